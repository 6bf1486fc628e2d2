"""
gamedice.backends.isaac
=======================

ISAAC (Indirection, Shift, Accumulate, Add, and Count) stream generator.

A straight port of Bob Jenkins' 32-bit ISAAC with a 256-word state. The
cipher itself lives in :class:`IsaacStream`; :class:`IsaacBackend` seeds it
and turns its words into dice through the unbiased sampler.

Seeding
-------
- bounded seed ``n``: every one of the 256 seed words is set to ``n``
- large seed ``n``:   the little-endian 32-bit words of ``n`` fill the seed
                      array, the rest is zero
"""

from __future__ import annotations

from typing import List, Sequence, Tuple

from ..constants import ISAAC_GOLDEN_RATIO, ISAAC_RANDSIZ, RAW_WORD_MASK
from ..sampler import sample_face
from ..types.core import GeneratorKind
from .base import Backend, RawPair, words_le

_M = RAW_WORD_MASK
_HALF = ISAAC_RANDSIZ // 2
_IDX = ISAAC_RANDSIZ - 1


def _mix(
    a: int, b: int, c: int, d: int, e: int, f: int, g: int, h: int
) -> Tuple[int, int, int, int, int, int, int, int]:
    a ^= (b << 11) & _M; d = (d + a) & _M; b = (b + c) & _M
    b ^= c >> 2;         e = (e + b) & _M; c = (c + d) & _M
    c ^= (d << 8) & _M;  f = (f + c) & _M; d = (d + e) & _M
    d ^= e >> 16;        g = (g + d) & _M; e = (e + f) & _M
    e ^= (f << 10) & _M; h = (h + e) & _M; f = (f + g) & _M
    f ^= g >> 4;         a = (a + f) & _M; g = (g + h) & _M
    g ^= (h << 8) & _M;  b = (b + g) & _M; h = (h + a) & _M
    h ^= a >> 9;         c = (c + h) & _M; a = (a + b) & _M
    return a, b, c, d, e, f, g, h


class IsaacStream:
    """
    ISAAC state: 256 result words, 256 memory words and the a/b/c registers.

    Args:
        seed_words: Up to 256 initial result words (zero padded).
    """

    def __init__(self, seed_words: Sequence[int] = ()) -> None:
        if len(seed_words) > ISAAC_RANDSIZ:
            raise ValueError(f"at most {ISAAC_RANDSIZ} seed words")
        self.results: List[int] = [w & _M for w in seed_words]
        self.results += [0] * (ISAAC_RANDSIZ - len(self.results))
        self.memory: List[int] = [0] * ISAAC_RANDSIZ
        self.a = self.b = self.c = 0
        self.remaining = 0
        self._init()

    def _init(self) -> None:
        regs = (ISAAC_GOLDEN_RATIO,) * 8
        for _ in range(4):
            regs = _mix(*regs)

        # two passes: fold in the seed, then spread it through memory
        for source in (self.results, self.memory):
            for i in range(0, ISAAC_RANDSIZ, 8):
                regs = _mix(*((x + source[i + j]) & _M for j, x in enumerate(regs)))
                self.memory[i:i + 8] = regs

        self.refill()
        self.remaining = ISAAC_RANDSIZ

    def refill(self) -> None:
        """Generate the next 256 result words."""
        mm = self.memory
        r = self.results
        self.c = (self.c + 1) & _M
        a = self.a
        b = (self.b + self.c) & _M
        for i in range(ISAAC_RANDSIZ):
            x = mm[i]
            step = i & 3
            if step == 0:
                a ^= (a << 13) & _M
            elif step == 1:
                a ^= a >> 6
            elif step == 2:
                a ^= (a << 2) & _M
            else:
                a ^= a >> 16
            a = (a + mm[(i + _HALF) & _IDX]) & _M
            y = (mm[(x >> 2) & _IDX] + a + b) & _M
            mm[i] = y
            b = (mm[(y >> 10) & _IDX] + x) & _M
            r[i] = b
        self.a = a
        self.b = b

    def next_word(self) -> int:
        """Return the next 32-bit output, consuming results from the top down."""
        if self.remaining == 0:
            self.refill()
            self.remaining = ISAAC_RANDSIZ
        self.remaining -= 1
        return self.results[self.remaining]


class IsaacBackend(Backend):
    kind = GeneratorKind.ISAAC

    def __init__(self) -> None:
        self.long_seed = 0
        self._stream = IsaacStream()

    def seed(self, n: int) -> None:
        self.long_seed = n
        self._stream = IsaacStream([n] * ISAAC_RANDSIZ)

    def seed_large(self, n: int) -> None:
        self.long_seed = n
        self._stream = IsaacStream(words_le(n, ISAAC_RANDSIZ))

    def roll(self) -> RawPair:
        draw = self._stream.next_word
        return (
            sample_face(draw, on_reject=self._on_reject),
            sample_face(draw, on_reject=self._on_reject),
        )

    def describe_seed(self) -> str:
        return f"The current seed is {self.long_seed}."


__all__ = ["IsaacStream", "IsaacBackend"]
