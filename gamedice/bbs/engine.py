"""
gamedice.bbs.engine
===================

Blum-Blum-Shub bit generator and the dice built from it.

Key pieces
----------
- :class:`BBSGenerator`: state ``x`` and modulus ``N``; each step squares
  ``x`` modulo ``N`` and emits ``x mod 2`` (the hard-core bit).
- :func:`trit_from_bits`: a 5-state automaton turning fair bits into a
  uniform digit in {0, 1, 2} using 2.5 bits on average.
- :func:`face_from_bits`: ``trit + 3 * bit + 1``, uniform over 1..6.
- :meth:`BBSGenerator.check_initial_seed`: rejects seeds sitting on a short
  squaring cycle before any bit is handed out.

The generator never emits bits from a degenerate state: a seed of 0 or 1 is
a fixed point of squaring, so :meth:`BBSGenerator.check` must pass before a
roll and the caller is told to reseed otherwise.
"""

from __future__ import annotations

import logging
from typing import Callable

from ..constants import BBS_MIN_CYCLE, BBS_SEED_ATTEMPTS, BBS_WARMUP_SQUARINGS
from ..errors import BBSCheckFailed

logger = logging.getLogger(__name__)

BitSource = Callable[[], int]

# ---------------------------------------------------------------------------
# Trit automaton
# ---------------------------------------------------------------------------

_GOTO = 0
_EMIT = 1

# state -> (action on bit 0, action on bit 1)
_TRIT_TABLE = (
    ((_GOTO, 1), (_GOTO, 2)),   # 0: start
    ((_EMIT, 0), (_GOTO, 3)),   # 1
    ((_GOTO, 4), (_EMIT, 2)),   # 2
    ((_GOTO, 1), (_EMIT, 1)),   # 3
    ((_EMIT, 1), (_GOTO, 2)),   # 4
)


def trit_from_bits(next_bit: BitSource) -> int:
    """
    Return a digit uniformly distributed over {0, 1, 2}, drawing one bit from
    `next_bit` per transition. Exact for fair bits; never returns without
    consuming at least two bits.
    """
    state = 0
    while True:
        action, arg = _TRIT_TABLE[state][next_bit() & 1]
        if action == _EMIT:
            return arg
        state = arg


def face_from_bits(next_bit: BitSource) -> int:
    """Combine a trit and one more bit into a face in 1..6."""
    trit = trit_from_bits(next_bit)
    return trit + 3 * (next_bit() & 1) + 1


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------

class BBSGenerator:
    """
    Quadratic-residue bit generator over a Blum integer.

    Args:
        modulus: The Blum integer N (fixed for the life of the instance).
        seed: Initial state; call :meth:`check_initial_seed` before use.
    """

    def __init__(self, modulus: int, seed: int = 0) -> None:
        if modulus <= 1:
            raise ValueError("modulus must be > 1")
        self.modulus = modulus
        self.seed = seed

    def next_bit(self) -> int:
        self.seed = pow(self.seed, 2, self.modulus)
        return self.seed & 1

    def next_trit(self) -> int:
        return trit_from_bits(self.next_bit)

    def next_face(self) -> int:
        return face_from_bits(self.next_bit)

    def check(self) -> bool:
        """False when the state is stuck on 0 or 1."""
        return self.seed not in (0, 1)

    def _invalidate(self) -> None:
        self.seed = 0
        logger.error(
            "Invalid seed and/or modulus for the Blum, Blum and Shub generator; "
            "reset the seed and/or modulus before continuing."
        )

    def _has_short_cycle(self, x: int) -> bool:
        for _ in range(BBS_WARMUP_SQUARINGS):
            x = pow(x, 2, self.modulus)
        ref = x
        for _ in range(BBS_MIN_CYCLE):
            x = pow(x, 2, self.modulus)
            if x == ref:
                return True
        return False

    def check_initial_seed(self) -> int:
        """
        Move the seed off any squaring cycle shorter than the minimum.

        Tries the current seed and up to 31 successors. Returns how many
        times the seed was incremented.

        Raises:
            BBSCheckFailed: seed not positive, or no acceptable seed found.
                The state is zeroed so every later roll fails fast.
        """
        if self.seed < 1:
            self._invalidate()
            raise BBSCheckFailed("non-positive-seed")

        for attempt in range(BBS_SEED_ATTEMPTS):
            if not self._has_short_cycle(self.seed):
                if attempt:
                    logger.warning(
                        "BBS seed moved by %d to avoid a short cycle", attempt
                    )
                return attempt
            self.seed += 1

        self._invalidate()
        raise BBSCheckFailed("short-cycle", attempts=BBS_SEED_ATTEMPTS)


__all__ = [
    "BitSource",
    "trit_from_bits",
    "face_from_bits",
    "BBSGenerator",
]
