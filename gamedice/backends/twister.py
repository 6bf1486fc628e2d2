"""
gamedice.backends.twister
=========================

Mersenne Twister (MT19937) dice, the default and always-available backend.

The standard library's :class:`random.Random` is MT19937. Integer seeds are
split into 32-bit words and fed to ``init_by_array`` in full, so a seed wider
than one word uses all of its entropy instead of being truncated.
"""

from __future__ import annotations

import random

from ..constants import RAW_WORD_BITS
from ..sampler import sample_face
from ..types.core import GeneratorKind
from .base import Backend, RawPair


class TwisterBackend(Backend):
    kind = GeneratorKind.MERSENNE

    def __init__(self) -> None:
        self.long_seed = 0
        self._mt = random.Random(0)

    def seed(self, n: int) -> None:
        self.long_seed = n
        self._mt = random.Random(n)

    def next_word(self) -> int:
        return self._mt.getrandbits(RAW_WORD_BITS)

    def roll(self) -> RawPair:
        return (
            sample_face(self.next_word, on_reject=self._on_reject),
            sample_face(self.next_word, on_reject=self._on_reject),
        )

    def describe_seed(self) -> str:
        return f"The current seed is {self.long_seed}."


__all__ = ["TwisterBackend"]
