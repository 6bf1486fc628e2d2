"""
gamedice.backends.digest
========================

Counter-mode MD5 dice.

Each roll hashes the current 32-bit counter (4 bytes, little-endian) and
reads the first 8 digest bytes as two little-endian 32-bit words, one per
die. A word in the sampler's rejected tail makes the loop walk the counter
forward and rehash until both words are accepted; the counter is
incremented once more after every roll.

The retry walks the counter rather than rehashing the same value, which
keeps long runs identical to the historical stream. When md5(n + k) is the
first accepted digest (k >= 1) the counter ends at n + k + 2.
"""

from __future__ import annotations

import hashlib
import struct

from ..constants import DIGEST_SEED_MODULUS, RAW_WORD_MASK, SAMPLER_LIMIT, SAMPLER_QUOTIENT
from ..metrics import METRICS
from ..types.core import GeneratorKind
from .base import Backend, RawPair


def digest_words(counter: int) -> tuple[int, int]:
    """MD5 of the 32-bit counter, first two little-endian words."""
    h = hashlib.md5(struct.pack("<I", counter & RAW_WORD_MASK)).digest()
    return struct.unpack_from("<II", h)


def _rejected(words: tuple[int, int]) -> bool:
    return words[0] >= SAMPLER_LIMIT or words[1] >= SAMPLER_LIMIT


class DigestBackend(Backend):
    kind = GeneratorKind.MD5

    def __init__(self) -> None:
        self.counter = 0

    def seed(self, n: int) -> None:
        self.counter = n & RAW_WORD_MASK

    def seed_large(self, n: int) -> None:
        self.seed(n % DIGEST_SEED_MODULUS)

    def roll(self) -> RawPair:
        words = digest_words(self.counter)
        while _rejected(words):
            METRICS.record_rejection(self.kind.value)
            words = digest_words(self.counter)
            self.counter = (self.counter + 1) & RAW_WORD_MASK

        self.counter = (self.counter + 1) & RAW_WORD_MASK
        return (1 + words[0] // SAMPLER_QUOTIENT, 1 + words[1] // SAMPLER_QUOTIENT)

    def describe_seed(self) -> str:
        return f"The current seed is {self.counter}."


__all__ = ["DigestBackend", "digest_words"]
