"""
gamedice.backends.base
======================

Common contract for the dice backends.

Every backend owns the state of exactly one generator kind and exposes:

    roll()            -> (int, int)   raw pair, validated by the context
    seed(n)           bounded seed (0 .. 2^32-1), already checked
    seed_large(n)     arbitrary-precision seed, already checked
    describe_seed()   human-readable seed text
    close()           release files/sessions

The generator context validates seeds before calling into a backend, so
backends only ever see non-negative integers. The usage counter lives in the
context; backends only provide the wording used to display it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import ClassVar, List, Optional, Tuple

from ..constants import RAW_WORD_BITS, RAW_WORD_MASK
from ..errors import UnsupportedOperation
from ..metrics import METRICS
from ..types.core import GeneratorKind

RawPair = Tuple[int, int]


def words_le(n: int, count: int) -> List[int]:
    """
    Split `n` into `count` 32-bit words, least significant first.

    Words beyond the width of `n` are zero; words beyond `count` are dropped.
    """
    out = []
    for _ in range(count):
        out.append(n & RAW_WORD_MASK)
        n >>= RAW_WORD_BITS
    return out


class Backend(ABC):
    """Base class for one generator kind's state."""

    kind: ClassVar[GeneratorKind]
    counter_text: ClassVar[Optional[str]] = "Number of calls since last seed: {count}."

    @abstractmethod
    def roll(self) -> RawPair:
        """Produce a raw pair of faces. Values outside 1..6 signal a malfunction."""

    def seed(self, n: int) -> None:
        """Seed from a bounded integer. No-op for kinds without a seed."""

    def seed_large(self, n: int) -> None:
        """Seed from an arbitrary-precision integer; defaults to the bounded path."""
        self.seed(n)

    def describe_seed(self) -> str:
        raise UnsupportedOperation(self.kind.value, "describe-seed")

    def describe_counter(self, count: int) -> Optional[str]:
        if self.counter_text is None:
            return None
        return self.counter_text.format(count=count)

    def close(self) -> None:
        pass

    # ----- helpers -----------------------------------------------------------

    def _on_reject(self, raw: int) -> None:
        METRICS.record_rejection(self.kind.value)


__all__ = ["Backend", "RawPair", "words_le"]
