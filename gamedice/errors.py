"""
Dice generator errors.

This module defines a small, typed hierarchy of exceptions raised by the
generator context and its backends. Callers can catch the base `DiceError`
to handle every generator failure, or catch the concrete subclasses for
more granular control.

Transient entropy problems (network unreachable, OS entropy missing, end of
a replay file) are recovered where they happen and only logged; the
exceptions here cover configuration mistakes and states in which a backend
must not be trusted to produce dice.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Tuple


class DiceError(Exception):
    """Base class for all dice generator errors."""
    pass


@dataclass(frozen=True)
class InvalidSeed(DiceError):
    """
    Raised when a seed is negative, unparsable or outside the accepted range.

    Attributes:
        value: The rejected input, as supplied by the caller.
        reason: Short explanation ('negative', 'not-a-number', 'too-large').
    """
    value: Any
    reason: str

    def __str__(self) -> str:  # pragma: no cover - trivial formatting
        return f"InvalidSeed: value={self.value!r} reason={self.reason}"


@dataclass(frozen=True)
class InvalidModulus(DiceError):
    """Raised when a supplied BBS modulus cannot be used."""
    value: Any
    reason: str

    def __str__(self) -> str:  # pragma: no cover - trivial formatting
        return f"InvalidModulus: value={self.value!r} reason={self.reason}"


@dataclass(frozen=True)
class InvalidFactor(DiceError):
    """Raised when a supplied Blum factor is unparsable or not positive."""
    value: Any
    reason: str

    def __str__(self) -> str:  # pragma: no cover - trivial formatting
        return f"InvalidFactor: value={self.value!r} reason={self.reason}"


@dataclass(frozen=True)
class GeneratorNotReady(DiceError):
    """
    Raised when the selected backend lacks what it needs to produce dice.

    Attributes:
        kind: Name of the generator kind.
        reason: What is missing (e.g. 'no-modulus', 'no-provider').
    """
    kind: str
    reason: str

    def __str__(self) -> str:  # pragma: no cover - trivial formatting
        return f"GeneratorNotReady: kind={self.kind} reason={self.reason}"


@dataclass(frozen=True)
class BBSCheckFailed(DiceError):
    """
    Raised when the Blum-Blum-Shub state is unusable.

    Either the seed collapsed to 0 or 1, or the seed-quality search ran out
    of attempts. The generator stays selected but every roll fails until it
    is reseeded.

    Attributes:
        reason: 'degenerate-seed', 'short-cycle' or 'non-positive-seed'.
        attempts: Number of seeds tried by the quality check, if relevant.
    """
    reason: str
    attempts: Optional[int] = None

    def __str__(self) -> str:  # pragma: no cover - trivial formatting
        base = f"BBSCheckFailed: reason={self.reason}"
        return f"{base} attempts={self.attempts}" if self.attempts is not None else base


@dataclass(frozen=True)
class ReplaySourceError(DiceError):
    """Raised when a dice replay file cannot be opened."""
    path: str
    reason: str

    def __str__(self) -> str:  # pragma: no cover - trivial formatting
        return f"ReplaySourceError: path={self.path!r} reason={self.reason}"


@dataclass(frozen=True)
class GeneratorMalfunction(DiceError):
    """
    Raised when the fallback generator also produced dice outside 1..6.

    Attributes:
        kind: Name of the generator kind that produced the bad pair.
        dice: The offending pair.
    """
    kind: str
    dice: Tuple[int, int]

    def __str__(self) -> str:  # pragma: no cover - trivial formatting
        return f"GeneratorMalfunction: kind={self.kind} dice={self.dice}"


@dataclass(frozen=True)
class UnsupportedOperation(DiceError):
    """Raised when a generator kind cannot perform the requested operation."""
    kind: str
    operation: str

    def __str__(self) -> str:  # pragma: no cover - trivial formatting
        return f"UnsupportedOperation: kind={self.kind} operation={self.operation}"


__all__ = [
    "DiceError",
    "InvalidSeed",
    "InvalidModulus",
    "InvalidFactor",
    "GeneratorNotReady",
    "BBSCheckFailed",
    "ReplaySourceError",
    "GeneratorMalfunction",
    "UnsupportedOperation",
]
