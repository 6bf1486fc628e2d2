"""
Core typed primitives for the dice generators.

These are intentionally minimal and free of heavy dependencies so they can be
shared across the backends, the generator context, the CLI and tests.

Types provided:
  • GeneratorKind — closed set of interchangeable entropy sources
  • DieRoll       — an ordered pair of faces, each in 1..6
  • SystemSeed    — the seed chosen from system entropy and where it came from
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Tuple

# Internal constants (kept local to avoid import cycles)
_MIN_FACE = 1
_MAX_FACE = 6


class GeneratorKind(str, Enum):
    """
    The entropy sources a generator context can be switched between.

      BBS        — Blum, Blum and Shub quadratic-residue generator
      ISAAC      — Bob Jenkins' ISAAC stream cipher
      MD5        — MD5 digest of an incrementing counter
      MERSENNE   — Mersenne Twister (the always-available default)
      MANUAL     — dice typed in by hand
      RANDOM_ORG — integers fetched from random.org
      FILE       — dice replayed from a file
    """

    BBS = "bbs"
    ISAAC = "isaac"
    MD5 = "md5"
    MERSENNE = "mersenne"
    MANUAL = "manual"
    RANDOM_ORG = "random.org"
    FILE = "file"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]

    @property
    def seedable(self) -> bool:
        """True when seeding makes the roll sequence reproducible."""
        return self not in (GeneratorKind.MANUAL, GeneratorKind.RANDOM_ORG)

    @classmethod
    def parse(cls, name: str) -> "GeneratorKind":
        """Resolve a user-facing name ('mt', 'Mersenne', 'random.org', ...)."""
        if isinstance(name, GeneratorKind):
            return name
        key = str(name).strip().lower()
        if key in _ALIASES:
            return _ALIASES[key]
        try:
            return cls(key)
        except ValueError:
            raise ValueError(f"unknown generator kind: {name!r}") from None


_DISPLAY_NAMES = {
    GeneratorKind.BBS: "Blum, Blum and Shub",
    GeneratorKind.ISAAC: "ISAAC",
    GeneratorKind.MD5: "MD5",
    GeneratorKind.MERSENNE: "Mersenne Twister",
    GeneratorKind.MANUAL: "manual dice",
    GeneratorKind.RANDOM_ORG: "www.random.org",
    GeneratorKind.FILE: "read from file",
}

_DESCRIPTIONS = {
    GeneratorKind.BBS: "Blum, Blum and Shub's verifiably strong generator",
    GeneratorKind.ISAAC: "Bob Jenkins' Indirection, Shift, Accumulate, Add and Count cryptographic generator",
    GeneratorKind.MD5: "A generator based on the Message Digest 5 algorithm",
    GeneratorKind.MERSENNE: "Makoto Matsumoto and Takuji Nishimura's generator",
    GeneratorKind.MANUAL: "Enter each dice roll by hand",
    GeneratorKind.RANDOM_ORG: "The online non-deterministic generator from random.org",
    GeneratorKind.FILE: "Dice loaded from a file",
}

_ALIASES = {
    "blum": GeneratorKind.BBS,
    "mt": GeneratorKind.MERSENNE,
    "mt19937": GeneratorKind.MERSENNE,
    "randomorg": GeneratorKind.RANDOM_ORG,
    "random_org": GeneratorKind.RANDOM_ORG,
    "network": GeneratorKind.RANDOM_ORG,
    "replay": GeneratorKind.FILE,
}


def face_in_range(value: int) -> bool:
    return _MIN_FACE <= value <= _MAX_FACE


def parse_decimal(text: str) -> int:
    """
    Parse plain ASCII decimal text with an optional leading minus sign.

    Unlike int(), rejects "+7", "1_000" and non-ASCII digits.
    """
    s = text.strip()
    negative = s.startswith("-")
    digits = s[1:] if negative else s
    if not (digits.isascii() and digits.isdigit()):
        raise ValueError(f"not a decimal integer: {text!r}")
    n = int(digits)
    return -n if negative else n


# ---- Rolls -------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class DieRoll:
    """
    One roll of two dice.

    Fields:
      first   — face of the first die (1..6)
      second  — face of the second die (1..6)

    Constructing a DieRoll with a face outside 1..6 raises ValueError; a
    backend producing such a value is malfunctioning, and the generator
    context handles that before a DieRoll is ever built.
    """

    first: int
    second: int

    def __post_init__(self) -> None:  # type: ignore[override]
        for name in ("first", "second"):
            v = getattr(self, name)
            if not isinstance(v, int) or isinstance(v, bool):
                raise TypeError(f"{name} must be an int")
            if not face_in_range(v):
                raise ValueError(f"{name} must be in {_MIN_FACE}..{_MAX_FACE} (got {v})")

    def __iter__(self) -> Iterator[int]:
        yield self.first
        yield self.second

    def as_tuple(self) -> Tuple[int, int]:
        return (self.first, self.second)


# ---- Seeding -----------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class SystemSeed:
    """
    Seed picked by `seed_from_system_entropy`.

    Fields:
      value   — the seed actually used (decimal-displayable, arbitrary precision)
      secure  — True if it came from the OS entropy device, False if time-derived
    """

    value: int
    secure: bool


__all__ = [
    "GeneratorKind",
    "DieRoll",
    "SystemSeed",
    "face_in_range",
    "parse_decimal",
]
