"""
gamedice.bbs.params
===================

Modulus construction for the Blum-Blum-Shub generator.

What lives here
---------------
- :func:`is_probable_prime`: Miller-Rabin with fixed small-prime bases plus
  extra random bases for numbers beyond the deterministic range.
- :func:`is_good_factor` / :func:`find_good_factor`: the Blum factor rule
  (prime, = 3 mod 4, at least 19) and the upward search used to repair a
  bad candidate.
- :class:`BlumModulus`: two validated, distinct factors and their product.
- :meth:`BlumModulus.generate`: two fresh random factors, used when none are
  configured.
- :func:`parse_modulus`: accept a raw modulus supplied without its factors.

Notes
-----
- A bad factor is never rejected outright. The search walks upward from the
  candidate until it finds a good one and reports the substitution, so user
  input such as ``4 9`` still yields a working modulus (19 * 23).
- Factors given only through a raw modulus cannot be checked; we only insist
  that the modulus is an odd integer greater than one.
"""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from typing import Any, Tuple, Type

from ..constants import BBS_DEFAULT_FACTOR_BITS, BBS_MIN_FACTOR, BBS_PRIMALITY_ROUNDS
from ..errors import DiceError, InvalidFactor, InvalidModulus
from ..types.core import parse_decimal

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Primes
# ---------------------------------------------------------------------------

_SMALL_PRIMES = (
    2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37, 41, 43, 47,
    53, 59, 61, 67, 71, 73, 79, 83, 89, 97,
)

# Miller-Rabin with these bases is exact for n < 3.3 * 10^24.
_MR_BASES = (2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37)
_MR_DETERMINISTIC_BOUND = 3_317_044_064_679_887_385_961_981


def _miller_rabin(n: int, bases: Tuple[int, ...]) -> bool:
    # write n-1 = d * 2^s with d odd
    d = n - 1
    s = 0
    while d % 2 == 0:
        d //= 2
        s += 1

    def trial(a: int) -> bool:
        x = pow(a % n, d, n)
        if x == 1 or x == n - 1:
            return True
        for _ in range(s - 1):
            x = (x * x) % n
            if x == n - 1:
                return True
        return False

    for a in bases:
        if a % n == 0:
            continue
        if not trial(a):
            return False
    return True


def is_probable_prime(n: int, rounds: int = BBS_PRIMALITY_ROUNDS) -> bool:
    """
    Probabilistic primality test.

    Exact below ~3.3e24; above that, `rounds` random bases are added so a
    composite survives with probability at most 4^-rounds.
    """
    if n < 2:
        return False
    for p in _SMALL_PRIMES:
        if n == p:
            return True
        if n % p == 0:
            return False
    if not _miller_rabin(n, _MR_BASES):
        return False
    if n < _MR_DETERMINISTIC_BOUND:
        return True
    extra = tuple(2 + secrets.randbelow(n - 3) for _ in range(rounds))
    return _miller_rabin(n, extra)


# ---------------------------------------------------------------------------
# Blum factors
# ---------------------------------------------------------------------------

def is_good_factor(x: int, rounds: int = BBS_PRIMALITY_ROUNDS) -> bool:
    """A Blum factor is a prime >= 19 that is congruent to 3 mod 4."""
    return (x & 3) == 3 and x >= BBS_MIN_FACTOR and is_probable_prime(x, rounds)


def find_good_factor(x: int, rounds: int = BBS_PRIMALITY_ROUNDS) -> int:
    """Return the smallest good factor strictly greater than `x`."""
    x += 1
    while not is_good_factor(x, rounds):
        x += 1
    return x


def random_good_factor(bits: int, rounds: int = BBS_PRIMALITY_ROUNDS) -> int:
    """Search upward from a random `bits`-bit start for a good factor."""
    if bits < 8:
        raise ValueError("bits must be >= 8")
    start = secrets.randbits(bits) | (1 << (bits - 1))
    return find_good_factor(start, rounds)


def _parse_positive(value: Any, err: Type[DiceError]) -> int:
    if isinstance(value, bool):
        raise err(value, "not-a-number")
    if isinstance(value, int):
        n = value
    else:
        try:
            n = parse_decimal(str(value))
        except ValueError:
            raise err(value, "not-a-number") from None
    if n < 1:
        raise err(value, "not-positive")
    return n


@dataclass(frozen=True)
class BlumModulus:
    """
    A Blum integer and (when known) its two factors.

    Fields:
      modulus       — the product p*q (or a raw modulus when factors are unknown)
      p, q          — validated distinct factors, 0 when built from a raw modulus
      substituted   — True if either supplied factor had to be replaced
    """

    modulus: int
    p: int = 0
    q: int = 0
    substituted: bool = False

    @property
    def has_factors(self) -> bool:
        return self.p != 0 and self.q != 0

    @classmethod
    def from_factors(
        cls, p_in: Any, q_in: Any, rounds: int = BBS_PRIMALITY_ROUNDS
    ) -> "BlumModulus":
        """
        Validate two candidate factors and build the modulus.

        A failing candidate is replaced by the next good factor above it; if
        both end up equal, the second is searched again so they differ.

        Raises:
            InvalidFactor: a candidate is not a positive decimal integer.
        """
        p = _parse_positive(p_in, InvalidFactor)
        q = _parse_positive(q_in, InvalidFactor)
        substituted = False

        if not is_good_factor(p, rounds):
            p = find_good_factor(p, rounds)
            substituted = True
            logger.warning("%s is an invalid Blum factor, using %d instead.", p_in, p)

        if not is_good_factor(q, rounds) or p == q:
            q = find_good_factor(q, rounds)
            if p == q:
                q = find_good_factor(q, rounds)
            substituted = True
            logger.warning("%s is an invalid Blum factor, using %d instead.", q_in, q)

        return cls(modulus=p * q, p=p, q=q, substituted=substituted)

    @classmethod
    def generate(
        cls, bits: int = BBS_DEFAULT_FACTOR_BITS, rounds: int = BBS_PRIMALITY_ROUNDS
    ) -> "BlumModulus":
        """Build a modulus from two fresh random factors of `bits` bits each."""
        p = random_good_factor(bits, rounds)
        q = random_good_factor(bits, rounds)
        while q == p:
            q = random_good_factor(bits, rounds)
        return cls(modulus=p * q, p=p, q=q)

    @classmethod
    def from_modulus(cls, value: Any) -> "BlumModulus":
        return cls(modulus=parse_modulus(value))


def parse_modulus(value: Any) -> int:
    """
    Parse a raw decimal modulus.

    Raises:
        InvalidModulus: unparsable, not positive, even, or 1.
    """
    n = _parse_positive(value, InvalidModulus)
    if n == 1:
        raise InvalidModulus(value, "trivial")
    if n % 2 == 0:
        raise InvalidModulus(value, "even")
    return n


__all__ = [
    "is_probable_prime",
    "is_good_factor",
    "find_good_factor",
    "random_good_factor",
    "BlumModulus",
    "parse_modulus",
]
