"""
gamedice.bbs
============

Blum-Blum-Shub support for the cryptographic dice backend.

- :mod:`gamedice.bbs.params` builds and validates the Blum modulus.
- :mod:`gamedice.bbs.engine` runs the squaring generator, the trit automaton
  and the seed-quality check.

>>> from gamedice.bbs import BlumModulus, BBSGenerator
>>> m = BlumModulus.from_factors(4, 9)     # repaired to 19 * 23
>>> gen = BBSGenerator(m.modulus, seed=3)
>>> moved = gen.check_initial_seed()
"""

from __future__ import annotations

from .engine import BBSGenerator, face_from_bits, trit_from_bits
from .params import (
    BlumModulus,
    find_good_factor,
    is_good_factor,
    is_probable_prime,
    parse_modulus,
    random_good_factor,
)

__all__ = [
    "BBSGenerator",
    "BlumModulus",
    "face_from_bits",
    "trit_from_bits",
    "find_good_factor",
    "is_good_factor",
    "is_probable_prime",
    "parse_modulus",
    "random_good_factor",
]
