"""
gamedice.types
--------------

Typed primitives shared across the dice generators:

  • GeneratorKind — which entropy source a context uses
  • DieRoll       — a validated pair of faces
  • SystemSeed    — result of seeding from system entropy

    from gamedice.types import GeneratorKind, DieRoll
"""

from __future__ import annotations

from .core import DieRoll, GeneratorKind, SystemSeed, face_in_range, parse_decimal

__all__ = ["GeneratorKind", "DieRoll", "SystemSeed", "face_in_range", "parse_decimal"]
