"""
gamedice: fair dice for turn-based board games.

This package rolls pairs of dice from interchangeable entropy sources:
- pseudo-random generators (Mersenne Twister, ISAAC, MD5 counter),
- the Blum-Blum-Shub cryptographic generator,
- random.org, manual entry, and replay from a file.

Only light, stable exports are surfaced here:

    from gamedice import GeneratorContext, GeneratorKind

    with GeneratorContext(GeneratorKind.MERSENNE) as ctx:
        ctx.seed(42)
        first, second = ctx.roll()
"""

from __future__ import annotations

from .version import __version__
from .types.core import DieRoll, GeneratorKind, SystemSeed
from .context import GeneratorContext

__all__ = [
    "__version__",
    "DieRoll",
    "GeneratorKind",
    "SystemSeed",
    "GeneratorContext",
]
