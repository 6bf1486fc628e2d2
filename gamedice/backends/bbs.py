"""
gamedice.backends.bbs
=====================

Blum-Blum-Shub dice.

Each die is one trit from the automaton plus one extra bit (see
:mod:`gamedice.bbs.engine`). The backend starts unseeded: until a seed
passes the quality check every roll raises :class:`BBSCheckFailed`.
"""

from __future__ import annotations

import logging

from ..bbs.engine import BBSGenerator
from ..bbs.params import BlumModulus
from ..errors import BBSCheckFailed
from ..types.core import GeneratorKind
from .base import Backend, RawPair

logger = logging.getLogger(__name__)


class BBSBackend(Backend):
    kind = GeneratorKind.BBS

    def __init__(self, modulus: BlumModulus) -> None:
        self.params = modulus
        self._gen = BBSGenerator(modulus.modulus)

    @property
    def modulus(self) -> int:
        return self._gen.modulus

    @property
    def state(self) -> int:
        return self._gen.seed

    @property
    def ready(self) -> bool:
        return self._gen.check()

    def set_modulus(self, modulus: BlumModulus) -> None:
        """Replace the modulus. The state is cleared; reseed before rolling."""
        self.params = modulus
        self._gen = BBSGenerator(modulus.modulus)
        logger.info("BBS modulus set to %d", modulus.modulus)

    def seed(self, n: int) -> None:
        self._gen.seed = n
        self._gen.check_initial_seed()

    def roll(self) -> RawPair:
        if not self._gen.check():
            logger.error("BBS check failed: the generator must be reseeded")
            raise BBSCheckFailed("degenerate-seed")
        return (self._gen.next_face(), self._gen.next_face())

    def describe_seed(self) -> str:
        return f"The current seed is {self._gen.seed}, and the modulus is {self._gen.modulus}."


__all__ = ["BBSBackend"]
