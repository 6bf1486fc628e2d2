"""
gamedice.backends.manual
========================

Dice entered by hand. The faces come from a caller-supplied provider (the
CLI prompts the player); they are trusted as given.
"""

from __future__ import annotations

from typing import Callable, Optional, Tuple

from ..errors import GeneratorNotReady, UnsupportedOperation
from ..types.core import GeneratorKind
from .base import Backend, RawPair

ManualDiceProvider = Callable[[], Tuple[int, int]]


class ManualBackend(Backend):
    kind = GeneratorKind.MANUAL
    counter_text = None

    def __init__(self, provider: Optional[ManualDiceProvider] = None) -> None:
        self.provider = provider

    def roll(self) -> RawPair:
        if self.provider is None:
            raise GeneratorNotReady(self.kind.value, "no-provider")
        first, second = self.provider()
        return (int(first), int(second))

    def describe_seed(self) -> str:
        raise UnsupportedOperation(self.kind.value, "describe-seed")

    def __deepcopy__(self, memo: dict) -> "ManualBackend":
        return ManualBackend(self.provider)


__all__ = ["ManualBackend", "ManualDiceProvider"]
