"""
gamedice.backends
=================

One module per generator kind, all implementing :class:`Backend`:

    bbs      — Blum-Blum-Shub           (GeneratorKind.BBS)
    isaac    — ISAAC stream cipher       (GeneratorKind.ISAAC)
    digest   — MD5 counter               (GeneratorKind.MD5)
    twister  — Mersenne Twister          (GeneratorKind.MERSENNE)
    manual   — dice entered by hand      (GeneratorKind.MANUAL)
    network  — random.org                (GeneratorKind.RANDOM_ORG)
    replay   — dice read from a file     (GeneratorKind.FILE)

:func:`create_backend` builds a fresh, unseeded backend for a kind from a
:class:`~gamedice.config.DiceConfig`.
"""

from __future__ import annotations

from typing import Any, Optional

from ..bbs.params import BlumModulus
from ..config import DiceConfig
from ..types.core import GeneratorKind
from .base import Backend, RawPair, words_le
from .bbs import BBSBackend
from .digest import DigestBackend
from .isaac import IsaacBackend, IsaacStream
from .manual import ManualBackend, ManualDiceProvider
from .network import RandomOrgBackend
from .replay import ReplayBackend
from .twister import TwisterBackend


def blum_modulus_from_config(cfg: DiceConfig) -> BlumModulus:
    if cfg.bbs.modulus is not None:
        return BlumModulus.from_modulus(cfg.bbs.modulus)
    if cfg.bbs.factor_p is None or cfg.bbs.factor_q is None:
        return BlumModulus.generate(cfg.bbs.factor_bits, cfg.bbs.primality_rounds)
    return BlumModulus.from_factors(cfg.bbs.factor_p, cfg.bbs.factor_q, cfg.bbs.primality_rounds)


def create_backend(
    kind: GeneratorKind,
    cfg: DiceConfig,
    *,
    manual_dice: Optional[ManualDiceProvider] = None,
    session: Optional[Any] = None,
    replay_path: Optional[str] = None,
    blum: Optional[BlumModulus] = None,
) -> Backend:
    """
    Build an unseeded backend for `kind`.

    `blum` overrides the configured BBS modulus.

    Raises:
        ReplaySourceError: FILE selected with a path that cannot be opened.
    """
    if kind is GeneratorKind.BBS:
        return BBSBackend(blum or blum_modulus_from_config(cfg))
    if kind is GeneratorKind.ISAAC:
        return IsaacBackend()
    if kind is GeneratorKind.MD5:
        return DigestBackend()
    if kind is GeneratorKind.MERSENNE:
        return TwisterBackend()
    if kind is GeneratorKind.MANUAL:
        return ManualBackend(manual_dice)
    if kind is GeneratorKind.RANDOM_ORG:
        return RandomOrgBackend(
            cfg.network.endpoint,
            timeout=cfg.network.timeout_s,
            batch_size=cfg.network.batch_size,
            session=session,
        )
    if kind is GeneratorKind.FILE:
        return ReplayBackend(replay_path or cfg.replay.path)
    raise ValueError(f"unknown generator kind: {kind!r}")


__all__ = [
    "Backend",
    "RawPair",
    "words_le",
    "BBSBackend",
    "DigestBackend",
    "IsaacBackend",
    "IsaacStream",
    "ManualBackend",
    "ManualDiceProvider",
    "RandomOrgBackend",
    "ReplayBackend",
    "TwisterBackend",
    "blum_modulus_from_config",
    "create_backend",
]
