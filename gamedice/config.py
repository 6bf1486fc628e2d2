"""
Dice generator configuration.

This file defines typed configuration objects and helpers for:
- Which generator a new context starts with, and an optional fixed seed
- Blum-Blum-Shub factors (or a raw modulus) and primality rounds
- The dice replay file
- The random.org endpoint, timeout and batch size
- The OS entropy device used for system seeding

It provides:
- Dataclass-based configs with validation
- Loading from environment variables (prefix configurable)
- Loading from a JSON or YAML file
"""

from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional
from urllib.parse import urlparse

import yaml

from .constants import (
    BBS_DEFAULT_FACTOR_BITS,
    BBS_PRIMALITY_ROUNDS,
    NETWORK_MAX_BATCH,
    NETWORK_TIMEOUT_S,
    RANDOM_ORG_ENDPOINT,
    SYSTEM_ENTROPY_BYTES,
    SYSTEM_ENTROPY_DEVICE,
)
from .types.core import GeneratorKind, parse_decimal

# -------------------------
# Sub-configs
# -------------------------


@dataclass
class BBSConfig:
    """
    Blum-Blum-Shub parameters.

    factor_p, factor_q: candidate Blum factors (repaired upward if invalid);
                        None for both generates fresh random factors
    factor_bits: size of each generated factor
    modulus: raw modulus; when set it takes precedence over the factors
    primality_rounds: extra Miller-Rabin rounds for large candidates
    """

    factor_p: Optional[int] = None
    factor_q: Optional[int] = None
    factor_bits: int = BBS_DEFAULT_FACTOR_BITS
    modulus: Optional[int] = None
    primality_rounds: int = BBS_PRIMALITY_ROUNDS

    def validate(self) -> None:
        if self.modulus is not None:
            if self.modulus <= 1 or self.modulus % 2 == 0:
                raise ValueError("bbs.modulus must be an odd integer > 1")
        if (self.factor_p is None) != (self.factor_q is None):
            raise ValueError("bbs.factor_p and bbs.factor_q must be set together")
        if self.factor_p is not None and (self.factor_p < 1 or self.factor_q < 1):
            raise ValueError("bbs factors must be positive")
        if self.factor_bits < 8:
            raise ValueError("bbs.factor_bits must be >= 8")
        if self.primality_rounds <= 0:
            raise ValueError("bbs.primality_rounds must be > 0")


@dataclass
class ReplayConfig:
    """path: dice file opened when the 'file' generator is selected."""

    path: Optional[str] = None

    def validate(self) -> None:
        if self.path is not None and not self.path:
            raise ValueError("replay.path must be non-empty when set")


@dataclass
class NetworkConfig:
    """
    random.org access.

    endpoint: integer generator URL
    timeout_s: HTTP timeout per request
    batch_size: integers fetched per request (1 = one request per die)
    """

    endpoint: str = RANDOM_ORG_ENDPOINT
    timeout_s: float = NETWORK_TIMEOUT_S
    batch_size: int = 1

    def validate(self) -> None:
        u = urlparse(self.endpoint)
        if u.scheme not in {"http", "https"}:
            raise ValueError("network.endpoint must be http(s)")
        if self.timeout_s <= 0:
            raise ValueError("network.timeout_s must be > 0")
        if not (1 <= self.batch_size <= NETWORK_MAX_BATCH):
            raise ValueError(f"network.batch_size must be in 1..{NETWORK_MAX_BATCH}")


@dataclass
class EntropyConfig:
    """device: OS entropy device; nbytes: bytes read for a system seed."""

    device: str = SYSTEM_ENTROPY_DEVICE
    nbytes: int = SYSTEM_ENTROPY_BYTES

    def validate(self) -> None:
        if not self.device:
            raise ValueError("entropy.device must be non-empty")
        if self.nbytes <= 0:
            raise ValueError("entropy.nbytes must be > 0")


# -------------------------
# Top-level config
# -------------------------


@dataclass
class DiceConfig:
    """
    generator: kind a new context starts with (any GeneratorKind name/alias)
    seed: fixed seed for the initial generator; None seeds from system entropy

    BBS / replay / network / entropy: nested sub-configs
    """

    generator: str = GeneratorKind.MERSENNE.value
    seed: Optional[int] = None

    bbs: BBSConfig = field(default_factory=BBSConfig)
    replay: ReplayConfig = field(default_factory=ReplayConfig)
    network: NetworkConfig = field(default_factory=NetworkConfig)
    entropy: EntropyConfig = field(default_factory=EntropyConfig)

    @property
    def kind(self) -> GeneratorKind:
        return GeneratorKind.parse(self.generator)

    def validate(self) -> None:
        try:
            self.kind
        except ValueError as e:
            raise ValueError(f"invalid generator: {e}") from e
        if self.seed is not None and self.seed < 0:
            raise ValueError("seed must be >= 0")

        # Sub-configs
        self.bbs.validate()
        self.replay.validate()
        self.network.validate()
        self.entropy.validate()

    # -------------------------
    # Serialization helpers
    # -------------------------

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, sort_keys=True)

    # -------------------------
    # Loaders
    # -------------------------

    @staticmethod
    def from_env(prefix: str = "GAMEDICE_") -> "DiceConfig":
        """
        Load configuration from environment variables. All variables are optional.

        Supported keys (examples):
          - GAMEDICE_GENERATOR=mersenne
          - GAMEDICE_SEED=12345678901234567890

          - GAMEDICE_BBS_P=1019
          - GAMEDICE_BBS_Q=2039
          - GAMEDICE_BBS_BITS=256
          - GAMEDICE_BBS_MODULUS=437
          - GAMEDICE_BBS_ROUNDS=10

          - GAMEDICE_REPLAY_PATH=./dice.txt

          - GAMEDICE_NET_ENDPOINT=https://www.random.org/integers/
          - GAMEDICE_NET_TIMEOUT_S=10
          - GAMEDICE_NET_BATCH=1

          - GAMEDICE_ENTROPY_DEVICE=/dev/urandom
          - GAMEDICE_ENTROPY_BYTES=64
        """

        def _get(name: str, cast: Any, default: Any) -> Any:
            key = prefix + name
            raw = os.getenv(key)
            if raw is None:
                return default
            try:
                return cast(raw)
            except Exception as e:
                raise ValueError(f"Invalid value for {key}: {raw!r}") from e

        cfg = DiceConfig(
            generator=_get("GENERATOR", str, GeneratorKind.MERSENNE.value),
            seed=_get("SEED", parse_decimal, None),
            bbs=BBSConfig(
                factor_p=_get("BBS_P", parse_decimal, None),
                factor_q=_get("BBS_Q", parse_decimal, None),
                factor_bits=_get("BBS_BITS", int, BBS_DEFAULT_FACTOR_BITS),
                modulus=_get("BBS_MODULUS", parse_decimal, None),
                primality_rounds=_get("BBS_ROUNDS", int, BBS_PRIMALITY_ROUNDS),
            ),
            replay=ReplayConfig(path=_get("REPLAY_PATH", str, None)),
            network=NetworkConfig(
                endpoint=_get("NET_ENDPOINT", str, RANDOM_ORG_ENDPOINT),
                timeout_s=_get("NET_TIMEOUT_S", float, NETWORK_TIMEOUT_S),
                batch_size=_get("NET_BATCH", int, 1),
            ),
            entropy=EntropyConfig(
                device=_get("ENTROPY_DEVICE", str, SYSTEM_ENTROPY_DEVICE),
                nbytes=_get("ENTROPY_BYTES", int, SYSTEM_ENTROPY_BYTES),
            ),
        )
        cfg.validate()
        return cfg

    @staticmethod
    def from_file(path: str) -> "DiceConfig":
        """
        Load configuration from a JSON or YAML file. Keys mirror the dataclass
        structure. Example (YAML):

            generator: bbs
            seed: 8675309
            bbs:
              factor_p: 1019
              factor_q: 2039
            replay:
              path: ./dice.txt
        """
        text = _read_text(path)
        data = _parse_json_or_yaml(text, path)

        def _pop(d: Dict[str, Any], key: str, default: Any) -> Any:
            return d.pop(key, default) if isinstance(d, dict) else default

        bbs_d = _pop(data, "bbs", {}) or {}
        replay_d = _pop(data, "replay", {}) or {}
        net_d = _pop(data, "network", {}) or {}
        ent_d = _pop(data, "entropy", {}) or {}

        cfg = DiceConfig(
            generator=str(_pop(data, "generator", GeneratorKind.MERSENNE.value)),
            seed=_opt_int(_pop(data, "seed", None)),
            bbs=BBSConfig(
                factor_p=_opt_int(_pop(bbs_d, "factor_p", None)),
                factor_q=_opt_int(_pop(bbs_d, "factor_q", None)),
                factor_bits=int(_pop(bbs_d, "factor_bits", BBS_DEFAULT_FACTOR_BITS)),
                modulus=_opt_int(_pop(bbs_d, "modulus", None)),
                primality_rounds=int(_pop(bbs_d, "primality_rounds", BBS_PRIMALITY_ROUNDS)),
            ),
            replay=ReplayConfig(path=_pop(replay_d, "path", None)),
            network=NetworkConfig(
                endpoint=_pop(net_d, "endpoint", RANDOM_ORG_ENDPOINT),
                timeout_s=float(_pop(net_d, "timeout_s", NETWORK_TIMEOUT_S)),
                batch_size=int(_pop(net_d, "batch_size", 1)),
            ),
            entropy=EntropyConfig(
                device=_pop(ent_d, "device", SYSTEM_ENTROPY_DEVICE),
                nbytes=int(_pop(ent_d, "nbytes", SYSTEM_ENTROPY_BYTES)),
            ),
        )
        cfg.validate()
        return cfg


# -------------------------
# Utilities
# -------------------------


def _opt_int(v: Any) -> Optional[int]:
    # Large seeds are often quoted in files to survive JSON tooling.
    if v is None:
        return None
    return parse_decimal(v) if isinstance(v, str) else int(v)


def _read_text(path: str) -> str:
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def _parse_json_or_yaml(text: str, path_hint: str) -> Dict[str, Any]:
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ValueError(f"Failed to parse {path_hint!r} as JSON or YAML: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"{path_hint!r} must contain a mapping at the top level")
    return data


# A handy default instance for quick use in REPL/tests.
DEFAULT: DiceConfig = DiceConfig()


__all__ = [
    "BBSConfig",
    "ReplayConfig",
    "NetworkConfig",
    "EntropyConfig",
    "DiceConfig",
    "DEFAULT",
]
