"""
gamedice.entropy
================

System entropy used to seed the generators.

Providers included
------------------
- DeviceEntropy : read bytes from an OS entropy device (default /dev/urandom)

Helpers
-------
- :func:`time_seed`:   32-bit seed folded from the microsecond wall clock
- :func:`system_seed`: 512 bits from the device, or the time seed if the
                       device cannot be read

Security notes
--------------
- The time fallback is predictable and only meant to keep a game playable on
  hosts without an entropy device. :class:`~gamedice.types.SystemSeed`
  records which path was taken so callers can tell the player.
"""

from __future__ import annotations

import io
import logging
import time
from typing import Optional, Protocol

from .constants import RAW_WORD_BITS, RAW_WORD_MASK, SYSTEM_ENTROPY_BYTES, SYSTEM_ENTROPY_DEVICE
from .types.core import SystemSeed

logger = logging.getLogger(__name__)


class EntropySource(Protocol):
    """Minimal entropy source protocol."""

    def random_bytes(self, n: int) -> bytes:  # pragma: no cover - protocol
        """Return exactly n bytes of entropy, or raise on failure."""
        ...


class EntropyUnavailable(RuntimeError):
    """Raised when an entropy source cannot deliver the requested bytes."""


def _read_exact_from_file(f: io.BufferedReader, n: int) -> bytes:
    """
    Read exactly n bytes from an open binary file object, raising EOFError
    if not enough bytes are available.
    """
    out = bytearray()
    remaining = n
    while remaining:
        chunk = f.read(remaining)
        if not chunk:
            raise EOFError(f"unexpected EOF: needed {remaining} more bytes")
        out.extend(chunk)
        remaining -= len(chunk)
    return bytes(out)


class DeviceEntropy(EntropySource):
    """
    Read entropy bytes from a device path, opening it per call.

    Args:
        path: Device or file to read from.
    """

    def __init__(self, path: str = SYSTEM_ENTROPY_DEVICE) -> None:
        if not path or not isinstance(path, str):
            raise ValueError("path must be a non-empty string")
        self.path = path

    def random_bytes(self, n: int) -> bytes:
        if n < 0:
            raise ValueError("n must be non-negative")
        if n == 0:
            return b""
        try:
            with open(self.path, "rb", buffering=0) as fh:
                return _read_exact_from_file(io.BufferedReader(fh), n)
        except (OSError, EOFError) as e:
            raise EntropyUnavailable(f"cannot read {n} bytes from {self.path}: {e}") from e


def time_seed(now_us: Optional[int] = None) -> int:
    """Fold the microsecond clock into 32 bits (high word XOR low word)."""
    if now_us is None:
        now_us = time.time_ns() // 1000
    return ((now_us >> RAW_WORD_BITS) ^ now_us) & RAW_WORD_MASK


def system_seed(
    source: Optional[EntropySource] = None, nbytes: int = SYSTEM_ENTROPY_BYTES
) -> SystemSeed:
    """
    Pick a seed from system entropy.

    The device bytes are read as one little-endian integer, giving an
    arbitrary-precision seed. If the device is missing or short, falls back
    to :func:`time_seed` and marks the result as not secure.
    """
    src = source if source is not None else DeviceEntropy()
    try:
        raw = src.random_bytes(nbytes)
    except EntropyUnavailable as e:
        logger.warning("system entropy unavailable, seeding from the clock: %s", e)
        return SystemSeed(value=time_seed(), secure=False)
    return SystemSeed(value=int.from_bytes(raw, "little"), secure=True)


__all__ = [
    "EntropySource",
    "EntropyUnavailable",
    "DeviceEntropy",
    "time_seed",
    "system_seed",
]
