"""
gamedice.backends.network
=========================

Dice fetched from random.org's integer service.

Each die costs one HTTP request (``batch_size=1``). With a larger batch the
backend asks for that many integers at once and serves later dice from the
buffer. Any failure (connection error, HTTP error status, garbled body)
yields the failure value 0; when the first die of a roll fails, the second
reuses that value instead of issuing another request, and the generator
context takes over with its fallback.

Security notes
--------------
- random.org is an external, unauthenticated source; treat these dice as
  entertainment-grade and never as a secret.
- Requests block for up to ``timeout`` seconds; keep them off latency
  sensitive paths.
"""

from __future__ import annotations

import copy
import logging
from collections import deque
from typing import Any, Deque, Optional

import requests

from ..constants import NETWORK_MAX_BATCH, NETWORK_TIMEOUT_S, RANDOM_ORG_ENDPOINT
from ..metrics import METRICS
from ..types.core import GeneratorKind, face_in_range
from ..version import __version__
from .base import Backend, RawPair

logger = logging.getLogger(__name__)

FAILED = 0


class RandomOrgBackend(Backend):
    """
    Args:
        endpoint: Integer generator URL.
        timeout: Socket timeout in seconds per request.
        batch_size: Integers requested per HTTP call.
        session: Optional `requests.Session` (or anything with a compatible
            ``get``); a new session is created when omitted.
    """

    kind = GeneratorKind.RANDOM_ORG
    counter_text = "Number of dice fetched this session: {count}."

    def __init__(
        self,
        endpoint: str = RANDOM_ORG_ENDPOINT,
        *,
        timeout: float = NETWORK_TIMEOUT_S,
        batch_size: int = 1,
        session: Optional[Any] = None,
    ) -> None:
        if not endpoint or not isinstance(endpoint, str):
            raise ValueError("endpoint must be a non-empty string")
        if timeout <= 0:
            raise ValueError("timeout must be positive")
        if not (1 <= batch_size <= NETWORK_MAX_BATCH):
            raise ValueError(f"batch_size must be in 1..{NETWORK_MAX_BATCH}")

        self.endpoint = endpoint
        self.timeout = timeout
        self.batch_size = batch_size
        self._owns_session = session is None
        if session is None:
            session = requests.Session()
            session.headers["User-Agent"] = f"gamedice/{__version__}"
        self._session = session
        self._buffer: Deque[int] = deque()

    def _request(self) -> list[int]:
        params = {
            "num": self.batch_size,
            "min": 1,
            "max": 6,
            "col": 1,
            "base": 10,
            "format": "plain",
            "rnd": "new",
        }
        with METRICS.network_timer():
            resp = self._session.get(self.endpoint, params=params, timeout=self.timeout)
        resp.raise_for_status()
        values = [int(tok) for tok in resp.text.split()]
        if not values or not all(face_in_range(v) for v in values):
            raise ValueError(f"unexpected response body: {resp.text[:64]!r}")
        return values

    def fetch_die(self) -> int:
        if not self._buffer:
            try:
                self._buffer.extend(self._request())
            except (requests.RequestException, ValueError) as e:
                logger.warning("could not fetch dice from %s: %s", self.endpoint, e)
                return FAILED
        return self._buffer.popleft()

    def roll(self) -> RawPair:
        first = self.fetch_die()
        second = self.fetch_die() if first > 0 else first
        return (first, second)

    def close(self) -> None:
        self._buffer.clear()
        if self._owns_session:
            self._session.close()

    def __deepcopy__(self, memo: dict) -> "RandomOrgBackend":
        dup = copy.copy(self)
        dup._buffer = deque(self._buffer)
        dup._owns_session = False
        return dup


__all__ = ["RandomOrgBackend", "FAILED"]
