"""Stand-ins for the HTTP session and entropy device used by the tests."""

from __future__ import annotations

from typing import List, Optional

import requests


class FakeResponse:
    def __init__(self, text: str, status: int = 200) -> None:
        self.text = text
        self.status_code = status

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


class FakeSession:
    """Serves queued responses; an Exception in the queue is raised instead."""

    def __init__(self, responses: Optional[list] = None) -> None:
        self.responses: list = list(responses or [])
        self.calls: List[dict] = []
        self.closed = False

    def get(self, url, params=None, timeout=None):
        self.calls.append({"url": url, "params": dict(params or {}), "timeout": timeout})
        if not self.responses:
            raise requests.ConnectionError("no response queued")
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def close(self) -> None:
        self.closed = True


class FixedEntropy:
    """Entropy source that always returns the same bytes."""

    def __init__(self, data: bytes) -> None:
        self.data = data
        self.requests: List[int] = []

    def random_bytes(self, n: int) -> bytes:
        self.requests.append(n)
        return (self.data * (n // max(len(self.data), 1) + 1))[:n]
