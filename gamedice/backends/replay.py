"""
gamedice.backends.replay
========================

Dice replayed from a file.

Only the ASCII digits '1' through '6' are dice; every other byte (newlines,
spaces, commas, '0', '7'...) is skipped. Reaching the end of the file rewinds
to the start and keeps reading, so a short file repeats forever. A read that
finds no die even after a full pass, an I/O error, or no open file yields the
failure value -1, which the generator context treats as a malfunction.
"""

from __future__ import annotations

import io
import logging
from typing import Optional

from ..errors import ReplaySourceError
from ..types.core import GeneratorKind
from .base import Backend, RawPair

logger = logging.getLogger(__name__)

FAILED = -1


class ReplayBackend(Backend):
    kind = GeneratorKind.FILE
    counter_text = "Number of dice read from current file: {count}."

    def __init__(self, path: Optional[str] = None) -> None:
        self.path: Optional[str] = None
        self._fh: Optional[io.BufferedReader] = None
        if path is not None:
            self.open(path)

    @property
    def is_open(self) -> bool:
        return self._fh is not None

    def open(self, path: str) -> None:
        """
        Open `path` as the replay source, closing any previous one.

        Raises:
            ReplaySourceError: the file cannot be opened; the previous source,
                if any, stays open and keeps its position.
        """
        try:
            fh = open(path, "rb")
        except OSError as e:
            raise ReplaySourceError(path, e.strerror or str(e)) from e
        self.close()
        self.path = path
        self._fh = fh

    def rewind(self) -> None:
        if self._fh is not None:
            self._fh.seek(0)

    def read_die(self) -> int:
        if self._fh is None:
            return FAILED

        rewound = False
        while True:
            try:
                b = self._fh.read(1)
            except OSError as e:
                logger.error("error reading dice file %s: %s", self.path, e)
                return FAILED
            if not b:
                if rewound:
                    logger.error("no dice found in file %s", self.path)
                    return FAILED
                logger.info("Rewinding dice file (%s)", self.path)
                self._fh.seek(0)
                rewound = True
                continue
            if 0x31 <= b[0] <= 0x36:
                return b[0] - 0x30

    def roll(self) -> RawPair:
        return (self.read_die(), self.read_die())

    def seed(self, n: int) -> None:
        # A replay has no seed; reseeding restarts the file so it replays.
        self.rewind()

    def describe_seed(self) -> str:
        if self.path is None:
            return "No dice file is open."
        return f"Reading dice from file: {self.path}"

    def close(self) -> None:
        if self._fh is not None:
            try:
                self._fh.close()
            finally:
                self._fh = None

    def __deepcopy__(self, memo: dict) -> "ReplayBackend":
        dup = ReplayBackend()
        dup.path = self.path
        if self._fh is not None and self.path is not None:
            dup.open(self.path)
            dup._fh.seek(self._fh.tell())
        return dup


__all__ = ["ReplayBackend", "FAILED"]
