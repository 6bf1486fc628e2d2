"""
gamedice.sampler
================

Bias-free mapping from raw generator words to die faces.

A raw word drawn uniformly from [0, 2^W) cannot be reduced to 1..R with a
plain modulo without favouring the low faces whenever R does not divide 2^W.
Instead we split [0, q*R) into R equal buckets of width q = floor(2^W / R)
and reject (redraw) anything at or above q*R. For W=32 and R=6 the rejected
tail is 4 values out of 2^32, so almost every draw is accepted.

Key functions
-------------
- :func:`face_from_word`: map one raw word, or return None if it must be redrawn
- :func:`sample_face`:    draw until a word is accepted and return the face
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from .constants import DIE_FACES, RAW_WORD_BITS

logger = logging.getLogger(__name__)

WordSource = Callable[[], int]


def bounds(size: int = DIE_FACES, width: int = RAW_WORD_BITS) -> tuple[int, int]:
    """Return (quotient, limit) for a target range of `size` over `width`-bit words."""
    if size <= 0:
        raise ValueError("size must be positive")
    if width <= 0 or (1 << width) < size:
        raise ValueError("width too small for the requested range")
    q = (1 << width) // size
    return q, q * size


def face_from_word(
    raw: int, size: int = DIE_FACES, width: int = RAW_WORD_BITS
) -> Optional[int]:
    """
    Map a raw word in [0, 2^width) to 1..size, or None when it falls in the
    rejected tail.
    """
    if raw < 0 or raw >> width:
        raise ValueError(f"raw word out of range for {width} bits: {raw}")
    q, limit = bounds(size, width)
    if raw >= limit:
        return None
    return 1 + raw // q


def sample_face(
    draw: WordSource,
    size: int = DIE_FACES,
    width: int = RAW_WORD_BITS,
    *,
    on_reject: Optional[Callable[[int], None]] = None,
) -> int:
    """
    Draw raw words from `draw` until one is accepted and return its face.

    `on_reject` is called with each discarded word (used for metrics).
    """
    while True:
        raw = draw()
        face = face_from_word(raw, size, width)
        if face is not None:
            return face
        logger.debug("sampler rejected raw word %d", raw)
        if on_reject is not None:
            on_reject(raw)


__all__ = ["WordSource", "bounds", "face_from_word", "sample_face"]
