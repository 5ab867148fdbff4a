"""Normalization helpers for host-supplied selections."""

from __future__ import annotations

from .document import BufferDocument
from .state import Selection


def normalize_selection(document: BufferDocument, start: int, end: int) -> Selection:
    """Order ``start``/``end`` and clamp both into ``[0, len(text)]``.

    Hosts report anchor/cursor pairs, so a backwards drag arrives reversed.
    """

    if start > end:
        start, end = end, start
    length = document.length
    start = max(0, min(start, length))
    end = max(0, min(end, length))
    return (start, end)
