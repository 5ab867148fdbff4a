"""Bounded snapshot history backing undo/redo."""

from __future__ import annotations

from collections import deque
from typing import Deque, List, Optional

DEFAULT_HISTORY_LIMIT = 50


class SnapshotHistory:
    """Linear undo/redo history of whole-buffer text snapshots.

    The undo side is ordered oldest to newest and drops its oldest entry once
    ``limit`` is exceeded. Recording a new snapshot discards every redo entry,
    so history never branches.
    """

    def __init__(self, limit: int = DEFAULT_HISTORY_LIMIT) -> None:
        if limit <= 0:
            raise ValueError("limit must be positive")
        self.limit = limit
        self._undo: Deque[str] = deque(maxlen=limit)
        self._redo: List[str] = []

    @property
    def undo_stack(self) -> tuple[str, ...]:
        return tuple(self._undo)

    @property
    def redo_stack(self) -> tuple[str, ...]:
        return tuple(self._redo)

    def record(self, snapshot: str) -> None:
        self._undo.append(snapshot)
        self._redo.clear()

    def can_undo(self) -> bool:
        return bool(self._undo)

    def can_redo(self) -> bool:
        return bool(self._redo)

    def undo(self, current: str) -> Optional[str]:
        """Pop the newest snapshot, parking ``current`` on the redo side."""

        if not self._undo:
            return None
        previous = self._undo.pop()
        self._redo.append(current)
        return previous

    def redo(self, current: str) -> Optional[str]:
        if not self._redo:
            return None
        following = self._redo.pop()
        self._undo.append(current)
        return following

    def clear(self) -> None:
        self._undo.clear()
        self._redo.clear()
