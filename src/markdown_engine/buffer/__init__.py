"""Buffer abstractions and undo/redo data structures."""

from .buffer import Buffer, BufferDelta, Transaction
from .document import BufferDocument
from .state import BufferState, Location, Selection
from .sync import BufferMirror, BufferSync
from .undo import DEFAULT_HISTORY_LIMIT, SnapshotHistory
from .validation import normalize_selection

__all__ = [
    "BufferDocument",
    "BufferState",
    "Location",
    "Selection",
    "SnapshotHistory",
    "DEFAULT_HISTORY_LIMIT",
    "Buffer",
    "BufferDelta",
    "Transaction",
    "BufferMirror",
    "BufferSync",
    "normalize_selection",
]
