"""High-level editing verbs reused by the toolbar and keyboard shortcuts."""

from .core import update_selection
from .format import apply_format, format_action
from .history import capture_typed_edit, redo, undo

__all__ = [
    "update_selection",
    "apply_format",
    "format_action",
    "capture_typed_edit",
    "undo",
    "redo",
]
