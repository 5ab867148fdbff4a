"""Adapter boundary types for syncing buffers with host widgets."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from .state import Selection


@dataclass(slots=True)
class BufferMirror:
    """Host-friendly snapshot describing what the text surface should show."""

    text: str
    selection: Selection
    version: int
    can_undo: bool = False
    can_redo: bool = False
    attributes: dict[str, str] = field(default_factory=dict)


class BufferSync(Protocol):
    """How adapters exchange data with the buffer layer."""

    def pull_buffer(self) -> BufferMirror:
        """Return the latest buffer snapshot that the host should render."""
        ...

    def push_host_edit(self, text: str) -> None:
        """Submit a raw edit (keystroke, paste, IME commit) from the host."""
        ...

    def push_host_selection(self, start: int, end: int) -> None:
        """Report the host's current selection range."""
        ...
