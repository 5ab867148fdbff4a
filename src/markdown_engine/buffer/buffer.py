"""High-level buffer façade combining document, selection, and history."""

from __future__ import annotations

from contextlib import AbstractContextManager
from dataclasses import dataclass
from typing import ContextManager, Optional

from markdown_engine.runtime import telemetry

from .document import BufferDocument
from .state import BufferState, Selection
from .sync import BufferMirror
from .undo import DEFAULT_HISTORY_LIMIT, SnapshotHistory
from .validation import normalize_selection


@dataclass(slots=True)
class BufferDelta:
    version: int
    text: str
    selection: Selection
    label: str
    recorded: bool


class Buffer:
    def __init__(
        self,
        *,
        name: str = "default",
        document: Optional[BufferDocument] = None,
        state: Optional[BufferState] = None,
        history: Optional[SnapshotHistory] = None,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> None:
        self.name = name
        self.document = document or BufferDocument()
        self.state = state or BufferState()
        self.history = history or SnapshotHistory(history_limit)

    @classmethod
    def from_text(
        cls,
        text: str,
        *,
        name: str = "default",
        history_limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> "Buffer":
        return cls(
            name=name,
            document=BufferDocument.from_text(text),
            history_limit=history_limit,
        )

    @property
    def text(self) -> str:
        return self.document.text

    @property
    def selection(self) -> Selection:
        return self.state.selection

    @property
    def has_selection(self) -> bool:
        return self.state.has_selection

    def set_selection(self, start: int, end: int) -> Selection:
        self.state.set_selection(*normalize_selection(self.document, start, end))
        return self.state.selection

    def mirror(self, *, attributes: Optional[dict[str, str]] = None) -> BufferMirror:
        return BufferMirror(
            text=self.document.text,
            selection=self.state.selection,
            version=self.document.version,
            can_undo=self.history.can_undo(),
            can_redo=self.history.can_redo(),
            attributes=dict(attributes or {}),
        )

    def replace_text(
        self,
        text: str,
        *,
        selection: Optional[Selection] = None,
        label: str,
        record: bool = True,
    ) -> BufferDelta:
        """Swap in ``text`` and, when ``record`` is set, snapshot the old text.

        ``selection`` is trusted as-is; transforms guarantee their own bounds.
        Without one the selection collapses to the end of the new text.
        """

        with Transaction(self, label) as tx:
            if record:
                tx.commit(self.document.text)
            self._swap_document(text, selection)

        return BufferDelta(
            version=self.document.version,
            text=self.document.text,
            selection=self.state.selection,
            label=label,
            recorded=record,
        )

    def undo(self) -> Optional[BufferDelta]:
        previous = self.history.undo(self.document.text)
        if previous is None:
            return None
        return self._restore(previous, label="undo")

    def redo(self) -> Optional[BufferDelta]:
        following = self.history.redo(self.document.text)
        if following is None:
            return None
        return self._restore(following, label="redo")

    def load(self, text: str) -> None:
        """Adopt an unrelated initial value, forgetting all history."""

        self.document = BufferDocument.from_text(text)
        self.state = BufferState()
        self.history.clear()

    def _restore(self, text: str, *, label: str) -> BufferDelta:
        with Transaction(self, label):
            self._swap_document(text, None)
        return BufferDelta(
            version=self.document.version,
            text=self.document.text,
            selection=self.state.selection,
            label=label,
            recorded=False,
        )

    def _swap_document(self, text: str, selection: Optional[Selection]) -> None:
        self.document = self.document.replace(text)
        if selection is None:
            self.state.collapse_to(len(text))
        else:
            self.state.set_selection(*selection)


class Transaction(AbstractContextManager["Transaction"]):
    def __init__(self, buffer: Buffer, label: str) -> None:
        self.buffer = buffer
        self.label = label
        self._span_cm: Optional[ContextManager[object]] = None

    def __enter__(self) -> "Transaction":
        self._span_cm = telemetry.span(
            name=f"buffer::{self.label}",
            component=True,
            metadata={"buffer": self.buffer.name},
        )
        self._span_cm.__enter__()
        return self

    def commit(self, before_text: str) -> None:
        self.buffer.history.record(before_text)

    def __exit__(self, exc_type, exc, tb) -> bool:
        if self._span_cm is not None:
            self._span_cm.__exit__(exc_type, exc, tb)
        return False
