"""Core action implementations shared by toolbar and shortcuts."""

from __future__ import annotations

from markdown_engine.buffer import normalize_selection
from markdown_engine.editor.base import ActionResult, EditorContext, noop


def update_selection(context: EditorContext, start: int, end: int) -> ActionResult:
    """Track the host's selection so formatting knows its target."""

    buffer = context.buffer
    selection = normalize_selection(buffer.document, start, end)
    if selection == buffer.selection:
        return noop("unchanged")
    buffer.set_selection(*selection)
    context.bus.emit(
        "selection.changed",
        {"selection": selection, "has_selection": buffer.has_selection},
    )
    return ActionResult(consumed=True, status="selection")


__all__ = ["update_selection"]
