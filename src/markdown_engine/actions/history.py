"""Undo/redo actions and typed-edit history capture."""

from __future__ import annotations

from markdown_engine.editor.base import ActionResult, EditorContext, noop


def undo(context: EditorContext, match: object) -> ActionResult:
    del match
    delta = context.buffer.undo()
    if delta is None:
        return noop("history_empty", "undo")
    context.bus.emit("history.undo", {"version": delta.version})
    return ActionResult(consumed=True, status="undo", message="undo", delta=delta)


def redo(context: EditorContext, match: object) -> ActionResult:
    del match
    delta = context.buffer.redo()
    if delta is None:
        return noop("history_empty", "redo")
    context.bus.emit("history.redo", {"version": delta.version})
    return ActionResult(consumed=True, status="redo", message="redo", delta=delta)


def capture_typed_edit(context: EditorContext, new_value: str) -> ActionResult:
    """Adopt a raw host edit, snapshotting only coalesced checkpoints.

    The pre-edit text is recorded when the history is empty or when the
    length jumps by more than ``coalesce_threshold`` characters. Runs of small
    edits therefore share one checkpoint.
    """

    buffer = context.buffer
    previous = buffer.text
    if new_value == previous:
        return noop("unchanged")

    threshold = context.settings.coalesce_threshold
    record = (
        not buffer.history.can_undo()
        or abs(len(new_value) - len(previous)) > threshold
    )
    start, end = buffer.selection
    selection = (min(start, len(new_value)), min(end, len(new_value)))
    delta = buffer.replace_text(
        new_value, selection=selection, label="typed_edit", record=record
    )
    if record:
        context.bus.emit(
            "history.record", {"length": len(previous), "version": delta.version}
        )
    return ActionResult(
        consumed=True,
        status="typed_checkpoint" if record else "typed",
        delta=delta,
    )


__all__ = ["undo", "redo", "capture_typed_edit"]
