"""Actions that apply formatting transforms to the active selection."""

from __future__ import annotations

from typing import Callable

from markdown_engine.editor.base import ActionResult, EditorContext, noop
from markdown_engine.transforms import Operation, apply_transform

FormatAction = Callable[[EditorContext, object], ActionResult]


def apply_format(context: EditorContext, operation: Operation) -> ActionResult:
    buffer = context.buffer
    start, end = buffer.selection
    if start == end:
        return noop("no_selection", operation.value)

    result = apply_transform(operation, buffer.text, start, end)
    if result is None:
        return noop("unsupported", operation.value)

    selection = (result.new_selection_start, result.new_selection_end)
    delta = buffer.replace_text(
        result.new_text, selection=selection, label=f"format_{operation.value}"
    )
    context.bus.emit(
        "toolbar.transform",
        {"operation": operation.value, "range": (start, end), "selection": selection},
    )
    return ActionResult(
        consumed=True,
        status="transform",
        message=operation.value,
        delta=delta,
        restore_selection=selection,
    )


def format_action(operation: Operation) -> FormatAction:
    """Build a keymap-compatible handler bound to ``operation``."""

    def handler(context: EditorContext, match: object) -> ActionResult:
        del match
        return apply_format(context, operation)

    handler.__name__ = f"format_{operation.value}"
    return handler


__all__ = ["apply_format", "format_action"]
