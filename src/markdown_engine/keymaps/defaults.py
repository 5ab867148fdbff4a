"""Built-in toolbar actions and the default keyboard shortcuts."""

from __future__ import annotations

from typing import Iterable, Sequence

from markdown_engine.actions import format as format_actions
from markdown_engine.actions import history as history_actions
from markdown_engine.transforms import TRANSFORMS, Operation

from .models import ActionRef, Binding, KeyChord
from .registry import KeymapRegistry

_DESCRIPTIONS = {
    Operation.H1: "Heading 1",
    Operation.H2: "Heading 2",
    Operation.H3: "Heading 3",
    Operation.BOLD: "Bold",
    Operation.ITALIC: "Italic",
    Operation.CODE: "Inline Code",
    Operation.BULLETS: "Bullet List",
    Operation.NUMBERED: "Numbered List",
    Operation.QUOTE: "Blockquote",
    Operation.LINK: "Link",
    Operation.IMAGE: "Image",
    Operation.CODEBLOCK: "Code Block",
    Operation.TABLE: "Table",
    Operation.HR: "Horizontal Line",
    Operation.UNDO: "Undo",
    Operation.REDO: "Redo",
}


def action_id_for(operation: Operation) -> str:
    prefix = "history" if operation.is_history else "format"
    return f"{prefix}.{operation.value}"


DEFAULT_ACTIONS: tuple[ActionRef, ...] = tuple(
    ActionRef(
        id=action_id_for(operation),
        handler=format_actions.format_action(operation),
        description=_DESCRIPTIONS[operation],
        metadata={"operation": operation.value},
    )
    for operation in TRANSFORMS
) + (
    ActionRef(
        id=action_id_for(Operation.UNDO),
        handler=history_actions.undo,
        description=_DESCRIPTIONS[Operation.UNDO],
        metadata={"operation": Operation.UNDO.value},
    ),
    ActionRef(
        id=action_id_for(Operation.REDO),
        handler=history_actions.redo,
        description=_DESCRIPTIONS[Operation.REDO],
        metadata={"operation": Operation.REDO.value},
    ),
)

DEFAULT_BINDINGS: tuple[Binding, ...] = (
    Binding(
        id="shortcut.bold",
        chord=KeyChord.parse("ctrl+b"),
        action_id="format.bold",
        description="Bold the selection",
        when=("has_selection",),
    ),
    Binding(
        id="shortcut.italic",
        chord=KeyChord.parse("ctrl+i"),
        action_id="format.italic",
        description="Italicize the selection",
        when=("has_selection",),
    ),
    Binding(
        id="shortcut.undo",
        chord=KeyChord.parse("ctrl+z"),
        action_id="history.undo",
        description="Undo the last change",
    ),
    Binding(
        id="shortcut.redo",
        chord=KeyChord.parse("ctrl+shift+z"),
        action_id="history.redo",
        description="Redo the last undone change",
    ),
    Binding(
        id="shortcut.redo_alt",
        chord=KeyChord.parse("ctrl+y"),
        action_id="history.redo",
        description="Redo the last undone change",
    ),
)


def load_default_keymaps(
    registry: KeymapRegistry,
    *,
    replace: bool = False,
    extra_bindings: Iterable[Binding] | None = None,
    include_bindings: Sequence[str] | None = None,
    exclude_bindings: Sequence[str] | None = None,
) -> None:
    """Register every toolbar action plus the selected default shortcuts."""

    include = set(include_bindings) if include_bindings else None
    exclude = set(exclude_bindings or ())

    for action in DEFAULT_ACTIONS:
        registry.register_action(action, replace=replace)

    for binding in DEFAULT_BINDINGS:
        if include is not None and binding.id not in include:
            continue
        if binding.id in exclude:
            continue
        registry.register_binding(binding, replace=replace)

    for binding in extra_bindings or ():
        registry.register_binding(binding, replace=replace)


__all__ = [
    "load_default_keymaps",
    "action_id_for",
    "DEFAULT_ACTIONS",
    "DEFAULT_BINDINGS",
]
