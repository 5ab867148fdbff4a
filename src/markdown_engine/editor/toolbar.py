"""Toolbar engine coordinating transforms, history, and shortcuts."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from markdown_engine.actions import core as core_actions
from markdown_engine.actions import history as history_actions
from markdown_engine.buffer import Buffer, Selection
from markdown_engine.keymaps import (
    KeyChord,
    KeymapRegistry,
    KeymapResolver,
    ResolutionMatch,
    action_id_for,
    load_default_keymaps,
)
from markdown_engine.runtime import telemetry
from markdown_engine.runtime.settings import EngineSettings
from markdown_engine.transforms import Operation

from .base import ActionResult, EditorBus, EditorContext, KeyInput, noop


@dataclass(frozen=True, slots=True)
class ToolbarButton:
    id: str
    label: str
    tooltip: str


@dataclass(frozen=True, slots=True)
class ButtonState:
    id: str
    label: str
    tooltip: str
    enabled: bool


@dataclass(frozen=True, slots=True)
class ToolbarState:
    """Affordances the host renders: which buttons are live right now."""

    can_undo: bool
    can_redo: bool
    has_selection: bool
    groups: tuple[tuple[ButtonState, ...], ...]

    def button(self, button_id: str) -> ButtonState:
        for group in self.groups:
            for state in group:
                if state.id == button_id:
                    return state
        raise KeyError(button_id)


TOOLBAR_GROUPS: tuple[tuple[ToolbarButton, ...], ...] = (
    (
        ToolbarButton("h1", "H1", "Heading 1"),
        ToolbarButton("h2", "H2", "Heading 2"),
        ToolbarButton("h3", "H3", "Heading 3"),
    ),
    (
        ToolbarButton("bold", "B", "Bold (Ctrl+B)"),
        ToolbarButton("italic", "I", "Italic (Ctrl+I)"),
        ToolbarButton("code", "</>", "Inline Code"),
    ),
    (
        ToolbarButton("bullets", "•", "Bullet List"),
        ToolbarButton("numbered", "1.", "Numbered List"),
        ToolbarButton("quote", '"', "Blockquote"),
    ),
    (
        ToolbarButton("link", "Link", "Link"),
        ToolbarButton("image", "Img", "Image"),
    ),
    (
        ToolbarButton("codeblock", "```", "Code Block"),
        ToolbarButton("table", "Table", "Table"),
        ToolbarButton("hr", "—", "Horizontal Line"),
    ),
    (
        ToolbarButton("undo", "↶", "Undo (Ctrl+Z)"),
        ToolbarButton("redo", "↷", "Redo (Ctrl+Y)"),
    ),
)


class ToolbarEngine:
    """Owns dispatch for toolbar buttons, shortcuts, and host edits.

    Nothing here raises for bad input: empty selections, empty history and
    unknown operation ids all come back as non-consumed results.
    """

    def __init__(
        self,
        context: EditorContext,
        *,
        keymap_registry: KeymapRegistry | None = None,
        keymap_resolver: KeymapResolver | None = None,
        load_defaults: bool = True,
    ) -> None:
        self.context = context
        self.keymap_registry = keymap_registry or KeymapRegistry(
            logger_name="markdown_engine.keymaps"
        )
        if load_defaults and keymap_registry is None:
            load_default_keymaps(self.keymap_registry)
        self.keymap_resolver = keymap_resolver or KeymapResolver(
            self.keymap_registry, logger_name="markdown_engine.keymaps"
        )

    @classmethod
    def for_text(
        cls, text: str = "", *, settings: Optional[EngineSettings] = None
    ) -> "ToolbarEngine":
        settings = settings or EngineSettings()
        buffer = Buffer.from_text(text, history_limit=settings.history_limit)
        return cls(EditorContext(buffer=buffer, bus=EditorBus(), settings=settings))

    @property
    def buffer(self) -> Buffer:
        return self.context.buffer

    @property
    def bus(self) -> EditorBus:
        return self.context.bus

    def attach_buffer(self, buffer: Buffer) -> None:
        """Point the engine at another buffer (and therefore its history)."""

        self.context.buffer = buffer
        self.bus.emit("buffer.attached", {"buffer": buffer.name})

    def apply_operation(self, op_id: str) -> ActionResult:
        operation = Operation.parse(op_id)
        if operation is None:
            return noop("unknown_operation", op_id)
        action_id = action_id_for(operation)
        if not self.keymap_registry.has_action(action_id):
            return noop("unknown_operation", op_id)
        action = self.keymap_registry.get_action(action_id)
        with telemetry.span(
            name=f"toolbar::{operation.value}",
            component="toolbar",
            metadata={"buffer": self.buffer.name},
        ) as handle:
            result = action(self.context, None)
            handle.add_metadata("status", result.status)
        return result

    def handle_key(self, key: KeyInput) -> ActionResult:
        chord = KeyChord(key=key.key, modifiers=key.modifiers)
        resolution = self.keymap_resolver.resolve(chord, context=self.context.flags())
        if resolution.status == "match" and resolution.match:
            return self._execute_match(resolution.match)
        if resolution.status == "blocked":
            # Bound chord whose gate failed, e.g. Ctrl+B without a selection.
            return ActionResult(consumed=True, status="noop", message=chord.token)
        return noop("unbound", chord.token)

    def on_text_changed(self, new_value: str) -> ActionResult:
        return history_actions.capture_typed_edit(self.context, new_value)

    def update_selection(self, start: int, end: int) -> Selection:
        core_actions.update_selection(self.context, start, end)
        return self.buffer.selection

    def undo(self) -> ActionResult:
        return self.apply_operation(Operation.UNDO.value)

    def redo(self) -> ActionResult:
        return self.apply_operation(Operation.REDO.value)

    def toolbar_state(self) -> ToolbarState:
        can_undo = self.buffer.history.can_undo()
        can_redo = self.buffer.history.can_redo()
        has_selection = self.buffer.has_selection
        enabled_for = {"undo": can_undo, "redo": can_redo}
        groups = tuple(
            tuple(
                ButtonState(
                    id=button.id,
                    label=button.label,
                    tooltip=button.tooltip,
                    enabled=enabled_for.get(button.id, has_selection),
                )
                for button in group
            )
            for group in TOOLBAR_GROUPS
        )
        return ToolbarState(
            can_undo=can_undo,
            can_redo=can_redo,
            has_selection=has_selection,
            groups=groups,
        )

    def _execute_match(self, match: ResolutionMatch) -> ActionResult:
        with telemetry.span(
            "keymaps::execute",
            component="keymaps",
            metadata={
                "binding_id": match.binding.id,
                "action": match.action.telemetry_name,
            },
        ):
            outcome = match.action(self.context, match)

        if isinstance(outcome, ActionResult):
            # Shortcuts always swallow their chord, even when they no-op.
            outcome.consumed = True
            return outcome
        return ActionResult(consumed=True)


__all__ = [
    "ToolbarEngine",
    "ToolbarState",
    "ButtonState",
    "ToolbarButton",
    "TOOLBAR_GROUPS",
]
