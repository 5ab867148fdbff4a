"""Adapter that wires ToolbarEngine results and bus events into UI callbacks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Optional

from markdown_engine.buffer import BufferMirror, Selection
from markdown_engine.editor import ActionResult, KeyInput, LanguageWorkspace
from markdown_engine.editor.toolbar import ToolbarEngine, ToolbarState
from markdown_engine.keymaps import KeyChord

# Terminals deliver ctrl+i as tab and fold ctrl+shift+z into ctrl+z; these
# chords reach the app intact and stand in for the shortcuts they name.
TERMINAL_CHORD_ALIASES = {
    "ctrl+o": KeyChord.parse("ctrl+i"),
    "ctrl+r": KeyChord.parse("ctrl+shift+z"),
}


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    update_buffer: Callable[[BufferMirror], None]
    update_status: Callable[[str], None] = _noop
    # Host should focus its text area and select this range after re-render
    restore_selection: Callable[[Selection], None] = _noop
    update_toolbar: Callable[[ToolbarState], None] = _noop
    handle_event: Callable[[str, object | None], None] = _noop
    log: Callable[[str], None] = _noop


class TextualToolbarAdapter:
    """Bridges ToolbarEngine + bus events to a Textual-friendly surface.

    Implements :class:`markdown_engine.buffer.BufferSync`, so hosts can also
    drive it through ``pull_buffer``/``push_host_edit``/``push_host_selection``.
    """

    def __init__(
        self,
        engine: ToolbarEngine,
        hooks: TextualUIHooks,
        *,
        workspace: Optional[LanguageWorkspace] = None,
    ) -> None:
        self.engine = engine
        self.hooks = hooks
        self.workspace = workspace
        if workspace is not None:
            engine.attach_buffer(workspace.active_buffer)
        self._subscribe_events()
        self._refresh_buffer()
        self._refresh_toolbar()

    def handle_textual_key(
        self,
        key: str,
        *,
        text: Optional[str] = None,
        modifiers: Iterable[str] = (),
    ) -> ActionResult:
        """Translate a Textual key event into a KeyInput and dispatch it."""

        normalized_modifiers = tuple(str(mod).lower() for mod in modifiers)
        alias = None
        if key:
            chord = KeyChord(key=key, modifiers=normalized_modifiers)
            alias = TERMINAL_CHORD_ALIASES.get(chord.token)
        if alias is not None:
            key, normalized_modifiers = alias.key, alias.modifiers
        self._log_state("key ->", key=key, text=text, mods=normalized_modifiers)
        result = self.engine.handle_key(
            KeyInput(key=key, text=text, modifiers=normalized_modifiers)
        )
        self._after_result(result)
        return result

    def press_button(self, op_id: str) -> ActionResult:
        self._log_state("button ->", op=op_id)
        result = self.engine.apply_operation(op_id)
        self._after_result(result)
        return result

    def on_text_changed(self, text: str) -> ActionResult:
        result = self.engine.on_text_changed(text)
        # The host already shows ``text``; only affordances need refreshing.
        self._refresh_toolbar()
        self._log_state("typed <-", status=result.status)
        return result

    def on_selection_changed(self, start: int, end: int) -> Selection:
        selection = self.engine.update_selection(start, end)
        self._refresh_toolbar()
        return selection

    def switch_language(self, language: str) -> BufferMirror:
        if self.workspace is None:
            raise RuntimeError("No language workspace attached")
        buffer = self.workspace.activate(language)
        self.engine.attach_buffer(buffer)
        self.hooks.update_status(f"language::{language}")
        self._refresh_buffer()
        self._refresh_toolbar()
        return self.pull_buffer()

    def refresh(self) -> BufferMirror:
        """Republish the active buffer after it changed outside the engine."""

        self._refresh_buffer()
        self._refresh_toolbar()
        return self.pull_buffer()

    # BufferSync -----------------------------------------------------------

    def pull_buffer(self) -> BufferMirror:
        attributes = {"buffer": self.engine.buffer.name}
        if self.workspace is not None:
            attributes["title"] = self.workspace.title(self.workspace.active)
        return self.engine.buffer.mirror(attributes=attributes)

    def push_host_edit(self, text: str) -> None:
        self.on_text_changed(text)

    def push_host_selection(self, start: int, end: int) -> None:
        self.on_selection_changed(start, end)

    # internals ------------------------------------------------------------

    def _after_result(self, result: ActionResult) -> None:
        status = result.message or result.status
        if status:
            self.hooks.update_status(status)
        if result.changed:
            self._refresh_buffer()
        if result.restore_selection is not None:
            self.hooks.restore_selection(result.restore_selection)
        self._refresh_toolbar()
        self._log_state(
            "result <-",
            consumed=result.consumed,
            status=result.status,
            message=result.message,
        )

    def _subscribe_events(self) -> None:
        bus = self.engine.bus
        for event in (
            "toolbar.transform",
            "history.undo",
            "history.redo",
            "history.record",
            "buffer.attached",
        ):
            bus.subscribe(
                event, lambda payload, name=event: self._handle_event(name, payload)
            )

    def _handle_event(self, name: str, payload: object | None) -> None:
        self._log_state("event ->", event=name, payload=payload)
        self.hooks.handle_event(name, payload)

    def _refresh_buffer(self) -> None:
        self.hooks.update_buffer(self.pull_buffer())

    def _refresh_toolbar(self) -> None:
        self.hooks.update_toolbar(self.engine.toolbar_state())

    def _log_state(self, prefix: str, **fields: object) -> None:
        snapshot = self._state_metadata()
        snapshot.update({k: v for k, v in fields.items() if v is not None})
        parts = [prefix]
        for key, value in snapshot.items():
            parts.append(f"{key}={value!r}")
        self.hooks.log(" ".join(parts))

    def _state_metadata(self) -> Dict[str, object]:
        buffer = self.engine.buffer
        return {
            "buffer": buffer.name,
            "buffer_version": buffer.document.version,
            "selection": buffer.selection,
            "can_undo": buffer.history.can_undo(),
            "can_redo": buffer.history.can_redo(),
        }


__all__ = ["TERMINAL_CHORD_ALIASES", "TextualToolbarAdapter", "TextualUIHooks"]
