"""Shared context, results, and event bus for the editor engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Mapping, Optional, Tuple

from markdown_engine.buffer import Buffer, BufferDelta, Selection
from markdown_engine.runtime.settings import EngineSettings


@dataclass(slots=True)
class KeyInput:
    """Normalized key event passed to the engine."""

    key: str
    modifiers: Tuple[str, ...] = ()
    text: Optional[str] = None


@dataclass(slots=True)
class ActionResult:
    """Outcome of an action, shortcut, or typed edit.

    ``restore_selection`` is set when the host should refocus its text
    surface and select that range once it has rendered the new text.
    """

    consumed: bool
    status: str = "ok"
    message: Optional[str] = None
    delta: Optional[BufferDelta] = None
    restore_selection: Optional[Selection] = None

    @property
    def changed(self) -> bool:
        return self.delta is not None


@dataclass(slots=True)
class EditorContext:
    """Services every action can access."""

    buffer: Buffer
    bus: "EditorBus"
    settings: EngineSettings = field(default_factory=EngineSettings)
    extras: Dict[str, object] = field(default_factory=dict)

    def flags(self) -> Mapping[str, bool]:
        """Boolean state consulted by keymap ``when`` clauses."""

        return {
            "has_selection": self.buffer.has_selection,
            "can_undo": self.buffer.history.can_undo(),
            "can_redo": self.buffer.history.can_redo(),
        }


class EditorBus:
    """Minimal event bus letting the engine publish structured signals."""

    def __init__(self) -> None:
        self._subscribers: Dict[str, list[Callable[[object], None]]] = {}

    def subscribe(self, event: str, callback: Callable[[object], None]) -> None:
        self._subscribers.setdefault(event, []).append(callback)

    def emit(self, event: str, payload: object | None = None) -> None:
        for callback in self._subscribers.get(event, []):
            callback(payload)


def noop(status: str = "noop", message: Optional[str] = None) -> ActionResult:
    return ActionResult(consumed=False, status=status, message=message)
