"""Value types for keyboard shortcuts: chords, gates, actions and bindings."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Iterable, Mapping

# Cmd/Meta on macOS hosts trigger the same shortcuts as Ctrl.
_MODIFIER_ALIASES = {"meta": "ctrl", "cmd": "ctrl", "command": "ctrl", "control": "ctrl"}


def _canonical_modifiers(modifiers: Iterable[str]) -> tuple[str, ...]:
    seen: set[str] = set()
    for modifier in modifiers:
        name = modifier.strip().lower()
        if name:
            seen.add(_MODIFIER_ALIASES.get(name, name))
    return tuple(sorted(seen))


@dataclass(frozen=True, slots=True)
class KeyChord:
    """One key plus its held modifiers; ``token`` is e.g. ``ctrl+shift+z``."""

    key: str
    modifiers: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.key:
            raise ValueError("key cannot be empty")
        object.__setattr__(self, "key", self.key.lower())
        object.__setattr__(self, "modifiers", _canonical_modifiers(self.modifiers))

    @property
    def token(self) -> str:
        return "+".join((*self.modifiers, self.key))

    @classmethod
    def parse(cls, expression: str) -> "KeyChord":
        *modifiers, key = expression.strip().split("+")
        if not key:
            raise ValueError(f"invalid chord '{expression}'")
        return cls(key=key, modifiers=tuple(modifiers))


@dataclass(frozen=True, slots=True)
class WhenClause:
    """Gate on one editor flag; ``!flag`` requires the flag to be false."""

    flag: str
    expected: bool = True

    def __post_init__(self) -> None:
        if not self.flag:
            raise ValueError("flag cannot be empty")

    @classmethod
    def parse(cls, expression: str) -> "WhenClause":
        text = expression.strip()
        negated = text.startswith("!")
        return cls(text[1:] if negated else text, not negated)

    def evaluate(self, flags: Mapping[str, bool]) -> bool:
        return bool(flags.get(self.flag, False)) == self.expected


@dataclass(frozen=True, slots=True)
class ActionRef:
    """Named handler invoked as ``handler(context, match)``."""

    id: str
    handler: Callable[..., object]
    telemetry_name: str | None = None
    description: str = ""
    metadata: Mapping[str, object] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("action id cannot be empty")
        if not callable(self.handler):
            raise TypeError(f"handler for '{self.id}' is not callable")
        object.__setattr__(self, "telemetry_name", self.telemetry_name or self.id)
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    def __call__(self, *args: object, **kwargs: object) -> object:
        return self.handler(*args, **kwargs)


@dataclass(frozen=True, slots=True)
class Binding:
    """Chord -> action, firing only while every ``when`` gate holds.

    ``when`` also accepts plain strings (``"has_selection"``,
    ``"!has_selection"``), parsed on construction.
    """

    id: str
    chord: KeyChord
    action_id: str
    description: str = ""
    when: tuple[WhenClause, ...] = ()
    priority: int = 0

    def __post_init__(self) -> None:
        if not self.id or not self.action_id:
            raise ValueError("binding id and action_id are required")
        gates = tuple(
            gate if isinstance(gate, WhenClause) else WhenClause.parse(str(gate))
            for gate in self.when
        )
        object.__setattr__(self, "when", gates)

    @property
    def when_map(self) -> Mapping[str, bool]:
        return MappingProxyType({gate.flag: gate.expected for gate in self.when})

    def allows(self, flags: Mapping[str, bool]) -> bool:
        return all(gate.evaluate(flags) for gate in self.when)


__all__ = [
    "KeyChord",
    "WhenClause",
    "ActionRef",
    "Binding",
]
