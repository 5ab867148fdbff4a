"""Store of shortcut actions and the chord bindings that trigger them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, Optional

from markdown_engine.runtime.telemetry import span

from .models import ActionRef, Binding


@dataclass(slots=True)
class RegistryStats:
    action_count: int
    binding_count: int
    chords: tuple[str, ...]


class KeymapConflictError(RuntimeError):
    """A binding would fire on the same chord and flags as an existing one."""

    def __init__(self, binding: Binding, conflicts: Iterable[Binding]):
        self.binding = binding
        self.conflicts = tuple(conflicts)
        ids = ", ".join(existing.id for existing in self.conflicts)
        super().__init__(f"Binding '{binding.id}' collides with: {ids}")


class KeymapRegistry:
    """Actions by id, bindings by id, and bindings grouped by chord token.

    ``revision`` increases on every binding change so callers can notice
    that a cached resolution is stale.
    """

    def __init__(self, *, logger_name: str | None = None) -> None:
        self._actions: Dict[str, ActionRef] = {}
        self._bindings: Dict[str, Binding] = {}
        self._by_chord: Dict[str, Dict[str, Binding]] = {}
        self._logger_name = logger_name
        self._revision = 0

    def revision(self) -> int:
        return self._revision

    def has_action(self, action_id: str) -> bool:
        return action_id in self._actions

    def get_action(self, action_id: str) -> ActionRef:
        action = self._actions.get(action_id)
        if action is None:
            raise KeyError(f"Action '{action_id}' is not registered")
        return action

    def get_binding(self, binding_id: str) -> Binding:
        binding = self._bindings.get(binding_id)
        if binding is None:
            raise KeyError(f"Binding '{binding_id}' is not registered")
        return binding

    def register_action(self, action: ActionRef, *, replace: bool = False) -> ActionRef:
        if action.id in self._actions and not replace:
            raise ValueError(f"Action '{action.id}' already registered")
        self._actions[action.id] = action
        return action

    def register_binding(self, binding: Binding, *, replace: bool = False) -> Binding:
        """Add ``binding``; with ``replace`` evict whatever it collides with."""

        with span(
            "keymaps::register_binding",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"binding_id": binding.id, "chord": binding.chord.token},
        ) as handle:
            if not self.has_action(binding.action_id):
                raise KeyError(
                    f"Binding '{binding.id}' references unknown action "
                    f"'{binding.action_id}'"
                )

            conflicts = self.detect_conflicts(binding)
            if not replace:
                if conflicts:
                    handle.add_metadata("conflicts", [c.id for c in conflicts])
                    raise KeymapConflictError(binding, conflicts)
                if binding.id in self._bindings:
                    raise ValueError(f"Binding id '{binding.id}' already registered")

            evicted = list(conflicts)
            if binding.id in self._bindings:
                evicted.append(self._bindings[binding.id])
            for existing in evicted:
                self._remove(existing)

            self._bindings[binding.id] = binding
            self._by_chord.setdefault(binding.chord.token, {})[binding.id] = binding
            self._revision += 1
            return binding

    def unregister_binding(self, binding_id: str) -> Optional[Binding]:
        binding = self._bindings.get(binding_id)
        if binding is not None:
            self._remove(binding)
            self._revision += 1
        return binding

    def iter_bindings(self, chord: Optional[str] = None) -> Iterator[Binding]:
        """All bindings in registration order, or those on one chord by id."""

        if chord is None:
            return iter(list(self._bindings.values()))
        group = self._by_chord.get(chord, {})
        return iter([group[key] for key in sorted(group)])

    def bindings_for_action(self, action_id: str) -> tuple[Binding, ...]:
        return tuple(
            binding
            for binding in self._bindings.values()
            if binding.action_id == action_id
        )

    def stats(self) -> RegistryStats:
        return RegistryStats(
            action_count=len(self._actions),
            binding_count=len(self._bindings),
            chords=tuple(sorted(self._by_chord)),
        )

    def detect_conflicts(self, binding: Binding) -> list[Binding]:
        same_chord = self._by_chord.get(binding.chord.token, {})
        return [
            existing
            for existing in same_chord.values()
            if existing.id != binding.id and _gates_collide(binding, existing)
        ]

    def _remove(self, binding: Binding) -> None:
        self._bindings.pop(binding.id, None)
        group = self._by_chord.get(binding.chord.token)
        if group is None:
            return
        group.pop(binding.id, None)
        if not group:
            del self._by_chord[binding.chord.token]


def _gates_collide(left: Binding, right: Binding) -> bool:
    # Two ungated bindings always collide; a gated one never shadows an
    # ungated one. Gated pairs collide only when their gates are identical.
    if not left.when or not right.when:
        return not left.when and not right.when
    return dict(left.when_map) == dict(right.when_map)


__all__ = [
    "KeymapRegistry",
    "KeymapConflictError",
    "RegistryStats",
]
