"""Chord resolution with telemetry instrumentation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Mapping, Optional

from markdown_engine.runtime.telemetry import span

from .models import ActionRef, Binding, KeyChord
from .registry import KeymapRegistry


@dataclass(frozen=True, slots=True)
class ResolutionMatch:
    """Resolved binding paired with its action."""

    binding: Binding
    action: ActionRef


@dataclass(frozen=True, slots=True)
class ResolutionResult:
    """Outcome returned from the resolver.

    ``blocked`` means the chord is bound but every binding's ``when`` gate
    failed; hosts should still swallow the key (Ctrl+B with no selection must
    not fall through to the widget).
    """

    status: Literal["match", "blocked", "miss"]
    match: Optional[ResolutionMatch] = None


class KeymapResolver:
    """Picks the highest-priority binding whose gates allow the chord."""

    def __init__(
        self, registry: KeymapRegistry, *, logger_name: str | None = None
    ) -> None:
        self._registry = registry
        self._logger_name = logger_name

    def resolve(
        self,
        chord: KeyChord | str,
        *,
        context: Optional[Mapping[str, bool]] = None,
    ) -> ResolutionResult:
        ctx = context or {}
        token = chord.token if isinstance(chord, KeyChord) else KeyChord.parse(chord).token
        with span(
            "keymaps::resolve",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"chord": token},
        ) as handle:
            candidates = list(self._registry.iter_bindings(token))
            if not candidates:
                handle.add_metadata("status", "miss")
                return ResolutionResult(status="miss")

            allowed = [binding for binding in candidates if binding.allows(ctx)]
            if not allowed:
                handle.add_metadata("status", "blocked")
                return ResolutionResult(status="blocked")

            allowed.sort(key=lambda b: (-b.priority, b.id))
            binding = allowed[0]
            handle.add_metadata("status", "match")
            handle.add_metadata("binding_id", binding.id)
            return ResolutionResult(
                status="match",
                match=ResolutionMatch(
                    binding=binding,
                    action=self._registry.get_action(binding.action_id),
                ),
            )


__all__ = [
    "KeymapResolver",
    "ResolutionResult",
    "ResolutionMatch",
]
