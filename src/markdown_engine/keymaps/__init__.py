"""Declarative shortcut registry and default bindings."""

from .models import ActionRef, Binding, KeyChord, WhenClause
from .registry import KeymapConflictError, KeymapRegistry, RegistryStats
from .resolver import KeymapResolver, ResolutionMatch, ResolutionResult
from .defaults import action_id_for, load_default_keymaps

__all__ = [
    "ActionRef",
    "Binding",
    "KeyChord",
    "WhenClause",
    "KeymapRegistry",
    "KeymapConflictError",
    "RegistryStats",
    "KeymapResolver",
    "ResolutionResult",
    "ResolutionMatch",
    "action_id_for",
    "load_default_keymaps",
]
