"""Request/response shapes and errors for article auto-translation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Sequence, Tuple

from markdown_engine.editor.languages import LANGUAGE_KEYS

TranslationMap = Dict[str, Dict[str, str]]


class TranslationError(RuntimeError):
    """Raised when a translation cannot be produced.

    ``status`` mirrors the HTTP status the admin console's endpoint would
    answer with (400 bad request, 500 misconfiguration, 502 upstream).
    """

    def __init__(self, message: str, *, status: int = 502, detail: Any = None) -> None:
        super().__init__(message)
        self.status = status
        self.detail = detail


@dataclass(frozen=True, slots=True)
class TranslationRequest:
    source_language: str
    targets: Sequence[str]
    title: str = ""
    content: str = ""
    effective_targets: Tuple[str, ...] = field(init=False, default=())

    def __post_init__(self) -> None:
        if self.source_language not in LANGUAGE_KEYS:
            raise TranslationError("Invalid source language", status=400)
        if isinstance(self.targets, str) or not self.targets:
            raise TranslationError("Targets are required", status=400)
        effective = tuple(
            target
            for target in dict.fromkeys(self.targets)
            if target != self.source_language and target in LANGUAGE_KEYS
        )
        if not effective:
            raise TranslationError("No valid target languages", status=400)
        object.__setattr__(self, "effective_targets", effective)
