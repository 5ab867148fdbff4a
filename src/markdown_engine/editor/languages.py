"""Per-language buffers behind the admin console's language tabs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, Mapping, Optional, Tuple

from markdown_engine.buffer import Buffer, DEFAULT_HISTORY_LIMIT
from markdown_engine.runtime import telemetry


@dataclass(frozen=True, slots=True)
class Language:
    key: str
    label: str
    name: str  # English name used in translation prompts


LANGUAGES: Tuple[Language, ...] = (
    Language("uz_latin", "O'zbekcha (Lotin)", "Uzbek (Latin)"),
    Language("uz_cyrillic", "Ўзбекча (Кирилл)", "Uzbek (Cyrillic)"),
    Language("ru", "Русский", "Russian"),
    Language("en", "English", "English"),
)

LANGUAGE_KEYS: Tuple[str, ...] = tuple(language.key for language in LANGUAGES)
DEFAULT_LANGUAGE = LANGUAGE_KEYS[0]


def get_language(key: str) -> Language:
    for language in LANGUAGES:
        if language.key == key:
            return language
    raise KeyError(f"Unknown language '{key}'")


@dataclass(slots=True)
class LanguageEntry:
    title: str
    buffer: Buffer


class LanguageWorkspace:
    """One title plus one buffer (with its own history) per language tab."""

    def __init__(
        self,
        *,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
        active: str = DEFAULT_LANGUAGE,
    ) -> None:
        self._history_limit = history_limit
        self._entries: Dict[str, LanguageEntry] = {
            key: LanguageEntry(
                title="",
                buffer=Buffer(name=key, history_limit=history_limit),
            )
            for key in LANGUAGE_KEYS
        }
        get_language(active)
        self._active = active

    @property
    def active(self) -> str:
        return self._active

    @property
    def active_buffer(self) -> Buffer:
        return self._entries[self._active].buffer

    def __iter__(self) -> Iterator[str]:
        return iter(LANGUAGE_KEYS)

    def entry(self, language: str) -> LanguageEntry:
        try:
            return self._entries[language]
        except KeyError as exc:
            raise KeyError(f"Unknown language '{language}'") from exc

    def buffer(self, language: str) -> Buffer:
        return self.entry(language).buffer

    def title(self, language: str) -> str:
        return self.entry(language).title

    def set_title(self, language: str, title: str) -> None:
        self.entry(language).title = title

    def activate(self, language: str) -> Buffer:
        entry = self.entry(language)
        if language != self._active:
            telemetry.record_event(
                "workspace.activate",
                level="debug",
                data={"from": self._active, "to": language},
            )
            self._active = language
        return entry.buffer

    def load(self, values: Mapping[str, Mapping[str, Optional[str]]]) -> None:
        """Seed titles and content; touched buffers start with empty history.

        ``values`` maps language keys to ``{"title": ..., "content": ...}``.
        """

        for language, fields in values.items():
            entry = self.entry(language)
            entry.title = fields.get("title") or ""
            entry.buffer.load(fields.get("content") or "")

    def missing_languages(self) -> Tuple[str, ...]:
        """Languages whose title or content is still blank, in tab order."""

        return tuple(
            key
            for key in LANGUAGE_KEYS
            if not self._entries[key].title or not self._entries[key].buffer.text
        )

    def as_payload(self) -> Dict[str, str]:
        """Flatten into the backend's ``title_<lang>``/``content_<lang>`` fields."""

        payload: Dict[str, str] = {}
        for key in LANGUAGE_KEYS:
            entry = self._entries[key]
            payload[f"title_{key}"] = entry.title
            payload[f"content_{key}"] = entry.buffer.text
        return payload


__all__ = [
    "Language",
    "LANGUAGES",
    "LANGUAGE_KEYS",
    "DEFAULT_LANGUAGE",
    "LanguageEntry",
    "LanguageWorkspace",
    "get_language",
]
