"""Environment-driven settings for the engine and its collaborators."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

ENV_PREFIX = "MARKDOWN_ENGINE_"

DEFAULT_HISTORY_LIMIT = 50
DEFAULT_COALESCE_THRESHOLD = 10
DEFAULT_GEMINI_MODEL = "gemini-2.5-flash"
DEFAULT_TRANSLATE_TIMEOUT = 60.0


def env(name: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(f"{ENV_PREFIX}{name}", default)


def env_flag(name: str, default: bool) -> bool:
    raw = env(name)
    if raw is None:
        return default
    return raw.lower() in {"1", "true", "yes", "on"}


def env_int(name: str, fallback: int) -> int:
    value = env(name)
    if value is None:
        return fallback
    try:
        return int(value)
    except ValueError:
        return fallback


def env_float(name: str, fallback: float) -> float:
    value = env(name)
    if value is None:
        return fallback
    try:
        return float(value)
    except ValueError:
        return fallback


@dataclass(frozen=True, slots=True)
class EngineSettings:
    """Tunables shared by buffers, the toolbar engine and the translator."""

    history_limit: int = DEFAULT_HISTORY_LIMIT
    coalesce_threshold: int = DEFAULT_COALESCE_THRESHOLD
    gemini_api_key: Optional[str] = None
    gemini_model: str = DEFAULT_GEMINI_MODEL
    translate_timeout: float = DEFAULT_TRANSLATE_TIMEOUT

    def __post_init__(self) -> None:
        if self.history_limit <= 0:
            raise ValueError("history_limit must be positive")
        if self.coalesce_threshold < 0:
            raise ValueError("coalesce_threshold cannot be negative")

    @classmethod
    def from_env(cls) -> "EngineSettings":
        """Read ``MARKDOWN_ENGINE_*`` variables, falling back to defaults.

        ``GEMINI_API_KEY`` is also honoured without the prefix so the same
        key the admin console deploys with keeps working.
        """

        return cls(
            history_limit=env_int("HISTORY_LIMIT", DEFAULT_HISTORY_LIMIT),
            coalesce_threshold=env_int(
                "COALESCE_THRESHOLD", DEFAULT_COALESCE_THRESHOLD
            ),
            gemini_api_key=env("GEMINI_API_KEY") or os.getenv("GEMINI_API_KEY"),
            gemini_model=env("GEMINI_MODEL") or DEFAULT_GEMINI_MODEL,
            translate_timeout=env_float(
                "TRANSLATE_TIMEOUT", DEFAULT_TRANSLATE_TIMEOUT
            ),
        )


__all__ = [
    "ENV_PREFIX",
    "EngineSettings",
    "env",
    "env_flag",
    "env_float",
    "env_int",
]
