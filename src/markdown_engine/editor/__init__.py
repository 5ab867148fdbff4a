"""Editor context, language workspace, and toolbar dispatch.

``ToolbarEngine`` lives in :mod:`markdown_engine.editor.toolbar`; it pulls in
the keymap layer, which itself depends on the types exported here.
"""

from .base import ActionResult, EditorBus, EditorContext, KeyInput
from .languages import (
    DEFAULT_LANGUAGE,
    LANGUAGE_KEYS,
    LANGUAGES,
    Language,
    LanguageWorkspace,
    get_language,
)

__all__ = [
    "ActionResult",
    "EditorBus",
    "EditorContext",
    "KeyInput",
    "DEFAULT_LANGUAGE",
    "LANGUAGE_KEYS",
    "LANGUAGES",
    "Language",
    "LanguageWorkspace",
    "get_language",
]
