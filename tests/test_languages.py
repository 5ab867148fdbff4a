from __future__ import annotations

import pytest

from markdown_engine.editor import (
    DEFAULT_LANGUAGE,
    LANGUAGE_KEYS,
    LanguageWorkspace,
    get_language,
)


def test_languages_are_in_tab_order() -> None:
    assert LANGUAGE_KEYS == ("uz_latin", "uz_cyrillic", "ru", "en")
    assert DEFAULT_LANGUAGE == "uz_latin"
    assert get_language("uz_cyrillic").name == "Uzbek (Cyrillic)"


def test_unknown_language_raises() -> None:
    workspace = LanguageWorkspace()

    with pytest.raises(KeyError):
        get_language("de")
    with pytest.raises(KeyError):
        workspace.activate("de")
    with pytest.raises(KeyError):
        LanguageWorkspace(active="de")


def test_each_language_has_its_own_history() -> None:
    workspace = LanguageWorkspace()
    workspace.buffer("en").replace_text("hello", label="test")

    ru = workspace.activate("ru")

    assert workspace.active == "ru"
    assert ru is workspace.active_buffer
    assert not ru.history.can_undo()
    assert workspace.buffer("en").history.can_undo()


def test_load_seeds_values_and_resets_history() -> None:
    workspace = LanguageWorkspace()
    workspace.buffer("en").replace_text("draft", label="test")

    workspace.load(
        {
            "en": {"title": "Hello", "content": "Body"},
            "ru": {"title": None, "content": None},
        }
    )

    assert workspace.title("en") == "Hello"
    assert workspace.buffer("en").text == "Body"
    assert not workspace.buffer("en").history.can_undo()
    assert workspace.title("ru") == ""


def test_missing_languages_need_title_and_content() -> None:
    workspace = LanguageWorkspace()
    workspace.load(
        {
            "uz_latin": {"title": "Sarlavha", "content": "Matn"},
            "ru": {"title": "Заголовок", "content": ""},
            "en": {"title": "", "content": "Body"},
        }
    )

    assert workspace.missing_languages() == ("uz_cyrillic", "ru", "en")


def test_payload_flattens_fields() -> None:
    workspace = LanguageWorkspace(history_limit=5)
    workspace.set_title("en", "Title")
    workspace.buffer("en").replace_text("Body", label="test")

    payload = workspace.as_payload()

    assert payload["title_en"] == "Title"
    assert payload["content_en"] == "Body"
    assert payload["content_ru"] == ""
    assert len(payload) == 8
    assert workspace.buffer("en").history.limit == 5
