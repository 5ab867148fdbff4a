from __future__ import annotations

from typing import Any, Dict, List

from markdown_engine.adapters.textual import TextualToolbarAdapter, TextualUIHooks
from markdown_engine.buffer import BufferSync
from markdown_engine.editor import LanguageWorkspace
from markdown_engine.editor.toolbar import ToolbarEngine, ToolbarState
from markdown_engine.translation import apply_translations


def make_adapter(
    text: str = "hello world",
) -> tuple[TextualToolbarAdapter, Dict[str, List[Any]]]:
    seen: Dict[str, List[Any]] = {
        "buffer": [],
        "status": [],
        "selection": [],
        "toolbar": [],
        "events": [],
        "log": [],
    }
    ui = TextualUIHooks(
        update_buffer=lambda mirror: seen["buffer"].append(mirror),
        update_status=lambda status: seen["status"].append(status),
        restore_selection=lambda selection: seen["selection"].append(selection),
        update_toolbar=lambda state: seen["toolbar"].append(state),
        handle_event=lambda name, payload: seen["events"].append((name, payload)),
        log=lambda line: seen["log"].append(line),
    )
    return TextualToolbarAdapter(ToolbarEngine.for_text(text), ui), seen


def test_adapter_publishes_initial_state() -> None:
    _, seen = make_adapter()

    assert seen["buffer"][-1].text == "hello world"
    assert isinstance(seen["toolbar"][-1], ToolbarState)
    assert not seen["toolbar"][-1].button("bold").enabled


def test_button_press_updates_buffer_and_restores_selection() -> None:
    adapter, seen = make_adapter()
    adapter.on_selection_changed(6, 11)
    assert seen["toolbar"][-1].button("bold").enabled

    result = adapter.press_button("bold")

    assert result.status == "transform"
    assert seen["buffer"][-1].text == "hello **world**"
    assert seen["buffer"][-1].can_undo is True
    assert seen["selection"] == [(8, 13)]
    assert seen["status"][-1] == "bold"
    assert ("toolbar.transform", {"operation": "bold", "range": (6, 11), "selection": (8, 13)}) in seen["events"]


def test_buffer_is_published_before_selection_is_restored() -> None:
    calls: List[tuple[str, Any]] = []
    adapter = TextualToolbarAdapter(
        ToolbarEngine.for_text("hello world"),
        TextualUIHooks(
            update_buffer=lambda mirror: calls.append(("buffer", mirror.text)),
            restore_selection=lambda selection: calls.append(("selection", selection)),
        ),
    )
    adapter.on_selection_changed(6, 11)
    calls.clear()

    adapter.press_button("bold")

    assert calls == [("buffer", "hello **world**"), ("selection", (8, 13))]


def test_shortcut_without_selection_changes_nothing() -> None:
    adapter, seen = make_adapter()
    published = len(seen["buffer"])

    result = adapter.handle_textual_key("b", modifiers=("CTRL",))

    assert result.consumed is True
    assert len(seen["buffer"]) == published
    assert seen["selection"] == []


def test_undo_shortcut_relays_history_event() -> None:
    adapter, seen = make_adapter()
    adapter.on_selection_changed(0, 5)
    adapter.press_button("h2")

    adapter.handle_textual_key("z", modifiers=("ctrl",))

    assert seen["buffer"][-1].text == "hello world"
    assert seen["buffer"][-1].can_redo is True
    assert any(name == "history.undo" for name, _ in seen["events"])
    assert seen["toolbar"][-1].can_redo


def test_typed_edits_only_refresh_toolbar() -> None:
    adapter, seen = make_adapter("")
    published = len(seen["buffer"])

    result = adapter.on_text_changed("typed")

    assert result.status == "typed_checkpoint"
    assert len(seen["buffer"]) == published
    assert seen["toolbar"][-1].can_undo


def test_adapter_satisfies_buffer_sync() -> None:
    adapter, _ = make_adapter("")
    sync: BufferSync = adapter

    sync.push_host_edit("abc")
    sync.push_host_selection(0, 3)

    mirror = sync.pull_buffer()
    assert mirror.text == "abc"
    assert mirror.selection == (0, 3)
    assert mirror.attributes["buffer"] == "default"


def test_switch_language_attaches_workspace_buffer() -> None:
    workspace = LanguageWorkspace()
    workspace.load({"ru": {"title": "Заголовок", "content": "Текст"}})
    statuses: List[str] = []
    mirrors: List[Any] = []
    adapter = TextualToolbarAdapter(
        ToolbarEngine.for_text(),
        TextualUIHooks(update_buffer=mirrors.append, update_status=statuses.append),
        workspace=workspace,
    )
    assert adapter.engine.buffer is workspace.buffer("uz_latin")

    mirror = adapter.switch_language("ru")

    assert mirror.text == "Текст"
    assert mirror.attributes == {"buffer": "ru", "title": "Заголовок"}
    assert statuses[-1] == "language::ru"
    assert adapter.engine.buffer is workspace.buffer("ru")


def test_refresh_republishes_translated_tab() -> None:
    workspace = LanguageWorkspace()
    mirrors: List[Any] = []
    adapter = TextualToolbarAdapter(
        ToolbarEngine.for_text(),
        TextualUIHooks(update_buffer=mirrors.append),
        workspace=workspace,
    )
    adapter.switch_language("ru")
    apply_translations(workspace, {"ru": {"title": "Привет", "content": "# Мир"}})

    mirror = adapter.refresh()

    assert mirrors[-1].text == "# Мир"
    assert mirror.attributes == {"buffer": "ru", "title": "Привет"}
    assert mirror.can_undo is True


def test_terminal_chords_stand_in_for_italic_and_redo() -> None:
    adapter, seen = make_adapter()
    adapter.on_selection_changed(6, 11)

    result = adapter.handle_textual_key("o", modifiers=("ctrl",))

    assert result.status == "transform"
    assert seen["buffer"][-1].text == "hello *world*"

    adapter.handle_textual_key("z", modifiers=("ctrl",))
    adapter.handle_textual_key("r", modifiers=("ctrl",))

    assert seen["buffer"][-1].text == "hello *world*"


def test_adapter_emits_log_lines() -> None:
    adapter, seen = make_adapter()

    adapter.handle_textual_key("b", modifiers=("ctrl",))

    assert any(line.startswith("key ->") for line in seen["log"])
    assert any(line.startswith("result <-") for line in seen["log"])
