from __future__ import annotations

from markdown_engine.buffer import (
    Buffer,
    BufferDocument,
    SnapshotHistory,
    normalize_selection,
)
from markdown_engine.editor.toolbar import ToolbarEngine


def apply_bold(engine: ToolbarEngine) -> None:
    engine.update_selection(0, len(engine.buffer.text))
    engine.apply_operation("bold")


def test_undo_then_redo_round_trips_transforms() -> None:
    engine = ToolbarEngine.for_text("base")
    states = [engine.buffer.text]
    for op in ("bold", "italic", "h1"):
        engine.update_selection(0, len(engine.buffer.text))
        engine.apply_operation(op)
        states.append(engine.buffer.text)

    for expected in reversed(states[:-1]):
        engine.undo()
        assert engine.buffer.text == expected

    for expected in states[1:]:
        engine.redo()
        assert engine.buffer.text == expected


def test_new_edit_after_undo_clears_redo() -> None:
    engine = ToolbarEngine.for_text("text")
    apply_bold(engine)
    engine.undo()
    assert engine.buffer.history.can_redo()

    apply_bold(engine)
    result = engine.redo()

    assert not engine.buffer.history.can_redo()
    assert result.consumed is False
    assert result.status == "history_empty"
    assert engine.buffer.text == "**text**"


def test_history_keeps_at_most_fifty_snapshots() -> None:
    engine = ToolbarEngine.for_text("x")
    for _ in range(60):
        apply_bold(engine)

    undone = 0
    while engine.undo().consumed:
        undone += 1

    assert undone == 50
    assert len(engine.buffer.history.redo_stack) == 50


def test_undo_places_caret_at_end_of_restored_text() -> None:
    engine = ToolbarEngine.for_text("hello world")
    engine.update_selection(6, 11)
    engine.apply_operation("bold")

    result = engine.undo()

    assert result.delta is not None
    assert engine.buffer.text == "hello world"
    assert engine.buffer.selection == (11, 11)


def test_undo_on_empty_history_is_noop() -> None:
    engine = ToolbarEngine.for_text("hello")

    result = engine.undo()

    assert result.consumed is False
    assert engine.buffer.text == "hello"


def test_snapshot_history_direct() -> None:
    history = SnapshotHistory(limit=2)
    history.record("a")
    history.record("b")
    history.record("c")

    assert history.undo_stack == ("b", "c")
    assert history.undo("d") == "c"
    assert history.redo_stack == ("d",)
    assert history.redo("c") == "d"
    assert history.undo_stack == ("b", "c")


def test_buffer_load_forgets_history() -> None:
    buffer = Buffer.from_text("one")
    buffer.replace_text("two", label="test")
    assert buffer.history.can_undo()

    buffer.load("fresh")

    assert buffer.text == "fresh"
    assert not buffer.history.can_undo()
    assert not buffer.history.can_redo()
    assert buffer.selection == (0, 0)


def test_replace_text_without_record_skips_history() -> None:
    buffer = Buffer.from_text("one")

    delta = buffer.replace_text("one two", label="typed", record=False)

    assert delta.recorded is False
    assert buffer.history.undo_stack == ()
    assert buffer.selection == (7, 7)


def test_normalize_selection_swaps_and_clamps() -> None:
    document = BufferDocument.from_text("hello")

    assert normalize_selection(document, 4, 1) == (1, 4)
    assert normalize_selection(document, -3, 99) == (0, 5)


def test_document_offsets_and_locations_agree() -> None:
    document = BufferDocument.from_text("ab\ncde\nf")

    assert document.location_for_offset(4) == (1, 1)
    assert document.offset_for_location((1, 1)) == 4
    assert document.offset_for_location((2, 10)) == len(document.text)
    assert document.line_count == 3
    assert document.replace("x").version == 1
