"""Executable Textual app hosting the markdown toolbar engine."""

from __future__ import annotations

import argparse
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional, Sequence

try:  # pragma: no cover - imported only when the app is run
    from textual import events, work
    from textual.app import App, ComposeResult
    from textual.binding import Binding
    from textual.containers import Horizontal, Vertical
    from textual.widgets import (
        Button,
        Footer,
        Header,
        Input,
        Markdown,
        Static,
        Tab,
        Tabs,
        TextArea,
    )
    from textual.widgets.text_area import Selection as TextSelection
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use markdown_engine.adapters.textual.app"
    ) from exc

from markdown_engine.buffer import BufferMirror, Selection
from markdown_engine.editor import (
    DEFAULT_LANGUAGE,
    LANGUAGES,
    EditorBus,
    EditorContext,
    LanguageWorkspace,
)
from markdown_engine.editor.toolbar import TOOLBAR_GROUPS, ToolbarEngine, ToolbarState
from markdown_engine.preview import layout_for_width, render_preview
from markdown_engine.runtime import telemetry
from markdown_engine.runtime.settings import EngineSettings
from markdown_engine.translation import (
    GeminiTranslator,
    TranslationError,
    TranslationRequest,
    apply_translations,
)

from .controller import TextualToolbarAdapter, TextualUIHooks


@dataclass
class UIState:
    status_text: str = ""
    layout: str = "split"
    show_preview: bool = False


class MarkdownEngineApp(App[None]):
    """Article editor: language tabs, formatting toolbar, editor, preview."""

    CSS = """
	#toolbar {
		height: 3;
	}

	#toolbar Button {
		min-width: 5;
		margin: 0 1 0 0;
	}

	#panes {
		height: 1fr;
	}

	#editor, #preview {
		width: 1fr;
		border: round $accent;
	}

	.-narrow #preview {
		display: none;
	}

	.-narrow.-show-preview #preview {
		display: block;
	}

	.-narrow.-show-preview #editor {
		display: none;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}
	"""

    BINDINGS = [
        Binding("ctrl+b", "shortcut('b')", "Bold", priority=True),
        # Terminals send ctrl+i as tab and drop shift from ctrl+shift+z, so
        # ctrl+o and ctrl+r carry italic and redo there.
        Binding("ctrl+i", "shortcut('i')", "Italic", show=False, priority=True),
        Binding("ctrl+o", "shortcut('o')", "Italic", priority=True),
        Binding("ctrl+z", "shortcut('z')", "Undo", priority=True),
        Binding("ctrl+shift+z", "shortcut('z', 'shift')", "Redo", show=False, priority=True),
        Binding("ctrl+y", "shortcut('y')", "Redo", priority=True),
        Binding("ctrl+r", "shortcut('r')", "Redo", show=False, priority=True),
        Binding("ctrl+p", "toggle_preview", "Preview"),
        Binding("ctrl+t", "translate", "Translate missing"),
        Binding("ctrl+s", "save", "Save"),
        Binding("ctrl+q", "quit", "Quit"),
    ]

    def __init__(
        self,
        *,
        settings: Optional[EngineSettings] = None,
        file: Optional[Path] = None,
        language: str = DEFAULT_LANGUAGE,
    ) -> None:
        super().__init__()
        self.settings = settings or EngineSettings.from_env()
        self.file = file
        self.workspace = LanguageWorkspace(
            history_limit=self.settings.history_limit, active=language
        )
        if file is not None and file.exists():
            self.workspace.load({language: {"content": file.read_text(encoding="utf-8")}})
        self.engine = ToolbarEngine(
            EditorContext(
                buffer=self.workspace.active_buffer,
                bus=EditorBus(),
                settings=self.settings,
            )
        )
        self.adapter: TextualToolbarAdapter | None = None
        self._state = UIState()

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield Tabs(
            *(Tab(language.label, id=language.key) for language in LANGUAGES),
            active=self.workspace.active,
            id="languages",
        )
        yield Input(placeholder="Title", id="title")
        with Horizontal(id="toolbar"):
            for group in TOOLBAR_GROUPS:
                for button in group:
                    yield Button(
                        button.label,
                        id=f"op-{button.id}",
                        tooltip=button.tooltip,
                    )
        with Horizontal(id="panes"):
            with Vertical(id="editor"):
                yield TextArea(id="text")
            with Vertical(id="preview"):
                yield Markdown(id="preview-view")
        yield Static("", id="status-line")
        yield Footer()

    def on_mount(self) -> None:
        hooks = TextualUIHooks(
            update_buffer=self._update_buffer,
            update_status=self._update_status,
            restore_selection=self._restore_selection,
            update_toolbar=self._update_toolbar,
            log=self._log_line,
        )
        self.adapter = TextualToolbarAdapter(self.engine, hooks, workspace=self.workspace)
        self.query_one("#title", Input).value = self.workspace.title(self.workspace.active)
        self.query_one("#text", TextArea).focus()

    def on_resize(self, event: events.Resize) -> None:
        self._state.layout = layout_for_width(event.size.width)
        self.screen.set_class(self._state.layout == "tabs", "-narrow")

    # host -> engine -------------------------------------------------------

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        if self.adapter:
            self.adapter.on_text_changed(event.text_area.text)
            self._refresh_preview()

    def on_text_area_selection_changed(self, event: TextArea.SelectionChanged) -> None:
        if not self.adapter:
            return
        document = self.engine.buffer.document
        start = document.offset_for_location(event.selection.start)
        end = document.offset_for_location(event.selection.end)
        self.adapter.on_selection_changed(start, end)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id or ""
        if self.adapter and button_id.startswith("op-"):
            self.adapter.press_button(button_id[len("op-") :])
            event.stop()

    def on_tabs_tab_activated(self, event: Tabs.TabActivated) -> None:
        if not self.adapter or event.tab.id is None:
            return
        if event.tab.id == self.workspace.active:
            return
        self.adapter.switch_language(event.tab.id)
        self.query_one("#title", Input).value = self.workspace.title(event.tab.id)

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id == "title":
            self.workspace.set_title(self.workspace.active, event.value)

    def action_shortcut(self, key: str, *modifiers: str) -> None:
        if self.adapter:
            self.adapter.handle_textual_key(key, modifiers=("ctrl", *modifiers))

    def action_toggle_preview(self) -> None:
        self._state.show_preview = not self._state.show_preview
        self.screen.set_class(self._state.show_preview, "-show-preview")

    def action_save(self) -> None:
        if self.file is None:
            self._update_status("save::no file")
            return
        self.file.write_text(self.engine.buffer.text, encoding="utf-8")
        html_path = self.file.with_suffix(".html")
        html_path.write_text(render_preview(self.engine.buffer.text), encoding="utf-8")
        self._update_status(f"saved::{self.file}")

    @work(exclusive=True)
    async def action_translate(self) -> None:
        source = self.workspace.active
        targets = [key for key in self.workspace.missing_languages() if key != source]
        if not targets:
            self._update_status("translate::nothing missing")
            return
        self._update_status("translate::running")
        try:
            request = TranslationRequest(
                source_language=source,
                targets=targets,
                title=self.workspace.title(source),
                content=self.workspace.buffer(source).text,
            )
            translations = await GeminiTranslator(self.settings).translate(request)
        except TranslationError as exc:
            self.notify(str(exc), severity="error")
            self._update_status(f"translate::{exc.status}")
            return
        apply_translations(self.workspace, translations)
        if self.adapter:
            self.adapter.refresh()
        self.query_one("#title", Input).value = self.workspace.title(self.workspace.active)
        self._update_status(f"translate::{','.join(translations)}")

    # engine -> host -------------------------------------------------------

    def _update_buffer(self, mirror: BufferMirror) -> None:
        text_area = self.query_one("#text", TextArea)
        if text_area.text != mirror.text:
            text_area.load_text(mirror.text)
            end = self.engine.buffer.document.location_for_offset(mirror.selection[1])
            text_area.selection = TextSelection(end, end)
        self._refresh_preview()

    def _restore_selection(self, selection: Selection) -> None:
        def apply() -> None:
            document = self.engine.buffer.document
            text_area = self.query_one("#text", TextArea)
            text_area.focus()
            text_area.selection = TextSelection(
                document.location_for_offset(selection[0]),
                document.location_for_offset(selection[1]),
            )

        self.call_after_refresh(apply)

    def _update_toolbar(self, state: ToolbarState) -> None:
        for group in state.groups:
            for button in group:
                self.query_one(f"#op-{button.id}", Button).disabled = not button.enabled

    def _update_status(self, status: str) -> None:
        self._state.status_text = status
        self.query_one("#status-line", Static).update(status)

    def _refresh_preview(self) -> None:
        self.query_one("#preview-view", Markdown).update(self.engine.buffer.text)

    def _log_line(self, line: str) -> None:
        telemetry.record_event("textual.adapter", level="debug", data={"line": line})


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the markdown article editor.")
    parser.add_argument(
        "--file",
        type=Path,
        default=None,
        help="Markdown file loaded into the starting language and written on save",
    )
    parser.add_argument(
        "--language",
        choices=[language.key for language in LANGUAGES],
        default=DEFAULT_LANGUAGE,
        help=f"Language tab to start in (default: {DEFAULT_LANGUAGE})",
    )
    parser.add_argument(
        "--history-limit",
        type=int,
        default=None,
        help="Undo snapshots kept per language (default: MARKDOWN_ENGINE_HISTORY_LIMIT or 50)",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    settings = EngineSettings.from_env()
    if args.history_limit is not None:
        settings = replace(settings, history_limit=args.history_limit)
    app = MarkdownEngineApp(settings=settings, file=args.file, language=args.language)
    app.run()


if __name__ == "__main__":  # pragma: no cover - manual run
    main()
