"""Read-only HTML rendering of a buffer for the preview pane."""

from __future__ import annotations

from typing import Literal

import mistune

EMPTY_PREVIEW = "<p><em>Nothing to preview</em></p>"
MOBILE_BREAKPOINT = 768

PreviewLayout = Literal["split", "tabs"]

# Tables, strikethrough, task lists and bare URLs, as GitHub renders them.
_GFM_PLUGINS = ["table", "strikethrough", "task_lists", "url"]

_render = mistune.create_markdown(escape=True, plugins=_GFM_PLUGINS)


def render_preview(text: str) -> str:
    if not text:
        return EMPTY_PREVIEW
    return str(_render(text))


def layout_for_width(width: int, breakpoint: int = MOBILE_BREAKPOINT) -> PreviewLayout:
    """Narrow hosts switch between write/preview tabs instead of splitting."""

    return "tabs" if width < breakpoint else "split"


__all__ = [
    "EMPTY_PREVIEW",
    "MOBILE_BREAKPOINT",
    "PreviewLayout",
    "render_preview",
    "layout_for_width",
]
