"""Pure markdown formatting transforms applied to a text selection.

Every transform maps ``(selected, text, start, end)`` to a
:class:`TransformResult`. The returned selection bounds are derived from the
inserted markup itself, so each function guarantees
``new_selection_start <= new_selection_end <= len(new_text)`` on its own.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional

LINK_PLACEHOLDER = "https://"
TABLE_HEADER = "| Column 1 | Column 2 |\n|---|---|\n"
HORIZONTAL_RULE = "\n---\n"


class Operation(Enum):
    """Closed catalog of toolbar operations keyed by their toolbar ids."""

    H1 = "h1"
    H2 = "h2"
    H3 = "h3"
    BOLD = "bold"
    ITALIC = "italic"
    CODE = "code"
    BULLETS = "bullets"
    NUMBERED = "numbered"
    QUOTE = "quote"
    LINK = "link"
    IMAGE = "image"
    CODEBLOCK = "codeblock"
    TABLE = "table"
    HR = "hr"
    UNDO = "undo"
    REDO = "redo"

    @classmethod
    def parse(cls, op_id: str) -> Optional["Operation"]:
        try:
            return cls(op_id)
        except ValueError:
            return None

    @property
    def is_history(self) -> bool:
        return self in (Operation.UNDO, Operation.REDO)

    @property
    def heading_level(self) -> Optional[int]:
        return _HEADING_LEVELS.get(self)


_HEADING_LEVELS = {Operation.H1: 1, Operation.H2: 2, Operation.H3: 3}


@dataclass(frozen=True, slots=True)
class TransformResult:
    new_text: str
    new_selection_start: int
    new_selection_end: int


Transform = Callable[[str, str, int, int], TransformResult]


def _splice(text: str, start: int, end: int, replacement: str) -> str:
    return text[:start] + replacement + text[end:]


def _block(text: str, start: int, end: int, block: str) -> TransformResult:
    return TransformResult(_splice(text, start, end, block), start, start + len(block))


def _wrap(
    selected: str, text: str, start: int, end: int, prefix: str, suffix: str
) -> TransformResult:
    inner_start = start + len(prefix)
    return TransformResult(
        _splice(text, start, end, f"{prefix}{selected}{suffix}"),
        inner_start,
        inner_start + len(selected),
    )


def heading(level: int) -> Transform:
    marker = "#" * level + " "

    def apply(selected: str, text: str, start: int, end: int) -> TransformResult:
        block = "\n".join(marker + line for line in selected.split("\n"))
        return _block(text, start, end, block)

    apply.__name__ = f"heading_{level}"
    return apply


def bold(selected: str, text: str, start: int, end: int) -> TransformResult:
    return _wrap(selected, text, start, end, "**", "**")


def italic(selected: str, text: str, start: int, end: int) -> TransformResult:
    return _wrap(selected, text, start, end, "*", "*")


def inline_code(selected: str, text: str, start: int, end: int) -> TransformResult:
    return _wrap(selected, text, start, end, "`", "`")


def code_block(selected: str, text: str, start: int, end: int) -> TransformResult:
    return _wrap(selected, text, start, end, "```\n", "\n```")


def bullet_list(selected: str, text: str, start: int, end: int) -> TransformResult:
    # Lines that already carry a bullet (after indentation) are left alone.
    lines = [
        line if line.lstrip().startswith("- ") else f"- {line}"
        for line in selected.split("\n")
    ]
    return _block(text, start, end, "\n".join(lines))


def numbered_list(selected: str, text: str, start: int, end: int) -> TransformResult:
    lines = [f"{i}. {line}" for i, line in enumerate(selected.split("\n"), start=1)]
    return _block(text, start, end, "\n".join(lines))


def blockquote(selected: str, text: str, start: int, end: int) -> TransformResult:
    lines = [f"> {line}" for line in selected.split("\n")]
    return _block(text, start, end, "\n".join(lines))


def _reference(
    marker: str, selected: str, text: str, start: int, end: int
) -> TransformResult:
    label = f"{marker}[{selected}]("
    url_start = start + len(label)
    return TransformResult(
        _splice(text, start, end, f"{label}{LINK_PLACEHOLDER})"),
        url_start,
        url_start + len(LINK_PLACEHOLDER),
    )


def link(selected: str, text: str, start: int, end: int) -> TransformResult:
    return _reference("", selected, text, start, end)


def image(selected: str, text: str, start: int, end: int) -> TransformResult:
    return _reference("!", selected, text, start, end)


def table(selected: str, text: str, start: int, end: int) -> TransformResult:
    return _wrap(selected, text, start, end, TABLE_HEADER + "| ", " |  |")


def horizontal_rule(selected: str, text: str, start: int, end: int) -> TransformResult:
    # The selected text is replaced, not kept beside the rule.
    del selected
    return _block(text, start, end, HORIZONTAL_RULE)


TRANSFORMS: Dict[Operation, Transform] = {
    Operation.H1: heading(1),
    Operation.H2: heading(2),
    Operation.H3: heading(3),
    Operation.BOLD: bold,
    Operation.ITALIC: italic,
    Operation.CODE: inline_code,
    Operation.BULLETS: bullet_list,
    Operation.NUMBERED: numbered_list,
    Operation.QUOTE: blockquote,
    Operation.LINK: link,
    Operation.IMAGE: image,
    Operation.CODEBLOCK: code_block,
    Operation.TABLE: table,
    Operation.HR: horizontal_rule,
}


def apply_transform(
    operation: Operation, text: str, start: int, end: int
) -> Optional[TransformResult]:
    """Run ``operation`` over ``text[start:end]``.

    Returns ``None`` for an empty selection or a non-formatting operation.
    """

    transform = TRANSFORMS.get(operation)
    if transform is None or start == end:
        return None
    return transform(text[start:end], text, start, end)


__all__ = [
    "Operation",
    "TransformResult",
    "Transform",
    "TRANSFORMS",
    "apply_transform",
    "heading",
    "bold",
    "italic",
    "inline_code",
    "code_block",
    "bullet_list",
    "numbered_list",
    "blockquote",
    "link",
    "image",
    "table",
    "horizontal_rule",
]
