"""Core text storage for markdown_engine buffers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from .state import Location


@dataclass(frozen=True, slots=True)
class BufferDocument:
    """Immutable text snapshot with a monotonically bumped version.

    Offsets are the unit every transform works in; the row/column helpers
    exist for hosts whose widgets report locations instead.
    """

    text: str = ""
    version: int = 0

    @classmethod
    def from_text(cls, text: str) -> "BufferDocument":
        return cls(text=text, version=0)

    def replace(self, text: str) -> "BufferDocument":
        """Return a new document holding ``text`` with a bumped version."""

        return BufferDocument(text=text, version=self.version + 1)

    def lines(self) -> Sequence[str]:
        return tuple(self.text.split("\n"))

    @property
    def length(self) -> int:
        return len(self.text)

    @property
    def line_count(self) -> int:
        return self.text.count("\n") + 1

    def offset_for_location(self, location: Location) -> int:
        lines = self.lines()
        row, col = location
        row = max(0, min(row, len(lines) - 1))
        offset = 0
        for i in range(row):
            offset += len(lines[i]) + 1  # newline
        return offset + max(0, min(col, len(lines[row])))

    def location_for_offset(self, offset: int) -> Location:
        lines = self.lines()
        running = 0
        for row, line in enumerate(lines):
            line_len = len(line)
            if offset <= running + line_len:
                return (row, max(0, offset - running))
            running += line_len + 1
        return (len(lines) - 1, len(lines[-1]))
