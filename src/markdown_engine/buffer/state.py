"""Selection state tracked alongside a buffer document."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

Selection = Tuple[int, int]  # (start, end) character offsets
Location = Tuple[int, int]  # (row, column)


@dataclass(slots=True)
class BufferState:
    """Mutable selection over the current BufferDocument."""

    selection: Selection = (0, 0)

    @property
    def has_selection(self) -> bool:
        start, end = self.selection
        return start != end

    def set_selection(self, start: int, end: int) -> None:
        self.selection = (start, end)

    def collapse_to(self, offset: int) -> None:
        self.selection = (offset, offset)
