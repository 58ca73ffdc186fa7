"""Navigation and selection state for a scrollable list.

Invariant after every mutation when the list is non-empty::

    scroll_offset <= current_index <= scroll_offset + visible_height - 1
    0 <= scroll_offset <= max(0, total_rows - visible_height)

An empty list has ``current_index == -1`` and ignores all navigation.
"""

from __future__ import annotations

from typing import Generic, TypeVar

from .datasource import DataSource

T = TypeVar("T")


class VirtualListState(Generic[T]):
    """Cursor, viewport and selection over a fixed-size data source."""

    def __init__(self, data_source: DataSource[T], visible_height: int) -> None:
        if visible_height <= 0:
            raise ValueError("visible_height must be positive")
        self.data_source = data_source
        self.visible_height = visible_height
        self.total_rows = data_source.size
        self.current_index = 0 if self.total_rows > 0 else -1
        self.scroll_offset = 0
        self.selected_indices: set[int] = set()

    @property
    def is_empty(self) -> bool:
        return self.total_rows == 0

    @property
    def max_scroll_offset(self) -> int:
        return max(0, self.total_rows - self.visible_height)

    def move_up(self) -> None:
        if self.is_empty or self.current_index == 0:
            return
        self.current_index -= 1
        self.ensure_visible()

    def move_down(self) -> None:
        if self.is_empty or self.current_index >= self.total_rows - 1:
            return
        self.current_index += 1
        self.ensure_visible()

    def move_home(self) -> None:
        if self.is_empty:
            return
        self.current_index = 0
        self.ensure_visible()

    def move_end(self) -> None:
        if self.is_empty:
            return
        self.current_index = self.total_rows - 1
        self.ensure_visible()

    def move_page_up(self) -> None:
        if self.is_empty:
            return
        self.current_index = max(0, self.current_index - self.visible_height)
        self.ensure_visible()

    def move_page_down(self) -> None:
        if self.is_empty:
            return
        self.current_index = min(self.total_rows - 1, self.current_index + self.visible_height)
        self.ensure_visible()

    def toggle_selection(self) -> None:
        """Flip selection of the highlighted row without moving the cursor."""
        if self.is_empty:
            return
        if self.current_index in self.selected_indices:
            self.selected_indices.discard(self.current_index)
        else:
            self.selected_indices.add(self.current_index)
        self.ensure_visible()

    def clear_selection(self) -> None:
        self.selected_indices.clear()

    def ensure_visible(self) -> None:
        """Scroll the minimum amount that keeps ``current_index`` on screen."""
        if self.current_index < self.scroll_offset:
            self.scroll_offset = self.current_index
        if self.current_index >= self.scroll_offset + self.visible_height:
            self.scroll_offset = self.current_index - self.visible_height + 1
        self.scroll_offset = max(0, min(self.scroll_offset, self.max_scroll_offset))

    def visible_range(self) -> range:
        end = min(self.scroll_offset + self.visible_height, self.total_rows)
        return range(self.scroll_offset, max(self.scroll_offset, end))

    def visible_rows(self) -> list[tuple[int, T]]:
        """Return ``(index, row)`` pairs for the rows inside the viewport."""
        if self.is_empty:
            return []
        rows = self.data_source.get_range(self.scroll_offset, self.visible_height)
        return [(self.scroll_offset + offset, row) for offset, row in enumerate(rows)]

    def is_highlighted(self, index: int) -> bool:
        return index == self.current_index

    def is_selected(self, index: int) -> bool:
        return index in self.selected_indices

    def current_selection(self) -> T | None:
        """Return the highlighted row, or ``None`` for an empty list."""
        if self.is_empty:
            return None
        return self.data_source.get(self.current_index)

    def selected_rows(self) -> list[T]:
        return [self.data_source.get(i) for i in sorted(self.selected_indices) if 0 <= i < self.total_rows]

    def selected_snapshot(self) -> frozenset[int]:
        return frozenset(self.selected_indices)

    def current_row_relative_position(self) -> int | None:
        """Return the cursor's row within the viewport, or ``None`` if off screen."""
        if self.current_index in self.visible_range():
            return self.current_index - self.scroll_offset
        return None
