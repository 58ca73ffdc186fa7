"""Frame composition for the interactive table.

Builds one complete text frame (borders, header, exactly ``visible_height``
rows, footer) from list state, a resolved column layout and a style. Frames
are composed fully in memory; ``FrameRenderer.render`` hands the result to
the output sink as a single clear-and-write.
"""

from __future__ import annotations

import shutil
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from .ansi import clip_to_width, display_width, flatten_cell_text
from .state import VirtualListState
from .style import DEFAULT_STYLE, VirtualTableStyle

ALIGN_LEFT = "left"
ALIGN_CENTER = "center"
ALIGN_RIGHT = "right"
ALIGNMENTS = (ALIGN_LEFT, ALIGN_CENTER, ALIGN_RIGHT)

MIN_AUTO_WIDTH = 10
KEY_HINTS = "↑↓:Navigate  Space:Select  q:Quit"


@dataclass(frozen=True)
class Column:
    """One table column; ``width=None`` shares the leftover terminal width."""

    header: str
    accessor: Callable[[Any], Any]
    width: int | None = None
    align: str = ALIGN_LEFT
    truncate: bool = True

    def __post_init__(self) -> None:
        if self.width is not None and self.width <= 0:
            raise ValueError(f"column {self.header!r}: width must be positive")
        if self.align not in ALIGNMENTS:
            raise ValueError(f"column {self.header!r}: unknown alignment {self.align!r}")


@dataclass(frozen=True)
class ColumnLayout:
    """Columns paired with their resolved content widths."""

    columns: tuple[Column, ...]
    widths: tuple[int, ...]

    @classmethod
    def resolve(
        cls,
        columns: Sequence[Column],
        style: VirtualTableStyle = DEFAULT_STYLE,
        terminal_width: int | None = None,
    ) -> ColumnLayout:
        """Fix column widths once for a session.

        Explicit widths are kept as given. Auto-sized columns split what is
        left of ``terminal_width`` after borders, padding and fixed columns,
        never dropping below ``MIN_AUTO_WIDTH``.
        """
        if not columns:
            raise ValueError("a table needs at least one column")
        if terminal_width is None:
            terminal_width = shutil.get_terminal_size((80, 24)).columns

        base = style.base
        count = len(columns)
        separator_width = display_width(base.border_chars.vertical)
        if base.show_borders:
            border_overhead = separator_width * (count + 1)
        else:
            border_overhead = separator_width * (count - 1)
        padding_overhead = count * base.padding * 2
        fixed_total = sum(column.width for column in columns if column.width is not None)
        auto_count = sum(1 for column in columns if column.width is None)

        auto_width = MIN_AUTO_WIDTH
        if auto_count:
            available = terminal_width - border_overhead - padding_overhead - fixed_total
            auto_width = max(MIN_AUTO_WIDTH, available // auto_count)

        widths = tuple(column.width if column.width is not None else auto_width for column in columns)
        return cls(columns=tuple(columns), widths=widths)


def fit_text(text: str, width: int, truncate: bool, ellipsis: str = "...") -> str:
    """Cut ``text`` to ``width`` columns, ending in ``ellipsis`` when truncating."""
    if display_width(text) <= width:
        return text
    marker_width = display_width(ellipsis)
    if truncate and width > marker_width:
        return clip_to_width(text, width - marker_width) + ellipsis
    return clip_to_width(text, width)


def pad_cell(content: str, width: int, align: str, padding: int = 0) -> str:
    """Pad already-fitted ``content`` to ``width`` columns plus side padding.

    Centered text puts the odd leftover column on the right.
    """
    gap = max(0, width - display_width(content))
    side = " " * padding
    if align == ALIGN_RIGHT:
        return f"{side}{' ' * gap}{content}{side}"
    if align == ALIGN_CENTER:
        left = gap // 2
        return f"{side}{' ' * left}{content}{' ' * (gap - left)}{side}"
    return f"{side}{content}{' ' * gap}{side}"


def cell_text(column: Column, row: Any) -> str:
    """Run the column accessor and flatten the result for display."""
    value = column.accessor(row)
    if value is None:
        return ""
    return flatten_cell_text(str(value))


def _rule(layout: ColumnLayout, style: VirtualTableStyle, left: str, cross: str, right: str) -> str:
    base = style.base
    segments = [base.border_chars.horizontal * (width + base.padding * 2) for width in layout.widths]
    return f"{left}{cross.join(segments)}{right}"


def _join_cells(cells: list[str], style: VirtualTableStyle) -> str:
    vertical = style.base.border_chars.vertical
    inner = vertical.join(cells)
    if style.base.show_borders:
        return f"{vertical}{inner}{vertical}"
    return inner


def _header_line(layout: ColumnLayout, style: VirtualTableStyle) -> str:
    padding = style.base.padding
    cells = []
    for column, width in zip(layout.columns, layout.widths):
        content = fit_text(flatten_cell_text(column.header), width, True, style.ellipsis)
        cells.append(style.header.apply(pad_cell(content, width, ALIGN_CENTER, padding)))
    return _join_cells(cells, style)


def _data_line(
    layout: ColumnLayout,
    style: VirtualTableStyle,
    row: Any,
    highlighted: bool,
    selected: bool,
) -> str:
    padding = style.base.padding
    cells = []
    for column, width in zip(layout.columns, layout.widths):
        content = fit_text(cell_text(column, row), width, column.truncate, style.ellipsis)
        padded = pad_cell(content, width, column.align, padding)
        if highlighted and selected:
            padded = style.highlight.apply(style.selection.apply(padded))
        elif highlighted:
            padded = style.highlight.apply(padded)
        elif selected:
            padded = style.selection.apply(padded)
        cells.append(padded)
    return _join_cells(cells, style)


def _empty_line(layout: ColumnLayout, style: VirtualTableStyle) -> str:
    padding = style.base.padding
    return _join_cells([pad_cell("", width, ALIGN_LEFT, padding) for width in layout.widths], style)


def footer_text(state: VirtualListState, style: VirtualTableStyle) -> str:
    """Summarize cursor position and selection for the status line."""
    parts: list[str] = []
    if state.total_rows > 0:
        parts.append(f"Row {state.current_index + 1} of {state.total_rows}")
    else:
        parts.append("No data")

    selected_count = len(state.selected_indices)
    if selected_count > 0:
        parts.append(f"{selected_count} selected")

    if style.show_scroll_indicator and state.total_rows > state.visible_height:
        visible = state.visible_range()
        parts.append(f"Showing {visible.start + 1}-{visible.stop}")

    if style.show_key_hints:
        parts.append(KEY_HINTS)

    return " | ".join(parts)


def build_frame(state: VirtualListState, layout: ColumnLayout, style: VirtualTableStyle = DEFAULT_STYLE) -> str:
    """Compose the full frame text for ``state``.

    Accessor errors are not caught; a failing accessor aborts the frame.
    """
    b = style.base.border_chars
    show_borders = style.base.show_borders
    lines: list[str] = []

    if show_borders:
        lines.append(_rule(layout, style, b.top_left, b.top_cross, b.top_right))

    lines.append(_header_line(layout, style))

    if style.base.show_header_separator:
        if show_borders:
            lines.append(_rule(layout, style, b.header_left, b.header_cross, b.header_right))
        else:
            lines.append(_rule(layout, style, "", b.header_cross, ""))

    visible_rows = state.visible_rows()
    for index, row in visible_rows:
        lines.append(_data_line(layout, style, row, state.is_highlighted(index), state.is_selected(index)))
    for _ in range(state.visible_height - len(visible_rows)):
        lines.append(_empty_line(layout, style))

    if show_borders:
        lines.append(_rule(layout, style, b.bottom_left, b.bottom_cross, b.bottom_right))

    if style.show_footer:
        lines.append(style.footer.apply(f" {footer_text(state, style)} "))

    return "\n".join(lines) + "\n"


class FrameRenderer:
    """Renderer bound to one column layout and style for a session."""

    def __init__(
        self,
        columns: Sequence[Column],
        style: VirtualTableStyle = DEFAULT_STYLE,
        terminal_width: int | None = None,
    ) -> None:
        self.style = style
        self.layout = ColumnLayout.resolve(columns, style, terminal_width)

    def build(self, state: VirtualListState) -> str:
        return build_frame(state, self.layout, self.style)

    def render(self, state: VirtualListState, output) -> None:
        """Compose the frame first, then write it with one clear-and-write."""
        output.write_frame(self.build(state))
