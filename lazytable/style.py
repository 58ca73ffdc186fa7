"""Table style definitions and selection helpers.

A ``VirtualTableStyle`` bundles border glyphs, padding and the ANSI
decorations for highlighted, selected, header and footer cells. Named SGR
colors come from ``pygments.console``; 256-color backgrounds are literal.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from pygments.console import codes, reset_color

REVERSE = "\033[7m"
BG_BLUE = "\033[48;5;33m"
BG_DARK_GRAY = "\033[48;5;238m"
BG_DARKER_GRAY = "\033[48;5;236m"
FG_BRIGHT_WHITE = "\033[97m"


@dataclass(frozen=True)
class BorderChars:
    """Box-drawing glyphs for frame borders."""

    top_left: str
    top_right: str
    bottom_left: str
    bottom_right: str
    horizontal: str
    vertical: str
    header_left: str
    header_right: str
    header_cross: str
    top_cross: str
    bottom_cross: str


UNICODE_BORDERS = BorderChars(
    top_left="┌",
    top_right="┐",
    bottom_left="└",
    bottom_right="┘",
    horizontal="─",
    vertical="│",
    header_left="├",
    header_right="┤",
    header_cross="┼",
    top_cross="┬",
    bottom_cross="┴",
)

ASCII_BORDERS = BorderChars(
    top_left="+",
    top_right="+",
    bottom_left="+",
    bottom_right="+",
    horizontal="-",
    vertical="|",
    header_left="+",
    header_right="+",
    header_cross="+",
    top_cross="+",
    bottom_cross="+",
)

MINIMAL_BORDERS = BorderChars(
    top_left="",
    top_right="",
    bottom_left="",
    bottom_right="",
    horizontal="",
    vertical=" ",
    header_left="",
    header_right="",
    header_cross="",
    top_cross="",
    bottom_cross="",
)


@dataclass(frozen=True)
class SelectionStyle:
    """SGR decoration applied around a cell's padded text."""

    background: str = ""
    foreground: str = ""
    bold: bool = False
    reverse: bool = False

    @property
    def is_plain(self) -> bool:
        return not (self.background or self.foreground or self.bold or self.reverse)

    def apply(self, text: str) -> str:
        if self.is_plain:
            return text
        prefix = self.background + self.foreground
        if self.bold:
            prefix += codes["bold"]
        if self.reverse:
            prefix += REVERSE
        return f"{prefix}{text}{reset_color()}"


NO_DECORATION = SelectionStyle()
HIGHLIGHT = SelectionStyle(reverse=True)
SELECTION = SelectionStyle(background=BG_BLUE, foreground=FG_BRIGHT_WHITE)
HEADER = SelectionStyle(background=BG_DARK_GRAY, foreground=codes["brightcyan"], bold=True)
FOOTER = SelectionStyle(background=BG_DARKER_GRAY, foreground=codes["gray"])


@dataclass(frozen=True)
class TableStyle:
    """Frame geometry: glyphs, which border lines to draw, cell padding."""

    border_chars: BorderChars = UNICODE_BORDERS
    show_borders: bool = True
    show_header_separator: bool = True
    padding: int = 1


@dataclass(frozen=True)
class VirtualTableStyle:
    """Complete look of an interactive table."""

    name: str = "default"
    base: TableStyle = field(default_factory=TableStyle)
    highlight: SelectionStyle = HIGHLIGHT
    selection: SelectionStyle = SELECTION
    header: SelectionStyle = HEADER
    footer: SelectionStyle = FOOTER
    show_footer: bool = True
    show_key_hints: bool = True
    show_scroll_indicator: bool = True
    ellipsis: str = "..."


DEFAULT_STYLE = VirtualTableStyle()

ASCII_STYLE = VirtualTableStyle(
    name="ascii",
    base=TableStyle(border_chars=ASCII_BORDERS),
)

MINIMAL_STYLE = VirtualTableStyle(
    name="minimal",
    base=TableStyle(
        border_chars=MINIMAL_BORDERS,
        show_borders=False,
        show_header_separator=False,
        padding=2,
    ),
    show_footer=False,
    show_key_hints=False,
    show_scroll_indicator=False,
)

COMPACT_STYLE = VirtualTableStyle(
    name="compact",
    base=TableStyle(padding=0),
    show_key_hints=False,
)

# Colorless variant used when output is not a terminal.
PLAIN_STYLE = replace(
    ASCII_STYLE,
    name="plain",
    highlight=NO_DECORATION,
    selection=NO_DECORATION,
    header=NO_DECORATION,
    footer=NO_DECORATION,
    show_key_hints=False,
)

_STYLES: dict[str, VirtualTableStyle] = {
    style.name: style
    for style in (DEFAULT_STYLE, ASCII_STYLE, MINIMAL_STYLE, COMPACT_STYLE, PLAIN_STYLE)
}


def available_style_names() -> tuple[str, ...]:
    """Return selectable style names."""
    return tuple(sorted(_STYLES.keys()))


def normalize_style_name(name: str | None) -> str:
    """Return a valid style name, falling back to default."""
    if not name:
        return DEFAULT_STYLE.name
    candidate = str(name).strip().lower()
    if candidate in _STYLES:
        return candidate
    return DEFAULT_STYLE.name


def get_style(name: str | None) -> VirtualTableStyle:
    return _STYLES[normalize_style_name(name)]


__all__ = [
    "BorderChars",
    "SelectionStyle",
    "TableStyle",
    "VirtualTableStyle",
    "UNICODE_BORDERS",
    "ASCII_BORDERS",
    "MINIMAL_BORDERS",
    "DEFAULT_STYLE",
    "ASCII_STYLE",
    "MINIMAL_STYLE",
    "COMPACT_STYLE",
    "PLAIN_STYLE",
    "available_style_names",
    "normalize_style_name",
    "get_style",
]
