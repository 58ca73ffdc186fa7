"""Key event vocabulary shared by the decoder and the session dispatcher.

Every decoded keystroke is a ``KeyEvent`` whose ``kind`` comes from the
closed ``KEY_KINDS`` set. Printable characters and control chords carry their
character in ``char``; all other kinds carry nothing.
"""

from __future__ import annotations

from dataclasses import dataclass

UP = "UP"
DOWN = "DOWN"
LEFT = "LEFT"
RIGHT = "RIGHT"
PAGE_UP = "PAGE_UP"
PAGE_DOWN = "PAGE_DOWN"
HOME = "HOME"
END = "END"
ENTER = "ENTER"
ESCAPE = "ESCAPE"
TAB = "TAB"
BACKSPACE = "BACKSPACE"
DELETE = "DELETE"
CHAR = "CHAR"
CTRL = "CTRL"
UNKNOWN = "UNKNOWN"

DIRECTIONAL_KINDS = frozenset({UP, DOWN, LEFT, RIGHT})
PAGING_KINDS = frozenset({PAGE_UP, PAGE_DOWN, HOME, END})
EDITING_KINDS = frozenset({ENTER, ESCAPE, TAB, BACKSPACE, DELETE})
PAYLOAD_KINDS = frozenset({CHAR, CTRL})
KEY_KINDS = DIRECTIONAL_KINDS | PAGING_KINDS | EDITING_KINDS | PAYLOAD_KINDS | {UNKNOWN}


@dataclass(frozen=True)
class KeyEvent:
    """One resolved keystroke."""

    kind: str
    char: str = ""

    def __post_init__(self) -> None:
        if self.kind not in KEY_KINDS:
            raise ValueError(f"unknown key kind: {self.kind!r}")
        if self.kind in PAYLOAD_KINDS:
            if len(self.char) != 1:
                raise ValueError(f"{self.kind} key needs exactly one character, got {self.char!r}")
        elif self.char:
            raise ValueError(f"{self.kind} key does not carry a character")

    @property
    def is_unknown(self) -> bool:
        return self.kind == UNKNOWN

    def __str__(self) -> str:
        if self.kind == CHAR:
            return repr(self.char)
        if self.kind == CTRL:
            return f"CTRL_{self.char.upper()}"
        return self.kind


def char_key(ch: str) -> KeyEvent:
    """Build a printable-character event."""
    return KeyEvent(CHAR, ch)


def ctrl_key(letter: str) -> KeyEvent:
    """Build a control-chord event for ``letter`` (``ctrl_key("c")`` is Ctrl-C)."""
    return KeyEvent(CTRL, letter.lower())


KEY_UP = KeyEvent(UP)
KEY_DOWN = KeyEvent(DOWN)
KEY_LEFT = KeyEvent(LEFT)
KEY_RIGHT = KeyEvent(RIGHT)
KEY_PAGE_UP = KeyEvent(PAGE_UP)
KEY_PAGE_DOWN = KeyEvent(PAGE_DOWN)
KEY_HOME = KeyEvent(HOME)
KEY_END = KeyEvent(END)
KEY_ENTER = KeyEvent(ENTER)
KEY_ESCAPE = KeyEvent(ESCAPE)
KEY_TAB = KeyEvent(TAB)
KEY_BACKSPACE = KeyEvent(BACKSPACE)
KEY_DELETE = KeyEvent(DELETE)
KEY_UNKNOWN = KeyEvent(UNKNOWN)
