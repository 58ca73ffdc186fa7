"""Terminal control helpers for the interactive session.

Owns the raw-mode lifecycle (save, switch, restore exactly once) and the
cursor/screen control sequences written to the output sink.
"""

from __future__ import annotations

import atexit
import contextlib
import logging
import os
import sys
import termios
import threading

logger = logging.getLogger(__name__)

HIDE_CURSOR = "\x1b[?25l"
SHOW_CURSOR = "\x1b[?25h"
CLEAR_SCREEN = "\x1b[2J\x1b[H"

# termios attribute list indexes.
_IFLAG = 0
_LFLAG = 3
_CC = 6


class TerminalUnavailable(RuntimeError):
    """Raised when raw mode is requested without an interactive terminal."""


class RawModeHandle:
    """Ownership of one terminal in raw mode; ``release`` restores it once."""

    def __init__(self, stdin_fd: int, saved_attrs: list) -> None:
        self.stdin_fd = stdin_fd
        self._saved_attrs = saved_attrs
        self._lock = threading.Lock()
        self._released = False

    @property
    def released(self) -> bool:
        return self._released

    def release(self) -> None:
        """Restore the saved attributes; later calls are no-ops."""
        with self._lock:
            if self._released:
                return
            self._released = True
        atexit.unregister(self.release)
        termios.tcsetattr(self.stdin_fd, termios.TCSADRAIN, self._saved_attrs)
        logger.debug("restored terminal attributes on fd %d", self.stdin_fd)

    def __enter__(self) -> RawModeHandle:
        return self

    def __exit__(self, *_exc) -> None:
        self.release()


class RawModeController:
    """Switch a terminal into per-keystroke input mode."""

    def __init__(self, stdin_fd: int | None = None) -> None:
        self.stdin_fd = stdin_fd

    def _resolve_fd(self) -> int:
        if self.stdin_fd is not None:
            return self.stdin_fd
        try:
            return sys.stdin.fileno()
        except (AttributeError, OSError, ValueError) as exc:
            raise TerminalUnavailable(f"stdin has no file descriptor: {exc}") from exc

    def acquire(self) -> RawModeHandle:
        """Disable line buffering and echo, returning the restoring handle.

        Raises ``TerminalUnavailable`` when stdin is not a tty. ISIG is left on
        so Ctrl-C still interrupts the main thread and unwinds through the
        normal cleanup path.
        """
        fd = self._resolve_fd()
        if not os.isatty(fd):
            raise TerminalUnavailable(f"fd {fd} is not an interactive terminal")
        try:
            saved_attrs = termios.tcgetattr(fd)
        except termios.error as exc:
            raise TerminalUnavailable(f"cannot read terminal attributes: {exc}") from exc

        new_attrs = termios.tcgetattr(fd)
        new_attrs[_IFLAG] &= ~termios.IXON
        new_attrs[_LFLAG] &= ~(termios.ECHO | termios.ICANON | termios.IEXTEN)
        new_attrs[_CC][termios.VMIN] = 1
        new_attrs[_CC][termios.VTIME] = 0
        termios.tcsetattr(fd, termios.TCSAFLUSH, new_attrs)

        handle = RawModeHandle(fd, saved_attrs)
        # Last-resort restore if the process exits without running cleanup.
        atexit.register(handle.release)
        logger.debug("entered raw mode on fd %d", fd)
        return handle

    @contextlib.contextmanager
    def raw_mode(self):
        """Context manager that brackets code with acquire/release."""
        handle = self.acquire()
        try:
            yield handle
        finally:
            handle.release()


class TerminalOutput:
    """Output sink accepting ANSI control and SGR sequences."""

    def __init__(self, stream=None) -> None:
        self.stream = sys.stdout if stream is None else stream

    def write(self, text: str) -> None:
        self.stream.write(text)

    def flush(self) -> None:
        self.stream.flush()

    def hide_cursor(self) -> None:
        self.write(HIDE_CURSOR)
        self.flush()

    def show_cursor(self) -> None:
        self.write(SHOW_CURSOR)
        self.flush()

    def clear_screen(self) -> None:
        self.write(CLEAR_SCREEN)
        self.flush()

    def write_frame(self, frame: str) -> None:
        """Replace the screen with ``frame`` in one write."""
        self.write(CLEAR_SCREEN + frame)
        self.flush()
