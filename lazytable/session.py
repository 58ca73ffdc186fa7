"""Interactive table session: raw mode, input thread, and render loop.

The session is single-use: ``idle -> running -> stopping -> stopped``. The
input thread applies key events to the list state under one lock and marks
the frame dirty; the calling thread polls on a fixed interval and redraws
dirty frames under the same lock. Terminal restoration runs exactly once on
every exit path.
"""

from __future__ import annotations

import contextlib
import logging
import threading
import time
from collections.abc import Callable, Sequence
from typing import Generic, TypeVar

from .config import SessionConfig
from .datasource import DataSource
from .input import keys
from .input.keys import KeyEvent
from .input.loop import InputLoop
from .input.reader import FdByteSource
from .render import Column, FrameRenderer
from .state import VirtualListState
from .style import VirtualTableStyle, get_style
from .terminal import RawModeController, RawModeHandle, TerminalOutput

logger = logging.getLogger(__name__)

T = TypeVar("T")

IDLE = "idle"
RUNNING = "running"
STOPPING = "stopping"
STOPPED = "stopped"

QUIT_CHARS = frozenset({"q", "Q"})
TOGGLE_CHAR = " "

# Every key kind must have a handler so new kinds cannot be dropped silently.
KEY_DISPATCH: dict[str, str] = {
    keys.UP: "_on_up",
    keys.DOWN: "_on_down",
    keys.PAGE_UP: "_on_page_up",
    keys.PAGE_DOWN: "_on_page_down",
    keys.HOME: "_on_home",
    keys.END: "_on_end",
    keys.ENTER: "_on_enter",
    keys.ESCAPE: "_on_escape",
    keys.CHAR: "_on_char",
    keys.LEFT: "_ignore",
    keys.RIGHT: "_ignore",
    keys.TAB: "_ignore",
    keys.BACKSPACE: "_ignore",
    keys.DELETE: "_ignore",
    keys.CTRL: "_ignore",
    keys.UNKNOWN: "_ignore",
}

if set(KEY_DISPATCH) != keys.KEY_KINDS:
    raise RuntimeError(f"key dispatch does not cover: {sorted(keys.KEY_KINDS ^ set(KEY_DISPATCH))}")


class AlreadyRunning(RuntimeError):
    """Raised when ``start`` is called on a session that is not idle."""


class InteractiveSession(Generic[T]):
    """Navigate ``data_source`` in a fixed-height table until the user quits."""

    def __init__(
        self,
        data_source: DataSource[T],
        columns: Sequence[Column],
        *,
        config: SessionConfig | None = None,
        style: VirtualTableStyle | None = None,
        output: TerminalOutput | None = None,
        controller: RawModeController | None = None,
        byte_source=None,
        on_select: Callable[[T], None] | None = None,
    ) -> None:
        self.config = config or SessionConfig()
        self.style = style or get_style(self.config.style_name)
        self._state: VirtualListState[T] = VirtualListState(data_source, self.config.visible_height)
        self._renderer = FrameRenderer(columns, self.style, self.config.terminal_width)
        self._output = output or TerminalOutput()
        self._controller = controller or RawModeController()
        self._byte_source = byte_source
        self._owns_byte_source = False
        self._on_select = on_select

        self._lock = threading.RLock()
        self._status = IDLE
        self._dirty = True
        self._handle: RawModeHandle | None = None
        self._input_loop: InputLoop | None = None
        self._cleaned_up = False

    @property
    def status(self) -> str:
        return self._status

    @property
    def list_state(self) -> VirtualListState[T]:
        return self._state

    def start(self) -> None:
        """Take over the terminal and block until the session stops.

        Raises ``AlreadyRunning`` unless idle and propagates
        ``TerminalUnavailable`` without entering the running state. Errors from
        rendering or from the input thread propagate after cleanup.
        """
        with self._lock:
            if self._status != IDLE:
                raise AlreadyRunning(f"session is {self._status}")
            self._handle = self._controller.acquire()
            self._status = RUNNING
        logger.debug("session started: %d rows, height %d", self._state.total_rows, self._state.visible_height)

        try:
            self._output.hide_cursor()
            with self._lock:
                self._renderer.render(self._state, self._output)
                self._dirty = False
            self._input_loop = InputLoop(
                self._ensure_byte_source(),
                self._handle_key,
                read_timeout_ms=self.config.read_timeout_ms,
                escape_timeout_ms=self.config.escape_timeout_ms,
                join_timeout=self.config.join_timeout,
            )
            self._input_loop.start()
            self._render_loop()
        finally:
            self._cleanup()

    def stop(self) -> None:
        """Request shutdown; safe from any thread and safe to repeat."""
        with self._lock:
            if self._status == RUNNING:
                self._status = STOPPING
            elif self._status == IDLE:
                self._status = STOPPED

    def close(self) -> None:
        self.stop()

    def refresh(self) -> None:
        """Force a redraw on the next render tick."""
        with self._lock:
            self._dirty = True

    def current_selection(self) -> T | None:
        """Return the highlighted row, or ``None`` for an empty table."""
        with self._lock:
            return self._state.current_selection()

    def selected_rows(self) -> list[T]:
        with self._lock:
            return self._state.selected_rows()

    def selected_indices(self) -> frozenset[int]:
        with self._lock:
            return self._state.selected_snapshot()

    def __enter__(self) -> InteractiveSession[T]:
        return self

    def __exit__(self, *_exc) -> None:
        self.close()

    def _ensure_byte_source(self):
        if self._byte_source is None:
            self._byte_source = FdByteSource(self._handle.stdin_fd)
            self._owns_byte_source = True
        return self._byte_source

    def _render_loop(self) -> None:
        input_loop = self._input_loop
        while True:
            with self._lock:
                if input_loop.error is not None:
                    raise input_loop.error
                if self._status != RUNNING:
                    return
                if not input_loop.running:
                    logger.debug("input ended; stopping session")
                    self._status = STOPPING
                    return
                if self._dirty:
                    self._renderer.render(self._state, self._output)
                    self._dirty = False
            time.sleep(self.config.frame_interval)

    def _cleanup(self) -> None:
        with self._lock:
            if self._cleaned_up:
                return
            self._cleaned_up = True
            if self._status == RUNNING:
                self._status = STOPPING

        # Callbacks run last-registered first: input, cursor, screen, raw mode.
        with contextlib.ExitStack() as stack:
            stack.callback(self._mark_stopped)
            if self._owns_byte_source:
                stack.callback(self._close_byte_source)
            if self._handle is not None:
                stack.callback(self._handle.release)
            stack.callback(self._output.clear_screen)
            stack.callback(self._output.show_cursor)
            if self._input_loop is not None:
                stack.callback(self._input_loop.stop)

    def _close_byte_source(self) -> None:
        if self._input_loop is not None and self._input_loop.abandoned:
            return
        self._byte_source.close()

    def _mark_stopped(self) -> None:
        with self._lock:
            self._status = STOPPED
        logger.debug("session stopped")

    def _handle_key(self, event: KeyEvent) -> None:
        with self._lock:
            if self._status != RUNNING:
                return
            getattr(self, KEY_DISPATCH[event.kind])(event)

    def _on_up(self, _event: KeyEvent) -> None:
        self._state.move_up()
        self._dirty = True

    def _on_down(self, _event: KeyEvent) -> None:
        self._state.move_down()
        self._dirty = True

    def _on_page_up(self, _event: KeyEvent) -> None:
        self._state.move_page_up()
        self._dirty = True

    def _on_page_down(self, _event: KeyEvent) -> None:
        self._state.move_page_down()
        self._dirty = True

    def _on_home(self, _event: KeyEvent) -> None:
        self._state.move_home()
        self._dirty = True

    def _on_end(self, _event: KeyEvent) -> None:
        self._state.move_end()
        self._dirty = True

    def _on_enter(self, _event: KeyEvent) -> None:
        row = self._state.current_selection()
        if row is not None and self._on_select is not None:
            self._on_select(row)
        if self.config.exit_on_enter:
            self.stop()

    def _on_escape(self, _event: KeyEvent) -> None:
        self.stop()

    def _on_char(self, event: KeyEvent) -> None:
        if event.char in QUIT_CHARS:
            self.stop()
        elif event.char == TOGGLE_CHAR:
            self._state.toggle_selection()
            self._dirty = True

    def _ignore(self, _event: KeyEvent) -> None:
        pass
