"""Background keyboard reader thread.

Decodes keys from a byte source with a bounded read timeout and hands each
resolved event to a callback on the reader thread.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from .keys import KeyEvent
from .reader import ESC_SEQUENCE_TIMEOUT_MS, decode_key

logger = logging.getLogger(__name__)

READ_TIMEOUT_MS = 100
JOIN_TIMEOUT_SECONDS = 1.0


class InputLoop:
    """Run ``decode_key`` on one daemon thread until stopped.

    Timeouts and UNKNOWN events never reach ``on_key``. If the callback or the
    source raises, the loop ends and the exception is kept in ``error`` so the
    owner can re-raise it on its own thread.
    """

    def __init__(
        self,
        source,
        on_key: Callable[[KeyEvent], None],
        *,
        read_timeout_ms: int = READ_TIMEOUT_MS,
        escape_timeout_ms: int = ESC_SEQUENCE_TIMEOUT_MS,
        join_timeout: float = JOIN_TIMEOUT_SECONDS,
        name: str = "lazytable-input",
    ) -> None:
        self._source = source
        self._on_key = on_key
        self._read_timeout_ms = read_timeout_ms
        self._escape_timeout_ms = escape_timeout_ms
        self._join_timeout = join_timeout
        self._name = name
        self._stop_event = threading.Event()
        self._lock = threading.Lock()
        self._thread: threading.Thread | None = None
        self.error: BaseException | None = None
        self.abandoned = False

    @property
    def running(self) -> bool:
        thread = self._thread
        return thread is not None and thread.is_alive()

    def start(self) -> None:
        with self._lock:
            if self._thread is not None:
                raise RuntimeError("input loop already started")
            self._thread = threading.Thread(target=self._run, name=self._name, daemon=True)
        self._thread.start()

    def _run(self) -> None:
        while not self._stop_event.is_set():
            try:
                event = decode_key(self._source, self._read_timeout_ms, self._escape_timeout_ms)
                if event is None:
                    if getattr(self._source, "eof", False):
                        logger.debug("input reached end of stream")
                        return
                    continue
                if event.is_unknown:
                    continue
                if self._stop_event.is_set():
                    return
                self._on_key(event)
            except Exception as exc:
                logger.exception("input loop stopped by error")
                self.error = exc
                return

    def stop(self) -> None:
        """Signal the thread, wake it, and wait a bounded time for it to exit."""
        self._stop_event.set()
        interrupt = getattr(self._source, "interrupt", None)
        if interrupt is not None:
            interrupt()
        with self._lock:
            thread = self._thread
        if thread is None or thread is threading.current_thread():
            return
        thread.join(self._join_timeout)
        if thread.is_alive():
            self.abandoned = True
            logger.warning(
                "input thread %s did not exit within %.1fs; abandoning it",
                thread.name,
                self._join_timeout,
            )
