from __future__ import annotations

import queue
import threading
import time
import unittest

from lazytable.input import keys
from lazytable.input.loop import InputLoop


class QueueByteSource:
    """Blocking byte source fed from a queue; ``None`` entries are timeouts."""

    def __init__(self) -> None:
        self._queue: queue.Queue[int | None] = queue.Queue()
        self._pending: list[int] = []
        self.eof = False
        self.interrupts = 0

    def feed(self, data: bytes) -> None:
        for value in data:
            self._queue.put(value)

    def finish(self) -> None:
        self.eof = True
        self._queue.put(None)

    def read_byte(self, timeout_ms):
        if self._pending:
            return self._pending.pop()
        timeout = None if timeout_ms is None else timeout_ms / 1000.0
        try:
            return self._queue.get(timeout=timeout)
        except queue.Empty:
            return None

    def unread(self, value: int) -> None:
        self._pending.append(value)

    def interrupt(self) -> None:
        self.interrupts += 1
        self._queue.put(None)


def wait_until(predicate, timeout: float = 2.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.005)
    return predicate()


class InputLoopTests(unittest.TestCase):
    def test_delivers_decoded_keys_in_order_and_skips_unknown(self) -> None:
        source = QueueByteSource()
        received: list[keys.KeyEvent] = []
        loop = InputLoop(source, received.append, read_timeout_ms=10, escape_timeout_ms=10)
        loop.start()
        try:
            source.feed(b"\x1b[B\x1b[99~j\r")
            self.assertTrue(wait_until(lambda: len(received) >= 3))
        finally:
            loop.stop()

        self.assertEqual(received, [keys.KEY_DOWN, keys.char_key("j"), keys.KEY_ENTER])
        self.assertFalse(loop.running)
        self.assertIsNone(loop.error)

    def test_stop_interrupts_source_and_joins(self) -> None:
        source = QueueByteSource()
        loop = InputLoop(source, lambda _event: None, read_timeout_ms=5000)
        loop.start()
        self.assertTrue(loop.running)

        started = time.monotonic()
        loop.stop()

        self.assertLess(time.monotonic() - started, 1.0)
        self.assertGreaterEqual(source.interrupts, 1)
        self.assertFalse(loop.running)
        self.assertFalse(loop.abandoned)

    def test_end_of_stream_ends_thread(self) -> None:
        source = QueueByteSource()
        loop = InputLoop(source, lambda _event: None, read_timeout_ms=10)
        loop.start()
        source.finish()

        self.assertTrue(wait_until(lambda: not loop.running))
        self.assertIsNone(loop.error)
        loop.stop()

    def test_callback_error_is_captured(self) -> None:
        source = QueueByteSource()

        def explode(_event):
            raise ValueError("boom")

        loop = InputLoop(source, explode, read_timeout_ms=10)
        with self.assertLogs("lazytable.input.loop", level="ERROR"):
            loop.start()
            source.feed(b"x")
            self.assertTrue(wait_until(lambda: not loop.running))

        self.assertIsInstance(loop.error, ValueError)
        loop.stop()

    def test_start_twice_raises(self) -> None:
        loop = InputLoop(QueueByteSource(), lambda _event: None, read_timeout_ms=10)
        loop.start()
        try:
            with self.assertRaises(RuntimeError):
                loop.start()
        finally:
            loop.stop()

    def test_stuck_callback_is_abandoned_with_warning(self) -> None:
        source = QueueByteSource()
        release = threading.Event()
        entered = threading.Event()

        def block(_event):
            entered.set()
            release.wait(5)

        loop = InputLoop(source, block, read_timeout_ms=10, join_timeout=0.05)
        loop.start()
        source.feed(b"x")
        self.assertTrue(entered.wait(2))

        with self.assertLogs("lazytable.input.loop", level="WARNING") as logs:
            loop.stop()

        self.assertTrue(loop.abandoned)
        self.assertIn("abandoning", logs.output[0])
        release.set()
        self.assertTrue(wait_until(lambda: not loop.running))

    def test_stop_before_start_is_noop(self) -> None:
        source = QueueByteSource()
        loop = InputLoop(source, lambda _event: None)
        loop.stop()
        self.assertFalse(loop.running)
        self.assertFalse(loop.abandoned)


if __name__ == "__main__":
    unittest.main()
