"""Low-level terminal input decoding.

Reads raw bytes from a byte source and translates them into ``KeyEvent``s.
Handles ESC-sequence timing for CSI (``ESC [``) and SS3 (``ESC O``) keys.
"""

from __future__ import annotations

import os
import select
from collections import deque

from .keys import (
    KEY_BACKSPACE,
    KEY_DELETE,
    KEY_DOWN,
    KEY_END,
    KEY_ENTER,
    KEY_ESCAPE,
    KEY_HOME,
    KEY_LEFT,
    KEY_PAGE_DOWN,
    KEY_PAGE_UP,
    KEY_RIGHT,
    KEY_TAB,
    KEY_UNKNOWN,
    KEY_UP,
    KeyEvent,
    char_key,
    ctrl_key,
)

ESC_SEQUENCE_TIMEOUT_MS = 50
# Longest digit run parsed as a key number; longer runs decode as UNKNOWN.
MAX_KEY_NUMBER_DIGITS = 16

ESC = 0x1B

# Final letters shared by CSI and SS3 encodings.
_LETTER_KEYS: dict[int, KeyEvent] = {
    ord("A"): KEY_UP,
    ord("B"): KEY_DOWN,
    ord("C"): KEY_RIGHT,
    ord("D"): KEY_LEFT,
    ord("H"): KEY_HOME,
    ord("F"): KEY_END,
}

_TILDE_KEYS: dict[int, KeyEvent] = {
    1: KEY_HOME,
    3: KEY_DELETE,
    4: KEY_END,
    5: KEY_PAGE_UP,
    6: KEY_PAGE_DOWN,
}


class BufferByteSource:
    """In-memory byte source; running out of bytes behaves like a read timeout."""

    def __init__(self, data: bytes = b"") -> None:
        self._pending: deque[int] = deque(data)

    def feed(self, data: bytes) -> None:
        self._pending.extend(data)

    def read_byte(self, timeout_ms: int | None) -> int | None:
        if not self._pending:
            return None
        return self._pending.popleft()

    def unread(self, value: int) -> None:
        self._pending.appendleft(value)

    def remaining(self) -> bytes:
        return bytes(self._pending)


class FdByteSource:
    """Byte source over a file descriptor with timeout-bounded reads.

    A private wake pipe lets another thread interrupt a blocked ``read_byte``;
    the interrupted read returns ``None`` exactly like a timeout.
    """

    def __init__(self, fd: int) -> None:
        self.fd = fd
        self.eof = False
        self._pending: deque[int] = deque()
        self._wake_r, self._wake_w = os.pipe()
        os.set_blocking(self._wake_w, False)

    def read_byte(self, timeout_ms: int | None) -> int | None:
        if self._pending:
            return self._pending.popleft()
        if self.eof:
            return None
        timeout = None if timeout_ms is None else max(0.0, timeout_ms / 1000.0)
        ready, _, _ = select.select([self.fd, self._wake_r], [], [], timeout)
        if not ready:
            return None
        if self._wake_r in ready:
            os.read(self._wake_r, 64)
            return None
        ch = os.read(self.fd, 1)
        if not ch:
            self.eof = True
            return None
        return ch[0]

    def unread(self, value: int) -> None:
        self._pending.appendleft(value)

    def interrupt(self) -> None:
        """Wake a reader blocked in ``select``."""
        try:
            os.write(self._wake_w, b"\x00")
        except (BlockingIOError, OSError):
            # Pipe already full or closed; the reader is awake either way.
            pass

    def close(self) -> None:
        for fd in (self._wake_r, self._wake_w):
            try:
                os.close(fd)
            except OSError:
                pass


def _decode_single_byte(byte: int) -> KeyEvent:
    if byte in (13, 10):
        return KEY_ENTER
    if byte == 9:
        return KEY_TAB
    if byte == 127:
        return KEY_BACKSPACE
    if 1 <= byte <= 26:
        return ctrl_key(chr(byte - 1 + ord("a")))
    if 0x20 <= byte <= 0x7E:
        return char_key(chr(byte))
    return KEY_UNKNOWN


def _decode_tilde_sequence(source, first_digit: int, timeout_ms: int) -> KeyEvent:
    """Finish ``ESC [ <digits> ~`` after the first digit has been read."""
    digits = [first_digit]
    count = 1
    while True:
        part = source.read_byte(timeout_ms)
        if part is None:
            return KEY_UNKNOWN
        if part == ord("~"):
            if count > MAX_KEY_NUMBER_DIGITS:
                return KEY_UNKNOWN
            return _TILDE_KEYS.get(int(bytes(digits)), KEY_UNKNOWN)
        if ord("0") <= part <= ord("9"):
            count += 1
            if count <= MAX_KEY_NUMBER_DIGITS:
                digits.append(part)
            continue
        _drain_csi_parameters(source, part, timeout_ms)
        return KEY_UNKNOWN


def _drain_csi_parameters(source, part: int, timeout_ms: int) -> None:
    """Swallow the rest of an unsupported CSI sequence up to its final byte.

    Parameter and intermediate bytes (``0x20..0x3F``) are skipped until a final
    byte (``0x40..0x7E``) or a timeout ends the sequence. Any other byte is
    pushed back so it is decoded as the next key.
    """
    while 0x20 <= part <= 0x3F:
        next_part = source.read_byte(timeout_ms)
        if next_part is None:
            return
        part = next_part
    if 0x40 <= part <= 0x7E:
        return
    source.unread(part)


def _decode_csi(source, timeout_ms: int) -> KeyEvent:
    part = source.read_byte(timeout_ms)
    if part is None:
        return KEY_UNKNOWN
    letter_key = _LETTER_KEYS.get(part)
    if letter_key is not None:
        return letter_key
    if ord("0") <= part <= ord("9"):
        return _decode_tilde_sequence(source, part, timeout_ms)
    _drain_csi_parameters(source, part, timeout_ms)
    return KEY_UNKNOWN


def _decode_ss3(source, timeout_ms: int) -> KeyEvent:
    part = source.read_byte(timeout_ms)
    if part is None:
        return KEY_UNKNOWN
    return _LETTER_KEYS.get(part, KEY_UNKNOWN)


def decode_key(source, timeout_ms: int | None, escape_timeout_ms: int = ESC_SEQUENCE_TIMEOUT_MS) -> KeyEvent | None:
    """Decode one key event from ``source``.

    ``timeout_ms`` bounds the wait for the first byte (``None`` means wait
    indefinitely); ``None`` is returned when it expires. Continuation bytes of
    an escape sequence are each bounded by ``escape_timeout_ms``. A lone ESC
    that is not followed by anything within that window is ESCAPE; any other
    sequence cut short by the timeout is UNKNOWN.
    """
    byte = source.read_byte(timeout_ms)
    if byte is None:
        return None

    if byte != ESC:
        return _decode_single_byte(byte)

    # Escape / function key sequences.
    prefix = source.read_byte(escape_timeout_ms)
    if prefix is None:
        return KEY_ESCAPE
    if prefix == ord("["):
        return _decode_csi(source, escape_timeout_ms)
    if prefix == ord("O"):
        return _decode_ss3(source, escape_timeout_ms)
    source.unread(prefix)
    return KEY_ESCAPE


def decode_bytes(data: bytes) -> KeyEvent | None:
    """Decode the first key event in ``data``; a missing byte counts as a timeout."""
    return decode_key(BufferByteSource(data), timeout_ms=0, escape_timeout_ms=0)
