"""Input-layer public API: key vocabulary, decoding, and the reader thread.

Exports are split between the low-level decoder (``decode_key``) and the
background ``InputLoop`` used by the interactive session.
"""

from . import keys
from .keys import KEY_KINDS, KeyEvent, char_key, ctrl_key
from .loop import JOIN_TIMEOUT_SECONDS, READ_TIMEOUT_MS, InputLoop
from .reader import (
    ESC_SEQUENCE_TIMEOUT_MS,
    BufferByteSource,
    FdByteSource,
    decode_bytes,
    decode_key,
)

__all__ = [
    "keys",
    "KEY_KINDS",
    "KeyEvent",
    "char_key",
    "ctrl_key",
    "decode_key",
    "decode_bytes",
    "BufferByteSource",
    "FdByteSource",
    "ESC_SEQUENCE_TIMEOUT_MS",
    "InputLoop",
    "READ_TIMEOUT_MS",
    "JOIN_TIMEOUT_SECONDS",
]
