"""Public package surface for lazytable.

Exports ``main`` for programmatic CLI invocation and the session building
blocks. Names are imported lazily to keep package imports lightweight.
"""

from __future__ import annotations

_EXPORTS = {
    "InteractiveSession": ".session",
    "AlreadyRunning": ".session",
    "SessionConfig": ".config",
    "Column": ".render",
    "FrameRenderer": ".render",
    "DataSource": ".datasource",
    "InMemoryDataSource": ".datasource",
    "LazyDataSource": ".datasource",
    "OutOfRange": ".datasource",
    "VirtualListState": ".state",
    "TerminalUnavailable": ".terminal",
    "KeyEvent": ".input.keys",
}


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)


def __getattr__(name: str):
    module_name = _EXPORTS.get(name)
    if module_name is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    import importlib

    return getattr(importlib.import_module(module_name, __name__), name)


__all__ = ["main", *_EXPORTS]
