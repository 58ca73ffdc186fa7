"""Session configuration and the optional JSON config file.

``SessionConfig`` carries the tunables with their defaults. Users may override
them in ``config.json`` under the platform config directory; malformed or
missing files fall back to the defaults.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, fields, replace
from pathlib import Path

from platformdirs import user_config_dir

from .style import normalize_style_name

logger = logging.getLogger(__name__)

APP_NAME = "lazytable"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME


@dataclass(frozen=True)
class SessionConfig:
    """Tunables for one interactive session."""

    visible_height: int = 10
    frame_interval: float = 0.05
    read_timeout_ms: int = 100
    escape_timeout_ms: int = 50
    join_timeout: float = 1.0
    style_name: str = "default"
    terminal_width: int | None = None
    exit_on_enter: bool = False


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        text = CONFIG_PATH.read_text(encoding="utf-8")
    except OSError:
        return {}
    try:
        data = json.loads(text)
    except ValueError:
        logger.warning("ignoring malformed config file %s", CONFIG_PATH)
        return {}
    if not isinstance(data, dict):
        logger.warning("ignoring config file %s: top level is not an object", CONFIG_PATH)
        return {}
    return data


def _positive_int(value: object) -> int | None:
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value if value > 0 else None


def _nonnegative_int(value: object) -> int | None:
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value if value >= 0 else None


def _seconds_from_ms(value: object) -> float | None:
    """Convert a positive millisecond count to seconds."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value / 1000.0 if value > 0 else None


def config_from_mapping(data: dict[str, object], base: SessionConfig | None = None) -> SessionConfig:
    """Build a ``SessionConfig`` from config-file keys.

    Recognized keys: ``visible_height``, ``frame_interval_ms``,
    ``read_timeout_ms``, ``escape_timeout_ms``, ``join_timeout_ms``,
    ``style``, ``terminal_width``, ``exit_on_enter``. Invalid values keep the
    value from ``base``.
    """
    config = base or SessionConfig()
    updates: dict[str, object] = {}

    parsers = {
        "visible_height": ("visible_height", _positive_int),
        "frame_interval_ms": ("frame_interval", _seconds_from_ms),
        "read_timeout_ms": ("read_timeout_ms", _positive_int),
        "escape_timeout_ms": ("escape_timeout_ms", _nonnegative_int),
        "join_timeout_ms": ("join_timeout", _seconds_from_ms),
        "terminal_width": ("terminal_width", _positive_int),
    }
    for key, (attr, parse) in parsers.items():
        if key not in data:
            continue
        parsed = parse(data[key])
        if parsed is None:
            logger.warning("ignoring invalid config value %s=%r", key, data[key])
            continue
        updates[attr] = parsed

    style = data.get("style")
    if isinstance(style, str) and style.strip():
        updates["style_name"] = normalize_style_name(style)

    exit_on_enter = data.get("exit_on_enter")
    if isinstance(exit_on_enter, bool):
        updates["exit_on_enter"] = exit_on_enter

    return replace(config, **updates)


def load_session_config(**overrides: object) -> SessionConfig:
    """Return defaults merged with the config file, then explicit overrides.

    Overrides whose value is ``None`` are ignored so CLI options that were not
    given do not mask the config file.
    """
    config = config_from_mapping(load_config())
    known = {f.name for f in fields(SessionConfig)}
    explicit = {key: value for key, value in overrides.items() if value is not None}
    unknown = set(explicit) - known
    if unknown:
        raise TypeError(f"unknown session config fields: {', '.join(sorted(unknown))}")
    return replace(config, **explicit)
