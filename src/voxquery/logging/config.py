"""Persisted logging preferences for the voxquery CLI.

The only setting stored today is ``log_level``; it lives in a small JSON file
so ``voxquery logging set-level`` survives between invocations.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional


def config_path(config_file: Optional[os.PathLike[str] | str] = None) -> Path:
    """Return the logging config path.

    Resolution order: explicit ``config_file``, ``VOXQUERY_LOG_CONFIG``, then
    ``logging.json`` inside ``VOXQUERY_CONFIG_DIR`` (default ``~/.voxquery``).
    """

    if config_file is not None:
        return Path(config_file)

    raw = (os.environ.get("VOXQUERY_LOG_CONFIG") or "").strip()
    if raw:
        return Path(raw).expanduser()

    config_dir = (os.environ.get("VOXQUERY_CONFIG_DIR") or "").strip()
    base = Path(config_dir).expanduser() if config_dir else Path.home() / ".voxquery"
    return base / "logging.json"


def load_config(config_file: Optional[os.PathLike[str] | str] = None) -> Dict[str, Any]:
    """Load the logging configuration JSON file.

    Missing, unreadable or malformed files are treated as an empty
    configuration.
    """

    path = config_path(config_file)
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except (OSError, json.JSONDecodeError):
        return {}

    return data if isinstance(data, dict) else {}


def save_config(
    config: Dict[str, Any],
    config_file: Optional[os.PathLike[str] | str] = None,
) -> Path:
    path = config_path(config_file)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as handle:
        json.dump(config, handle, indent=2, sort_keys=True)
        handle.write("\n")
    return path


def _level_number(value: str | int) -> Optional[int]:
    if isinstance(value, int):
        return value
    candidate = logging.getLevelName(str(value).strip().upper())
    return candidate if isinstance(candidate, int) else None


def load_log_level(
    config_file: Optional[os.PathLike[str] | str] = None,
) -> Optional[int]:
    """Fetch the persisted log level, if any."""

    value = load_config(config_file).get("log_level")
    if value is None:
        return None
    return _level_number(value)


def save_log_level(
    level: str | int,
    config_file: Optional[os.PathLike[str] | str] = None,
) -> Path:
    """Persist ``level`` and return the config path.

    Raises
    ------
    ValueError
        If the level name is not a known logging level.
    """

    numeric = _level_number(level)
    if numeric is None:
        raise ValueError(f"Unknown logging level: {level!r}")

    config = load_config(config_file)
    config["log_level"] = logging.getLevelName(numeric)
    return save_config(config, config_file)


__all__ = [
    "config_path",
    "load_config",
    "save_config",
    "load_log_level",
    "save_log_level",
]
