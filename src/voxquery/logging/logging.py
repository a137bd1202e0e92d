# voxquery/logging/logging.py
import os
import logging
import sys
from pathlib import Path

from voxquery.logging.config import load_log_level

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Names of loggers that already carry voxquery handlers.
_CONFIGURED = set()


def _resolve_log_file(log_file=None):
    if log_file is not None:
        return Path(log_file)
    log_dir = os.environ.get("VOXQUERY_LOG_DIR") or Path.home() / ".voxquery" / "logs"
    return Path(log_dir) / "voxquery.log"


def _handlers(log_file, console):
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    path = _resolve_log_file(log_file)
    path.parent.mkdir(parents=True, exist_ok=True)
    handlers = [logging.FileHandler(path, encoding="utf-8")]
    if console:
        handlers.append(logging.StreamHandler(sys.stderr))

    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def get_logger(name="voxquery", level=None, log_file=None, console=True):
    """Return ``name``'s logger, attaching file and stderr handlers on first use.

    Without an explicit ``level`` the level saved by ``voxquery logging
    set-level`` applies, falling back to INFO. Later calls return the
    configured logger unchanged until :func:`reset_logger` is called.
    """
    logger = logging.getLogger(name)
    if name in _CONFIGURED:
        return logger

    logger.setLevel(level if level is not None else load_log_level() or logging.INFO)
    logger.propagate = False
    for handler in _handlers(log_file, console):
        logger.addHandler(handler)

    _CONFIGURED.add(name)
    return logger


def reset_logger(name=None):
    """Detach and close handlers for ``name``, or for every configured logger."""
    names = [name] if name is not None else list(_CONFIGURED)

    for item in names:
        logger = logging.getLogger(item)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
        _CONFIGURED.discard(item)


def get_configured_level(name="voxquery"):
    level = logging.getLogger(name).getEffectiveLevel()
    return logging.getLevelName(level)
