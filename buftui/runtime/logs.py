"""Logging bootstrap.

The terminal belongs to the UI, so records go to a file under the user log
directory instead of stderr.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from platformdirs import user_log_dir

from .config import APP_NAME

LOG_LEVEL_ENV = "BUFTUI_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"
LOG_FORMAT = "%(asctime)s %(levelname)s %(threadName)s %(name)s: %(message)s"
LOG_PATH = Path(user_log_dir(APP_NAME, appauthor=False)) / f"{APP_NAME}.log"


def resolve_log_level(level: str | None) -> int:
    name = (level or os.environ.get(LOG_LEVEL_ENV) or DEFAULT_LOG_LEVEL).strip().upper()
    value = logging.getLevelName(name)
    if not isinstance(value, int):
        raise ValueError(f"unknown log level: {name}")
    return value


def configure_logging(level: str | None = None, path: Path | None = None) -> Path | None:
    """Attach a file handler to the ``buftui`` logger; returns the log path.

    Returns ``None`` when the log directory cannot be created, in which case
    records are dropped.
    """
    target = path if path is not None else LOG_PATH
    root = logging.getLogger(APP_NAME)
    root.setLevel(resolve_log_level(level))
    root.propagate = False
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(target, encoding="utf-8")
    except OSError:
        root.addHandler(logging.NullHandler())
        return None
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    return target
