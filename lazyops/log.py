"""Logging setup shared by the CLI and the operation core.

Configure once via ``setup_logging(...)`` at startup and fetch module loggers
with ``get_logger(__name__)``. Handlers are attached to the root logger.
"""

from __future__ import annotations

import logging
import logging.handlers
import os
import sys
from pathlib import Path

from platformdirs import user_log_dir

APP_NAME = "lazyops"
DEFAULT_LOG_PATH = Path(user_log_dir(APP_NAME, appauthor=False)) / f"{APP_NAME}.log"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d:%(funcName)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_CONFIGURED = False


def _expand_path(path: str | Path) -> Path:
    return Path(os.path.expanduser(str(path))).resolve()


def setup_logging(
    level: str | int = "WARNING",
    log_file: str | Path | None = None,
    max_bytes: int = 1_000_000,
    backup_count: int = 3,
) -> None:
    """Configure root logging with a stderr handler and optional rotating file.

    Calling this more than once is safe; handlers are only added the first
    time. ``level`` applies to the console handler, the file handler always
    captures DEBUG records.
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.WARNING)

    root = logging.getLogger()
    root.setLevel(logging.DEBUG if log_file is not None else level)
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(level)
    console.setFormatter(formatter)
    root.addHandler(console)

    if log_file is not None:
        log_path = _expand_path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            filename=log_path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    _CONFIGURED = True


def get_logger(name: str | None = None) -> logging.Logger:
    """Return ``logging.getLogger(name)``, defaulting to the package logger."""
    if name is None:
        name = APP_NAME
    return logging.getLogger(name)
