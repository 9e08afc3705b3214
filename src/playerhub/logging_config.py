from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List, Optional, Union

from .persistence.paths import ensure_dir

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"

# Rotate the log file at 1 MiB, keeping three old files
LOG_FILE_MAX_BYTES = 1 << 20
LOG_FILE_BACKUPS = 3

_installed: List[logging.Handler] = []


def resolve_level(level: Union[str, int], default: int = logging.INFO) -> int:
    """Turn a level name such as "debug" into its numeric value; unknown names give ``default``."""
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).strip().upper())
    return value if isinstance(value, int) else default


def configure_logging(level: Union[str, int] = logging.INFO, log_file: Optional[Path] = None) -> None:
    """Configure the root logger for the command line tools.

    Records go to stderr and, when ``log_file`` is given, also to a rotating
    file. Calling this again replaces the handlers a previous call installed
    and leaves every other handler on the root logger alone.
    """
    root = logging.getLogger()
    for handler in _installed:
        root.removeHandler(handler)
        handler.close()
    _installed.clear()

    formatter = logging.Formatter(LOG_FORMAT)
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if log_file is not None:
        ensure_dir(Path(log_file).parent)
        handlers.append(
            RotatingFileHandler(
                log_file, maxBytes=LOG_FILE_MAX_BYTES, backupCount=LOG_FILE_BACKUPS, encoding="utf-8"
            )
        )
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)
        _installed.append(handler)
    root.setLevel(resolve_level(level))
