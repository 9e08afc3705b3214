from __future__ import annotations

import os
from pathlib import Path

from platformdirs import PlatformDirs

APP_NAME = "playerhub"

# Environment variable overrides (useful for tests and scripted runs)
ENV_DATA_DIR = "PLAYERHUB_DATA_DIR"
ENV_CONFIG_DIR = "PLAYERHUB_CONFIG_DIR"

JSON_FILENAME = "players.json"
XML_FILENAME = "players.xml"
LOG_FILENAME = "playerhub.log"


def _platform_dir(kind: str, env_var: str | None = None) -> Path:
    """Resolve one of the PlatformDirs user_*_dir locations, env override first."""
    override = os.getenv(env_var) if env_var else None
    if override:
        base = Path(override)
    else:
        base = Path(getattr(PlatformDirs(appname=APP_NAME, appauthor=False), f"user_{kind}_dir"))
    return base.expanduser().resolve()


def default_storage_dir() -> Path:
    """Return the directory holding the player files.

    Linux: ~/.local/share/playerhub
    macOS: ~/Library/Application Support/playerhub
    Windows: %LOCALAPPDATA%\\playerhub

    PLAYERHUB_DATA_DIR takes precedence when set.
    """
    return _platform_dir("data", ENV_DATA_DIR)


def default_config_dir() -> Path:
    """Return the directory searched for playerhub.yaml (PLAYERHUB_CONFIG_DIR overrides)."""
    return _platform_dir("config", ENV_CONFIG_DIR)


def default_log_file() -> Path:
    return _platform_dir("log") / LOG_FILENAME


def ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path
