from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .errors import ConfigError
from .persistence import JsonPlayerCodec, PlayerCodec, XmlPlayerCodec
from .persistence.paths import (
    ENV_DATA_DIR,
    JSON_FILENAME,
    XML_FILENAME,
    default_config_dir,
    default_log_file,
    default_storage_dir,
)
from .registry import PlayerRegistry

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "playerhub.yaml"

ENV_FORMAT = "PLAYERHUB_FORMAT"
ENV_LOG_LEVEL = "PLAYERHUB_LOG_LEVEL"

FORMATS = {
    "json": (JsonPlayerCodec, JSON_FILENAME),
    "xml": (XmlPlayerCodec, XML_FILENAME),
}


@dataclass(frozen=True)
class RegistryConfig:
    """
    Where and how the registry stores its players.

    A YAML file may provide any of these keys:
      - format: "json" or "xml" (default "json")
      - storage_dir: directory holding the player file (default: platform data dir)
      - log_level: logging level name (default "INFO")
      - log_file: path of a log file, or true for playerhub.log in the platform
        log dir (default: log to stderr only)
    """

    storage_format: str = "json"
    storage_dir: Path = field(default_factory=default_storage_dir)
    log_level: str = "INFO"
    log_file: Optional[Path] = None

    def __post_init__(self) -> None:
        if self.storage_format not in FORMATS:
            raise ConfigError(
                f"Unknown storage format {self.storage_format!r}; expected one of {sorted(FORMATS)}"
            )

    @property
    def storage_path(self) -> Path:
        return self.storage_dir / FORMATS[self.storage_format][1]


def load_config(path: Optional[str | Path] = None) -> RegistryConfig:
    """Load registry configuration from YAML, then apply environment overrides.

    If path is None, playerhub.yaml in the platform config dir is used when it
    exists; otherwise defaults apply. An explicit path that does not exist is
    an error, and so is a value of the wrong type.
    """
    data: Dict[str, Any] = {}
    if path is not None:
        config_path = Path(path)
        if not config_path.exists():
            raise ConfigError(f"Config file not found: {config_path}")
        data = _read_yaml(config_path)
    else:
        candidate = default_config_dir() / CONFIG_FILENAME
        if candidate.exists():
            data = _read_yaml(candidate)

    file_format, file_dir, file_level = (_text(data, key) for key in ("format", "storage_dir", "log_level"))
    storage_format = os.getenv(ENV_FORMAT) or file_format or "json"
    storage_dir = os.getenv(ENV_DATA_DIR) or file_dir
    log_level = os.getenv(ENV_LOG_LEVEL) or file_level or "INFO"

    cfg = RegistryConfig(
        storage_format=storage_format.strip().lower(),
        storage_dir=Path(storage_dir).expanduser() if storage_dir else default_storage_dir(),
        log_level=log_level.strip().upper(),
        log_file=_log_file(data.get("log_file")),
    )
    logger.debug("Registry config: %s", cfg)
    return cfg


def _text(data: Dict[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigError(f"Config key {key!r} must be a string, got {type(value).__name__}")
    return value


def _log_file(value: Any) -> Optional[Path]:
    if value is None or value is False:
        return None
    if value is True:
        return default_log_file()
    if not isinstance(value, str) or not value:
        raise ConfigError(f"Config key 'log_file' must be a path or a boolean, got {value!r}")
    return Path(value).expanduser()


def _read_yaml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Cannot read config file {path}: {exc}") from exc
    if not isinstance(raw, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    logger.info("Loaded registry config from %s", path)
    return raw


def build_codec(config: RegistryConfig) -> PlayerCodec:
    codec_cls = FORMATS[config.storage_format][0]
    return codec_cls(config.storage_path)


def build_registry(config: Optional[RegistryConfig] = None) -> PlayerRegistry:
    """Create a registry wired to the codec the configuration selects."""
    return PlayerRegistry(build_codec(config or load_config()))
