"""Persistence layer for the player registry.

This package provides:
- The PlayerCodec interface the registry persists through
- JSON and XML file codecs with atomic whole-file writes
- An in-memory codec for tests and embedders that need no disk I/O
- Platform-aware default storage locations
"""

from .base import PlayerCodec, FilePlayerCodec, InMemoryPlayerCodec, collapse_duplicates
from .json_codec import JsonPlayerCodec
from .xml_codec import XmlPlayerCodec
from .paths import default_storage_dir, default_config_dir

__all__ = [
    "PlayerCodec",
    "FilePlayerCodec",
    "InMemoryPlayerCodec",
    "JsonPlayerCodec",
    "XmlPlayerCodec",
    "collapse_duplicates",
    "default_storage_dir",
    "default_config_dir",
]
