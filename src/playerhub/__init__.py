"""playerhub: a file-backed player registry.

The registry keeps every player in memory and rewrites the whole backing
file (JSON or XML) after each change.
"""

from .errors import (
    ConfigError,
    ConflictError,
    CodecError,
    InvalidArgument,
    PersistenceError,
    RegistryError,
)
from .models import MAX_NICKNAME_LENGTH, PlayerRecord
from .persistence import InMemoryPlayerCodec, JsonPlayerCodec, PlayerCodec, XmlPlayerCodec
from .registry import PlayerRegistry

__version__ = "0.1.0"

__all__ = [
    "MAX_NICKNAME_LENGTH",
    "PlayerRecord",
    "PlayerRegistry",
    "PlayerCodec",
    "JsonPlayerCodec",
    "XmlPlayerCodec",
    "InMemoryPlayerCodec",
    "RegistryError",
    "InvalidArgument",
    "ConflictError",
    "PersistenceError",
    "CodecError",
    "ConfigError",
]
