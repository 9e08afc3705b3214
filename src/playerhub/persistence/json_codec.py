from __future__ import annotations

import json
from pathlib import Path
from typing import Any, List, Optional

from ..errors import CodecError
from ..models import PlayerRecord, is_storable_nickname
from .base import FilePlayerCodec
from .paths import JSON_FILENAME, default_storage_dir


def encode_players(records: List[PlayerRecord]) -> str:
    """Encode players to a pretty-printed JSON array."""
    for record in records:
        if not is_storable_nickname(record.nickname):
            raise CodecError(f"Nickname of player {record.id} cannot be stored as JSON text")
    data = [r.to_dict() for r in records]
    return json.dumps(data, ensure_ascii=False, indent=2) + "\n"


def decode_players(text: str) -> List[PlayerRecord]:
    """Decode a JSON array of player objects. Duplicate ids are returned as-is."""
    try:
        data: Any = json.loads(text)
    except (ValueError, RecursionError) as e:
        # JSONDecodeError, oversized integers and runaway nesting
        raise CodecError(f"Invalid JSON: {e}") from e

    if not isinstance(data, list):
        raise CodecError(f"Expected a JSON array of players, got {type(data).__name__}")
    return [PlayerRecord.from_dict(entry) for entry in data]


class JsonPlayerCodec(FilePlayerCodec):
    """Stores players as a JSON array of ``{"id", "nickname", "points", "online"}`` objects."""

    format_name = "JSON"

    def __init__(self, path: Optional[str | Path] = None) -> None:
        super().__init__(path or default_storage_dir() / JSON_FILENAME)

    def encode(self, records: List[PlayerRecord]) -> str:
        return encode_players(records)

    def decode(self, text: str) -> List[PlayerRecord]:
        return decode_players(text)
