from __future__ import annotations

import unicodedata
from dataclasses import dataclass
from typing import Any, Dict

from .errors import CodecError

# Nicknames longer than this are rejected
MAX_NICKNAME_LENGTH = 15

FIELDS = ("id", "nickname", "points", "online")

# Control characters (Cc) and lone surrogates (Cs) cannot be stored in both formats
_FORBIDDEN_CATEGORIES = {"Cc", "Cs"}
_XML_NONCHARACTERS = {"\ufffe", "\uffff"}


def is_storable_nickname(nickname: str) -> bool:
    """True if every character survives a JSON and an XML round trip unchanged."""
    return not any(
        ch in _XML_NONCHARACTERS or unicodedata.category(ch) in _FORBIDDEN_CATEGORIES
        for ch in nickname
    )


@dataclass(frozen=True)
class PlayerRecord:
    """A single registered player.

    Records are immutable values. The registry replaces a record when its
    points change, so a record handed out to a caller never changes under it.
    """

    id: int
    nickname: str
    points: int = 0
    online: bool = True

    def with_points(self, points: int) -> "PlayerRecord":
        return PlayerRecord(id=self.id, nickname=self.nickname, points=points, online=self.online)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "nickname": self.nickname,
            "points": self.points,
            "online": self.online,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "PlayerRecord":
        """Build a record from a decoded mapping, validating every field.

        Raises CodecError if a field is missing, has the wrong type or is out of range.
        """
        if not isinstance(data, dict):
            raise CodecError(f"Player entry must be a mapping, got {type(data).__name__}")
        missing = [name for name in FIELDS if name not in data]
        if missing:
            raise CodecError(f"Player entry is missing fields: {missing}")

        player_id = data["id"]
        nickname = data["nickname"]
        points = data["points"]
        online = data["online"]

        if not _is_int(player_id) or player_id < 1:
            raise CodecError(f"Player id must be a positive integer, got {player_id!r}")
        if not isinstance(nickname, str) or not nickname or len(nickname) > MAX_NICKNAME_LENGTH:
            raise CodecError(f"Invalid nickname for player {player_id}: {nickname!r}")
        if not is_storable_nickname(nickname):
            raise CodecError(f"Nickname for player {player_id} contains unsupported characters")
        if not _is_int(points) or points < 0:
            raise CodecError(f"Points must be a non-negative integer for player {player_id}")
        if not isinstance(online, bool):
            raise CodecError(f"Online flag must be a boolean for player {player_id}")

        return PlayerRecord(id=player_id, nickname=nickname, points=points, online=online)


def _is_int(value: Any) -> bool:
    # bool is a subclass of int
    return isinstance(value, int) and not isinstance(value, bool)
