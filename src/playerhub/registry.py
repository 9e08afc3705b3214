from __future__ import annotations

import logging
from typing import Dict, List, Optional

from .errors import ConflictError, InvalidArgument
from .models import MAX_NICKNAME_LENGTH, PlayerRecord, is_storable_nickname
from .persistence.base import PlayerCodec

logger = logging.getLogger(__name__)


class PlayerRegistry:
    """In-memory catalog of players, persisted in full after every change.

    The registry loads its initial state from the codec on construction and
    calls ``codec.save`` with the whole collection after each create, delete
    and add_points. Saving is best effort: when the codec reports a failure
    the change is kept in memory and the operation still returns its normal
    result.

    Players that are not found are reported as None rather than raised.
    """

    def __init__(self, codec: PlayerCodec) -> None:
        self._codec = codec
        self._players: Dict[int, PlayerRecord] = {}
        for record in codec.load():
            self._players[record.id] = record
        self._warn_on_shared_nicknames()
        logger.info("Player registry ready with %d players (%r)", len(self._players), codec)

    # Public API

    def create(self, nickname: str) -> int:
        """Register a new player and return its id.

        Raises InvalidArgument for an empty, too long or non-string nickname and
        ConflictError if the nickname is already in use.
        """
        if not isinstance(nickname, str):
            raise InvalidArgument("nickname must be a string")
        if not nickname:
            raise InvalidArgument("nickname cannot be empty")
        if len(nickname) > MAX_NICKNAME_LENGTH:
            raise InvalidArgument("nickname is too long")
        if not is_storable_nickname(nickname):
            raise InvalidArgument("nickname contains unsupported characters")
        if any(p.nickname == nickname for p in self._players.values()):
            raise ConflictError(f"nickname is already in use: {nickname!r}")

        player_id = self._next_id()
        self._players[player_id] = PlayerRecord(id=player_id, nickname=nickname, points=0, online=True)
        logger.info("Created player %s (%s)", player_id, nickname)
        self._persist()
        return player_id

    def delete(self, player_id: int) -> Optional[PlayerRecord]:
        """Remove a player. Returns the removed record, or None if the id is unknown."""
        removed = self._players.pop(player_id, None)
        if removed is None:
            return None
        logger.info("Deleted player %s (%s)", removed.id, removed.nickname)
        self._persist()
        return removed

    def add_points(self, player_id: int, amount: int) -> Optional[int]:
        """Award points to a player and return the new total.

        The amount is validated before the lookup, so a negative amount raises
        InvalidArgument even for an unknown id. Returns None if the id is unknown.
        """
        if not isinstance(amount, int) or isinstance(amount, bool):
            raise InvalidArgument("points must be an integer")
        if amount < 0:
            raise InvalidArgument("points cannot be negative")

        player = self._players.get(player_id)
        if player is None:
            return None
        updated = player.with_points(player.points + amount)
        self._players[player_id] = updated
        logger.debug("Player %s: +%d points (total %d)", player_id, amount, updated.points)
        self._persist()
        return updated.points

    def get(self, player_id: int) -> Optional[PlayerRecord]:
        return self._players.get(player_id)

    def list(self) -> List[PlayerRecord]:
        """Return a snapshot of all players ordered by id."""
        return [self._players[pid] for pid in sorted(self._players)]

    def __len__(self) -> int:
        return len(self._players)

    def __contains__(self, player_id: object) -> bool:
        return player_id in self._players

    # Internal helpers

    def _next_id(self) -> int:
        if not self._players:
            return 1
        return max(self._players) + 1

    def _persist(self) -> None:
        if not self._codec.save(self.list()):
            logger.warning("Failed to persist players; keeping in-memory changes")

    def _warn_on_shared_nicknames(self) -> None:
        seen: Dict[str, int] = {}
        for record in self._players.values():
            if record.nickname in seen:
                logger.warning(
                    "Players %s and %s share nickname %r in storage",
                    seen[record.nickname],
                    record.id,
                    record.nickname,
                )
            else:
                seen[record.nickname] = record.id
