from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from ..errors import CodecError
from ..models import PlayerRecord
from .paths import ensure_dir

logger = logging.getLogger(__name__)


class PlayerCodec(ABC):
    """Abstract interface for player persistence.

    Implementations never raise out of load/save: failures are logged and
    reported as an empty collection (load) or a False result (save).
    """

    @abstractmethod
    def load(self) -> List[PlayerRecord]:
        """Load all stored players. Missing or unreadable storage yields an empty list."""

    @abstractmethod
    def save(self, records: Iterable[PlayerRecord]) -> bool:
        """Replace the stored collection with ``records``. Returns False on failure."""


def collapse_duplicates(records: Iterable[PlayerRecord]) -> List[PlayerRecord]:
    """Keep one record per id; a later entry replaces an earlier one."""
    by_id: Dict[int, PlayerRecord] = {}
    for record in records:
        if record.id in by_id:
            logger.debug("Duplicate player id %s in storage; keeping the later entry", record.id)
        by_id[record.id] = record
    return list(by_id.values())


class FilePlayerCodec(PlayerCodec):
    """PlayerCodec backed by a single file whose content is the whole collection.

    Subclasses provide the text format through encode/decode. Writes go to a
    temporary sibling file which then replaces the target, so readers never see
    a partially written file.
    """

    format_name = "file"

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    @abstractmethod
    def encode(self, records: List[PlayerRecord]) -> str:
        """Render records as text."""

    @abstractmethod
    def decode(self, text: str) -> List[PlayerRecord]:
        """Parse text into records (duplicates allowed). Raises CodecError on bad input."""

    def load(self) -> List[PlayerRecord]:
        if not self.path.exists():
            logger.info("%s player file not found at %s; starting empty", self.format_name, self.path)
            return []
        try:
            text = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Failed to read %s (%s). Starting with no players.", self.path, exc)
            return []
        try:
            records = self.decode(text)
        except CodecError as exc:
            logger.warning("Invalid %s player file %s (%s). Starting with no players.", self.format_name, self.path, exc)
            return []
        players = collapse_duplicates(records)
        logger.debug("Loaded %d players from %s", len(players), self.path)
        return players

    def save(self, records: Iterable[PlayerRecord]) -> bool:
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            payload = self.encode(list(records))
            ensure_dir(self.path.parent)
            with tmp_path.open("w", encoding="utf-8") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.path)
        except (CodecError, ValueError) as exc:
            logger.error("Cannot encode players for %s: %s", self.path, exc)
            return False
        except OSError as exc:
            logger.error("I/O error while saving players to %s: %s", self.path, exc)
            return False
        finally:
            if tmp_path.exists():
                try:
                    tmp_path.unlink()
                except OSError:
                    logger.debug("Could not remove temporary file %s", tmp_path)
        return True

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self.path)!r})"


class InMemoryPlayerCodec(PlayerCodec):
    """Test/deterministic codec that holds data in memory only.

    With ``fail_saves=True`` every save is reported as failed and nothing is stored.
    """

    def __init__(self, records: Optional[Iterable[PlayerRecord]] = None, fail_saves: bool = False) -> None:
        self._records: List[PlayerRecord] = list(records or [])
        self.fail_saves = fail_saves
        self.save_count = 0

    def load(self) -> List[PlayerRecord]:
        return collapse_duplicates(self._records)

    def save(self, records: Iterable[PlayerRecord]) -> bool:
        self.save_count += 1
        if self.fail_saves:
            logger.error("In-memory save rejected (fail_saves is set)")
            return False
        self._records = list(records)
        return True
