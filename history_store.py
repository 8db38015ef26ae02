"""
history_store.py
================
Durable per-player score history.

Every player's finished games live under a single key of a small key-value
store, as one JSON array of PlayerHistory objects:

    [
      {"playerName": "Ada",
       "scores": [{"date": 1700000000000, "totalScore": 120,
                   "questions": [...], "config": {...}}, ...]},
      ...
    ]

New entries are prepended, so each ``scores`` list is most-recent-first and
truncation to STORAGE_CONFIG.max_scores drops the oldest games.

Failure policy
--------------
History is a convenience, never a reason to interrupt a game. When the store
is unavailable every read returns empty and every write is skipped. When the
stored data cannot be read or parsed, or a write fails, the error is logged
at ERROR level and swallowed.
"""

from __future__ import annotations

import logging
import math
import os
import time
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Union

from pydantic import TypeAdapter

from config import STORAGE_CONFIG
from models import GameConfig, PlayerHistory, Question, ScoreHistoryEntry

logger = logging.getLogger("multitrainer.history_store")

_HISTORY_ADAPTER = TypeAdapter(List[PlayerHistory])


# ---------------------------------------------------------------------------
# Key-value backends
# ---------------------------------------------------------------------------

class KeyValueStorage:
    """
    Minimal string key-value interface the history store writes through.

    Subclasses implement the three item methods; ``is_available`` is the
    capability check run before any access.
    """

    def is_available(self) -> bool:
        return True

    def get_item(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set_item(self, key: str, value: str) -> None:
        raise NotImplementedError

    def remove_item(self, key: str) -> None:
        raise NotImplementedError


class JsonFileStorage(KeyValueStorage):
    """
    Stores each key as ``<directory>/<key>.json``.

    A ``directory`` of None means persistence is switched off; the store then
    reports itself unavailable.
    """

    def __init__(self, directory: Optional[Union[str, Path]]) -> None:
        self.directory = Path(directory).expanduser() if directory else None

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def is_available(self) -> bool:
        """
        True when the directory is writable, or could be created under its
        nearest existing parent. Nothing is created here; set_item() makes
        the directory on first write.
        """
        if self.directory is None:
            return False
        candidate = self.directory
        while not candidate.exists():
            if candidate.parent == candidate:
                return False
            candidate = candidate.parent
        if not candidate.is_dir():
            logger.debug("History directory %s unusable: %s is not a directory", self.directory, candidate)
            return False
        return os.access(candidate, os.W_OK | os.X_OK)

    def get_item(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set_item(self, key: str, value: str) -> None:
        path = self._path(key)
        self.directory.mkdir(parents=True, exist_ok=True)
        tmp  = path.with_name(path.name + ".tmp")
        tmp.write_text(value, encoding="utf-8")
        tmp.replace(path)

    def remove_item(self, key: str) -> None:
        path = self._path(key)
        if path.exists():
            path.unlink()


class MemoryStorage(KeyValueStorage):
    """Process-local store; used when history should not outlive the process."""

    def __init__(self) -> None:
        self._items: Dict[str, str] = {}

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


# ---------------------------------------------------------------------------
# History store
# ---------------------------------------------------------------------------

class HistoryStore:
    """
    Reads and writes the score history of every player.

    Attributes:
        storage:    Backend holding the serialized history.
        key:        Storage key of the history array.
        max_scores: Entries kept per player.
    """

    def __init__(
        self,
        storage: Optional[KeyValueStorage] = None,
        key: str = STORAGE_CONFIG.key,
        max_scores: int = STORAGE_CONFIG.max_scores,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.storage    = storage if storage is not None else JsonFileStorage(STORAGE_CONFIG.history_dir)
        self.key        = key
        self.max_scores = max_scores
        self._clock     = clock

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_all_history(self) -> List[PlayerHistory]:
        """
        Every player's history, or an empty list when there is none.

        Never raises: an unavailable store, a missing key and unparsable data
        all come back as an empty list.
        """
        if not self.storage.is_available():
            logger.debug("History storage unavailable; returning empty history.")
            return []

        try:
            raw = self.storage.get_item(self.key)
            if not raw:
                return []
            return _HISTORY_ADAPTER.validate_json(raw)
        except (OSError, ValueError) as exc:
            logger.error("Error loading history: %s", exc, exc_info=True)
            return []

    def get_player_history(self, player_name: str) -> List[ScoreHistoryEntry]:
        """Games of ``player_name`` (exact match), most recent first."""
        for record in self.get_all_history():
            if record.player_name == player_name:
                return record.scores
        return []

    def get_best_score(self, player_name: str) -> int:
        history = self.get_player_history(player_name)
        if not history:
            return 0
        return max(entry.total_score for entry in history)

    def get_average_score(self, player_name: str) -> int:
        """Mean score rounded half up, or 0 with no history."""
        history = self.get_player_history(player_name)
        if not history:
            return 0
        mean = sum(entry.total_score for entry in history) / len(history)
        return int(math.floor(mean + 0.5))

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def save_score(
        self,
        player_name: str,
        total_score: int,
        questions: Sequence[Question],
        config: GameConfig,
    ) -> None:
        """
        Record a finished game for ``player_name``.

        Builds a timestamped entry, prepends it to the player's scores
        (creating the player on first save), trims to ``max_scores`` and
        rewrites the whole history. Failures are logged and swallowed.
        """
        if not self.storage.is_available():
            logger.debug("History storage unavailable; score for %r not saved.", player_name)
            return

        entry = ScoreHistoryEntry(
            date=int(self._clock() * 1000),
            total_score=total_score,
            questions=[q.model_copy(deep=True) for q in questions],
            config=config,
        )

        all_history = self.get_all_history()
        record = next((p for p in all_history if p.player_name == player_name), None)
        if record is None:
            record = PlayerHistory(player_name=player_name, scores=[entry])
            all_history.append(record)
        else:
            record.scores.insert(0, entry)
            record.scores = record.scores[: self.max_scores]

        try:
            self._write(all_history)
        except OSError as exc:
            logger.error("Error saving score for %r: %s", player_name, exc, exc_info=True)
            return

        logger.info(
            "Saved score %d for %r (%d game%s retained).",
            total_score,
            player_name,
            len(record.scores),
            "" if len(record.scores) == 1 else "s",
        )

    def clear_history(self, player_name: Optional[str] = None) -> None:
        """Forget one player's games, or everyone's when no name is given."""
        if not self.storage.is_available():
            return

        try:
            if player_name is None:
                self.storage.remove_item(self.key)
                logger.info("Cleared all score history.")
                return
            remaining = [p for p in self.get_all_history() if p.player_name != player_name]
            self._write(remaining)
            logger.info("Cleared score history for %r.", player_name)
        except OSError as exc:
            logger.error("Error clearing history: %s", exc, exc_info=True)

    def _write(self, all_history: List[PlayerHistory]) -> None:
        payload = _HISTORY_ADAPTER.dump_json(all_history, by_alias=True).decode("utf-8")
        self.storage.set_item(self.key, payload)
