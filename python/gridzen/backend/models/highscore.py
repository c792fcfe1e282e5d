"""High score persistence and management."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from gridzen.backend.storage.store import KeyValueStore, StoreError

logger = logging.getLogger(__name__)

STORE_KEY = "highscores"
MAX_ENTRIES = 5


def size_key(size: int) -> str:
    return f"{size}x{size}"


@dataclass(frozen=True)
class HighScoreEntry:
    name: str
    moves: int
    time_remaining: int
    date: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "moves": self.moves,
            "timeRemaining": self.time_remaining,
            "date": self.date,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HighScoreEntry:
        moves = int(data["moves"])
        time_remaining = int(data["timeRemaining"])
        if moves < 0 or time_remaining < 0:
            raise ValueError(f"Negative score values in {data!r}")
        return cls(
            name=str(data["name"]),
            moves=moves,
            time_remaining=time_remaining,
            date=str(data["date"]),
        )


class HighScoreManager:
    """Keeps the top results per grid size and writes them to a store.

    Store failures never escape: a ledger that cannot be read starts
    empty, and a ledger that cannot be written stays in memory.
    """

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store
        self._scores: dict[str, list[HighScoreEntry]] = self.load()

    # -- persistence ----------------------------------------------------------

    def load(self) -> dict[str, list[HighScoreEntry]]:
        """Return the persisted ledger, or an empty one if there is none."""
        try:
            data = self.store.get(STORE_KEY)
        except StoreError:
            logger.warning("High scores unreadable, starting empty", exc_info=True)
            return {}
        if data is None:
            return {}
        try:
            return {
                str(key): [HighScoreEntry.from_dict(e) for e in entries]
                for key, entries in data.items()
            }
        except (AttributeError, KeyError, TypeError, ValueError):
            logger.warning("High scores corrupt, starting empty", exc_info=True)
            return {}

    def save(self) -> bool:
        data = {
            key: [e.to_dict() for e in entries]
            for key, entries in self._scores.items()
        }
        try:
            self.store.set(STORE_KEY, data)
        except StoreError:
            logger.exception("Could not save high scores; keeping them in memory")
            return False
        return True

    # -- mutation -------------------------------------------------------------

    def record_win(self, key: str, entry: HighScoreEntry) -> list[HighScoreEntry]:
        """Add *entry* under *key*, keep the best five, and persist."""
        entries = self._scores.setdefault(key, [])
        entries.append(entry)
        # list.sort is stable, so equal move counts keep arrival order.
        entries.sort(key=lambda e: e.moves)
        del entries[MAX_ENTRIES:]
        self.save()
        return list(entries)

    def reset(self) -> None:
        self._scores.clear()
        self.save()

    # -- queries --------------------------------------------------------------

    @property
    def ledger(self) -> dict[str, list[HighScoreEntry]]:
        return {key: list(entries) for key, entries in self._scores.items()}

    def get_scores(self, size: int) -> list[HighScoreEntry]:
        return list(self._scores.get(size_key(size), []))

    def get_all_sizes(self) -> list[int]:
        sizes = (key.split("x", 1)[0] for key, entries in self._scores.items() if entries)
        return sorted(int(s) for s in sizes if s.isdigit())

    def is_high_score(self, size: int, moves: int) -> bool:
        """Return True if a result with *moves* would enter the table."""
        entries = self._scores.get(size_key(size), [])
        return len(entries) < MAX_ENTRIES or moves < entries[-1].moves
