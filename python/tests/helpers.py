"""Shared test doubles and board builders."""

from __future__ import annotations

from gridzen.backend.models.board import Board
from gridzen.backend.storage.store import MemoryStore, StoreError


class FailingStore(MemoryStore):
    """A store whose every read and write fails."""

    def get(self, key):
        raise StoreError(f"cannot read {key}")

    def set(self, key, value):
        raise StoreError(f"cannot write {key}")

    def remove(self, key):
        raise StoreError(f"cannot remove {key}")


class RecordingSoundPlayer:
    def __init__(self) -> None:
        self.played: list[str] = []

    def play(self, sound) -> None:
        self.played.append(sound)


def near_solved(target: Board, a: int = 1, b: int = 2) -> Board:
    """Return *target* with the tiles numbered *a* and *b* exchanged."""
    numbers = target.numbers()
    i, j = numbers.index(a), numbers.index(b)
    numbers[i], numbers[j] = numbers[j], numbers[i]
    return Board.from_numbers(target.size, numbers, target.colors())
