"""Generates the solved and shuffled boards for a session."""

from __future__ import annotations

import random

from gridzen.backend.engine.gamegenerator.colors import generate_distinct_colors
from gridzen.backend.models.board import Board, Tile


class GameGenerator:
    """Builds a target board and a uniformly shuffled copy of its tiles."""

    @staticmethod
    def target(size: int, colors: list[str]) -> Board:
        """Return the goal-state board: cell (i, j) holds ``i * size + j + 1``."""
        tiles: list[list[Tile]] = []
        for i in range(size):
            row: list[Tile] = []
            for j in range(size):
                index = i * size + j
                row.append(Tile(number=index + 1, color=colors[index]))
            tiles.append(row)
        return Board(size=size, tiles=tiles)

    @staticmethod
    def shuffled(target: Board, rng: random.Random | None = None) -> Board:
        """Return a board holding *target*'s tiles in a uniform random order.

        ``random.shuffle`` is a Fisher-Yates shuffle, so every permutation
        is equally likely.  Colors stay bound to their numbers.
        """
        rng = rng or random.Random()
        numbers = list(range(1, target.size * target.size + 1))
        rng.shuffle(numbers)
        return Board.from_numbers(target.size, numbers, target.colors())

    @staticmethod
    def generate(
        size: int, rng: random.Random | None = None
    ) -> tuple[Board, Board]:
        """Return ``(target, initial)`` boards for a *size* × *size* game."""
        rng = rng or random.Random()
        colors = generate_distinct_colors(size * size, rng)
        target = GameGenerator.target(size, colors)
        return target, GameGenerator.shuffled(target, rng)
