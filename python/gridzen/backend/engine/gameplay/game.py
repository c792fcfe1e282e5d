"""Core gameplay logic: selection, swaps, and the win condition."""

from __future__ import annotations

import random
from enum import StrEnum

from gridzen.backend.engine.gamegenerator import GameGenerator
from gridzen.backend.models.board import Board

Cell = tuple[int, int]


class MoveOutcome(StrEnum):
    SELECTED = "selected"
    DESELECTED = "deselected"
    RESELECTED = "reselected"
    SWAPPED = "swapped"


class GamePlay:
    """Tracks one board, the current selection, and the move counter."""

    def __init__(self, target: Board, board: Board) -> None:
        if target.size != board.size:
            raise ValueError("Target and board sizes differ.")
        self.size = board.size
        self.target = target
        self.board = board
        self.selection: Cell | None = None
        self.moves: int = 0
        self._won = False

    @classmethod
    def new(cls, size: int, rng: random.Random | None = None) -> GamePlay:
        target, initial = GameGenerator.generate(size, rng)
        return cls(target, initial)

    # -- movement -------------------------------------------------------------

    def select_tile(self, row: int, col: int) -> MoveOutcome:
        """Tap the tile at (row, col).

        The first tap selects, tapping the selection again clears it, and
        tapping an orthogonal neighbour swaps the two tiles.  Any other tap
        moves the selection without swapping.
        """
        self.board.get_tile(row, col)  # bounds check

        if self.selection is None:
            self.selection = (row, col)
            return MoveOutcome.SELECTED

        if self.selection == (row, col):
            self.selection = None
            return MoveOutcome.DESELECTED

        if not self.is_adjacent(self.selection, (row, col)):
            self.selection = (row, col)
            return MoveOutcome.RESELECTED

        self.board.swap(self.selection, (row, col))
        self.moves += 1
        self.selection = None
        self._won = self.board.is_solved()
        return MoveOutcome.SWAPPED

    @staticmethod
    def is_adjacent(a: Cell, b: Cell) -> bool:
        """True for up/down/left/right neighbours, never diagonals."""
        return abs(a[0] - b[0]) + abs(a[1] - b[1]) == 1

    # -- queries --------------------------------------------------------------

    @property
    def is_won(self) -> bool:
        """Result of the win check made after the most recent swap."""
        return self._won
