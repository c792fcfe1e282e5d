"""Board model for the GridZen swap puzzle."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Tile:
    """A numbered, colored tile. Only its position on the board changes."""

    number: int
    color: str


@dataclass
class Board:
    """Represents the puzzle grid.

    Tiles are stored as a 2D list, row-major. Every number in
    ``1..size*size`` appears exactly once.
    """

    size: int
    tiles: list[list[Tile]]

    # -- construction helpers -------------------------------------------------

    @classmethod
    def from_numbers(
        cls, size: int, numbers: list[int], colors: dict[int, str]
    ) -> Board:
        """Create a board from a flat row-major number list.

        *colors* maps each number to the color it carries.

        Example::

            Board.from_numbers(2, [2, 1, 3, 4], {1: "hsl(0, 80%, 50%)", ...})
        """
        if len(numbers) != size * size:
            raise ValueError(
                f"Expected {size * size} tiles for a {size}×{size} board, "
                f"got {len(numbers)}."
            )
        if sorted(numbers) != list(range(1, size * size + 1)):
            raise ValueError(
                f"Numbers must be a permutation of 1..{size * size}."
            )
        tiles: list[list[Tile]] = []
        for r in range(size):
            row = numbers[r * size : (r + 1) * size]
            tiles.append([Tile(number=n, color=colors[n]) for n in row])
        return cls(size=size, tiles=tiles)

    # -- queries --------------------------------------------------------------

    def get_tile(self, row: int, col: int) -> Tile:
        if not (0 <= row < self.size and 0 <= col < self.size):
            raise IndexError(f"Cell ({row}, {col}) is off a {self.size}×{self.size} board.")
        return self.tiles[row][col]

    def numbers(self) -> list[int]:
        """Return the tile numbers in row-major order."""
        return [tile.number for row in self.tiles for tile in row]

    def colors(self) -> dict[int, str]:
        return {tile.number: tile.color for row in self.tiles for tile in row}

    def is_solved(self) -> bool:
        """Check if a row-major scan visits 1, 2, ..., size*size in order."""
        expected = 1
        for row in self.tiles:
            for tile in row:
                if tile.number != expected:
                    return False
                expected += 1
        return True

    def is_tile_correct(self, row: int, col: int) -> bool:
        """Check if a specific tile is in its goal position."""
        return self.tiles[row][col].number == row * self.size + col + 1

    # -- mutation -------------------------------------------------------------

    def swap(self, a: tuple[int, int], b: tuple[int, int]) -> None:
        (ar, ac), (br, bc) = a, b
        self.tiles[ar][ac], self.tiles[br][bc] = (
            self.tiles[br][bc],
            self.tiles[ar][ac],
        )

    def copy(self) -> Board:
        return Board(size=self.size, tiles=[row[:] for row in self.tiles])
