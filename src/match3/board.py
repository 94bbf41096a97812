"""Board representation for the match-3 playfield."""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

from .tiles import EMPTY, TileSet


Grid = NDArray[np.uint8]

# ``(row, col)`` of the left cell of the swappable pair.
Cursor = Tuple[int, int]


def create_empty_grid(height: int, width: int) -> Grid:
    """Return a new empty grid filled with ``EMPTY``."""

    return np.full((height, width), EMPTY, dtype=np.uint8)


def cursor_in_bounds(cursor: Cursor, height: int, width: int) -> bool:
    """Return ``True`` if ``cursor`` selects two cells inside the grid."""

    row, col = cursor
    return 0 <= row < height and 0 <= col < width - 1


class Board:
    """Fixed-size grid of tile codes, row ``0`` at the top."""

    def __init__(self, height: int, width: int, grid: Optional[Grid] = None) -> None:
        if height < 1 or width < 2:
            raise ValueError("Board needs at least one row and two columns")
        self._height = height
        self._width = width
        self.grid: Grid = create_empty_grid(height, width)
        if grid is not None:
            self.replace_grid(grid)

    @property
    def height(self) -> int:
        return self._height

    @property
    def width(self) -> int:
        return self._width

    def cell_at(self, row: int, col: int) -> int:
        """Safely return the code at ``(row, col)``.

        Raises:
            IndexError: If the coordinates are outside the board.
        """
        if 0 <= row < self.height and 0 <= col < self.width:
            return int(self.grid[row, col])
        raise IndexError("Cell out of bounds")

    def set_cell(self, row: int, col: int, value: int) -> None:
        """Safely set the code at ``(row, col)``.

        Raises:
            IndexError: If the coordinates are outside the board.
        """
        if 0 <= row < self.height and 0 <= col < self.width:
            self.grid[row, col] = np.uint8(value)
        else:
            raise IndexError("Cell out of bounds")

    def is_empty(self, row: int, col: int) -> bool:
        return self.cell_at(row, col) == EMPTY

    def swap(self, cursor: Cursor) -> Tuple[int, int]:
        """Exchange the two cells under ``cursor``.

        Returns the ``(left, right)`` codes as they were before the swap.

        Raises:
            IndexError: If the cursor pair is not fully on the board.
        """
        if not cursor_in_bounds(cursor, self.height, self.width):
            raise IndexError("Cursor out of bounds")
        row, col = cursor
        left = int(self.grid[row, col])
        right = int(self.grid[row, col + 1])
        self.grid[row, col] = right
        self.grid[row, col + 1] = left
        return left, right

    def is_top_row_empty(self) -> bool:
        """Return ``True`` while the top row holds no tiles."""

        return bool(np.all(self.grid[0] == EMPTY))

    def replace_grid(self, grid: Grid) -> None:
        """Install ``grid`` as the board contents.

        Raises:
            ValueError: If ``grid`` would change the board dimensions.
        """
        array = np.asarray(grid, dtype=np.uint8)
        if array.shape != (self.height, self.width):
            raise ValueError(
                f"Grid shape {array.shape} does not match board {(self.height, self.width)}"
            )
        self.grid = array.copy()

    def snapshot(self) -> Grid:
        """Return a read-only copy of the grid."""

        view = self.grid.copy()
        view.setflags(write=False)
        return view

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[Optional[str]]], tiles: TileSet) -> "Board":
        """Build a board from rows of symbols; ``None`` or ``"."`` is empty."""

        if not rows:
            raise ValueError("At least one row is required")
        width = len(rows[0])
        if any(len(row) != width for row in rows):
            raise ValueError("All rows must have the same width")
        board = cls(len(rows), width)
        for r, row in enumerate(rows):
            for c, symbol in enumerate(row):
                board.grid[r, c] = tiles.code_for(symbol)
        return board

    def to_rows(self, tiles: TileSet) -> List[List[Optional[str]]]:
        """Return the grid as rows of symbols with ``None`` for empty cells."""

        return [[tiles.symbol_for(v) for v in row] for row in self.grid]


__all__ = ["Board", "Cursor", "Grid", "create_empty_grid", "cursor_in_bounds"]
