from __future__ import annotations

import numpy as np
import pytest

from match3.board import Board
from match3.tiles import EMPTY, TileSet

TILES = TileSet(("a", "b"))


def test_cell_access_checks_bounds() -> None:
    board = Board(4, 3)
    board.set_cell(3, 2, 1)
    assert board.cell_at(3, 2) == 1
    assert board.is_empty(0, 0)
    with pytest.raises(IndexError):
        board.cell_at(4, 0)
    with pytest.raises(IndexError):
        board.set_cell(0, 3, 1)


def test_swap_exchanges_cursor_pair() -> None:
    board = Board.from_rows([["a", "b", "."], [".", ".", "."]], TILES)
    before = board.swap((0, 0))
    assert before == (1, 2)
    assert board.to_rows(TILES)[0] == ["b", "a", None]


def test_swap_rejects_cursor_on_last_column() -> None:
    board = Board(2, 3)
    with pytest.raises(IndexError):
        board.swap((0, 2))


def test_top_row_predicate() -> None:
    board = Board(3, 3)
    assert board.is_top_row_empty()
    board.set_cell(0, 1, 2)
    assert not board.is_top_row_empty()


def test_dimensions_are_fixed() -> None:
    board = Board(3, 3)
    with pytest.raises(ValueError):
        board.replace_grid(np.zeros((4, 3), dtype=np.uint8))


def test_snapshot_is_read_only_copy() -> None:
    board = Board(2, 2)
    view = board.snapshot()
    with pytest.raises(ValueError):
        view[0, 0] = 1
    board.set_cell(0, 0, 1)
    assert view[0, 0] == EMPTY


def test_from_rows_rejects_ragged_rows() -> None:
    with pytest.raises(ValueError):
        Board.from_rows([["a", "b"], ["a"]], TILES)
