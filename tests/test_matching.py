from __future__ import annotations

import random

import numpy as np
import pytest

from match3.board import Board
from match3.matching import (
    apply_gravity,
    detect_runs,
    is_settled,
    resolve_cascade,
    run_score,
    score_tiles,
)
from match3.tiles import EMPTY, TileSet

TILES = TileSet(("a", "b"))


def grid_of(*rows: str) -> np.ndarray:
    return Board.from_rows([list(row) for row in rows], TILES).grid


def random_grid(rng: random.Random, height: int, width: int) -> np.ndarray:
    return np.array(
        [[rng.choice([0, 1, 2, 3]) for _ in range(width)] for _ in range(height)],
        dtype=np.uint8,
    )


@pytest.mark.parametrize(
    "length, expected",
    [(1, 0), (2, 0), (3, 3), (4, 20), (5, 30), (6, 50), (7, 60), (9, 80)],
)
def test_run_score_table(length: int, expected: int) -> None:
    assert run_score(length) == expected


def test_two_horizontal_runs_clear_bottom_rows() -> None:
    grid = grid_of("aba", "bab", "aaa", "bbb")
    scan = detect_runs(grid)
    assert scan.score == 6
    assert scan.mask[2:].all()
    assert not scan.mask[:2].any()

    cleared, score = score_tiles(grid)
    assert score == 6
    assert (cleared[2:] == EMPTY).all()
    np.testing.assert_array_equal(cleared[:2], grid[:2])


def test_crossing_tile_counts_in_both_directions() -> None:
    grid = grid_of("aaa", "abb", "abb")
    scan = detect_runs(grid)
    assert scan.score == 6
    assert scan.cleared == 5
    assert len(scan.runs) == 2
    for run in scan.runs:
        cells = grid[run.span]
        assert cells.size == run.length
        assert (cells == run.tile).all()


def test_long_run_scores_from_table() -> None:
    grid = grid_of("aaaab")
    scan = detect_runs(grid)
    assert scan.score == 20
    assert scan.mask[0].tolist() == [True, True, True, True, False]


def test_empty_cells_never_form_runs() -> None:
    grid = grid_of("...", "...", "ab.")
    assert detect_runs(grid).score == 0


def test_detection_does_not_mutate_input() -> None:
    grid = grid_of("aaa", "bab")
    original = grid.copy()
    score_tiles(grid)
    np.testing.assert_array_equal(grid, original)


def test_gravity_compacts_columns_in_order() -> None:
    grid = grid_of("a.", ".b", "b.", "..")
    settled = apply_gravity(grid)
    expected = grid_of("..", "..", "a.", "bb")
    np.testing.assert_array_equal(settled, expected)


def test_gravity_always_settles_random_grids() -> None:
    rng = random.Random(3)
    for _ in range(50):
        grid = random_grid(rng, 6, 5)
        settled = apply_gravity(grid)
        assert is_settled(settled)
        for col in range(grid.shape[1]):
            before = [v for v in grid[:, col] if v != EMPTY]
            after = [v for v in settled[:, col] if v != EMPTY]
            assert before == after


def test_cascade_resolves_chain_reaction() -> None:
    grid = grid_of(".b.", ".a.", "bab", "aaa")
    result = resolve_cascade(grid)
    assert result.pass_scores == [6, 3, 0]
    assert result.score == 9
    assert result.passes == 3
    assert (result.grid == EMPTY).all()


def test_cascade_without_runs_still_applies_gravity() -> None:
    grid = grid_of("a..", "...", "b..")
    result = resolve_cascade(grid)
    assert result.score == 0
    assert result.pass_scores == [0]
    np.testing.assert_array_equal(result.grid, grid_of("...", "a..", "b.."))


def test_cascade_terminates_on_random_grids() -> None:
    rng = random.Random(11)
    for _ in range(50):
        grid = random_grid(rng, 8, 6)
        result = resolve_cascade(grid)
        assert result.passes <= grid.size // 3 + 1
        assert result.pass_scores[-1] == 0
        assert all(score >= 0 for score in result.pass_scores)
        assert is_settled(result.grid)


def test_unscored_pass_ends_cascade_after_gravity() -> None:
    grid = grid_of(".a.", "...", "bab", "aab")
    result = resolve_cascade(grid)
    # The floating "a" lands on column 1 but the cascade already ended.
    assert result.pass_scores == [0]
    assert result.score == 0
    assert is_settled(result.grid)
    assert result.grid[:, 1].tolist() == [0, 1, 1, 1]


def test_settled_grid_without_runs_is_one_pass() -> None:
    grid = grid_of("...", "ab.", "ba.")
    result = resolve_cascade(grid)
    assert result.passes == 1
    np.testing.assert_array_equal(result.grid, grid)
