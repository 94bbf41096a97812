from __future__ import annotations

import logging
import random

import numpy as np
import pytest

from match3.generator import RowGenerator, RowOutcome
from match3.matching import detect_runs


def test_generated_rows_never_hold_three_in_a_row() -> None:
    generator = RowGenerator((1, 2), rng=random.Random(5))
    for _ in range(200):
        row = generator.generate_row(8)
        assert set(row.tolist()) <= {1, 2}
        for idx in range(2, len(row)):
            assert not (row[idx] == row[idx - 1] == row[idx - 2])


def test_seeded_generators_agree() -> None:
    first = RowGenerator((1, 2, 3), rng=random.Random(9))
    second = RowGenerator((1, 2, 3), rng=random.Random(9))
    for _ in range(10):
        np.testing.assert_array_equal(first.generate_row(6), second.generate_row(6))


def test_append_row_leaves_match_free_bottom() -> None:
    generator = RowGenerator((1, 2), rng=random.Random(1))
    grid = np.zeros((4, 3), dtype=np.uint8)
    cursor = (3, 0)
    for _ in range(3):
        result = generator.append_row(grid, cursor)
        assert result.outcome is RowOutcome.ACCEPTED
        assert result.grid.shape == (4, 3)
        assert detect_runs(result.grid[-3:]).score == 0
        grid, cursor = result.grid, result.cursor
    assert cursor == (0, 0)


def test_append_row_sheds_top_row_and_moves_cursor_up() -> None:
    generator = RowGenerator((1, 2), rng=random.Random(2))
    grid = np.zeros((4, 3), dtype=np.uint8)
    grid[1] = [1, 2, 1]
    grid[0] = [2, 2, 1]
    result = generator.append_row(grid, (2, 1))
    np.testing.assert_array_equal(result.grid[0], [1, 2, 1])
    assert result.cursor == (1, 1)
    assert result.attempts >= 1


def test_cursor_on_top_row_stays_put() -> None:
    generator = RowGenerator((1, 2), rng=random.Random(2))
    result = generator.append_row(np.zeros((3, 3), dtype=np.uint8), (0, 1))
    assert result.cursor == (0, 1)


def test_exhaustion_accepts_last_candidate_and_warns(caplog) -> None:
    generator = RowGenerator((1, 2), rng=random.Random(0), max_attempts=5)
    grid = np.zeros((4, 3), dtype=np.uint8)
    # The bottom rows already hold runs, so every candidate window scores.
    grid[2] = [1, 1, 1]
    grid[3] = [2, 2, 2]
    with caplog.at_level(logging.WARNING, logger="match3.generator"):
        result = generator.append_row(grid, (3, 0))
    assert result.outcome is RowOutcome.EXHAUSTED
    assert result.exhausted
    assert result.attempts == 5
    assert result.grid.shape == (4, 3)
    assert set(result.grid[3].tolist()) <= {1, 2}
    assert "5 attempts" in caplog.text


def test_generator_needs_two_codes() -> None:
    with pytest.raises(ValueError):
        RowGenerator((1,))
