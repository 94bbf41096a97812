"""Constrained random generation of the rows pushed in from the bottom."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

import numpy as np
from numpy.typing import NDArray

from .board import Cursor, Grid
from .matching import detect_runs


LOGGER = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 100


class RowOutcome(str, Enum):
    """How the appended row was obtained."""

    ACCEPTED = "accepted"
    EXHAUSTED = "exhausted"


@dataclass(frozen=True)
class AppendResult:
    """New grid and cursor after a row insertion."""

    grid: Grid
    cursor: Cursor
    outcome: RowOutcome
    attempts: int

    @property
    def exhausted(self) -> bool:
        return self.outcome is RowOutcome.EXHAUSTED


class RowGenerator:
    """Produce rows that do not complete a run with the rows above them.

    ``rng`` defaults to :class:`random.SystemRandom`; pass a seeded
    :class:`random.Random` for reproducible boards.
    """

    def __init__(
        self,
        codes: Sequence[int],
        *,
        rng: Optional[random.Random] = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> None:
        if len(codes) < 2:
            raise ValueError("Row generation needs at least two tile codes")
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.codes = tuple(int(c) for c in codes)
        self.max_attempts = max_attempts
        self._rng = rng or random.SystemRandom()

    def generate_row(self, width: int) -> NDArray[np.uint8]:
        """Return a row with no three identical tiles placed in a row."""

        row = np.zeros(width, dtype=np.uint8)
        for idx in range(width):
            tile = self._rng.choice(self.codes)
            if idx > 1 and row[idx - 2] == tile and row[idx - 1] == tile:
                tile = self._rng.choice([c for c in self.codes if c != tile])
            row[idx] = tile
        return row

    def append_row(self, grid: Grid, cursor: Cursor) -> AppendResult:
        """Shed the top row and push a fresh row in at the bottom.

        Candidates are rejected while the bottom two rows plus the candidate
        contain a scoreable run.  After ``max_attempts`` the last candidate is
        accepted anyway and the result is tagged ``EXHAUSTED``.
        """

        array = np.asarray(grid, dtype=np.uint8)
        _, width = array.shape
        shifted = array[1:]
        context = shifted[-2:]

        outcome = RowOutcome.EXHAUSTED
        attempts = 0
        row = None
        while attempts < self.max_attempts:
            attempts += 1
            row = self.generate_row(width)
            window = np.vstack((context, row[np.newaxis, :]))
            if detect_runs(window).score == 0:
                outcome = RowOutcome.ACCEPTED
                break

        if outcome is RowOutcome.EXHAUSTED:
            LOGGER.warning(
                "No match-free row found after %d attempts; accepting last candidate",
                attempts,
            )

        new_grid = np.vstack((shifted, row[np.newaxis, :]))
        row_idx, col_idx = cursor
        # Keep the cursor on the same tiles as the board shifts upward.
        if row_idx > 0:
            row_idx -= 1
        return AppendResult(
            grid=new_grid,
            cursor=(row_idx, col_idx),
            outcome=outcome,
            attempts=attempts,
        )


__all__ = ["AppendResult", "RowGenerator", "RowOutcome", "DEFAULT_MAX_ATTEMPTS"]
