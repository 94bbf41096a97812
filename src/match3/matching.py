"""Run detection, scoring, gravity and the cascade resolver.

All functions are pure: they take a grid of tile codes and return new arrays,
leaving the input untouched.  Horizontal and vertical runs are detected
independently over the same input grid, so a tile at the crossing of two runs
is scored by both of them in a single pass.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterator, List, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from .board import Grid
from .tiles import EMPTY


LOGGER = logging.getLogger(__name__)

MIN_RUN = 3

# Exact scores for short runs; longer runs extend the last entry by 10 a tile.
RUN_SCORES = {3: 3, 4: 20, 5: 30, 6: 50}

Mask = NDArray[np.bool_]


def run_score(length: int) -> int:
    """Return the score awarded for a run of ``length`` identical tiles."""

    if length < MIN_RUN:
        return 0
    if length in RUN_SCORES:
        return RUN_SCORES[length]
    return RUN_SCORES[6] + 10 * (length - 6)


@dataclass(frozen=True)
class Run:
    """Maximal line of identical tiles starting at ``(row, col)``."""

    row: int
    col: int
    length: int
    horizontal: bool
    tile: int

    @property
    def score(self) -> int:
        return run_score(self.length)

    @property
    def span(self) -> Tuple[Union[int, slice], Union[int, slice]]:
        """Index expression selecting the run's cells in a grid."""

        if self.horizontal:
            return self.row, slice(self.col, self.col + self.length)
        return slice(self.row, self.row + self.length), self.col


@dataclass(frozen=True)
class RunScan:
    """Result of one detection pass."""

    mask: Mask
    score: int
    runs: Tuple[Run, ...] = ()

    @property
    def cleared(self) -> int:
        return int(np.count_nonzero(self.mask))


@dataclass
class CascadeResult:
    """Outcome of resolving a grid until no pass scores."""

    grid: Grid
    score: int = 0
    passes: int = 0
    pass_scores: List[int] = field(default_factory=list)


def _line_runs(line: NDArray[np.uint8]) -> Iterator[Tuple[int, int]]:
    """Yield ``(start, length)`` for every scoreable run in ``line``."""

    size = len(line)
    start = 0
    while start < size:
        value = line[start]
        end = start + 1
        while end < size and line[end] == value:
            end += 1
        if value != EMPTY and end - start >= MIN_RUN:
            yield start, end - start
        start = end


def find_runs(grid: Grid) -> List[Run]:
    """Return every horizontal and vertical run of three or more tiles."""

    array = np.asarray(grid)
    height, width = array.shape
    runs: List[Run] = []
    for row in range(height):
        for start, length in _line_runs(array[row, :]):
            runs.append(Run(row, start, length, True, int(array[row, start])))
    for col in range(width):
        for start, length in _line_runs(array[:, col]):
            runs.append(Run(start, col, length, False, int(array[start, col])))
    return runs


def detect_runs(grid: Grid) -> RunScan:
    """Return the mask of scored cells and the score of a single pass."""

    array = np.asarray(grid)
    mask = np.zeros(array.shape, dtype=bool)
    runs = find_runs(array)
    score = 0
    for run in runs:
        score += run.score
        mask[run.span] = True
    return RunScan(mask=mask, score=score, runs=tuple(runs))


def clear_scored(grid: Grid, mask: Mask) -> Grid:
    """Return a copy of ``grid`` with every masked cell emptied."""

    cleared = np.array(grid, dtype=np.uint8, copy=True)
    cleared[mask] = EMPTY
    return cleared


def score_tiles(grid: Grid) -> Tuple[Grid, int]:
    """Detect runs, clear them and return ``(new_grid, score)``."""

    scan = detect_runs(grid)
    return clear_scored(grid, scan.mask), scan.score


def apply_gravity(grid: Grid) -> Grid:
    """Drop tiles to the bottom of each column, keeping their order."""

    array = np.asarray(grid, dtype=np.uint8)
    height, width = array.shape
    settled = np.full_like(array, EMPTY)
    for col in range(width):
        column = array[:, col]
        tiles = column[column != EMPTY]
        if tiles.size:
            settled[height - tiles.size :, col] = tiles
    return settled


def is_settled(grid: Grid) -> bool:
    """Return ``True`` if no tile rests directly above an empty cell."""

    array = np.asarray(grid)
    above = array[:-1, :] != EMPTY
    below = array[1:, :] == EMPTY
    return not bool(np.any(above & below))


def resolve_cascade(grid: Grid) -> CascadeResult:
    """Repeat score, clear and gravity until a pass scores nothing.

    Gravity runs in every pass, including the final one, so the result is
    always settled.  Each scoring pass empties at least three cells, so a
    finite grid needs at most ``cells // 3 + 1`` passes.
    """

    current = np.array(grid, dtype=np.uint8, copy=True)
    result = CascadeResult(grid=current)
    limit = current.size // MIN_RUN + 1
    while result.passes < limit:
        cleared, score = score_tiles(current)
        current = apply_gravity(cleared)
        result.passes += 1
        result.pass_scores.append(score)
        result.score += score
        if score == 0:
            break
    result.grid = current
    if result.score:
        LOGGER.debug(
            "Cascade scored %d over %d pass(es): %s",
            result.score,
            result.passes,
            result.pass_scores,
        )
    return result


__all__ = [
    "MIN_RUN",
    "RUN_SCORES",
    "Run",
    "RunScan",
    "CascadeResult",
    "run_score",
    "find_runs",
    "detect_runs",
    "clear_scored",
    "score_tiles",
    "apply_gravity",
    "is_settled",
    "resolve_cascade",
]
