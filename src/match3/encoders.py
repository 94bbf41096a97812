"""State encoders turning a grid and cursor into a Q-table key.

Every encoder is a pure function of ``(grid, cursor)`` returning compact JSON.
Cells are written as their integer tile code with ``0`` for an empty cell;
rows that fall outside the board are ``null`` and adjacency that cannot be
decided because a cell is empty is ``"?"``, so an empty cell never reads the
same as a missing one.

A table trained with one encoder is meaningless under another; the encoder
``name`` travels with saved tables (see :mod:`match3.persistence`).
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Type

import numpy as np

from .board import Cursor, Grid
from .tiles import EMPTY


def _dumps(payload: object) -> str:
    return json.dumps(payload, separators=(",", ":"))


class StateEncoder(ABC):
    """Map a board position to a hashable, comparable state key."""

    name: str = ""

    @abstractmethod
    def encode(self, grid: Grid, cursor: Cursor) -> str:
        raise NotImplementedError

    def __call__(self, grid: Grid, cursor: Cursor) -> str:
        return self.encode(grid, cursor)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class FullGridEncoder(StateEncoder):
    """The entire grid plus the cursor."""

    name = "full"

    def encode(self, grid: Grid, cursor: Cursor) -> str:
        array = np.asarray(grid)
        return _dumps({"grid": array.tolist(), "cursor": [int(cursor[0]), int(cursor[1])]})


class LocalWindowEncoder(StateEncoder):
    """The row above the cursor, the cursor row and the row below."""

    name = "window"

    def encode(self, grid: Grid, cursor: Cursor) -> str:
        array = np.asarray(grid)
        height = array.shape[0]
        row = int(cursor[0])
        rows: List[Optional[List[int]]] = []
        for r in (row - 1, row, row + 1):
            rows.append(array[r].tolist() if 0 <= r < height else None)
        return _dumps({"grid": rows, "cursor": [row, int(cursor[1])]})


def _pair(a: int, b: int) -> str:
    if a == EMPTY or b == EMPTY:
        return "?"
    return "T" if a == b else "F"


class AdjacencyEncoder(StateEncoder):
    """Equality of neighbouring cells in the bottom ``rows`` rows.

    Each horizontal and vertical neighbour pair becomes ``T`` (same tile),
    ``F`` (different tiles) or ``?`` (either side empty).  Tile identities are
    dropped, which keeps the state space small at the cost of precision.
    """

    name = "adjacency"

    def __init__(self, rows: int = 3) -> None:
        if rows < 1:
            raise ValueError("rows must be at least 1")
        self.rows = rows

    def encode(self, grid: Grid, cursor: Cursor) -> str:
        array = np.asarray(grid)
        window = array[-self.rows :]
        height, width = window.shape
        horizontal = "".join(
            _pair(window[r, c], window[r, c + 1])
            for r in range(height)
            for c in range(width - 1)
        )
        vertical = "".join(
            _pair(window[r, c], window[r + 1, c])
            for r in range(height - 1)
            for c in range(width)
        )
        return _dumps(
            {"h": horizontal, "v": vertical, "cursor": [int(cursor[0]), int(cursor[1])]}
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(rows={self.rows})"


ENCODERS: Dict[str, Type[StateEncoder]] = {
    FullGridEncoder.name: FullGridEncoder,
    LocalWindowEncoder.name: LocalWindowEncoder,
    AdjacencyEncoder.name: AdjacencyEncoder,
}


def make_encoder(name: str, **kwargs) -> StateEncoder:
    """Instantiate the encoder registered under ``name``."""

    try:
        cls = ENCODERS[name]
    except KeyError:
        raise ValueError(
            f"Unknown encoder {name!r}; choose from {sorted(ENCODERS)}"
        ) from None
    return cls(**kwargs)


__all__ = [
    "ENCODERS",
    "AdjacencyEncoder",
    "FullGridEncoder",
    "LocalWindowEncoder",
    "StateEncoder",
    "make_encoder",
]
