"""Rendering helpers for the match-3 engine."""

from __future__ import annotations

from typing import List, Optional

import numpy as np

from .board import Cursor, Grid
from .tiles import EMPTY_SYMBOL, TileSet


def render_grid(grid: Grid, tiles: TileSet) -> List[List[Optional[str]]]:
    """Return a copy of ``grid`` as rows of tile symbols.

    Empty cells become ``None``.  Renderers draw from this copy, so nothing
    they do can reach the live board.
    """

    return [[tiles.symbol_for(v) for v in row] for row in np.asarray(grid)]


def render_ascii(grid: Grid, tiles: TileSet, cursor: Optional[Cursor] = None) -> str:
    """Return a text frame, bracketing the cursor pair when given."""

    lines = []
    for r, row in enumerate(render_grid(grid, tiles)):
        symbols = [symbol or EMPTY_SYMBOL for symbol in row]
        cells = [f" {s} " for s in symbols]
        if cursor is not None and r == cursor[0]:
            col = cursor[1]
            cells[col] = f"[{symbols[col]} "
            cells[col + 1] = f" {symbols[col + 1]}]"
        lines.append("".join(cells).rstrip())
    return "\n".join(lines)
