"""Tile alphabet and the integer codes stored in the grid."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

# Code stored in the grid for an empty cell.  Tile symbols map to ``1..n``.
EMPTY = 0

# How an empty cell is drawn by text renderers.
EMPTY_SYMBOL = "."

MAX_TILES = 254


@dataclass(frozen=True)
class TileSet:
    """Ordered, closed alphabet of tile symbols."""

    symbols: Tuple[str, ...]

    def __post_init__(self) -> None:
        symbols = tuple(self.symbols)
        object.__setattr__(self, "symbols", symbols)
        if len(symbols) < 2:
            raise ValueError("A tile set needs at least two symbols")
        if len(symbols) > MAX_TILES:
            raise ValueError(f"A tile set holds at most {MAX_TILES} symbols")
        if len(set(symbols)) != len(symbols):
            raise ValueError("Tile symbols must be unique")
        for symbol in symbols:
            if not isinstance(symbol, str) or not symbol:
                raise ValueError("Tile symbols must be non-empty strings")
            if symbol == EMPTY_SYMBOL:
                raise ValueError(f"{EMPTY_SYMBOL!r} is reserved for empty cells")

    def __len__(self) -> int:
        return len(self.symbols)

    @property
    def codes(self) -> Tuple[int, ...]:
        """Return the grid codes of every tile, in alphabet order."""

        return tuple(range(1, len(self.symbols) + 1))

    def code_for(self, symbol: Optional[str]) -> int:
        """Return the grid code for ``symbol``; ``None`` and ``"."`` are empty."""

        if symbol is None or symbol == EMPTY_SYMBOL:
            return EMPTY
        try:
            return self.symbols.index(symbol) + 1
        except ValueError:
            raise ValueError(f"Unknown tile symbol: {symbol!r}") from None

    def symbol_for(self, code: int) -> Optional[str]:
        """Return the symbol for ``code`` or ``None`` for an empty cell."""

        code = int(code)
        if code == EMPTY:
            return None
        if 1 <= code <= len(self.symbols):
            return self.symbols[code - 1]
        raise ValueError(f"Unknown tile code: {code}")


__all__ = ["EMPTY", "EMPTY_SYMBOL", "TileSet"]
