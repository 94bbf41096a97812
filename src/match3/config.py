"""Immutable game configuration and the stock presets."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

from .tiles import TileSet


@dataclass(frozen=True)
class GameConfig:
    """Settings for one game or training episode.

    ``height`` and ``width`` are measured in cells.  Every
    ``ms_between_renders`` the game clock advances by one tick and every
    ``ms_between_row_insert`` of accumulated time a new row is pushed in from
    the bottom.  ``max_row_attempts`` bounds the constrained row generator.

    Raises:
        ValueError: If the configuration cannot describe a playable board.
    """

    tiles: Tuple[str, ...] = ("z", "i", "e", "w", "a")
    height: int = 12
    width: int = 6
    starter_rows: int = 4
    ms_between_renders: int = 20
    ms_between_row_insert: int = 3_000
    max_row_attempts: int = 100
    tile_set: TileSet = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "tiles", tuple(self.tiles))
        object.__setattr__(self, "tile_set", TileSet(self.tiles))
        if self.width < 2:
            raise ValueError("Grid width must be at least 2 to hold a cursor pair")
        if self.height < 1:
            raise ValueError("Grid height must be at least 1")
        if not 0 <= self.starter_rows <= self.height:
            raise ValueError("starter_rows must be between 0 and the grid height")
        if self.ms_between_renders <= 0 or self.ms_between_row_insert <= 0:
            raise ValueError("Tick intervals must be positive")
        if self.max_row_attempts < 1:
            raise ValueError("max_row_attempts must be at least 1")

    @property
    def shape(self) -> Tuple[int, int]:
        return (self.height, self.width)


DEFAULT_CONFIG = GameConfig()

# Small board used for headless Q-learning: few states, fast episodes.
TRAINING_CONFIG = GameConfig(
    tiles=("z", "a"),
    height=4,
    width=3,
    starter_rows=1,
    ms_between_renders=1,
    ms_between_row_insert=10,
)


__all__ = ["GameConfig", "DEFAULT_CONFIG", "TRAINING_CONFIG"]
