"""High level game state container."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .board import Board, Cursor, Grid
from .config import GameConfig


class GameStatus(str, Enum):
    IDLE = "idle"
    PLAYING = "playing"
    GAME_OVER = "game_over"


@dataclass
class GameSession:
    """Mutable state for one match-3 game.

    Owned by :class:`match3.game.Game`; everything outside the game sees it
    only through :class:`GameSnapshot`.
    """

    board: Board
    cursor: Cursor = (0, 0)
    score: int = 0
    elapsed_ms: int = 0
    row_accum_ms: int = 0
    rows_inserted: int = 0

    @classmethod
    def empty(cls, config: GameConfig) -> "GameSession":
        return cls(board=Board(*config.shape))

    def snapshot(self, status: GameStatus) -> "GameSnapshot":
        return GameSnapshot(
            grid=self.board.snapshot(),
            cursor=self.cursor,
            score=self.score,
            status=status,
            elapsed_ms=self.elapsed_ms,
        )


@dataclass(frozen=True, eq=False)
class GameSnapshot:
    """Read-only view of a session handed to renderers, bots and trainers."""

    grid: Grid
    cursor: Cursor
    score: int
    status: GameStatus = GameStatus.IDLE
    elapsed_ms: int = 0

    @property
    def playing(self) -> bool:
        return self.status is GameStatus.PLAYING

    @property
    def game_over(self) -> bool:
        return self.status is GameStatus.GAME_OVER


__all__ = ["GameSession", "GameSnapshot", "GameStatus"]
