"""Game state machine: ticks, cursor movement, swaps and game over.

A :class:`Game` moves through ``IDLE -> PLAYING -> GAME_OVER``.  While playing,
each tick advances the clock by ``ms_between_renders``; once
``ms_between_row_insert`` has accumulated the game either ends (top row
occupied) or pushes a new row in from the bottom.  Player input arrives as
action tokens through :meth:`Game.handle_action`; anything that is not a
valid action for the current state is ignored.

Example usage
-------------

>>> import random
>>> from match3.game import Game
>>> from match3.config import TRAINING_CONFIG
>>> game = Game(TRAINING_CONFIG, rng=random.Random(0))
>>> game.start()
>>> game.playing
True
>>> game.handle_action("swap")
True
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple, Union

import numpy as np

from .board import Board, Cursor, Grid, cursor_in_bounds
from .config import DEFAULT_CONFIG, GameConfig
from .game_state import GameSession, GameSnapshot, GameStatus
from .generator import AppendResult, RowGenerator
from .matching import resolve_cascade
from .scheduler import Ticker


LOGGER = logging.getLogger(__name__)


class Direction(str, Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


_DELTAS = {
    Direction.UP: (-1, 0),
    Direction.DOWN: (1, 0),
    Direction.LEFT: (0, -1),
    Direction.RIGHT: (0, 1),
}


class Action(str, Enum):
    """Input vocabulary shared by keyboards, bots and agents."""

    MOVE_UP = "moveUp"
    MOVE_DOWN = "moveDown"
    MOVE_LEFT = "moveLeft"
    MOVE_RIGHT = "moveRight"
    SWAP = "swap"
    RESTART = "restart"

    @property
    def direction(self) -> Optional[Direction]:
        return _ACTION_DIRECTIONS.get(self)


_ACTION_DIRECTIONS = {
    Action.MOVE_UP: Direction.UP,
    Action.MOVE_DOWN: Direction.DOWN,
    Action.MOVE_LEFT: Direction.LEFT,
    Action.MOVE_RIGHT: Direction.RIGHT,
}

# Actions available to agents; restarting is left to the trainer.
ALLOWED_MOVES: Tuple[str, ...] = (
    Action.MOVE_UP.value,
    Action.MOVE_DOWN.value,
    Action.MOVE_LEFT.value,
    Action.MOVE_RIGHT.value,
    Action.SWAP.value,
)


def parse_action(token: Union[str, Action, None]) -> Optional[Action]:
    """Return the :class:`Action` for ``token`` or ``None`` if unrecognised."""

    if isinstance(token, Action):
        return token
    try:
        return Action(token)
    except ValueError:
        return None


@dataclass(frozen=True)
class SwapOutcome:
    """What a single swap did to the board."""

    left: int
    right: int
    score: int
    passes: int

    @property
    def identical(self) -> bool:
        return self.left == self.right


class Game:
    """Match-3 game driven by a tick source and player actions.

    ``rng`` feeds the row generator (cryptographic by default).  ``ticker``
    is started on :meth:`start` and cancelled on game over or :meth:`stop`;
    without one, the owner calls :meth:`tick` itself.
    """

    def __init__(
        self,
        config: GameConfig = DEFAULT_CONFIG,
        *,
        rng: Optional[random.Random] = None,
        ticker: Optional[Ticker] = None,
    ) -> None:
        self.config = config
        self._generator = RowGenerator(
            config.tile_set.codes, rng=rng, max_attempts=config.max_row_attempts
        )
        self._ticker = ticker
        self._status = GameStatus.IDLE
        self._session = GameSession.empty(config)
        self._resolving = False
        self.last_append: Optional[AppendResult] = None
        self.exhausted_rows = 0

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------
    @property
    def status(self) -> GameStatus:
        return self._status

    @property
    def playing(self) -> bool:
        return self._status is GameStatus.PLAYING

    @property
    def grid(self) -> Grid:
        """Read-only copy of the board."""

        return self._session.board.snapshot()

    @property
    def cursor(self) -> Cursor:
        return self._session.cursor

    @property
    def score(self) -> int:
        return self._session.score

    @property
    def elapsed_ms(self) -> int:
        return self._session.elapsed_ms

    @property
    def is_game_over(self) -> bool:
        """``True`` once a tile sits in the top row."""

        return not self._session.board.is_top_row_empty()

    def snapshot(self) -> GameSnapshot:
        return self._session.snapshot(self._status)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def start(self) -> None:
        """Begin a new game; ignored unless the game is idle."""

        if self._status is not GameStatus.IDLE:
            return
        self._session = GameSession.empty(self.config)
        self._reset_grid()
        self._status = GameStatus.PLAYING
        if self._ticker is not None:
            self._ticker.start(self.tick, self.config.ms_between_renders)
        LOGGER.debug("Game started with cursor at %s", self._session.cursor)

    def stop(self) -> None:
        """Cancel the tick source and leave the playing state.

        Safe to call repeatedly.  A finished game stays in ``GAME_OVER``.
        """

        if self._ticker is not None:
            self._ticker.cancel()
        if self._status is GameStatus.PLAYING:
            self._status = GameStatus.IDLE
            LOGGER.debug("Game stopped with score %d", self._session.score)

    def restart(self) -> None:
        """Discard the current session and start a fresh one."""

        self.stop()
        self._status = GameStatus.IDLE
        self._resolving = False
        self.start()

    def _reset_grid(self) -> None:
        session = self._session
        for _ in range(self.config.starter_rows):
            self._append_row()
        session.cursor = (
            min(self.config.height - self.config.starter_rows, self.config.height - 1),
            self.config.width // 2 - 1,
        )

    def _append_row(self) -> AppendResult:
        session = self._session
        result = self._generator.append_row(session.board.grid, session.cursor)
        session.board.replace_grid(result.grid)
        session.cursor = result.cursor
        session.rows_inserted += 1
        self.last_append = result
        if result.exhausted:
            self.exhausted_rows += 1
        return result

    def _game_over(self) -> None:
        self._status = GameStatus.GAME_OVER
        if self._ticker is not None:
            self._ticker.cancel()
        LOGGER.debug(
            "Game over after %d ms with score %d",
            self._session.elapsed_ms,
            self._session.score,
        )

    # ------------------------------------------------------------------
    # Clock
    # ------------------------------------------------------------------
    def tick(self) -> None:
        """Advance the clock by one render interval."""

        if self._status is not GameStatus.PLAYING:
            return
        session = self._session
        step = self.config.ms_between_renders
        session.elapsed_ms += step
        session.row_accum_ms += step
        if session.row_accum_ms < self.config.ms_between_row_insert:
            return
        session.row_accum_ms -= self.config.ms_between_row_insert
        if self.is_game_over:
            self._game_over()
            return
        self._append_row()

    # ------------------------------------------------------------------
    # Player actions
    # ------------------------------------------------------------------
    def allowed_moves(self) -> List[Direction]:
        """Return the directions the cursor may move in."""

        row, col = self._session.cursor
        directions: List[Direction] = []
        if row > 0:
            directions.append(Direction.UP)
        if row < self.config.height - 1:
            directions.append(Direction.DOWN)
        if col > 0:
            directions.append(Direction.LEFT)
        if col < self.config.width - 2:
            directions.append(Direction.RIGHT)
        return directions

    def legal_actions(self) -> List[str]:
        """Return the agent actions that would change something right now."""

        if not self.playing:
            return []
        moves = [
            action.value
            for action in _ACTION_DIRECTIONS
            if action.direction in self.allowed_moves()
        ]
        moves.append(Action.SWAP.value)
        return moves

    def move_cursor(self, direction: Union[Direction, str]) -> bool:
        """Move the cursor one cell; return ``False`` if the move is refused."""

        if not self.playing:
            return False
        try:
            direction = Direction(direction)
        except ValueError:
            return False
        if direction not in self.allowed_moves():
            return False
        d_row, d_col = _DELTAS[direction]
        row, col = self._session.cursor
        self._session.cursor = (row + d_row, col + d_col)
        return True

    def swap(self) -> Optional[SwapOutcome]:
        """Swap the cursor pair and resolve the resulting cascade."""

        if not self.playing or self._resolving:
            return None
        session = self._session
        self._resolving = True
        try:
            left, right = session.board.swap(session.cursor)
            cascade = resolve_cascade(session.board.grid)
            session.board.replace_grid(cascade.grid)
            session.score += cascade.score
        finally:
            self._resolving = False
        return SwapOutcome(left=left, right=right, score=cascade.score, passes=cascade.passes)

    def handle_action(self, token: Union[str, Action, None]) -> bool:
        """Apply an input token; return ``True`` if the game accepted it.

        Unknown tokens, blocked moves and actions while not playing are
        ignored and return ``False``.  A swap is accepted even when it
        exchanges two equal tiles and leaves the board unchanged.
        ``restart`` is accepted in every state.
        """

        action = parse_action(token)
        if action is None or self._resolving:
            return False
        if action is Action.RESTART:
            self.restart()
            return True
        if not self.playing:
            return False
        if action is Action.SWAP:
            return self.swap() is not None
        return self.move_cursor(action.direction)

    # ------------------------------------------------------------------
    # Testing conveniences
    # ------------------------------------------------------------------
    def set_board(self, grid: Grid, cursor: Optional[Cursor] = None) -> None:
        """Replace the board contents (and optionally the cursor).

        Exists for tests and tools that need a crafted position; the board
        dimensions must match the configuration.
        """

        self._session.board.replace_grid(np.asarray(grid, dtype=np.uint8))
        if cursor is not None:
            if not cursor_in_bounds(cursor, self.config.height, self.config.width):
                raise IndexError("Cursor out of bounds")
            self._session.cursor = tuple(cursor)

    def load_rows(self, rows, cursor: Optional[Cursor] = None) -> None:
        """Like :meth:`set_board` but from rows of tile symbols."""

        board = Board.from_rows(rows, self.config.tile_set)
        self.set_board(board.grid, cursor)


__all__ = [
    "ALLOWED_MOVES",
    "Action",
    "Direction",
    "Game",
    "SwapOutcome",
    "parse_action",
]
