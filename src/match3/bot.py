"""Replay a trained Q-table against a live game without learning."""

from __future__ import annotations

import logging
from typing import Optional

from .agent import QTable
from .encoders import LocalWindowEncoder, StateEncoder
from .game import Action, Game
from .scheduler import Ticker


LOGGER = logging.getLogger(__name__)


class Bot:
    """Greedy player reading a read-only Q-table.

    Every ``play_rate_ms`` the bot encodes the game with ``encoder`` (which
    must match the one used in training), picks the legal action with the
    highest value and applies it.  When all legal actions tie, including the
    case of a state never seen in training, ``default_action`` is played if it
    is legal.
    """

    def __init__(
        self,
        table: QTable,
        game: Game,
        *,
        play_rate_ms: int = 250,
        encoder: Optional[StateEncoder] = None,
        ticker: Optional[Ticker] = None,
        default_action: str = Action.SWAP.value,
    ) -> None:
        self._table = table
        self._game = game
        self.play_rate_ms = play_rate_ms
        self.encoder = encoder or LocalWindowEncoder()
        self._ticker = ticker
        self.default_action = default_action
        self.moves = 0

    @property
    def running(self) -> bool:
        return self._ticker is not None and self._ticker.active

    def start(self) -> None:
        """Begin playing; ignored unless the game is running."""

        if not self._game.playing or self._ticker is None:
            return
        self._ticker.start(self.step, self.play_rate_ms)
        LOGGER.debug("Bot started, one move every %d ms", self.play_rate_ms)

    def stop(self) -> None:
        if self._ticker is not None:
            self._ticker.cancel()

    def choose_action(self) -> Optional[str]:
        legal = self._game.legal_actions()
        if not legal:
            return None
        state = self.encoder.encode(self._game.grid, self._game.cursor)
        values = [self._table.get(state, action) for action in legal]
        if self.default_action in legal and all(v == values[0] for v in values):
            return self.default_action
        return self._table.best_action(state, legal)

    def step(self) -> Optional[str]:
        """Play one move; stops the bot once the game has ended."""

        if not self._game.playing:
            self.stop()
            return None
        action = self.choose_action()
        if action is None:
            return None
        self._game.handle_action(action)
        self.moves += 1
        return action


__all__ = ["Bot"]
