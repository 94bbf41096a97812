"""Step-based training environment around :class:`match3.game.Game`.

Each call to :meth:`MatchEnv.step` applies one action token, then advances the
game's clock by ``ticks_per_step`` render ticks on a :class:`ManualTicker`.
Time is synthetic, so training never waits on the wall clock.

Example usage
-------------

>>> from match3.env import MatchEnv
>>> env = MatchEnv(seed=0, max_episode_ms=1_000)
>>> state = env.reset()
>>> done = False
>>> while not done:
...     state, reward, done = env.step("swap")
>>> env.game.playing
False
"""

from __future__ import annotations

import random
from typing import List, Optional, Tuple

from .config import TRAINING_CONFIG, GameConfig
from .encoders import LocalWindowEncoder, StateEncoder
from .game import ALLOWED_MOVES, Action, Game, parse_action
from .rewards import RewardShaper, ShapedReward, Transition
from .scheduler import ManualTicker


class MatchEnv:
    """Q-learning environment with pluggable encoding and reward.

    Key properties
    - Action: one token from :data:`match3.game.ALLOWED_MOVES`.  Unknown
      tokens are no-ops.
    - Reward: computed by ``reward`` (default :class:`ShapedReward`).
    - Episode termination: the game reaches ``GAME_OVER`` or, when
      ``max_episode_ms`` is set, that much simulated time has passed.
    - State: the key produced by ``encoder`` for the current grid and cursor.
    """

    def __init__(
        self,
        config: GameConfig = TRAINING_CONFIG,
        *,
        encoder: Optional[StateEncoder] = None,
        reward: Optional[RewardShaper] = None,
        ticks_per_step: int = 1,
        max_episode_ms: Optional[int] = None,
        seed: Optional[int] = None,
    ) -> None:
        if ticks_per_step < 0:
            raise ValueError("ticks_per_step must not be negative")
        self.config = config
        self.encoder = encoder or LocalWindowEncoder()
        self.reward = reward or ShapedReward()
        self.ticks_per_step = ticks_per_step
        self.max_episode_ms = max_episode_ms
        self._rng = random.Random(seed)
        self._ticker = ManualTicker()
        self._game = Game(config, rng=self._rng, ticker=self._ticker)
        self._done = True
        self._truncated = False
        self.last_transition: Optional[Transition] = None

    @property
    def game(self) -> Game:
        return self._game

    @property
    def actions(self) -> Tuple[str, ...]:
        return ALLOWED_MOVES

    @property
    def done(self) -> bool:
        return self._done

    @property
    def truncated(self) -> bool:
        """``True`` when the last episode ended on the time limit."""

        return self._truncated

    def seed(self, seed: Optional[int]) -> None:
        """Seed the row generator."""

        if seed is not None:
            self._rng.seed(seed)

    def state(self) -> str:
        return self.encoder.encode(self._game.grid, self._game.cursor)

    def legal_actions(self) -> List[str]:
        return self._game.legal_actions()

    def reset(self, *, seed: Optional[int] = None) -> str:
        """Restart the game and return the initial state key."""

        self.seed(seed)
        self._game.restart()
        self._done = False
        self._truncated = False
        self.last_transition = None
        return self.state()

    def step(self, action: str) -> Tuple[str, float, bool]:
        """Apply ``action`` and return ``(state, reward, done)``.

        Stepping a finished episode returns the same state, zero reward and
        ``done``.
        """

        if self._done:
            return self.state(), 0.0, True

        game = self._game
        before = game.snapshot()
        swap = None
        parsed = parse_action(action)
        if parsed is Action.SWAP:
            swap = game.swap()
        elif parsed is not None and parsed is not Action.RESTART:
            game.move_cursor(parsed.direction)
        after_action = game.snapshot()

        self._ticker.fire(self.ticks_per_step)
        after = game.snapshot()

        transition = Transition(
            action=str(parsed.value if parsed is not None else action),
            before=before,
            after=after,
            swap=swap,
            after_action=after_action,
        )
        self.last_transition = transition
        reward = float(self.reward(transition))

        done = not game.playing
        if (
            not done
            and self.max_episode_ms is not None
            and game.elapsed_ms >= self.max_episode_ms
        ):
            done = True
            self._truncated = True
            game.stop()
        self._done = done
        return self.state(), reward, done


__all__ = ["MatchEnv"]
