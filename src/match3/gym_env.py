"""Gymnasium-compatible wrapper for the match-3 training environment.

The observation is one float32 vector holding the grid tile codes row by row
(0 = empty), then the cursor row and column, then, unless disabled, the
five-entry action mask.

Action space is Discrete(5), indexing :data:`match3.game.ALLOWED_MOVES`.
Moves that would push the cursor off the board are masked in the observation
(and provided via ``info['action_mask']``); taking one anyway is a no-op.
"""

from __future__ import annotations

from typing import Dict, Optional

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from .config import TRAINING_CONFIG, GameConfig
from .env import MatchEnv
from .game import ALLOWED_MOVES
from .rewards import RewardShaper
from .utils import render_ascii


class MatchGymEnv(gym.Env):
    metadata = {
        "render_modes": ["ansi"],
        "render_fps": 50,
    }

    def __init__(
        self,
        config: GameConfig = TRAINING_CONFIG,
        *,
        include_action_mask: bool = True,
        reward: Optional[RewardShaper] = None,
        ticks_per_step: int = 1,
        max_steps: Optional[int] = None,
    ) -> None:
        super().__init__()
        self._env = MatchEnv(config, reward=reward, ticks_per_step=ticks_per_step)
        self.config = config
        self.include_action_mask = include_action_mask
        self.action_space = spaces.Discrete(len(ALLOWED_MOVES))
        cells = config.height * config.width
        self._obs_size = cells + 2 + (len(ALLOWED_MOVES) if include_action_mask else 0)
        high = float(max(len(config.tiles), config.height, config.width))
        self.observation_space = spaces.Box(
            low=0.0, high=high, shape=(self._obs_size,), dtype=np.float32
        )
        self._steps = 0
        self._max_steps = max_steps

    # ----------------------- Env API -----------------------
    def reset(self, *, seed: Optional[int] = None, options: Optional[Dict] = None):
        super().reset(seed=seed)
        self._env.reset(seed=seed)
        self._steps = 0
        return self._observe(), self._info()

    def step(self, action: int):
        _, reward, done = self._env.step(ALLOWED_MOVES[int(action)])
        self._steps += 1
        terminated = bool(done and not self._env.truncated)
        truncated = bool(self._env.truncated)
        if self._max_steps is not None and self._steps >= self._max_steps:
            truncated = True
        return self._observe(), float(reward), terminated, truncated, self._info()

    def render(self):
        game = self._env.game
        return render_ascii(game.grid, game.config.tile_set, game.cursor)

    def close(self):
        return None

    # -------------------- Helpers -------------------------
    def _action_mask(self) -> np.ndarray:
        legal = set(self._env.legal_actions())
        return np.array([a in legal for a in ALLOWED_MOVES], dtype=bool)

    def _observe(self) -> np.ndarray:
        game = self._env.game
        grid = np.asarray(game.grid, dtype=np.float32).reshape(-1)
        cursor = np.array(game.cursor, dtype=np.float32)
        parts = [grid, cursor]
        if self.include_action_mask:
            parts.append(self._action_mask().astype(np.float32))
        return np.concatenate(parts, dtype=np.float32)

    def _info(self) -> Dict:
        return {
            "action_mask": self._action_mask(),
            "score": self._env.game.score,
        }


__all__ = ["MatchGymEnv"]
