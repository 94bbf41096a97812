"""Reward shaping strategies for the training environment.

The default :class:`ShapedReward` computes, for a transition with score gain
``delta``::

    delta > 0   ->  min(score_cap, delta)
    otherwise   ->  step_penalty
                    + wall_penalty            if a move left the cursor in place
                    + identical_swap_penalty  if a swap exchanged equal cells
                    + potential_bonus         if any other swap increased the
                                              number of adjacent equal pairs
    in both cases, + game_over_penalty when the step ended the game.

The base term never decreases as the score gain grows.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .board import Grid
from .game import Action, SwapOutcome, parse_action
from .game_state import GameSnapshot
from .tiles import EMPTY


def count_adjacent_pairs(grid: Grid) -> int:
    """Count horizontally and vertically adjacent pairs of equal tiles."""

    array = np.asarray(grid)
    horizontal = (array[:, 1:] == array[:, :-1]) & (array[:, 1:] != EMPTY)
    vertical = (array[1:, :] == array[:-1, :]) & (array[1:, :] != EMPTY)
    return int(np.count_nonzero(horizontal) + np.count_nonzero(vertical))


@dataclass(frozen=True)
class Transition:
    """One environment step as seen by a reward function."""

    action: str
    before: GameSnapshot
    after: GameSnapshot
    swap: Optional[SwapOutcome] = None
    # Position right after the action, before the clock advanced.
    after_action: Optional[GameSnapshot] = None

    @property
    def score_delta(self) -> int:
        return self.after.score - self.before.score

    @property
    def acted(self) -> GameSnapshot:
        return self.after_action if self.after_action is not None else self.after

    @property
    def parsed_action(self) -> Optional[Action]:
        return parse_action(self.action)

    @property
    def cursor_moved(self) -> bool:
        return tuple(self.acted.cursor) != tuple(self.before.cursor)

    @property
    def ended_game(self) -> bool:
        return self.after.game_over and not self.before.game_over


class RewardShaper(ABC):
    @abstractmethod
    def __call__(self, transition: Transition) -> float:
        raise NotImplementedError


@dataclass(frozen=True)
class ScoreDeltaReward(RewardShaper):
    """Plain score gain, no shaping."""

    def __call__(self, transition: Transition) -> float:
        return float(transition.score_delta)


@dataclass(frozen=True)
class ShapedReward(RewardShaper):
    score_cap: float = 30.0
    step_penalty: float = -0.01
    wall_penalty: float = -0.1
    identical_swap_penalty: float = -0.5
    potential_bonus: float = 1.0
    game_over_penalty: float = -10.0

    def __call__(self, transition: Transition) -> float:
        delta = transition.score_delta
        action = transition.parsed_action
        if delta > 0:
            reward = min(self.score_cap, float(delta))
        else:
            reward = self.step_penalty
            if action is not None and action.direction is not None:
                if not transition.cursor_moved:
                    reward += self.wall_penalty
            elif action is Action.SWAP and transition.swap is not None:
                if transition.swap.identical:
                    reward += self.identical_swap_penalty
                elif count_adjacent_pairs(transition.acted.grid) > count_adjacent_pairs(
                    transition.before.grid
                ):
                    reward += self.potential_bonus
        if transition.ended_game:
            reward += self.game_over_penalty
        return reward


__all__ = [
    "RewardShaper",
    "ScoreDeltaReward",
    "ShapedReward",
    "Transition",
    "count_adjacent_pairs",
]
