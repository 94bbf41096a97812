"""Tabular Q-learning agent."""

from __future__ import annotations

import random
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from .game import ALLOWED_MOVES

StateKey = str
ActionLike = Union[str, Enum]
Entry = Tuple[StateKey, str, float]


def _action_key(action: ActionLike) -> str:
    return action.value if isinstance(action, Enum) else str(action)


@dataclass
class AgentConfig:
    learning_rate: float = 0.1
    discount_factor: float = 0.95
    exploration_rate: float = 1.0
    exploration_decay: float = 0.9995
    min_exploration_rate: float = 0.001

    def __post_init__(self) -> None:
        if not 0.0 < self.learning_rate <= 1.0:
            raise ValueError("learning_rate must be in (0, 1]")
        if not 0.0 <= self.discount_factor < 1.0:
            raise ValueError("discount_factor must be in [0, 1)")
        if not 0.0 <= self.min_exploration_rate <= 1.0:
            raise ValueError("min_exploration_rate must be in [0, 1]")
        if not 0.0 < self.exploration_decay <= 1.0:
            raise ValueError("exploration_decay must be in (0, 1]")


class QTable:
    """Mapping of ``(state, action)`` to value; unseen pairs read as ``0``."""

    def __init__(self, entries: Optional[Iterable[Entry]] = None) -> None:
        self._values: Dict[Tuple[StateKey, str], float] = {}
        if entries is not None:
            for state, action, value in entries:
                self.set(state, action, value)

    def __len__(self) -> int:
        return len(self._values)

    def __contains__(self, key: Tuple[StateKey, ActionLike]) -> bool:
        state, action = key
        return (state, _action_key(action)) in self._values

    def get(self, state: StateKey, action: ActionLike) -> float:
        return self._values.get((state, _action_key(action)), 0.0)

    def set(self, state: StateKey, action: ActionLike, value: float) -> None:
        self._values[(state, _action_key(action))] = float(value)

    def states(self) -> List[StateKey]:
        return list(dict.fromkeys(state for state, _ in self._values))

    def max_value(self, state: StateKey, actions: Sequence[ActionLike]) -> float:
        return max(self.get(state, a) for a in actions)

    def best_action(self, state: StateKey, actions: Sequence[ActionLike]) -> ActionLike:
        """Return the highest-valued action; ties go to the earliest action."""

        if not actions:
            raise ValueError("No actions to choose from")
        best = actions[0]
        best_value = self.get(state, best)
        for action in actions[1:]:
            value = self.get(state, action)
            if value > best_value:
                best, best_value = action, value
        return best

    def snapshot(self) -> List[Entry]:
        """Return ``(state, action, value)`` triples in insertion order."""

        return [(state, action, value) for (state, action), value in self._values.items()]

    @classmethod
    def from_entries(cls, entries: Iterable[Entry]) -> "QTable":
        return cls(entries)


class QLearningAgent:
    """Epsilon-greedy learner over a fixed action set.

    ``rng`` drives exploration only; exploitation is deterministic, so two
    agents with equal tables and equally seeded generators pick the same
    actions.
    """

    def __init__(
        self,
        actions: Sequence[ActionLike] = ALLOWED_MOVES,
        config: Optional[AgentConfig] = None,
        *,
        rng: Optional[random.Random] = None,
        table: Optional[QTable] = None,
    ) -> None:
        if not actions:
            raise ValueError("The agent needs at least one action")
        self.actions: Tuple[str, ...] = tuple(_action_key(a) for a in actions)
        self.config = config or AgentConfig()
        self.table = table if table is not None else QTable()
        self._rng = rng or random.Random()
        self._exploration_rate = self.config.exploration_rate

    @property
    def exploration_rate(self) -> float:
        return self._exploration_rate

    def q_value(self, state: StateKey, action: ActionLike) -> float:
        return self.table.get(state, action)

    def greedy_action(
        self, state: StateKey, actions: Optional[Sequence[ActionLike]] = None
    ) -> str:
        candidates = tuple(_action_key(a) for a in actions) if actions else self.actions
        return self.table.best_action(state, candidates)

    def choose_action(
        self, state: StateKey, actions: Optional[Sequence[ActionLike]] = None
    ) -> str:
        """Explore with probability epsilon, otherwise act greedily."""

        candidates = tuple(_action_key(a) for a in actions) if actions else self.actions
        if self._rng.random() < self._exploration_rate:
            return self._rng.choice(candidates)
        return self.greedy_action(state, candidates)

    def update(
        self,
        state: StateKey,
        action: ActionLike,
        reward: float,
        next_state: StateKey,
    ) -> float:
        """Apply one Bellman update and return the new value.

        The bootstrap term maximises over the full action set, counting
        unseen pairs as ``0``.
        """

        current = self.table.get(state, action)
        max_next = self.table.max_value(next_state, self.actions)
        target = reward + self.config.discount_factor * max_next
        updated = current + self.config.learning_rate * (target - current)
        self.table.set(state, action, updated)
        return updated

    def decay_exploration(self) -> float:
        self._exploration_rate = max(
            self.config.min_exploration_rate,
            self._exploration_rate * self.config.exploration_decay,
        )
        return self._exploration_rate


__all__ = ["AgentConfig", "QLearningAgent", "QTable", "StateKey"]
