from __future__ import annotations

import random

import pytest

from match3.agent import AgentConfig, QLearningAgent, QTable
from match3.game import ALLOWED_MOVES, Action


def test_unseen_pairs_read_as_zero() -> None:
    table = QTable()
    assert table.get("s", "swap") == 0.0
    assert ("s", "swap") not in table
    table.set("s", Action.SWAP, 1.5)
    assert ("s", "swap") in table
    assert table.get("s", "swap") == 1.5
    assert len(table) == 1


def test_best_action_breaks_ties_by_order() -> None:
    table = QTable()
    assert table.best_action("s", ALLOWED_MOVES) == "moveUp"
    table.set("s", "moveLeft", 2.0)
    table.set("s", "swap", 2.0)
    assert table.best_action("s", ALLOWED_MOVES) == "moveLeft"
    assert table.best_action("s", ["swap", "moveLeft"]) == "swap"
    with pytest.raises(ValueError):
        table.best_action("s", [])


def test_snapshot_round_trips_through_entries() -> None:
    table = QTable([("a", "swap", 1.0), ("b", "moveUp", -0.5)])
    copy = QTable.from_entries(table.snapshot())
    assert copy.snapshot() == [("a", "swap", 1.0), ("b", "moveUp", -0.5)]
    assert copy.states() == ["a", "b"]


def test_equally_seeded_agents_choose_identically() -> None:
    config = AgentConfig(exploration_rate=0.5)
    first = QLearningAgent(config=config, rng=random.Random(42))
    second = QLearningAgent(config=config, rng=random.Random(42))
    for agent in (first, second):
        agent.table.set("s", "swap", 1.0)
    picks_a = [first.choose_action("s") for _ in range(50)]
    picks_b = [second.choose_action("s") for _ in range(50)]
    assert picks_a == picks_b
    assert set(picks_a) - {"swap"}


def test_zero_exploration_is_greedy() -> None:
    agent = QLearningAgent(config=AgentConfig(exploration_rate=0.0), rng=random.Random(1))
    agent.table.set("s", "moveDown", 0.3)
    assert all(agent.choose_action("s") == "moveDown" for _ in range(20))
    assert agent.choose_action("s", ["moveUp", "swap"]) == "moveUp"


def test_update_applies_bellman_rule() -> None:
    agent = QLearningAgent(
        config=AgentConfig(learning_rate=0.5, discount_factor=0.9),
        rng=random.Random(0),
    )
    agent.table.set("next", "swap", 2.0)
    agent.table.set("next", "moveUp", -1.0)
    value = agent.update("s", "moveUp", 1.0, "next")
    assert value == pytest.approx(0.5 * (1.0 + 0.9 * 2.0))
    assert agent.q_value("s", "moveUp") == pytest.approx(1.4)


def test_repeated_updates_converge_to_discounted_return() -> None:
    agent = QLearningAgent(
        actions=("swap",),
        config=AgentConfig(learning_rate=0.5, discount_factor=0.5),
        rng=random.Random(0),
    )
    for _ in range(200):
        agent.update("s", "swap", 1.0, "s")
    assert agent.q_value("s", "swap") == pytest.approx(1.0 / (1 - 0.5))


def test_exploration_decays_to_floor() -> None:
    agent = QLearningAgent(
        config=AgentConfig(exploration_decay=0.5, min_exploration_rate=0.1),
        rng=random.Random(0),
    )
    assert agent.decay_exploration() == pytest.approx(0.5)
    for _ in range(10):
        agent.decay_exploration()
    assert agent.exploration_rate == pytest.approx(0.1)


@pytest.mark.parametrize(
    "overrides",
    [
        {"learning_rate": 0.0},
        {"learning_rate": 1.5},
        {"discount_factor": 1.0},
        {"exploration_decay": 0.0},
        {"min_exploration_rate": -0.1},
    ],
)
def test_invalid_agent_configs_are_rejected(overrides) -> None:
    with pytest.raises(ValueError):
        AgentConfig(**overrides)


def test_agent_needs_actions() -> None:
    with pytest.raises(ValueError):
        QLearningAgent(actions=())
