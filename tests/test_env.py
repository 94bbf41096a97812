from __future__ import annotations

import pytest

from match3.env import MatchEnv
from match3.game_state import GameStatus


def test_step_before_reset_reports_done() -> None:
    env = MatchEnv(seed=0)
    _, reward, done = env.step("swap")
    assert done
    assert reward == 0.0


def test_reset_returns_encoded_state() -> None:
    env = MatchEnv(seed=0)
    state = env.reset()
    game = env.game
    assert game.playing
    assert not env.done
    assert state == env.encoder.encode(game.grid, game.cursor)
    assert env.legal_actions() == ["moveUp", "moveRight", "swap"]


def test_blocked_move_costs_wall_penalty() -> None:
    env = MatchEnv(seed=0, ticks_per_step=0)
    env.reset()
    state, reward, done = env.step("moveDown")
    assert not done
    assert reward == pytest.approx(-0.11)
    assert env.last_transition is not None
    assert env.last_transition.action == "moveDown"
    assert env.game.elapsed_ms == 0


def test_unknown_action_only_costs_a_step() -> None:
    env = MatchEnv(seed=0, ticks_per_step=0)
    state = env.reset()
    next_state, reward, done = env.step("jump")
    assert next_state == state
    assert reward == pytest.approx(-0.01)
    assert not done


def test_seeded_environments_are_reproducible() -> None:
    actions = ["swap", "moveUp", "moveRight", "swap", "moveDown"] * 6
    runs = []
    for _ in range(2):
        env = MatchEnv(seed=7)
        trace = [env.reset()]
        for action in actions:
            trace.append(env.step(action))
        runs.append(trace)
    assert runs[0] == runs[1]


def test_episode_ends_on_game_over() -> None:
    env = MatchEnv(seed=1)
    env.reset()
    done = False
    reward = 0.0
    for _ in range(200):
        _, reward, done = env.step("moveUp")
        if done:
            break
    assert done
    assert not env.truncated
    assert env.game.status is GameStatus.GAME_OVER
    assert reward < -9.0


def test_episode_time_limit_truncates() -> None:
    env = MatchEnv(seed=0, max_episode_ms=5)
    env.reset()
    results = [env.step("moveLeft") for _ in range(5)]
    assert [done for _, _, done in results] == [False] * 4 + [True]
    assert env.truncated
    assert env.game.status is GameStatus.IDLE
    state, reward, done = env.step("swap")
    assert done
    assert reward == 0.0


def test_reset_clears_truncation() -> None:
    env = MatchEnv(seed=0, max_episode_ms=2)
    env.reset()
    env.step("swap")
    env.step("swap")
    assert env.truncated
    env.reset()
    assert not env.truncated
    assert env.game.playing


def test_negative_ticks_per_step_is_rejected() -> None:
    with pytest.raises(ValueError):
        MatchEnv(ticks_per_step=-1)
