"""Episode loop tying :class:`MatchEnv` and :class:`QLearningAgent` together.

Exploration decays on the schedule selected in :class:`TrainingConfig`.  The
default, ``on_new_best``, multiplies epsilon by the agent's decay factor each
time the running game score exceeds the best score seen so far in the run.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import Executor, Future
from dataclasses import dataclass, field
from enum import Enum
from functools import partial
from typing import Callable, List, Optional

from .agent import QLearningAgent
from .env import MatchEnv
from .persistence import TableSnapshot


LOGGER = logging.getLogger(__name__)

SnapshotSink = Callable[[TableSnapshot], None]


class DecaySchedule(str, Enum):
    ON_NEW_BEST = "on_new_best"
    EVERY_STEP = "every_step"
    EVERY_EPISODE = "every_episode"


@dataclass
class TrainingConfig:
    episodes: int = 1_000
    snapshot_every: int = 25
    decay_schedule: DecaySchedule = DecaySchedule.ON_NEW_BEST
    # Wall-clock watchdog for episodes that never end on their own.
    max_episode_seconds: Optional[float] = 60.0
    max_steps_per_episode: Optional[int] = None
    step_delay_s: float = 0.0

    def __post_init__(self) -> None:
        self.decay_schedule = DecaySchedule(self.decay_schedule)
        if self.episodes < 0:
            raise ValueError("episodes must not be negative")
        if self.snapshot_every < 0:
            raise ValueError("snapshot_every must not be negative")


@dataclass
class EpisodeResult:
    episode: int
    score: int
    steps: int
    total_reward: float
    truncated: bool = False


@dataclass
class TrainingSession:
    """Progress counters carried through the training loop."""

    episode: int = 0
    total_steps: int = 0
    best_score: int = 0
    highest_score: int = 0
    highest_score_episode: int = 0
    scores: List[int] = field(default_factory=list)


def _log_publish_failure(snapshot: TableSnapshot, exc: BaseException) -> None:
    LOGGER.warning(
        "Failed to publish table snapshot after episode %d: %s",
        snapshot.episode,
        exc,
    )


def _report_publish(snapshot: TableSnapshot, future: Future) -> None:
    if future.cancelled():
        return
    exc = future.exception()
    if exc is not None:
        _log_publish_failure(snapshot, exc)


class Trainer:
    """Run Q-learning episodes and publish periodic table snapshots.

    ``sink`` receives a :class:`TableSnapshot` every ``snapshot_every``
    episodes; a failing sink is logged and training carries on.  Without an
    ``executor`` the sink runs inline and the loop waits for it; with one,
    each snapshot is submitted to the executor and the loop moves on at once.
    ``clock`` and ``sleep`` default to :func:`time.monotonic` and
    :func:`time.sleep` and can be replaced in tests.
    """

    def __init__(
        self,
        env: MatchEnv,
        agent: QLearningAgent,
        config: Optional[TrainingConfig] = None,
        *,
        sink: Optional[SnapshotSink] = None,
        executor: Optional[Executor] = None,
        clock: Optional[Callable[[], float]] = None,
        sleep: Optional[Callable[[float], None]] = None,
    ) -> None:
        self.env = env
        self.agent = agent
        self.config = config or TrainingConfig()
        self.sink = sink
        self.executor = executor
        self.session = TrainingSession()
        self._clock = clock or time.monotonic
        self._sleep = sleep or time.sleep

    def run_episode(self) -> EpisodeResult:
        """Play one episode from reset to game over or watchdog."""

        cfg = self.config
        session = self.session
        env = self.env
        agent = self.agent

        state = env.reset()
        started = self._clock()
        steps = 0
        total_reward = 0.0
        truncated = False
        done = False
        while not done:
            action = agent.choose_action(state)
            next_state, reward, done = env.step(action)
            agent.update(state, action, reward, next_state)
            state = next_state
            steps += 1
            total_reward += reward
            session.total_steps += 1

            score = env.game.score
            if cfg.decay_schedule is DecaySchedule.EVERY_STEP:
                agent.decay_exploration()
            elif cfg.decay_schedule is DecaySchedule.ON_NEW_BEST and score > session.best_score:
                agent.decay_exploration()
            session.best_score = max(session.best_score, score)

            if done:
                truncated = env.truncated
                break
            if cfg.max_steps_per_episode is not None and steps >= cfg.max_steps_per_episode:
                truncated = True
                break
            if (
                cfg.max_episode_seconds is not None
                and self._clock() - started >= cfg.max_episode_seconds
            ):
                LOGGER.warning(
                    "Episode %d lasted more than %.0f seconds; ending it",
                    session.episode + 1,
                    cfg.max_episode_seconds,
                )
                truncated = True
                break
            if cfg.step_delay_s > 0:
                self._sleep(cfg.step_delay_s)

        if truncated:
            env.game.stop()
        if cfg.decay_schedule is DecaySchedule.EVERY_EPISODE:
            agent.decay_exploration()

        session.episode += 1
        final_score = env.game.score
        session.scores.append(final_score)
        if final_score > session.highest_score:
            session.highest_score = final_score
            session.highest_score_episode = session.episode
        return EpisodeResult(
            episode=session.episode,
            score=final_score,
            steps=steps,
            total_reward=total_reward,
            truncated=truncated,
        )

    def train(self, episodes: Optional[int] = None) -> TrainingSession:
        """Run ``episodes`` episodes (default from the config)."""

        count = self.config.episodes if episodes is None else episodes
        for _ in range(count):
            result = self.run_episode()
            LOGGER.info(
                "Episode %d completed with score %d in %d steps (epsilon %.4f). "
                "Highest score so far: %d at episode %d",
                result.episode,
                result.score,
                result.steps,
                self.agent.exploration_rate,
                self.session.highest_score,
                self.session.highest_score_episode,
            )
            every = self.config.snapshot_every
            if every and result.episode % every == 0:
                self.publish_snapshot()
        return self.session

    def snapshot(self) -> TableSnapshot:
        return TableSnapshot.from_table(
            self.agent.table,
            encoder=self.env.encoder.name,
            episode=self.session.episode,
        )

    def publish_snapshot(self) -> bool:
        """Hand the current table to the sink; return ``False`` on failure.

        With an executor the write is only submitted here, so ``True`` means
        queued.  A failure inside the executor is logged when it completes.
        """

        if self.sink is None:
            return False
        snapshot = self.snapshot()
        if self.executor is not None:
            future = self.executor.submit(self.sink, snapshot)
            future.add_done_callback(partial(_report_publish, snapshot))
            return True
        try:
            self.sink(snapshot)
        except Exception as exc:
            _log_publish_failure(snapshot, exc)
            return False
        return True


__all__ = [
    "DecaySchedule",
    "EpisodeResult",
    "SnapshotSink",
    "Trainer",
    "TrainingConfig",
    "TrainingSession",
]
