"""Train a tabular Q-learning agent on the small match-3 board.

Run with::

    PYTHONPATH=src python examples/train_qlearning.py --episodes 500

The learned table is written to ``--output`` every ``--snapshot-every``
episodes and once more at the end.  Pass ``--help`` to see all options.
"""

from __future__ import annotations

import argparse
import logging
import random
from concurrent.futures import ThreadPoolExecutor

from match3.agent import AgentConfig, QLearningAgent
from match3.config import TRAINING_CONFIG
from match3.encoders import ENCODERS, make_encoder
from match3.env import MatchEnv
from match3.persistence import JsonTableStore
from match3.rewards import ScoreDeltaReward, ShapedReward
from match3.training import DecaySchedule, Trainer, TrainingConfig


LOGGER = logging.getLogger(__name__)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--episodes", type=int, default=1_000, help="Number of episodes to play.")
    parser.add_argument("--output", default="qtable.json", help="Where to write the learned table.")
    parser.add_argument(
        "--snapshot-every",
        type=int,
        default=25,
        help="Write the table every N episodes (0 writes only at the end).",
    )
    parser.add_argument(
        "--encoder",
        choices=sorted(ENCODERS),
        default="window",
        help="State encoding; the bot must use the same one.",
    )
    parser.add_argument(
        "--decay",
        choices=[s.value for s in DecaySchedule],
        default=DecaySchedule.ON_NEW_BEST.value,
        help="When to decay the exploration rate.",
    )
    parser.add_argument(
        "--raw-reward",
        action="store_true",
        help="Use the plain score delta as reward instead of the shaped reward.",
    )
    parser.add_argument("--learning-rate", type=float, default=0.1)
    parser.add_argument("--discount", type=float, default=0.95)
    parser.add_argument("--seed", type=int, default=None, help="Seed for boards and exploration.")
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (e.g. DEBUG, INFO, WARNING).",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO), format="%(message)s")

    env = MatchEnv(
        TRAINING_CONFIG,
        encoder=make_encoder(args.encoder),
        reward=ScoreDeltaReward() if args.raw_reward else ShapedReward(),
        seed=args.seed,
    )
    agent = QLearningAgent(
        config=AgentConfig(learning_rate=args.learning_rate, discount_factor=args.discount),
        rng=random.Random(args.seed),
    )
    store = JsonTableStore(args.output)
    with ThreadPoolExecutor(max_workers=1) as writer:
        trainer = Trainer(
            env,
            agent,
            TrainingConfig(
                episodes=args.episodes,
                snapshot_every=args.snapshot_every,
                decay_schedule=DecaySchedule(args.decay),
            ),
            sink=store,
            executor=writer,
        )
        session = trainer.train()
        trainer.publish_snapshot()
    LOGGER.info(
        "Trained %d episodes, %d table entries over %d states; highest score %d at episode %d. Table: %s",
        session.episode,
        len(agent.table),
        len(agent.table.states()),
        session.highest_score,
        session.highest_score_episode,
        store.path,
    )


if __name__ == "__main__":
    main()
