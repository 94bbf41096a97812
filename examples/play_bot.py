"""Watch a trained table play the match-3 game in the terminal.

Run with::

    PYTHONPATH=src python examples/play_bot.py --table qtable.json

The game clock and the bot each run on their own asyncio ticker; the frame is
printed every ``--frame-ms`` until the game ends or ``--seconds`` elapse.
"""

from __future__ import annotations

import argparse
import asyncio
import logging

from match3.bot import Bot
from match3.config import TRAINING_CONFIG
from match3.encoders import ENCODERS, make_encoder
from match3.game import Game
from match3.persistence import JsonTableStore
from match3.scheduler import AsyncioTicker
from match3.utils import render_ascii


LOGGER = logging.getLogger(__name__)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--table", default="qtable.json", help="Table written by train_qlearning.py.")
    parser.add_argument("--encoder", choices=sorted(ENCODERS), default=None,
                        help="Override the encoder recorded in the table file.")
    parser.add_argument("--play-rate-ms", type=int, default=5, help="Milliseconds between bot moves.")
    parser.add_argument("--frame-ms", type=int, default=200, help="Milliseconds between printed frames.")
    parser.add_argument("--seconds", type=float, default=10.0, help="Stop after this long.")
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (e.g. DEBUG, INFO, WARNING).",
    )
    return parser.parse_args()


async def run(args: argparse.Namespace) -> int:
    snapshot = JsonTableStore(args.table).load()
    encoder = make_encoder(args.encoder or snapshot.encoder)
    if encoder.name != snapshot.encoder:
        LOGGER.warning("Table was trained with %r but playing with %r", snapshot.encoder, encoder.name)

    game = Game(TRAINING_CONFIG, ticker=AsyncioTicker())
    game.start()
    bot = Bot(
        snapshot.to_table(),
        game,
        play_rate_ms=args.play_rate_ms,
        encoder=encoder,
        ticker=AsyncioTicker(),
    )
    bot.start()

    loop = asyncio.get_running_loop()
    deadline = loop.time() + args.seconds
    try:
        while game.playing and loop.time() < deadline:
            print(render_ascii(game.grid, game.config.tile_set, game.cursor))
            print(f"score: {game.score}\n")
            await asyncio.sleep(args.frame_ms / 1000.0)
    finally:
        bot.stop()
        game.stop()
    LOGGER.info("Bot made %d moves; final score %d (%s)", bot.moves, game.score, game.status.value)
    return game.score


def main() -> None:
    args = parse_args()
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO), format="%(message)s")
    asyncio.run(run(args))


if __name__ == "__main__":
    main()
