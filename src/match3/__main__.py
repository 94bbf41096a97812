"""Simple ASCII demo for the match-3 engine.

Run with: `python -m match3`

This module starts a game, prints the opening frame with the cursor pair in
brackets, swaps once and prints the resolved frame, a minimal smoke test that
the engine produces a populated board.
"""

from __future__ import annotations

from . import DEFAULT_CONFIG, Game, render_ascii


def _print_frame(game: Game) -> None:
    print(render_ascii(game.grid, game.config.tile_set, game.cursor))
    print(f"score: {game.score}")


def main() -> None:
    game = Game(DEFAULT_CONFIG)
    game.start()
    _print_frame(game)
    print()
    game.handle_action("swap")
    _print_frame(game)


if __name__ == "__main__":
    main()
