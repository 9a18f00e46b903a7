"""
main.py — Entry point.

Run with:
    python main.py [--difficulty hard] [--columns 30 --rows 30]

Requires:
    pip install pygame
"""

import argparse
import logging
import random
from pathlib import Path

from snake_arcade.config import COLS, ROWS, DEFAULT_DIFFICULTY, DIFFICULTIES, GameConfig
from snake_arcade.controller import GameController
from snake_arcade.session import GameSession
from snake_arcade.storage import DEFAULT_SCORES_PATH, JsonScoreStore, MemoryScoreStore


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Grid snake arcade game")
    parser.add_argument("--columns", type=int, default=COLS, help="board width in cells")
    parser.add_argument("--rows", type=int, default=ROWS, help="board height in cells")
    parser.add_argument("--difficulty", choices=sorted(DIFFICULTIES),
                        help="speed preset (default: last used, else medium)")
    parser.add_argument("--scores", type=Path, default=DEFAULT_SCORES_PATH,
                        help="JSON file holding the best score")
    parser.add_argument("--no-save", action="store_true", help="do not read or write the scores file")
    parser.add_argument("--seed", type=int, help="seed for food placement")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser.parse_args(argv)


def main(argv=None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    store = MemoryScoreStore() if args.no_save else JsonScoreStore(args.scores)
    difficulty = args.difficulty or store.get_settings().get("difficulty", DEFAULT_DIFFICULTY)
    config = GameConfig(columns=args.columns, rows=args.rows)
    session = GameSession(
        config,
        store=store,
        rng=random.Random(args.seed),
        difficulty=difficulty,
    )
    GameController(session).run()


if __name__ == "__main__":
    main()
