#!/usr/bin/env python3
"""
Play a game of landlord in the terminal.

Rule constants come from the environment (see `landlord.settings`);
the command line picks the players, the seed and the board file.
"""

import argparse
import logging
import sys
from typing import List, Optional

from landlord.config import load_config
from landlord.events import EventBus
from landlord.exceptions import ConfigurationError
from landlord.game import create_game, start_game
from landlord.settings import get_engine_settings
from landlord.ui import ConsoleUI


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Play a property-trading board game")
    parser.add_argument(
        "--players",
        nargs="+",
        default=["Alice", "Bob"],
        metavar="NAME",
        help="Player names in seating order (at least two)",
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for dice and shuffles")
    parser.add_argument(
        "--board",
        type=str,
        default=None,
        help="Path to a board definition JSON file (default: the standard board)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Logging level (default: LANDLORD_LOG_LEVEL or WARNING)",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI."""
    args = build_parser().parse_args(argv)

    try:
        settings = get_engine_settings()
        updates = {}
        if args.seed is not None:
            updates["seed"] = args.seed
        if args.log_level is not None:
            updates["log_level"] = args.log_level.upper()
        settings = settings.model_copy(update=updates)

        logging.basicConfig(
            level=settings.log_level,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

        config = load_config(settings, args.board)
        game_state = create_game(args.players, config=config)
    except (ConfigurationError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    ui = ConsoleUI()
    try:
        start_game(EventBus(), ui, game_state)
    except (EOFError, KeyboardInterrupt):
        print("\nGame abandoned.")
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
