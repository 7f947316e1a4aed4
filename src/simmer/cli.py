from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from . import __version__
from .app import CookingGame, build_store
from .errors import SimmerError
from .game.catalog import RecipeCatalog
from .logging_config import configure_logging
from .settings import Settings


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="simmer",
        description="simmer - energy, pantry and cooking state for a cooking game, headless",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--save-dir", type=Path, default=None, help="Directory holding the save file.")
    parser.add_argument("--settings", dest="settings_path", type=Path, default=None,
                        help="Path to a user settings YAML file to override defaults.")
    parser.add_argument("--catalog", dest="catalog_path", type=Path, default=None,
                        help="Path to a recipe catalog YAML file (defaults to the bundled one).")
    parser.add_argument("--debug", action="store_true", help="Enable verbose debug logging.")

    sub = parser.add_subparsers(dest="command", required=True)

    recipes = sub.add_parser("recipes", help="List recipes in the catalog.")
    recipes.add_argument("--search", default="", help="Case-insensitive name filter.")
    recipes.add_argument("--stars", type=int, default=0, help="Only show recipes with this star count.")

    sub.add_parser("status", help="Show the saved player state after offline progress.")

    cook = sub.add_parser("cook", help="Start cooking a recipe and save.")
    cook.add_argument("recipe_id")

    run = sub.add_parser("run", help="Drive the simulation loop headlessly, then save.")
    run.add_argument("--steps", type=int, default=300, help="Number of simulation steps.")
    run.add_argument("--dt", type=float, default=None,
                     help="Fixed seconds per step; measured wall time is used when omitted.")
    run.add_argument("--tick-rate", type=float, default=None, help="Target steps per second (0 = unthrottled).")

    return parser.parse_args(argv)


def _boot(args: argparse.Namespace, settings: Settings) -> CookingGame:
    store = build_store(settings, args.save_dir)
    catalog = RecipeCatalog.load(args.catalog_path)
    return CookingGame.boot(settings=settings, store=store, catalog=catalog)


def _print_json(data) -> None:
    print(json.dumps(data, indent=2, sort_keys=True))


def main(argv=None) -> int:
    args = parse_args(argv)
    configure_logging(level=logging.DEBUG if args.debug else None, default_level=logging.WARNING)

    try:
        settings = Settings.load(user_path=args.settings_path)

        if args.command == "recipes":
            catalog = RecipeCatalog.load(args.catalog_path)
            _print_json([
                {
                    "id": r.id,
                    "name": r.name,
                    "stars": r.star_count,
                    "time": r.required_time,
                    "ingredients": {c.item_id: c.amount for c in r.ingredient_costs},
                }
                for r in catalog.search(args.search, args.stars)
            ])
            return 0

        if args.command == "status":
            _print_json(_boot(args, settings).status())
            return 0

        if args.command == "cook":
            game = _boot(args, settings)
            result = game.start_cooking(args.recipe_id)
            game.shutdown()
            _print_json({
                "started": result.started,
                "reason": result.reason.value if result.reason else None,
                "status": game.status(),
            })
            return 0 if result else 1

        if args.command == "run":
            game = _boot(args, settings)
            if args.tick_rate is not None:
                game.engine.config.tick_rate = args.tick_rate
            try:
                game.run(max_steps=args.steps, fixed_dt=args.dt)
            finally:
                game.shutdown()
            _print_json(game.status())
            return 0
    except SimmerError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    return 1


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
