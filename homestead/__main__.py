"""Entry point for ``python -m homestead``.

Loads the YAML config, resumes the most recent save (or starts a new
world), and opens a Pygame window to play in.
"""

from __future__ import annotations

import argparse
import logging
import pathlib

from homestead.persistence.saves import load_latest, load_world, save_path_for
from homestead.simulation.config import GameConfig
from homestead.simulation.engine import GameEngine
from homestead.ui.pygame_client import PygameRenderer
from homestead.world.world import World

_DEFAULT_CONFIG = (
    pathlib.Path(__file__).resolve().parent.parent / "config" / "default.yaml"
)


def main() -> None:
    """Parse CLI args, load or create a world, launch renderer."""
    parser = argparse.ArgumentParser(
        prog="homestead",
        description="Homestead - grid settlement builder",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=pathlib.Path,
        default=_DEFAULT_CONFIG,
        help="Path to YAML config file (default: config/default.yaml)",
    )
    parser.add_argument(
        "--save-dir",
        type=pathlib.Path,
        default=None,
        help="Directory holding save files (default: from config)",
    )
    parser.add_argument(
        "--name",
        default=None,
        help="World to load or create (default: most recent save)",
    )
    parser.add_argument(
        "--new",
        action="store_true",
        help="Start a new world even if a save exists",
    )
    parser.add_argument(
        "--cell-size",
        type=int,
        default=24,
        help="Pixel size per cell (default: 24)",
    )
    parser.add_argument(
        "--fps",
        type=int,
        default=30,
        help="Target frames per second (default: 30)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: INFO)",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = GameConfig.from_yaml(args.config)
    if args.save_dir is not None:
        config.save_dir = str(args.save_dir)

    if args.new:
        world = World(name=args.name or "New World", config=config)
    elif args.name:
        path = save_path_for(config.save_dir, args.name)
        world = load_world(path, config) if path.exists() else World(config=config)
        world.name = args.name
    else:
        world = load_latest(config.save_dir, config)

    engine = GameEngine(config=config, world=world)
    renderer = PygameRenderer(engine=engine, cell_size=args.cell_size)
    renderer.run(fps=args.fps)


if __name__ == "__main__":
    main()
