"""
Entry point for Blockfall.

Supports three modes:
  - play:     Resume the saved game if there is one, otherwise start fresh.
  - continue: Resume the saved game; fail if there is none.
  - new:      Discard any saved game and start fresh.

Usage:
    python main.py
    python main.py --mode new --config config/game.yaml
    python main.py --mode continue --save-file ~/.blockfall/save.json
"""

from __future__ import annotations

import argparse
import pathlib
import sys

import yaml


def load_config(config_path: str | pathlib.Path) -> dict:
    """Load configuration from a YAML file.

    Args:
        config_path: Path to the YAML config file.

    Returns:
        Dict of configuration key-value pairs.

    Raises:
        FileNotFoundError: If the config file does not exist.
    """
    config_path = pathlib.Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")
    with open(config_path, "r") as f:
        return yaml.safe_load(f) or {}


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Namespace with mode, config, save_file and seed attributes.
    """
    parser = argparse.ArgumentParser(
        description="Blockfall - a falling-block puzzle game.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--mode",
        type=str,
        choices=["play", "continue", "new"],
        default="play",
        help="'play' (resume if saved), 'continue' (require a save), 'new' (discard save).",
    )
    parser.add_argument(
        "--config",
        type=str,
        default="config/game.yaml",
        help="Path to the YAML configuration file.",
    )
    parser.add_argument(
        "--save-file",
        type=str,
        default=None,
        help="Where the game is saved (overrides save_path from the config).",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for the piece sequence (overrides seed from the config).",
    )
    return parser.parse_args(argv)


def main() -> None:
    """Main entry point: parse args, load config, and start the game."""
    args = parse_args()
    config = load_config(args.config)
    if args.save_file is not None:
        config["save_path"] = args.save_file
    if args.seed is not None:
        config["seed"] = args.seed

    from blockfall.play import play_manual

    try:
        play_manual(config, mode=args.mode)
    except RuntimeError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
