"""Command-line entry point for the snapcards table."""

from __future__ import annotations

import argparse
import logging
from dataclasses import replace

from .app import CardGameApp
from .config import GameConfig

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run the snapcards pygame table.")
    parser.add_argument(
        "--width",
        type=int,
        help="Override the display width.",
    )
    parser.add_argument(
        "--height",
        type=int,
        help="Override the display height.",
    )
    parser.add_argument(
        "--fps",
        type=int,
        help="Override the target frame rate.",
    )
    parser.add_argument(
        "--fullscreen",
        dest="fullscreen",
        action="store_true",
        help="Start the game in full-screen windowed mode.",
    )
    parser.add_argument(
        "--windowed",
        dest="fullscreen",
        action="store_false",
        help="Force the game to start in windowed mode.",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Seed for shuffling the deck.",
    )
    parser.add_argument(
        "--step-interval",
        type=int,
        metavar="MS",
        help="Step self-moving cards automatically every MS milliseconds.",
    )
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        default="WARNING",
        help="Logging verbosity.",
    )
    parser.set_defaults(fullscreen=None)
    return parser


def parse_config(namespace: argparse.Namespace) -> GameConfig:
    config = GameConfig()
    display = config.display
    play = config.play
    fullscreen = (
        display.fullscreen
        if namespace.fullscreen is None
        else namespace.fullscreen
    )

    return replace(
        config,
        display=replace(
            display,
            width=namespace.width or display.width,
            height=namespace.height or display.height,
            frame_rate=namespace.fps or display.frame_rate,
            fullscreen=fullscreen,
        ),
        play=replace(
            play,
            seed=namespace.seed if namespace.seed is not None else play.seed,
            step_interval_ms=(
                namespace.step_interval
                if namespace.step_interval is not None
                else play.step_interval_ms
            ),
        ),
    )


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    config = parse_config(args)

    app = CardGameApp(config)
    app.run()
    return 0


if __name__ == "__main__":  # pragma: no cover - module use only
    raise SystemExit(main())
