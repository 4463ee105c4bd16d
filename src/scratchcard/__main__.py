from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from . import __version__
from .app import run_auto
from .logging_config import configure_logging


def _level_for(verbosity: int) -> int:
    if verbosity >= 2:
        return logging.DEBUG
    if verbosity == 1:
        return logging.INFO
    return logging.WARNING


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="scratchcard",
        description="Scratch card game - scratch, match three, collect",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--gui", action="store_true", help="Force GUI mode (Arcade)")
    mode.add_argument("--headless", action="store_true", help="Play a scripted session in the console")
    parser.add_argument("--config", type=Path, default=None, help="Path to a YAML config overriding the defaults")
    parser.add_argument("--seed", type=int, default=None, help="RNG seed for reproducible cards")
    parser.add_argument("--tick-rate", type=float, default=None, help="Target tick rate (Hz) for headless mode")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase log verbosity (-v, -vv)")

    args = parser.parse_args(argv)
    configure_logging(_level_for(args.verbose))

    # Honor CLI over env vars
    if args.gui:
        os.environ.pop("SCRATCHCARD_HEADLESS", None)
    elif args.headless:
        os.environ["SCRATCHCARD_HEADLESS"] = "1"
    return run_auto(config_path=args.config, seed=args.seed, tick_rate=args.tick_rate)


if __name__ == "__main__":
    sys.exit(main())
