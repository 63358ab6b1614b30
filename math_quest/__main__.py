from __future__ import annotations

import argparse
from collections.abc import Sequence

from .logging_config import configure_logging
from .problems import Operation
from .session import GameConfig


def build_config(argv: Sequence[str] | None = None) -> tuple[GameConfig, str]:
    """Parse command line arguments into a game config and a log level."""
    parser = argparse.ArgumentParser(prog="math-quest", description="Arithmetic practice game")
    parser.add_argument("--seed", type=int, default=None, help="seed for a reproducible problem stream")
    parser.add_argument(
        "--operation",
        choices=[op.value for op in Operation],
        default=Operation.ADDITION.value,
        help="operation selected at start",
    )
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"], default="INFO")
    args = parser.parse_args(argv)
    config = GameConfig(seed=args.seed, default_operation=Operation(args.operation))
    return config, args.log_level


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for running the game from the command line."""
    config, log_level = build_config(argv)
    configure_logging(log_level)

    # Imported late so argument errors do not pay for pygame start-up.
    from .app import run

    return run(config=config)


if __name__ == "__main__":
    raise SystemExit(main())
