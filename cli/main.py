"""Command line entry point for training and running NLayerNet networks."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Iterable

from nlayernet.config import DEFAULT_CONFIG_FILE_PATH, load_config
from nlayernet.core.errors import NetworkError, NetworkIOError
from nlayernet.reporting.console import ConsoleReporter
from nlayernet.training import pipeline


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "config",
        nargs="?",
        type=Path,
        default=Path(DEFAULT_CONFIG_FILE_PATH),
        help="Configuration file (.properties, .json or .yaml)",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity for diagnostics (reports always go to stdout)",
    )
    parser.add_argument(
        "--dump-config", type=Path, help="Dump the resolved config to a JSON file"
    )
    return parser.parse_args(argv)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def dump_config(config, path: Path) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(config.to_dict(), indent=2))
    except OSError as exc:
        raise NetworkIOError(f"Unable to write config dump at {path}: {exc}") from exc


def main(argv: Iterable[str] | None = None) -> None:
    args = parse_args(argv)
    configure_logging(args.log_level)

    try:
        config = load_config(args.config)
        if args.dump_config:
            dump_config(config, args.dump_config)
        pipeline.run_pipeline(config, ConsoleReporter())
    except NetworkError as exc:
        raise SystemExit(f"Error: {exc}") from exc


if __name__ == "__main__":
    main()
