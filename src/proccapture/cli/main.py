"""
Command-line interface for capturing the top processes on this machine.

This is a thin developer surface over CaptureEngine: it loads configuration,
runs one capture cycle and prints the result as a table or as JSON.
"""

import argparse
import dataclasses
import json
import logging
import signal
import sys
import threading
from pathlib import Path
from typing import List, Optional, Sequence

from ..capture import CaptureEngine
from ..config import clamp_sample_millis, get_config, set_config_path
from ..models import ProcessSnapshot, SelectionCriterion
from ..validation import (
    ValidationError,
    handle_cli_error,
    validate_positive_integer,
)

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)-5.5s] %(name)s:%(filename)s:%(lineno)d\t %(message)s"


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def _format_optional(value, fmt: str = "{}") -> str:
    return "-" if value is None else fmt.format(value)


def format_table(snapshots: List[ProcessSnapshot]) -> str:
    """Render snapshots as a fixed-width text table."""
    lines = [f"{'PID':>8} {'USER':<16} {'CPU%':>8} {'MEM(MB)':>10} {'PRI':>4} {'SYS':>4}  NAME"]
    for s in snapshots:
        lines.append(
            f"{s.pid:>8} {s.owner[:16]:<16} {_format_optional(s.cpu_percent):>8} "
            f"{_format_optional(s.memory_mb):>10} {_format_optional(s.priority):>4} "
            f"{'yes' if s.is_system_process else 'no':>4}  {s.name}"
        )
    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="proccapture",
        description="Capture the processes using the most CPU or memory.",
    )
    parser.add_argument(
        "-c",
        "--criterion",
        type=str,
        default="CPU",
        help="Ranking metric: CPU or MEMORY (aliases: MEM, RAM). Default: CPU.",
    )
    parser.add_argument(
        "-n",
        "--top",
        type=str,
        default="10",
        help="Number of entries to return. Default: 10.",
    )
    parser.add_argument(
        "--sample-millis",
        type=str,
        help="Override the sampling window from config (minimum 50).",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to an alternative config.toml.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the result as JSON instead of a table.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging on stderr.",
    )
    return parser


def main_cli(argv: Optional[Sequence[str]] = None) -> None:
    """
    Entry point of the ``proccapture`` command.

    Raises:
        SystemExit: On invalid arguments, configuration errors, or when no
                    process could be captured.
    """
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)

    if args.config:
        set_config_path(args.config)
    try:
        config = get_config()
    except (FileNotFoundError, ValidationError) as e:
        handle_cli_error(error=e, context="configuration loading", exit_code=1, logger=logger)

    try:
        criterion = SelectionCriterion.from_string(args.criterion)
        top_n = validate_positive_integer(args.top, min_value=1, field_name="--top")
        if args.sample_millis is not None:
            sample_millis = validate_positive_integer(
                args.sample_millis, min_value=0, field_name="--sample-millis"
            )
            config = dataclasses.replace(config, sample_millis=clamp_sample_millis(sample_millis))
    except ValidationError as e:
        handle_cli_error(error=e, context="argument validation", exit_code=1, logger=logger)

    stop_event = threading.Event()

    def _signal_handler(signum, frame):
        logger.info(f"Signal {signal.strsignal(signum)} received, finishing capture early")
        stop_event.set()

    previous_handler = signal.signal(signal.SIGINT, _signal_handler)
    try:
        engine = CaptureEngine.from_config(config)
        snapshots = engine.capture_top_n(criterion, top_n, stop_event=stop_event)
    finally:
        signal.signal(signal.SIGINT, previous_handler)

    if not snapshots:
        logger.error("Could not capture any processes")
        sys.exit(1)

    if args.json:
        print(json.dumps([s.to_dict() for s in snapshots], indent=2))
    else:
        print(format_table(snapshots))


if __name__ == "__main__":
    main_cli()
