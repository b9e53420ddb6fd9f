"""Command-line configuration for hostdash."""

import argparse
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from hostdash import __version__
from hostdash.scheduler import MIN_INTERVAL

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass(slots=True, frozen=True)
class Settings:
    """Runtime settings, fixed for the life of the process."""

    tick_interval: float = 1.0
    cpu_window: float = 1.0
    log_file: Path | None = None
    log_level: str = "WARNING"


def _interval(value: str) -> float:
    try:
        seconds = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {value!r}") from None
    if seconds <= 0:
        raise argparse.ArgumentTypeError(f"must be positive: {value!r}")
    return max(MIN_INTERVAL, seconds)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hostdash",
        description="Live terminal dashboard for CPU, memory and disk usage.",
    )
    parser.add_argument(
        "--interval",
        type=_interval,
        default=1.0,
        metavar="SECONDS",
        help="memory/disk/host refresh period (default: 1.0)",
    )
    parser.add_argument(
        "--cpu-window",
        type=_interval,
        default=1.0,
        metavar="SECONDS",
        help="CPU measurement window (default: 1.0)",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        metavar="PATH",
        help="write diagnostic logs to this file (default: no logging)",
    )
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        default="WARNING",
        type=str.upper,
        help="log level for --log-file (default: WARNING)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def parse_args(argv: Sequence[str] | None = None) -> Settings:
    """Parse command-line arguments into Settings."""
    args = build_parser().parse_args(argv)
    return Settings(
        tick_interval=args.interval,
        cpu_window=args.cpu_window,
        log_file=args.log_file,
        log_level=args.log_level,
    )


def configure_logging(settings: Settings) -> None:
    """
    Attach a file handler to the hostdash logger.

    The terminal belongs to the UI, so without --log-file nothing is emitted.
    """
    if settings.log_file is None:
        return
    handler = logging.FileHandler(settings.log_file, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger = logging.getLogger("hostdash")
    package_logger.addHandler(handler)
    package_logger.setLevel(settings.log_level)
