"""macstat - command-line entry point."""

import argparse
import logging
import sys

from macstat.config import CollectorConfig
from macstat.errors import MacstatError
from macstat.models import FIELDS
from macstat.monitor import SystemMonitor
from macstat.sink import append_record

__version__ = "1.0.0"

logger = logging.getLogger(__name__)

DESCRIPTION = (
    "Sample macOS CPU, disk, memory, swap, process, load and network metrics "
    "once and append them as one comma-separated line to the macstat log."
)


class UsageError(Exception):
    """Raised by the parser instead of exiting with argparse's status 2."""


class ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:
        raise UsageError(message)


def build_parser() -> ArgumentParser:
    """Build the command-line parser. Takes no positional arguments."""
    parser = ArgumentParser(prog="macstat", description=DESCRIPTION, add_help=False)
    parser.add_argument("-a", dest="catalog", action="store_true", help="list the metrics in record order and exit")
    parser.add_argument("-h", dest="help", action="store_true", help="show this help and exit")
    parser.add_argument("-V", dest="version", action="store_true", help="show version and exit")
    return parser


def format_catalog() -> str:
    """One numbered line per record field."""
    return "\n".join(
        f"{position:2d} {name:<13} {description}"
        for position, (name, description) in enumerate(FIELDS, start=1)
    )


def run(config: CollectorConfig | None = None) -> int:
    """Collect one record and append it to the log."""
    monitor = SystemMonitor(config)
    try:
        record = monitor.collect()
    except MacstatError as e:
        logger.error("%s", e)
        return 1
    try:
        path = append_record(monitor.config.log_path, record)
    except OSError as e:
        logger.error("cannot write %s: %s", monitor.config.log_path, e)
        return 1
    print(f"Metrics appended to {path}")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the macstat command."""
    logging.basicConfig(
        level=logging.WARNING,
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except UsageError as e:
        print(f"macstat: {e}", file=sys.stderr)
        parser.print_usage(sys.stderr)
        return 1

    if args.help:
        parser.print_help()
        return 0
    if args.version:
        print(f"macstat {__version__}")
        return 0
    if args.catalog:
        print(format_catalog())
        return 0
    return run()


if __name__ == "__main__":
    sys.exit(main())
