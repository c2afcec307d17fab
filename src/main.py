import argparse
import csv
import logging
import sys

from ledger_engine import LedgerEngine
from report import write_report

logger = logging.getLogger(__name__)

LOG_LEVELS = [logging.WARNING, logging.INFO, logging.DEBUG]


def configure_logging(verbosity: int) -> None:
    """WARNING by default; each -v lowers the threshold one level."""
    logging.basicConfig(
        level=LOG_LEVELS[min(verbosity, len(LOG_LEVELS) - 1)],
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
        force=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ledger-replay",
        description="Replay a CSV of transactions and print the resulting client balances as CSV.",
    )
    parser.add_argument("input", help="path to the input transactions CSV")
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="report rejected records (-v) and every applied record (-vv) on stderr",
    )
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    engine = LedgerEngine()
    try:
        engine.process_file(args.input)
    except (OSError, csv.Error) as e:
        logger.error(f"Cannot read {args.input}: {e}")
        return 1

    write_report(engine.accounts.accounts(), sys.stdout)
    print(engine.stats.summary(), file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
