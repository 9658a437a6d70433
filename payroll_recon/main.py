"""Main entry point for the payroll reconstruction system."""
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from payroll_recon.extractors import record_reader
from payroll_recon.pipelines import pipeline
from payroll_recon.utilities import config
from payroll_recon.utilities.exceptions import FatalInputError, InvalidDirectoryError

logger = logging.getLogger(__name__)


class UsageArgumentParser(argparse.ArgumentParser):
    """Argument parser that exits with status 1 on usage errors."""

    def error(self, message: str):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def parse_directory(value: str) -> Path:
    """Validate the input directory argument."""
    try:
        return record_reader.validate_directory(value)
    except InvalidDirectoryError as exc:
        raise argparse.ArgumentTypeError(str(exc))


def parse_year(value: str) -> int:
    """Parse a four digit year."""
    if len(value) != 4 or not value.isdigit():
        raise argparse.ArgumentTypeError(f"Invalid year: {value}. Use YYYY")
    return int(value)


def build_parser() -> argparse.ArgumentParser:
    parser = UsageArgumentParser(
        prog="payroll-recon",
        description="Reconstruct January-June payroll totals from payroll and department files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Process the files in ./data for the default year
  payroll-recon -d ./data

  # Payroll files named for 2016 (01042016, 06302016, ...)
  payroll-recon -d ./data --year 2016

  # Ignore payroll files named for days that do not exist
  payroll-recon -d ./data --strict-dates
        """,
    )

    parser.add_argument(
        "-d",
        "--directory",
        required=True,
        type=parse_directory,
        help="Directory holding the payroll and department files",
    )

    parser.add_argument(
        "--year",
        type=parse_year,
        default=config.DEFAULT_YEAR,
        help=f"Year suffix of payroll file names (default: {config.DEFAULT_YEAR})",
    )

    parser.add_argument(
        "--strict-dates",
        action="store_true",
        help="Skip payroll files named for dates that are not on the calendar",
    )

    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=config.LOG_LEVELS,
        default=config.DEFAULT_LOG_LEVEL,
        help=f"Set logging level (default: {config.DEFAULT_LOG_LEVEL})",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point with CLI argument parsing."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # argparse does not check defaults against choices
    if args.log_level not in config.LOG_LEVELS:
        parser.error(f"invalid log level: {args.log_level}")

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format=config.LOG_FORMAT,
        datefmt=config.LOG_DATE_FORMAT,
    )

    try:
        pipeline.run_full_pipeline(
            directory=args.directory,
            year=args.year,
            strict_dates=args.strict_dates,
        )
        return 0
    except KeyboardInterrupt:
        logger.warning("Pipeline interrupted by user")
        return 130
    except FatalInputError as exc:
        logger.error("Fatal: %s", exc)
        return 1
    except Exception as exc:
        logger.exception("Fatal error: %s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
