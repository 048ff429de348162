"""Command-line argument parsing for icalagenda."""

import argparse
from datetime import datetime

from .. import __version__
from ..agenda.view import ViewMode

LOG_LEVELS = ["DEBUG", "VERBOSE", "INFO", "WARNING", "ERROR", "CRITICAL"]


def parse_date(date_str: str) -> datetime:
    """Parse date string in YYYY-MM-DD format for command-line arguments.

    Args:
        date_str: Date string to parse in YYYY-MM-DD format

    Returns:
        Parsed datetime set to midnight

    Raises:
        argparse.ArgumentTypeError: If the date is not in YYYY-MM-DD format

    Example:
        >>> parse_date("2025-01-15")
        datetime.datetime(2025, 1, 15, 0, 0)
    """
    try:
        return datetime.strptime(date_str, "%Y-%m-%d")
    except ValueError as err:
        raise argparse.ArgumentTypeError(
            f"Invalid date format: {date_str}. Use YYYY-MM-DD"
        ) from err


def non_negative_int(value: str) -> int:
    """Parse a non-negative integer argument."""
    try:
        number = int(value)
    except ValueError as err:
        raise argparse.ArgumentTypeError(f"Not an integer: {value}") from err
    if number < 0:
        raise argparse.ArgumentTypeError(f"Must not be negative: {value}")
    return number


def create_parser() -> argparse.ArgumentParser:
    """Create command line argument parser.

    Returns:
        Configured ArgumentParser instance

    Example:
        >>> parser = create_parser()
        >>> args = parser.parse_args(["--view", "weekly", "--date", "2025-01-15"])
        >>> args.view
        'weekly'
    """
    parser = argparse.ArgumentParser(
        prog="icalagenda",
        description="icalagenda - agenda and task list from local iCalendar files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                                  # Agenda from configured calendars
  %(prog)s --calendar ~/cal/personal.ics     # Agenda from an ad-hoc file
  %(prog)s --calendar ~/repos/cal --recursive --view monthly
  %(prog)s --view daily --date 2025-01-15
  %(prog)s --list-calendars
        """,
    )

    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}", help="Show version information"
    )

    parser.add_argument("--config", metavar="PATH", help="YAML configuration file")

    # Calendar sources
    source_group = parser.add_argument_group("calendars", "Calendar source options")

    source_group.add_argument(
        "--calendar",
        "-c",
        action="append",
        metavar="PATH",
        help="Calendar file or directory (repeatable, added to configured calendars)",
    )

    source_group.add_argument(
        "--recursive",
        "-r",
        action="store_true",
        help="Scan subdirectories of --calendar directories",
    )

    source_group.add_argument(
        "--list-calendars", action="store_true", help="List configured calendars and exit"
    )

    # View options
    view_group = parser.add_argument_group("view", "Agenda view options")

    view_group.add_argument(
        "--view",
        choices=[mode.value for mode in ViewMode],
        default=ViewMode.AGENDA.value,
        help="View to print (default: agenda)",
    )

    view_group.add_argument(
        "--date",
        type=parse_date,
        default=None,
        metavar="YYYY-MM-DD",
        help="Date the view is anchored on (default: today)",
    )

    view_group.add_argument(
        "--days-ahead",
        type=non_negative_int,
        default=None,
        metavar="N",
        help="Length of the agenda view in days",
    )

    view_group.add_argument(
        "--show-completed", action="store_true", help="Include completed tasks"
    )

    view_group.add_argument("--no-tasks", action="store_true", help="Do not print the task list")

    # Logging options
    logging_group = parser.add_argument_group("logging", "Logging configuration options")

    logging_group.add_argument(
        "--log-level", choices=LOG_LEVELS, help="Set both console and file log levels"
    )

    logging_group.add_argument(
        "--verbose", "-v", action="store_true", help="Enable verbose logging"
    )

    logging_group.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Only show errors on console (sets console level to ERROR)",
    )

    logging_group.add_argument(
        "--no-log-colors", action="store_true", help="Disable colored console output"
    )

    return parser
