"""Entry point for `python -m icalagenda` command."""

import sys

from icalagenda.cli import main_entry


def main() -> None:
    """Entry point for python -m icalagenda and the console script."""
    try:
        sys.exit(main_entry())
    except KeyboardInterrupt:
        print("Operation cancelled by user")
        sys.exit(130)


if __name__ == "__main__":
    main()
