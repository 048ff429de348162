"""Command-line interface for icalagenda."""

import logging
from typing import List, Optional

from ..agenda import AgendaService, ViewContext, ViewMode
from ..config.settings import AgendaSettings
from ..display import ConsoleRenderer
from ..sources import SourceManager
from ..utils.logging import apply_command_line_overrides, setup_logging
from .config import apply_cli_overrides, show_setup_guidance
from .parser import create_parser, parse_date

logger = logging.getLogger(__name__)


def main_entry(argv: Optional[List[str]] = None) -> int:
    """Parse arguments, load calendars and print the requested view.

    Args:
        argv: Argument list, ``sys.argv[1:]`` when None

    Returns:
        Exit code (0 for success, 1 when no calendars are configured)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    settings = AgendaSettings(config_file=args.config)
    apply_command_line_overrides(settings, args)
    apply_cli_overrides(settings, args)
    setup_logging(settings)

    manager = SourceManager(settings)
    for path in args.calendar or []:
        manager.add_calendar(path, recursive=args.recursive)

    if args.list_calendars:
        entries = manager.list_calendars()
        if not entries:
            show_setup_guidance()
            return 1
        print("Configured calendars:")
        for entry in entries:
            print(f"  {entry}")
        return 0

    if not manager.calendars:
        show_setup_guidance()
        return 1

    context = ViewContext.from_settings(
        settings.display, mode=ViewMode(args.view), view_date=args.date
    )
    snapshot = AgendaService(settings, manager).refresh(context, today=args.date)
    print(ConsoleRenderer(settings).render(snapshot, context))
    return 0


__all__ = [
    "apply_cli_overrides",
    "create_parser",
    "main_entry",
    "parse_date",
    "show_setup_guidance",
]
