"""Command-line configuration helpers."""

import logging
from typing import Any

logger = logging.getLogger(__name__)


def apply_cli_overrides(settings: Any, args: Any) -> Any:
    """Apply display-related command-line overrides to settings.

    Args:
        settings: Current settings object
        args: Parsed command line arguments

    Returns:
        Updated settings object
    """
    display = settings.display

    if getattr(args, "days_ahead", None) is not None:
        display.days_ahead = args.days_ahead
        logger.debug(f"Agenda window set to {args.days_ahead} days from command line")

    if getattr(args, "show_completed", False):
        display.show_completed_tasks = True

    if getattr(args, "no_tasks", False):
        display.show_tasks = False

    return settings


def show_setup_guidance() -> None:
    """Explain how to configure calendars."""
    print("No calendars configured.\n")
    print("Either pass one on the command line:")
    print("  icalagenda --calendar ~/calendars/personal.ics")
    print("or list them in a config file (see config/config.yaml.example):")
    print("  ~/.config/icalagenda/config.yaml")
    print("\nCalendars can also be set with ICALAGENDA_CALENDARS as a JSON list.")
