"""Utility helpers for icalagenda."""

from .logging import (
    VERBOSE,
    AutoColoredFormatter,
    TimestampedFileHandler,
    apply_command_line_overrides,
    get_log_level,
    setup_logging,
)

__all__ = [
    "VERBOSE",
    "AutoColoredFormatter",
    "TimestampedFileHandler",
    "apply_command_line_overrides",
    "get_log_level",
    "setup_logging",
]
