"""Configuration management for icalagenda."""

from .settings import (
    AgendaSettings,
    DisplaySettings,
    IconSettings,
    LoggingSettings,
)

__all__ = [
    "AgendaSettings",
    "DisplaySettings",
    "IconSettings",
    "LoggingSettings",
]
