"""Data models for calendar source management."""

import os
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field

from ..ics.models import CalendarEvent, CalendarTask


def expand_path(path: str) -> Path:
    """Expand ``~`` and environment variables in a configured path."""
    return Path(os.path.expandvars(path)).expanduser()


class SourceConfig(BaseModel):
    """Configuration for a calendar source (file or directory)."""

    name: Optional[str] = Field(default=None, description="Calendar name")
    path: str = Field(..., min_length=1, description="File or directory path")
    color: Optional[str] = Field(default=None, description="Display color")
    recursive: bool = Field(default=False, description="Scan subdirectories")
    enabled: bool = Field(default=True, description="Whether source is enabled")

    @property
    def expanded_path(self) -> Path:
        """Configured path with user and environment expansion applied."""
        return expand_path(self.path)


class SourceLoadResult(BaseModel):
    """Records and diagnostics gathered from one or more sources."""

    events: List[CalendarEvent] = Field(default_factory=list)
    tasks: List[CalendarTask] = Field(default_factory=list)
    files_parsed: int = 0
    warnings: List[str] = Field(default_factory=list)

    def merge(self, other: "SourceLoadResult") -> None:
        """Append another result's records and warnings to this one."""
        self.events.extend(other.events)
        self.tasks.extend(other.tasks)
        self.files_parsed += other.files_parsed
        self.warnings.extend(other.warnings)
