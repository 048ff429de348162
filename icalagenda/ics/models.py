"""Data models for iCalendar event and task records."""

from datetime import datetime, timedelta
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_serializer


class TaskStatus(str, Enum):
    """VTODO status values."""

    NEEDS_ACTION = "NEEDS-ACTION"
    IN_PROCESS = "IN-PROCESS"
    COMPLETED = "COMPLETED"


class CalendarEvent(BaseModel):
    """Calendar event parsed from a VEVENT block.

    An event carrying ``rrule`` is a template: the aggregator returns its
    expanded occurrences rather than the template itself.
    """

    # Core properties
    uid: str = Field(default="", description="Event UID")
    summary: str = Field(..., description="Event summary/title")
    description: str = Field(default="", description="Event description")
    location: str = Field(default="", description="Event location")

    # Time information
    start: datetime = Field(..., description="Event start (local time)")
    end: datetime = Field(..., description="Event end (local time)")
    all_day: bool = Field(default=False, description="All-day event flag")

    # Recurrence
    rrule: Optional[str] = Field(default=None, description="Raw RRULE value")
    exdates: List[datetime] = Field(
        default_factory=list, description="Excluded days, normalized to start of day"
    )

    categories: List[str] = Field(default_factory=list, description="Category tags")
    status: str = Field(default="CONFIRMED", description="Event status")

    # Origin
    source_file: Optional[str] = Field(default=None, description="File the event came from")
    calendar: Optional[str] = Field(default=None, description="Owning calendar name")
    color: Optional[str] = Field(default=None, description="Owning calendar color")

    @property
    def is_recurring(self) -> bool:
        """Check if the event carries a recurrence rule."""
        return self.rrule is not None

    @property
    def duration(self) -> timedelta:
        """Length of the event."""
        return self.end - self.start

    def overlaps(self, range_start: datetime, range_end: datetime) -> bool:
        """Inclusive overlap test against a query range."""
        return self.start <= range_end and self.end >= range_start

    @field_serializer("start", "end", when_used="json")
    def serialize_datetime(self, dt: datetime) -> str:
        """Serialize datetime to ISO format."""
        return dt.isoformat()


class EventOccurrence(CalendarEvent):
    """One dated instance of a recurring event."""

    original_start: datetime = Field(..., description="Start of the template event")
    is_instance: bool = Field(default=True, description="Expanded instance marker")

    @classmethod
    def from_template(cls, template: CalendarEvent, start: datetime) -> "EventOccurrence":
        """Copy a template event onto a new start, preserving its duration."""
        data = template.model_dump(exclude={"start", "end", "original_start", "is_instance"})
        return cls(
            **data,
            start=start,
            end=start + template.duration,
            original_start=template.start,
        )


class CalendarTask(BaseModel):
    """Task parsed from a VTODO block."""

    uid: str = Field(default="", description="Task UID")
    summary: str = Field(..., description="Task summary")
    description: str = Field(default="", description="Task description")

    due: Optional[datetime] = Field(default=None, description="Due date")
    priority: int = Field(default=0, ge=0, le=9, description="0 = none, 1 = highest")
    status: TaskStatus = Field(default=TaskStatus.NEEDS_ACTION, description="Task status")
    percent_complete: int = Field(default=0, description="Percent complete")
    completed: Optional[datetime] = Field(default=None, description="Completion time")

    categories: List[str] = Field(default_factory=list, description="Category tags")

    source_file: Optional[str] = Field(default=None, description="File the task came from")
    calendar: Optional[str] = Field(default=None, description="Owning calendar name")
    color: Optional[str] = Field(default=None, description="Owning calendar color")

    @property
    def is_completed(self) -> bool:
        """Check if the task is completed."""
        return self.status == TaskStatus.COMPLETED


class ICSParseResult(BaseModel):
    """Result of parsing one calendar text."""

    events: List[CalendarEvent] = Field(default_factory=list)
    tasks: List[CalendarTask] = Field(default_factory=list)
    calendar_name: Optional[str] = None
    source_path: Optional[str] = None

    # Parse statistics
    event_count: int = 0
    task_count: int = 0
    recurring_event_count: int = 0
    discarded_count: int = 0

    # Defaulted or skipped fields, in encounter order
    warnings: List[str] = Field(default_factory=list)
