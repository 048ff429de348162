"""Agenda service tying sources, expansion and filtering together."""

import logging
from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, Field

from ..ics.datetime_utils import now_local
from ..ics.models import CalendarEvent, CalendarTask
from ..ics.rrule_expander import RRuleExpander
from ..sources import SourceManager
from .aggregator import expand_for_range, filter_tasks
from .view import ViewContext

logger = logging.getLogger(__name__)


class AgendaSnapshot(BaseModel):
    """Everything needed to render one view."""

    range_start: datetime
    range_end: datetime
    events: List[CalendarEvent] = Field(default_factory=list)
    tasks: List[CalendarTask] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    generated_at: datetime = Field(default_factory=now_local)


class AgendaService:
    """Builds agenda snapshots from the configured calendars.

    Sources are re-read on every refresh; nothing is cached between calls.
    """

    def __init__(self, settings: Any, source_manager: Optional[SourceManager] = None):
        """Initialize agenda service.

        Args:
            settings: Application settings
            source_manager: Source registry, built from settings by default
        """
        self.settings = settings
        self.source_manager = source_manager or SourceManager(settings)
        self.expander = RRuleExpander()

    def refresh(self, context: ViewContext, today: Optional[datetime] = None) -> AgendaSnapshot:
        """Load all sources and resolve the occurrences and tasks of a view.

        Args:
            context: View mode and date
            today: Reference day for the agenda view, defaults to now

        Returns:
            Snapshot of the view
        """
        range_start, range_end = context.date_range(today)
        loaded = self.source_manager.load_calendars()
        display = self.settings.display

        warnings = list(loaded.warnings)
        events = expand_for_range(loaded.events, range_start, range_end, warnings, self.expander)
        for message in warnings[len(loaded.warnings) :]:
            logger.warning(message)

        if not display.show_all_day:
            events = [event for event in events if not event.all_day]

        tasks = filter_tasks(loaded.tasks, display.show_completed_tasks) if display.show_tasks else []

        logger.info(
            f"{context.mode.value} view {range_start:%Y-%m-%d} to {range_end:%Y-%m-%d}: "
            f"{len(events)} events, {len(tasks)} tasks"
        )
        return AgendaSnapshot(
            range_start=range_start,
            range_end=range_end,
            events=events,
            tasks=tasks,
            warnings=warnings,
        )
