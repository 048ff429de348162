"""Shared fixtures for ICS module tests."""

from datetime import datetime, timedelta
from typing import Callable, Iterable, Optional

import pytest

from icalagenda.ics.models import CalendarEvent
from icalagenda.ics.parser import ICSParser
from icalagenda.ics.rrule_expander import RRuleExpander


@pytest.fixture
def parser() -> ICSParser:
    """Create ICSParser instance."""
    return ICSParser()


@pytest.fixture
def expander() -> RRuleExpander:
    """Create RRuleExpander instance."""
    return RRuleExpander()


@pytest.fixture
def make_event() -> Callable[..., CalendarEvent]:
    """Build a CalendarEvent; ``duration`` defaults to one hour (one day if all-day)."""

    def _make(
        start: datetime,
        rrule: Optional[str] = None,
        duration: Optional[timedelta] = None,
        exdates: Iterable[datetime] = (),
        all_day: bool = False,
        summary: str = "Event",
    ) -> CalendarEvent:
        if duration is None:
            duration = timedelta(days=1) if all_day else timedelta(hours=1)
        return CalendarEvent(
            uid=summary.lower(),
            summary=summary,
            start=start,
            end=start + duration,
            all_day=all_day,
            rrule=rrule,
            exdates=list(exdates),
        )

    return _make
