"""View modes and the query range each one covers."""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Optional, Tuple

from dateutil.relativedelta import relativedelta

from ..ics.datetime_utils import add_days, day_of_week, end_of_day, now_local, start_of_day

logger = logging.getLogger(__name__)


class ViewMode(str, Enum):
    """Supported agenda views."""

    AGENDA = "agenda"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


@dataclass
class ViewContext:
    """The (mode, date) pair a query range is computed from.

    The context is passed explicitly into every query; navigation mutates
    only this object.
    """

    mode: ViewMode = ViewMode.AGENDA
    view_date: datetime = field(default_factory=lambda: start_of_day(now_local()))
    days_ahead: int = 14
    show_past_events: bool = False

    def __post_init__(self) -> None:
        self.mode = ViewMode(self.mode)

    @classmethod
    def from_settings(
        cls,
        display: Any,
        mode: ViewMode = ViewMode.AGENDA,
        view_date: Optional[datetime] = None,
    ) -> "ViewContext":
        """Build a context using display settings for the agenda window."""
        return cls(
            mode=mode,
            view_date=start_of_day(view_date or now_local()),
            days_ahead=display.days_ahead,
            show_past_events=display.show_past_events,
        )

    def date_range(self, today: Optional[datetime] = None) -> Tuple[datetime, datetime]:
        """Compute the inclusive query range for the current view.

        Args:
            today: Reference day for the agenda view, defaults to now

        Returns:
            Tuple of (range_start, range_end)
        """
        if self.mode == ViewMode.DAILY:
            return start_of_day(self.view_date), end_of_day(self.view_date)

        if self.mode == ViewMode.WEEKLY:
            monday = add_days(start_of_day(self.view_date), 1 - day_of_week(self.view_date))
            return monday, add_days(monday, 7) - timedelta(seconds=1)

        if self.mode == ViewMode.MONTHLY:
            first = start_of_day(self.view_date).replace(day=1)
            return first, end_of_day(first + relativedelta(day=31))

        if self.mode == ViewMode.YEARLY:
            first = start_of_day(self.view_date).replace(month=1, day=1)
            return first, end_of_day(first.replace(month=12, day=31))

        start = start_of_day(today or now_local())
        if self.show_past_events:
            start = add_days(start, -7)
        return start, add_days(start, self.days_ahead)

    def navigate(self, direction: int) -> datetime:
        """Move the view date by one period forwards (1) or backwards (-1).

        Returns:
            The new view date
        """
        if self.mode == ViewMode.DAILY:
            self.view_date = add_days(self.view_date, direction)
        elif self.mode == ViewMode.MONTHLY:
            self.view_date = self.view_date + relativedelta(months=direction)
        elif self.mode == ViewMode.YEARLY:
            self.view_date = self.view_date + relativedelta(years=direction)
        else:
            self.view_date = add_days(self.view_date, direction * 7)

        logger.debug(f"Navigated {self.mode.value} view to {self.view_date:%Y-%m-%d}")
        return self.view_date

    def goto_today(self, today: Optional[datetime] = None) -> datetime:
        """Reset the view date to the start of today."""
        self.view_date = start_of_day(today or now_local())
        return self.view_date
