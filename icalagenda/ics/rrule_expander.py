"""RRULE expansion for recurring calendar events.

Supports DAILY, WEEKLY, MONTHLY and YEARLY rules with INTERVAL, COUNT, UNTIL,
BYDAY (weekday letters), BYMONTHDAY and EXDATE. BYDAY ordinals such as ``2MO``
are parsed but not applied, and BYMONTH is parsed but does not filter.
A YEARLY series started on Feb 29 falls on Feb 28 in non-leap years rather
than rolling over to Mar 1.
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Callable, Dict, Iterator, List, Optional

from dateutil.relativedelta import relativedelta

from .datetime_utils import (
    day_abbrev_to_num,
    day_num_to_abbrev,
    day_of_week,
    end_of_day,
    parse_calendar_date,
    start_of_day,
)
from .exceptions import RRuleParseError
from .models import CalendarEvent, EventOccurrence

logger = logging.getLogger(__name__)

_BYDAY_PATTERN = re.compile(r"^([+-]?\d{1,2})?(MO|TU|WE|TH|FR|SA|SU)$")


class Frequency(str, Enum):
    """Recurrence frequencies understood by the expander."""

    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    YEARLY = "YEARLY"
    UNSUPPORTED = "UNSUPPORTED"


@dataclass
class ByDay:
    """One BYDAY entry: ISO weekday plus optional ordinal (``-1FR``)."""

    weekday: int
    ordinal: Optional[int] = None


@dataclass
class RecurrenceRule:
    """Parsed RRULE value."""

    frequency: Optional[Frequency] = None
    interval: int = 1
    count: Optional[int] = None
    until: Optional[datetime] = None
    by_day: List[ByDay] = field(default_factory=list)
    by_month_day: List[int] = field(default_factory=list)
    by_month: List[int] = field(default_factory=list)
    week_start: str = "MO"


def _note(diagnostics: Optional[List[str]], message: str) -> None:
    logger.debug(message)
    if diagnostics is not None:
        diagnostics.append(message)


def _parse_int_list(
    value: str, key: str, valid: Callable[[int], bool], diagnostics: Optional[List[str]]
) -> List[int]:
    numbers = []
    for part in value.split(","):
        try:
            number = int(part.strip())
        except ValueError:
            _note(diagnostics, f"Invalid {key} entry {part!r} ignored")
            continue
        if not valid(number):
            _note(diagnostics, f"Out-of-range {key} entry {number} ignored")
            continue
        numbers.append(number)
    return numbers


def parse_rrule(  # noqa: PLR0912
    rrule_string: Optional[str], diagnostics: Optional[List[str]] = None
) -> RecurrenceRule:
    """Parse an RRULE value into its components.

    Args:
        rrule_string: RRULE value (e.g. "FREQ=WEEKLY;INTERVAL=2;BYDAY=MO,WE"),
            optionally prefixed with ``RRULE:``
        diagnostics: Optional list collecting ignored or defaulted parts

    Returns:
        Parsed rule; ``frequency`` is None when FREQ is absent

    Raises:
        RRuleParseError: If the rule string is empty
    """
    if not rrule_string or not rrule_string.strip():
        raise RRuleParseError("Empty RRULE string")

    text = rrule_string.strip()
    if text.upper().startswith("RRULE:"):
        text = text[len("RRULE:") :]

    rule = RecurrenceRule()

    for part in text.split(";"):
        if "=" not in part:
            continue
        key, value = part.split("=", 1)
        key = key.strip().upper()
        value = value.strip()

        if key == "FREQ":
            try:
                rule.frequency = Frequency(value.upper())
            except ValueError:
                _note(diagnostics, f"Unsupported RRULE frequency {value!r}")
                rule.frequency = Frequency.UNSUPPORTED
        elif key == "INTERVAL":
            try:
                rule.interval = int(value)
            except ValueError:
                rule.interval = 0
            if rule.interval < 1:
                _note(diagnostics, f"Invalid INTERVAL {value!r} defaulted to 1")
                rule.interval = 1
        elif key == "COUNT":
            try:
                count = int(value)
            except ValueError:
                count = 0
            if count > 0:
                rule.count = count
            else:
                _note(diagnostics, f"Invalid COUNT {value!r} ignored")
        elif key == "UNTIL":
            problems: List[str] = []
            until, is_date = parse_calendar_date(value, problems)
            if problems:
                _note(diagnostics, f"Invalid UNTIL {value!r} ignored")
            else:
                # A date-only UNTIL includes the whole day
                rule.until = end_of_day(until) if is_date else until
        elif key == "BYDAY":
            for entry in value.upper().split(","):
                match = _BYDAY_PATTERN.match(entry.strip())
                if not match:
                    _note(diagnostics, f"Invalid BYDAY entry {entry!r} ignored")
                    continue
                weekday = day_abbrev_to_num(match.group(2))
                ordinal = int(match.group(1)) if match.group(1) else None
                if ordinal is not None:
                    _note(
                        diagnostics,
                        f"BYDAY ordinal {ordinal:+d} ignored; every "
                        f"{day_num_to_abbrev(weekday)} is used",
                    )
                rule.by_day.append(ByDay(weekday, ordinal))
        elif key == "BYMONTHDAY":
            rule.by_month_day = _parse_int_list(
                value, key, lambda day: day != 0 and -31 <= day <= 31, diagnostics
            )
        elif key == "BYMONTH":
            rule.by_month = _parse_int_list(value, key, lambda month: 1 <= month <= 12, diagnostics)
        elif key == "WKST":
            if day_abbrev_to_num(value) is not None:
                rule.week_start = value.upper()

    return rule


class RRuleExpander:
    """Expands recurring event templates into dated occurrences.

    Each frequency supplies an ordered stream of candidate starts; a shared
    loop applies UNTIL, COUNT, the query range and exclusion dates.
    """

    DAILY_MAX_STEPS = 730
    WEEKLY_MAX_ITERATIONS = 208
    MONTHLY_MAX_ITERATIONS = 48
    YEARLY_MAX_ITERATIONS = 10

    def __init__(self) -> None:
        self._candidate_generators: Dict[
            Frequency, Callable[[datetime, RecurrenceRule], Iterator[datetime]]
        ] = {
            Frequency.DAILY: self._daily_candidates,
            Frequency.WEEKLY: self._weekly_candidates,
            Frequency.MONTHLY: self._monthly_candidates,
            Frequency.YEARLY: self._yearly_candidates,
        }

    def expand(
        self,
        event: CalendarEvent,
        range_start: datetime,
        range_end: datetime,
        diagnostics: Optional[List[str]] = None,
    ) -> List[CalendarEvent]:
        """Expand one event over an inclusive range.

        Args:
            event: Template event; non-recurring events are returned as-is
                when they overlap the range
            range_start: Inclusive range start
            range_end: Inclusive range end
            diagnostics: Optional list collecting rule problems

        Returns:
            Occurrences in chronological order
        """
        if not event.is_recurring:
            return [event] if event.overlaps(range_start, range_end) else []

        try:
            rule = parse_rrule(event.rrule, diagnostics)
        except RRuleParseError as e:
            _note(diagnostics, f"{e.message} on event {event.uid or event.summary!r}")
            rule = RecurrenceRule()

        generator = self._candidate_generators.get(rule.frequency)
        if generator is None:
            # Degrades to a single non-recurring instance
            return [event] if range_start <= event.start <= range_end else []

        excluded_days = {start_of_day(exdate) for exdate in event.exdates}
        occurrences: List[CalendarEvent] = []
        emitted = 0

        for candidate in generator(event.start, rule):
            if rule.until is not None and candidate > rule.until:
                break
            if rule.count is not None and emitted >= rule.count:
                break
            emitted += 1
            if candidate > range_end:
                break
            if candidate < range_start:
                continue
            if start_of_day(candidate) in excluded_days:
                continue
            occurrences.append(EventOccurrence.from_template(event, candidate))

        logger.debug(
            f"Expanded {rule.frequency.value} event {event.uid or event.summary!r} "
            f"into {len(occurrences)} occurrences"
        )
        return occurrences

    def _daily_candidates(self, start: datetime, rule: RecurrenceRule) -> Iterator[datetime]:
        for step in range(self.DAILY_MAX_STEPS):
            yield start + timedelta(days=step * rule.interval)

    def _weekly_candidates(self, start: datetime, rule: RecurrenceRule) -> Iterator[datetime]:
        active_days = sorted({by_day.weekday for by_day in rule.by_day}) or [day_of_week(start)]
        time_of_day = start - start_of_day(start)
        monday = start_of_day(start) - timedelta(days=day_of_week(start) - 1)

        for week in range(self.WEEKLY_MAX_ITERATIONS):
            week_anchor = monday + timedelta(weeks=week * rule.interval)
            for weekday in active_days:
                candidate = week_anchor + timedelta(days=weekday - 1) + time_of_day
                if candidate >= start:
                    yield candidate

    def _monthly_candidates(self, start: datetime, rule: RecurrenceRule) -> Iterator[datetime]:
        time_of_day = start - start_of_day(start)
        first_of_month = start_of_day(start).replace(day=1)
        month_days = rule.by_month_day or [start.day]

        for month in range(self.MONTHLY_MAX_ITERATIONS):
            month_anchor = first_of_month + relativedelta(months=month * rule.interval)
            last_day = (month_anchor + relativedelta(day=31)).day
            for day in self._resolve_month_days(month_days, last_day):
                candidate = month_anchor.replace(day=day) + time_of_day
                if candidate >= start:
                    yield candidate

    def _yearly_candidates(self, start: datetime, rule: RecurrenceRule) -> Iterator[datetime]:
        # relativedelta clamps Feb 29 to Feb 28 in non-leap years
        for year in range(self.YEARLY_MAX_ITERATIONS):
            yield start + relativedelta(years=year * rule.interval)

    @staticmethod
    def _resolve_month_days(month_days: List[int], last_day: int) -> List[int]:
        """Map BYMONTHDAY values onto one month's days, sorted and unique."""
        resolved = set()
        for day in month_days:
            if day < 0:
                day = last_day + day + 1
                if day < 1:
                    continue
            resolved.add(min(day, last_day))
        return sorted(resolved)


_default_expander = RRuleExpander()


def expand_event(
    event: CalendarEvent,
    range_start: datetime,
    range_end: datetime,
    diagnostics: Optional[List[str]] = None,
) -> List[CalendarEvent]:
    """Expand ``event`` over the range with a shared expander."""
    return _default_expander.expand(event, range_start, range_end, diagnostics)
