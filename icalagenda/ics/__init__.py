"""iCalendar parsing and recurrence expansion module."""

from .exceptions import ICSError, ICSFileError, ICSParseError, RRuleParseError
from .models import CalendarEvent, CalendarTask, EventOccurrence, ICSParseResult, TaskStatus
from .parser import ICSParser
from .rrule_expander import Frequency, RecurrenceRule, RRuleExpander, expand_event, parse_rrule

__all__ = [
    "CalendarEvent",
    "CalendarTask",
    "EventOccurrence",
    "Frequency",
    "ICSError",
    "ICSFileError",
    "ICSParseError",
    "ICSParseResult",
    "ICSParser",
    "RRuleExpander",
    "RRuleParseError",
    "RecurrenceRule",
    "TaskStatus",
    "expand_event",
    "parse_rrule",
]
