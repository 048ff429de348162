"""Merging, expansion and ordering of calendar records for a query range."""

import logging
from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from ..ics.models import CalendarEvent, CalendarTask
from ..ics.rrule_expander import RRuleExpander, expand_event

logger = logging.getLogger(__name__)

# Priority 0 means "no priority" and sorts after 9
_NO_PRIORITY_RANK = 10


def expand_for_range(
    events: Iterable[CalendarEvent],
    range_start: datetime,
    range_end: datetime,
    diagnostics: Optional[List[str]] = None,
    expander: Optional[RRuleExpander] = None,
) -> List[CalendarEvent]:
    """Resolve events into the occurrences visible in an inclusive range.

    Recurring events are replaced by their expanded occurrences; other events
    are kept when they overlap the range.

    Args:
        events: Parsed events, templates included
        range_start: Inclusive range start
        range_end: Inclusive range end
        diagnostics: Optional list collecting recurrence problems
        expander: Expander to use instead of the shared one

    Returns:
        Occurrences sorted by start time (stable for equal starts)
    """
    expand = expander.expand if expander is not None else expand_event
    results: List[CalendarEvent] = []

    for event in events:
        if event.is_recurring:
            results.extend(expand(event, range_start, range_end, diagnostics))
        elif event.overlaps(range_start, range_end):
            results.append(event)

    results.sort(key=lambda occurrence: occurrence.start)
    logger.debug(f"{len(results)} occurrences between {range_start} and {range_end}")
    return results


def task_sort_key(task: CalendarTask) -> Tuple[bool, bool, datetime, int, str]:
    """Ordering key: open first, dated by due date, priority, then summary."""
    return (
        task.is_completed,
        task.due is None,
        task.due or datetime.max,
        task.priority if task.priority > 0 else _NO_PRIORITY_RANK,
        task.summary,
    )


def filter_tasks(tasks: Iterable[CalendarTask], show_completed: bool = False) -> List[CalendarTask]:
    """Drop completed tasks unless requested and sort the rest.

    Args:
        tasks: Parsed tasks
        show_completed: Keep tasks with status COMPLETED

    Returns:
        Tasks in display order
    """
    visible = [task for task in tasks if show_completed or not task.is_completed]
    return sorted(visible, key=task_sort_key)
