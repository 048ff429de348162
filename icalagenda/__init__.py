"""icalagenda - agenda and task list from local iCalendar files.

Pipeline entry points:

* :func:`parse_source` reads a calendar file or directory into events and tasks
* :func:`expand_for_range` resolves events into the occurrences of a range
* :func:`filter_tasks` hides completed tasks and orders the rest
"""

__version__ = "1.0.0"
__description__ = "Agenda and task list from local iCalendar files"

from .agenda.aggregator import expand_for_range, filter_tasks  # noqa: E402
from .sources.file_source import parse_source  # noqa: E402

__all__ = [
    "__description__",
    "__version__",
    "expand_for_range",
    "filter_tasks",
    "parse_source",
]
