"""Agenda assembly: range expansion, task ordering and views."""

from .aggregator import expand_for_range, filter_tasks, task_sort_key
from .service import AgendaService, AgendaSnapshot
from .view import ViewContext, ViewMode

__all__ = [
    "AgendaService",
    "AgendaSnapshot",
    "ViewContext",
    "ViewMode",
    "expand_for_range",
    "filter_tasks",
    "task_sort_key",
]
