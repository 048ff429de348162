"""Console renderer for agenda snapshots."""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..agenda.service import AgendaSnapshot
from ..agenda.view import ViewContext
from ..ics.datetime_utils import (
    end_of_day,
    format_date,
    is_past,
    is_today,
    now_local,
    start_of_day,
)
from ..ics.models import CalendarEvent, CalendarTask, TaskStatus

logger = logging.getLogger(__name__)

# Task status labels shown after each task
STATUS_LABELS = {
    TaskStatus.NEEDS_ACTION: "pending",
    TaskStatus.IN_PROCESS: "in progress",
    TaskStatus.COMPLETED: "complete",
}


class ConsoleRenderer:
    """Renders agenda snapshots as plain text."""

    def __init__(self, settings: Any, width: int = 72) -> None:
        """Initialize console renderer.

        Args:
            settings: Application settings (``display`` and ``icons`` are used)
            width: Maximum line width
        """
        self.settings = settings
        self.width = width

        logger.debug("Console renderer initialized")

    @property
    def display(self) -> Any:
        return self.settings.display

    @property
    def icons(self) -> Any:
        return self.settings.icons

    def render(
        self, snapshot: AgendaSnapshot, context: ViewContext, now: Optional[datetime] = None
    ) -> str:
        """Render events and tasks of a snapshot.

        Args:
            snapshot: Result of an agenda refresh
            context: View the snapshot was built for
            now: Reference time for "today" and overdue checks

        Returns:
            Text ready to print
        """
        now = now or now_local()
        lines = self._render_header(snapshot, context)
        lines.extend(self._render_events(snapshot.events, now))

        if self.display.show_tasks:
            lines.append("")
            lines.extend(self._render_tasks(snapshot.tasks, now))

        return "\n".join(lines)

    def _render_header(self, snapshot: AgendaSnapshot, context: ViewContext) -> List[str]:
        title = f"Agenda ({context.mode.value})"
        range_text = (
            f"{format_date(snapshot.range_start, self.display.date_format)} - "
            f"{format_date(snapshot.range_end, self.display.date_format)}"
        )
        padding = max(2, self.width - len(title) - len(range_text))
        return [f"{title}{' ' * padding}{range_text}", "=" * self.width]

    def _render_events(self, events: List[CalendarEvent], now: datetime) -> List[str]:
        if not events:
            return ["", "  No upcoming events"]

        lines: List[str] = []
        current_day = None

        for event in events:
            event_day = start_of_day(event.start)
            if self.display.group_by_date and event_day != current_day:
                current_day = event_day
                header = format_date(event.start, self.display.date_format)
                if is_today(event.start, now):
                    header += " (Today)"
                lines.extend(["", header])

            lines.append(self._truncate(self._format_event_line(event)))

        return lines

    def _format_event_line(self, event: CalendarEvent) -> str:
        if event.all_day:
            time_text = f"{self.icons.all_day} All day".strip()
        else:
            time_format = self.display.time_format
            start_text = format_date(event.start, time_format)
            time_text = f"{start_text}-{format_date(event.end, time_format)}"
            if not self.display.group_by_date:
                time_text = f"{format_date(event.start, self.display.date_format)} {time_text}"

        prefix = f"{self.icons.recurring} " if event.is_recurring and self.icons.recurring else "  "
        line = f"{prefix}{time_text}  {event.summary}"

        if event.location:
            location_prefix = f"{self.icons.location} " if self.icons.location else ""
            line += f" {location_prefix}{event.location}"
        if event.calendar:
            line += f" [{event.calendar}]"
        return line

    def _render_tasks(self, tasks: List[CalendarTask], now: datetime) -> List[str]:
        lines = ["Tasks", "-" * self.width]
        if not tasks:
            lines.append("  No tasks")
            return lines

        today_start, today_end = start_of_day(now), end_of_day(now)
        sections: Dict[str, List[CalendarTask]] = {
            "Overdue": [],
            "Today": [],
            "Upcoming": [],
            "No Due Date": [],
        }

        for task in tasks:
            if task.due is None:
                sections["No Due Date"].append(task)
            elif is_past(task.due, today_start) and not task.is_completed:
                sections["Overdue"].append(task)
            elif today_start <= task.due <= today_end:
                sections["Today"].append(task)
            else:
                sections["Upcoming"].append(task)

        for title, section_tasks in sections.items():
            if not section_tasks:
                continue
            lines.append(title)
            for task in section_tasks:
                lines.append(self._truncate(self._format_task_line(task, show_due=title != "Today")))
            lines.append("")

        return lines[:-1]

    def _format_task_line(self, task: CalendarTask, show_due: bool) -> str:
        marker = self.icons.task_done if task.is_completed else self.icons.task
        line = f"  {marker} {task.summary}" if marker else f"  {task.summary}"
        line += f" {{{STATUS_LABELS.get(task.status, 'pending')}}}"
        for category in task.categories:
            line += f" [{category}]"
        if show_due and task.due is not None:
            line += f" ({format_date(task.due, self.display.date_format)})"
        return line

    def _truncate(self, line: str) -> str:
        if len(line) <= self.width:
            return line
        return line[: self.width - 3] + "..."
