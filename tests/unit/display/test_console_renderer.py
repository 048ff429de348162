"""Unit tests for the console renderer."""

from datetime import datetime, timedelta

import pytest

from icalagenda.agenda.service import AgendaSnapshot
from icalagenda.agenda.view import ViewContext, ViewMode
from icalagenda.display.console_renderer import ConsoleRenderer
from icalagenda.ics.models import CalendarEvent, CalendarTask, TaskStatus

NOW = datetime(2025, 1, 15, 12, 0)
DAY = datetime(2025, 1, 15)


def event(summary, start, minutes=60, **kwargs):
    return CalendarEvent(
        summary=summary, start=start, end=start + timedelta(minutes=minutes), **kwargs
    )


def snapshot(events=(), tasks=()):
    return AgendaSnapshot(
        range_start=DAY,
        range_end=datetime(2025, 1, 15, 23, 59, 59),
        events=list(events),
        tasks=list(tasks),
    )


@pytest.fixture
def renderer(test_settings):
    return ConsoleRenderer(test_settings, width=40)


@pytest.fixture
def daily():
    return ViewContext(ViewMode.DAILY, DAY)


@pytest.mark.unit
class TestRenderLayout:
    """Tests for overall output layout."""

    def test_full_output(self, renderer, daily):
        """Test header, grouped events and empty task list."""
        standup = event(
            "Standup", datetime(2025, 1, 15, 9), minutes=15, rrule="FREQ=DAILY", calendar="Work"
        )

        output = renderer.render(snapshot([standup]), daily, now=NOW)

        assert output.split("\n") == [
            "Agenda (daily)   Wed Jan 15 - Wed Jan 15",
            "=" * 40,
            "",
            "Wed Jan 15 (Today)",
            "↻ 09:00-09:15  Standup [Work]",
            "",
            "Tasks",
            "-" * 40,
            "  No tasks",
        ]

    def test_no_events(self, renderer, daily):
        """Test the empty event message."""
        assert "  No upcoming events" in renderer.render(snapshot(), daily, now=NOW).split("\n")

    def test_tasks_hidden(self, renderer, daily, test_settings):
        """Test the task block is omitted when tasks are disabled."""
        test_settings.display.show_tasks = False

        assert "Tasks" not in renderer.render(snapshot(), daily, now=NOW)

    def test_date_headers_per_day(self, renderer, daily):
        """Test a header is written for each new day."""
        events = [
            event("One", datetime(2025, 1, 15, 9)),
            event("Two", datetime(2025, 1, 15, 10)),
            event("Three", datetime(2025, 1, 16, 9)),
        ]

        lines = renderer.render(snapshot(events), daily, now=NOW).split("\n")

        assert lines.count("Wed Jan 15 (Today)") == 1
        assert "Thu Jan 16" in lines

    def test_long_lines_truncated(self, test_settings, daily):
        """Test lines are cut to the renderer width."""
        renderer = ConsoleRenderer(test_settings, width=30)
        long_event = event("A very long meeting title that keeps going", datetime(2025, 1, 15, 9))

        lines = renderer.render(snapshot([long_event]), daily, now=NOW).split("\n")

        event_line = next(line for line in lines if "09:00" in line)
        assert len(event_line) == 30
        assert event_line.endswith("...")


@pytest.mark.unit
class TestEventLines:
    """Tests for individual event lines."""

    def test_location_and_calendar(self, renderer, daily):
        """Test location and calendar suffixes."""
        meeting = event("Sync", datetime(2025, 1, 15, 14), location="Lab", calendar="Team")

        output = renderer.render(snapshot([meeting]), daily, now=NOW)

        assert "  14:00-15:00  Sync @ Lab [Team]" in output.split("\n")

    def test_all_day_marker(self, renderer, daily):
        """Test all-day events show the all-day label."""
        holiday = CalendarEvent(summary="Holiday", start=DAY, end=DAY + timedelta(days=1), all_day=True)

        output = renderer.render(snapshot([holiday]), daily, now=NOW)

        assert "  ◷ All day  Holiday" in output.split("\n")

    def test_empty_icons(self, renderer, daily, test_settings):
        """Test disabled icons leave plain text."""
        test_settings.icons.all_day = ""
        test_settings.icons.recurring = ""
        test_settings.icons.location = ""
        holiday = CalendarEvent(
            summary="Holiday",
            start=DAY,
            end=DAY + timedelta(days=1),
            all_day=True,
            rrule="FREQ=YEARLY",
            location="Home",
        )

        output = renderer.render(snapshot([holiday]), daily, now=NOW)

        assert "  All day  Holiday Home" in output.split("\n")

    def test_ungrouped_lines_carry_date(self, renderer, daily, test_settings):
        """Test dates move into event lines without grouping."""
        test_settings.display.group_by_date = False

        output = renderer.render(snapshot([event("Sync", datetime(2025, 1, 15, 9))]), daily, now=NOW)

        lines = output.split("\n")
        assert "  Wed Jan 15 09:00-10:00  Sync" in lines
        assert "Wed Jan 15 (Today)" not in lines


@pytest.mark.unit
class TestTaskSections:
    """Tests for task grouping."""

    def test_sections_in_order(self, test_settings, daily):
        """Test overdue, today, upcoming and undated groups."""
        renderer = ConsoleRenderer(test_settings, width=60)
        tasks = [
            CalendarTask(summary="Pay rent", due=datetime(2025, 1, 10)),
            CalendarTask(summary="Call bank", due=datetime(2025, 1, 15, 17)),
            CalendarTask(summary="Book trip", due=datetime(2025, 1, 20), categories=["Travel"]),
            CalendarTask(summary="Read book", status=TaskStatus.IN_PROCESS),
        ]

        lines = renderer.render(snapshot(tasks=tasks), daily, now=NOW).split("\n")
        task_block = lines[lines.index("Tasks") + 2 :]

        assert task_block == [
            "Overdue",
            "  ☐ Pay rent {pending} (Fri Jan 10)",
            "",
            "Today",
            "  ☐ Call bank {pending}",
            "",
            "Upcoming",
            "  ☐ Book trip {pending} [Travel] (Mon Jan 20)",
            "",
            "No Due Date",
            "  ☐ Read book {in progress}",
        ]

    def test_completed_past_task_not_overdue(self, renderer, daily):
        """Test completed tasks with a past due date are not overdue."""
        done = CalendarTask(
            summary="Filed taxes", due=datetime(2025, 1, 5), status=TaskStatus.COMPLETED
        )

        lines = renderer.render(snapshot(tasks=[done]), daily, now=NOW).split("\n")

        assert "Overdue" not in lines
        assert "  ☑ Filed taxes {complete} (Sun Jan 05)" in lines
