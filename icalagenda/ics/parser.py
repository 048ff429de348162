"""iCalendar text scanner producing event and task records."""

import logging
import re
from pathlib import Path
from typing import Dict, List, NamedTuple, Optional, Union

from .datetime_utils import (
    add_days,
    decode_ical_text,
    parse_calendar_date,
    read_text_file,
    start_of_day,
)
from .exceptions import ICSFileError, ICSParseError
from .models import CalendarEvent, CalendarTask, ICSParseResult, TaskStatus

logger = logging.getLogger(__name__)

_LINE_BREAK = re.compile(r"\r\n|\n|\r")
_EXDATE_VALUE = re.compile(r"\d+T?\d*Z?")
_UNESCAPED_COMMA = re.compile(r"(?<!\\),")

COMPONENT_EVENT = "VEVENT"
COMPONENT_TODO = "VTODO"


class ContentLine(NamedTuple):
    """One tokenized property line."""

    name: str
    params: Dict[str, str]
    value: str


def unfold_lines(content: str) -> List[str]:
    """Join folded continuation lines into logical lines.

    A physical line starting with a space or tab continues the previous line;
    exactly one leading whitespace character is removed. Empty lines are
    dropped.
    """
    lines: List[str] = []
    current = ""

    for raw_line in _LINE_BREAK.split(content):
        if raw_line[:1] in (" ", "\t"):
            current += raw_line[1:]
            continue
        if current:
            lines.append(current)
        current = raw_line

    if current:
        lines.append(current)

    return lines


def _split_outside_quotes(text: str, separator: str) -> List[str]:
    parts = []
    buf = []
    in_quotes = False
    for char in text:
        if char == '"':
            in_quotes = not in_quotes
        if char == separator and not in_quotes:
            parts.append("".join(buf))
            buf = []
        else:
            buf.append(char)
    parts.append("".join(buf))
    return parts


def parse_property(line: str) -> Optional[ContentLine]:
    """Tokenize ``NAME[;PARAM=VALUE...]:VALUE``.

    Example:
        ``DTSTART;TZID=America/New_York:20250115T090000`` gives name
        ``DTSTART``, params ``{"TZID": "America/New_York"}`` and value
        ``20250115T090000``.

    Returns:
        The tokenized line, or None when no value separator is present
    """
    in_quotes = False
    colon_pos = -1
    for index, char in enumerate(line):
        if char == '"':
            in_quotes = not in_quotes
        elif char == ":" and not in_quotes:
            colon_pos = index
            break

    if colon_pos < 0:
        return None

    head, value = line[:colon_pos], line[colon_pos + 1 :]
    name, *raw_params = _split_outside_quotes(head, ";")

    params: Dict[str, str] = {}
    for raw_param in raw_params:
        key, sep, param_value = raw_param.partition("=")
        if not sep:
            continue
        if len(param_value) >= 2 and param_value.startswith('"') and param_value.endswith('"'):
            param_value = param_value[1:-1]
        params[key.strip().upper()] = param_value

    return ContentLine(name.strip().upper(), params, value)


def _split_list(value: str) -> List[str]:
    """Split a comma-separated TEXT list, honoring escaped commas."""
    items = (decode_ical_text(item).strip() for item in _UNESCAPED_COMMA.split(value))
    return [item for item in items if item]


class ICSParser:
    """Line-oriented iCalendar parser for VEVENT and VTODO records."""

    def parse_ics_content(
        self,
        ics_content: str,
        source_path: Optional[str] = None,
    ) -> ICSParseResult:
        """Parse calendar text into events and tasks.

        Malformed lines and values never abort the parse: they are skipped or
        defaulted and described in ``result.warnings``.

        Args:
            ics_content: Raw calendar text
            source_path: Optional origin path, used in messages

        Returns:
            Parse result with records, calendar name and warnings

        Raises:
            ICSParseError: If the content is not text
        """
        if not isinstance(ics_content, str):
            raise ICSParseError(
                f"ICS content must be str, got {type(ics_content).__name__}", source_path
            )

        result = ICSParseResult(source_path=source_path)
        if not ics_content.strip():
            logger.debug(f"Empty ICS content from {source_path or '<string>'}")
            return result

        component: Optional[str] = None
        nested_depth = 0
        component_lines: List[ContentLine] = []

        for line in unfold_lines(ics_content):
            prop = parse_property(line)
            if prop is None:
                result.warnings.append(f"Malformed property line skipped: {line[:60]!r}")
                continue

            if prop.name == "BEGIN":
                kind = prop.value.strip().upper()
                if component is not None:
                    nested_depth += 1
                elif kind in (COMPONENT_EVENT, COMPONENT_TODO):
                    component = kind
                    component_lines = []
                continue

            if prop.name == "END":
                if component is None:
                    continue
                if nested_depth:
                    nested_depth -= 1
                    continue
                kind = prop.value.strip().upper()
                if kind != component:
                    result.warnings.append(f"Unexpected END:{kind} inside {component}, ignored")
                    continue
                self._finish_component(component, component_lines, result)
                component = None
                continue

            if component is None:
                if prop.name == "X-WR-CALNAME":
                    result.calendar_name = decode_ical_text(prop.value).strip() or None
                continue

            # Properties of nested sub-components (VALARM) belong to them
            if not nested_depth:
                component_lines.append(prop)

        if component is not None:
            result.warnings.append(f"Incomplete {component} at end of input dropped")

        logger.debug(
            f"Parsed {result.event_count} events and {result.task_count} tasks "
            f"from {source_path or '<string>'} ({result.discarded_count} discarded, "
            f"{len(result.warnings)} warnings)"
        )
        return result

    def parse_file(self, file_path: Union[str, Path]) -> ICSParseResult:
        """Read and parse one calendar file.

        Raises:
            ICSFileError: If the file cannot be read
        """
        try:
            content = read_text_file(file_path)
        except OSError as e:
            raise ICSFileError(f"Cannot read calendar file: {e}", str(file_path)) from e
        return self.parse_ics_content(content, str(file_path))

    def _finish_component(
        self, component: str, lines: List[ContentLine], result: ICSParseResult
    ) -> None:
        if component == COMPONENT_EVENT:
            event = self._parse_vevent(lines, result.warnings)
            if event is None:
                result.discarded_count += 1
                return
            result.events.append(event)
            result.event_count += 1
            if event.is_recurring:
                result.recurring_event_count += 1
        else:
            task = self._parse_vtodo(lines, result.warnings)
            if task is None:
                result.discarded_count += 1
                return
            result.tasks.append(task)
            result.task_count += 1

    def _parse_vevent(  # noqa: PLR0912
        self, lines: List[ContentLine], warnings: List[str]
    ) -> Optional[CalendarEvent]:
        """Map VEVENT properties onto an event; None for incomplete records."""
        fields: Dict[str, object] = {}
        categories: List[str] = []
        exdates = []
        start = end = None
        all_day = False

        for name, params, value in lines:
            if name == "UID":
                fields["uid"] = value.strip()
            elif name == "SUMMARY":
                fields["summary"] = decode_ical_text(value)
            elif name == "DESCRIPTION":
                fields["description"] = decode_ical_text(value)
            elif name == "LOCATION":
                fields["location"] = decode_ical_text(value)
            elif name == "DTSTART":
                start, is_date = parse_calendar_date(value, warnings)
                all_day = is_date or params.get("VALUE", "").upper() == "DATE"
            elif name == "DTEND":
                end, _ = parse_calendar_date(value, warnings)
            elif name == "RRULE":
                fields["rrule"] = value.strip() or None
            elif name == "EXDATE":
                for part in value.split(","):
                    match = _EXDATE_VALUE.search(part)
                    if not match:
                        warnings.append(f"Unparsable EXDATE entry {part!r} skipped")
                        continue
                    excluded, _ = parse_calendar_date(match.group(0), warnings)
                    exdates.append(start_of_day(excluded))
            elif name == "CATEGORIES":
                categories.extend(_split_list(value))
            elif name == "STATUS":
                fields["status"] = value.strip().upper()

        summary = str(fields.get("summary", ""))
        if not summary.strip():
            return None

        uid = fields.get("uid", "")
        if start is None:
            warnings.append(f"Event {uid or summary!r} has no DTSTART, skipped")
            return None

        default_end = add_days(start, 1) if all_day else start
        if end is None:
            end = default_end
        elif end < start:
            warnings.append(f"Event {uid or summary!r} ends before it starts, end defaulted")
            end = default_end

        return CalendarEvent(
            **fields,
            start=start,
            end=end,
            all_day=all_day,
            exdates=exdates,
            categories=categories,
        )

    def _parse_vtodo(
        self, lines: List[ContentLine], warnings: List[str]
    ) -> Optional[CalendarTask]:
        """Map VTODO properties onto a task; None for incomplete records."""
        fields: Dict[str, object] = {}
        categories: List[str] = []

        for name, _params, value in lines:
            if name == "UID":
                fields["uid"] = value.strip()
            elif name == "SUMMARY":
                fields["summary"] = decode_ical_text(value)
            elif name == "DESCRIPTION":
                fields["description"] = decode_ical_text(value)
            elif name == "DUE":
                fields["due"], _ = parse_calendar_date(value, warnings)
            elif name == "PRIORITY":
                fields["priority"] = self._parse_int(value, "PRIORITY", warnings, upper=9)
            elif name == "STATUS":
                fields["status"] = self._parse_task_status(value, warnings)
            elif name == "PERCENT-COMPLETE":
                fields["percent_complete"] = self._parse_int(
                    value, "PERCENT-COMPLETE", warnings, upper=100
                )
            elif name == "COMPLETED":
                fields["completed"], _ = parse_calendar_date(value, warnings)
            elif name == "CATEGORIES":
                categories.extend(_split_list(value))

        if not str(fields.get("summary", "")).strip():
            return None

        return CalendarTask(**fields, categories=categories)

    @staticmethod
    def _parse_int(value: str, prop_name: str, warnings: List[str], upper: int) -> int:
        try:
            number = int(value.strip())
        except ValueError:
            warnings.append(f"Non-numeric {prop_name} {value!r} defaulted to 0")
            return 0
        if not 0 <= number <= upper:
            warnings.append(f"{prop_name} {number} outside 0-{upper}, defaulted to 0")
            return 0
        return number

    @staticmethod
    def _parse_task_status(value: str, warnings: List[str]) -> TaskStatus:
        try:
            return TaskStatus(value.strip().upper())
        except ValueError:
            warnings.append(f"Unknown task STATUS {value!r} defaulted to NEEDS-ACTION")
            return TaskStatus.NEEDS_ACTION
