"""Date/time utilities for iCalendar processing.

All timestamps are naive local datetimes. UTC values (``Z`` suffix) are
shifted by the local UTC offset observed now; historical offsets and DST
transitions are not modeled.
"""

import logging
import re
from datetime import datetime, timedelta
from pathlib import Path
from typing import List, Optional, Tuple, Union

from dateutil.tz import tzlocal

logger = logging.getLogger(__name__)

WEEKDAY_ABBREVIATIONS = ("MO", "TU", "WE", "TH", "FR", "SA", "SU")

_ICAL_DATE_PATTERN = re.compile(r"^(\d{4})(\d{2})(\d{2})")

# Decoded in one pass so an escaped backslash never starts another escape
_ESCAPE_PATTERN = re.compile(r"\\([nN,;\\])")
_ESCAPE_MAP = {"n": "\n", "N": "\n", ",": ",", ";": ";", "\\": "\\"}


def now_local() -> datetime:
    """Current local time without microseconds."""
    return datetime.now().replace(microsecond=0)


def local_utc_offset() -> timedelta:
    """Local UTC offset at the current moment."""
    offset = datetime.now(tzlocal()).utcoffset()
    return offset if offset is not None else timedelta(0)


def start_of_day(dt: datetime) -> datetime:
    """Get midnight of the day containing ``dt``."""
    return dt.replace(hour=0, minute=0, second=0, microsecond=0)


def end_of_day(dt: datetime) -> datetime:
    """Get 23:59:59 of the day containing ``dt``."""
    return start_of_day(dt) + timedelta(days=1, seconds=-1)


def add_days(dt: datetime, days: int) -> datetime:
    """Add a (possibly negative) number of days."""
    return dt + timedelta(days=days)


def day_of_week(dt: datetime) -> int:
    """Get ISO day of week (1=Monday, 7=Sunday)."""
    return dt.isoweekday()


def is_today(dt: datetime, now: Optional[datetime] = None) -> bool:
    """Check if ``dt`` falls on the current local day."""
    reference = now if now is not None else now_local()
    return start_of_day(dt) == start_of_day(reference)


def is_past(dt: datetime, now: Optional[datetime] = None) -> bool:
    """Check if ``dt`` lies before the current moment."""
    reference = now if now is not None else now_local()
    return dt < reference


def format_date(dt: datetime, fmt: str) -> str:
    """Format a datetime with a strftime pattern."""
    return dt.strftime(fmt)


def day_abbrev_to_num(day: str) -> Optional[int]:
    """Convert a two-letter day abbreviation to ISO weekday (MO=1 ... SU=7).

    Returns:
        Weekday number, or None for unknown abbreviations
    """
    try:
        return WEEKDAY_ABBREVIATIONS.index(day.strip().upper()) + 1
    except ValueError:
        return None


def day_num_to_abbrev(num: int) -> str:
    """Convert ISO weekday number to its abbreviation, defaulting to MO."""
    if 1 <= num <= 7:
        return WEEKDAY_ABBREVIATIONS[num - 1]
    return "MO"


def parse_calendar_date(
    datestr: Optional[str],
    diagnostics: Optional[List[str]] = None,
) -> Tuple[datetime, bool]:
    """Parse an iCalendar DATE or DATE-TIME value.

    Handles ``20250115``, ``20250115T090000`` and ``20250115T090000Z``. Bad
    input never raises: the current time is returned instead and a message is
    appended to ``diagnostics`` when a list is supplied.

    Args:
        datestr: Raw property value
        diagnostics: Optional list collecting defaulted-value messages

    Returns:
        Tuple of (local datetime, is_date_only)
    """
    text = (datestr or "").strip()

    def _degraded(reason: str) -> Tuple[datetime, bool]:
        message = f"Unparsable date value {text!r}: {reason}"
        logger.debug(message)
        if diagnostics is not None:
            diagnostics.append(message)
        return now_local(), False

    if not text:
        return _degraded("empty value")

    match = _ICAL_DATE_PATTERN.match(text)
    if not match:
        return _degraded("missing YYYYMMDD prefix")

    year, month, day = (int(part) for part in match.groups())
    hour = minute = second = 0
    is_date_only = True

    # Time component follows a T separator at position 9
    if len(text) >= 15 and text[8] == "T":
        time_part = text[9:15]
        if not time_part.isdigit():
            return _degraded("invalid time component")
        hour, minute, second = int(time_part[0:2]), int(time_part[2:4]), int(time_part[4:6])
        is_date_only = False

    try:
        parsed = datetime(year, month, day, hour, minute, second)
    except ValueError as e:
        return _degraded(str(e))

    if text.endswith("Z"):
        parsed = parsed + local_utc_offset()

    return parsed, is_date_only


def decode_ical_text(text: Optional[str]) -> str:
    """Decode iCalendar TEXT escapes (``\\n``, ``\\,``, ``\\;``, ``\\\\``).

    A single left-to-right pass means an escaped backslash is never re-read as
    the start of another escape.
    """
    if not text:
        return ""
    return _ESCAPE_PATTERN.sub(lambda m: _ESCAPE_MAP[m.group(1)], text)


def read_text_file(path: Union[str, Path]) -> str:
    """Read a calendar file as UTF-8, replacing undecodable bytes.

    Raises:
        OSError: If the file cannot be opened or read
    """
    with Path(path).open(encoding="utf-8", errors="replace", newline="") as f:
        return f.read()
