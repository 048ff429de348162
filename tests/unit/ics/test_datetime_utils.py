"""Unit tests for calendar date/time utilities."""

from datetime import datetime, timedelta
from unittest.mock import patch

import pytest

from icalagenda.ics import datetime_utils
from icalagenda.ics.datetime_utils import (
    add_days,
    day_abbrev_to_num,
    day_num_to_abbrev,
    day_of_week,
    decode_ical_text,
    end_of_day,
    format_date,
    is_past,
    is_today,
    parse_calendar_date,
    read_text_file,
    start_of_day,
)

FIXED_NOW = datetime(2025, 1, 15, 12, 0, 0)


@pytest.fixture
def fixed_now():
    """Pin the current local time used for degraded values."""
    with patch.object(datetime_utils, "now_local", return_value=FIXED_NOW):
        yield FIXED_NOW


@pytest.mark.unit
class TestParseCalendarDate:
    """Tests for parse_calendar_date."""

    def test_date_only(self):
        """Test date-only values are flagged as such."""
        assert parse_calendar_date("20250115") == (datetime(2025, 1, 15), True)

    def test_local_date_time(self):
        """Test floating date-time values."""
        assert parse_calendar_date("20250115T093000") == (datetime(2025, 1, 15, 9, 30), False)

    def test_utc_value_shifted_by_local_offset(self):
        """Test Z suffix adds the local UTC offset."""
        with patch.object(datetime_utils, "local_utc_offset", return_value=timedelta(hours=-5)):
            parsed, is_date = parse_calendar_date("20250115T093000Z")

        assert parsed == datetime(2025, 1, 15, 4, 30)
        assert is_date is False

    def test_utc_value_crossing_midnight(self):
        """Test offset correction can move the value to the next day."""
        with patch.object(datetime_utils, "local_utc_offset", return_value=timedelta(hours=2)):
            parsed, _ = parse_calendar_date("20250115T230000Z")

        assert parsed == datetime(2025, 1, 16, 1, 0)

    def test_surrounding_whitespace_ignored(self):
        """Test values are stripped before parsing."""
        assert parse_calendar_date("  20250115  ") == (datetime(2025, 1, 15), True)

    @pytest.mark.parametrize(
        "value",
        ["", None, "garbage", "2025-01-15", "20251345", "20250230", "20250115T25AB00"],
    )
    def test_malformed_values_degrade_to_now(self, fixed_now, value):
        """Test malformed input never raises and returns the current time."""
        diagnostics = []

        parsed, is_date = parse_calendar_date(value, diagnostics)

        assert parsed == fixed_now
        assert is_date is False
        assert len(diagnostics) == 1
        assert "Unparsable date value" in diagnostics[0]

    def test_impossible_time_degrades(self, fixed_now):
        """Test out-of-range hour values degrade."""
        assert parse_calendar_date("20250115T250000") == (fixed_now, False)

    def test_diagnostics_optional(self, fixed_now):
        """Test degraded parsing without a diagnostics list."""
        assert parse_calendar_date("nope") == (fixed_now, False)

    def test_round_trip(self):
        """Test a parsed timestamp formats back to its source text."""
        parsed, _ = parse_calendar_date("20250704T181530")

        assert format_date(parsed, "%Y%m%dT%H%M%S") == "20250704T181530"


@pytest.mark.unit
class TestDayArithmetic:
    """Tests for day-level helpers."""

    def test_start_and_end_of_day(self):
        """Test day boundaries."""
        dt = datetime(2025, 1, 15, 10, 45, 12, 500)

        assert start_of_day(dt) == datetime(2025, 1, 15)
        assert end_of_day(dt) == datetime(2025, 1, 15, 23, 59, 59)

    def test_add_days_negative(self):
        """Test adding negative day counts."""
        assert add_days(datetime(2025, 3, 1, 8), -1) == datetime(2025, 2, 28, 8)

    def test_day_of_week_is_iso(self):
        """Test Monday is 1 and Sunday is 7."""
        assert day_of_week(datetime(2025, 1, 13)) == 1
        assert day_of_week(datetime(2025, 1, 19)) == 7

    def test_is_today_and_is_past(self):
        """Test comparisons against an explicit now."""
        now = datetime(2025, 1, 15, 12)

        assert is_today(datetime(2025, 1, 15, 23, 59), now)
        assert not is_today(datetime(2025, 1, 16), now)
        assert is_past(datetime(2025, 1, 15, 11), now)
        assert not is_past(datetime(2025, 1, 15, 13), now)


@pytest.mark.unit
class TestWeekdayNames:
    """Tests for weekday abbreviation conversion."""

    @pytest.mark.parametrize(
        ("abbrev", "number"),
        [("MO", 1), ("TU", 2), ("WE", 3), ("TH", 4), ("FR", 5), ("SA", 6), ("SU", 7)],
    )
    def test_round_trip(self, abbrev, number):
        """Test every abbreviation maps to its ISO number and back."""
        assert day_abbrev_to_num(abbrev) == number
        assert day_num_to_abbrev(number) == abbrev

    def test_case_insensitive(self):
        """Test lowercase abbreviations are accepted."""
        assert day_abbrev_to_num("we") == 3

    def test_unknown_values(self):
        """Test unknown abbreviations and numbers."""
        assert day_abbrev_to_num("XX") is None
        assert day_num_to_abbrev(0) == "MO"
        assert day_num_to_abbrev(8) == "MO"


@pytest.mark.unit
class TestDecodeIcalText:
    """Tests for TEXT unescaping."""

    def test_all_escapes(self):
        """Test newline, comma, semicolon and backslash escapes."""
        raw = "Line1\\nLine2\\NLine3\\, with\\; stuff\\\\"

        assert decode_ical_text(raw) == "Line1\nLine2\nLine3, with; stuff\\"

    def test_escaped_backslash_not_reinterpreted(self):
        """Test an escaped backslash followed by n stays a literal n."""
        assert decode_ical_text("C:\\\\new") == "C:\\new"

    def test_empty_values(self):
        """Test None and empty input."""
        assert decode_ical_text(None) == ""
        assert decode_ical_text("") == ""

    def test_unknown_escape_kept(self):
        """Test unsupported escapes are left untouched."""
        assert decode_ical_text("a\\tb") == "a\\tb"


@pytest.mark.unit
class TestReadTextFile:
    """Tests for read_text_file."""

    def test_invalid_utf8_replaced(self, tmp_path):
        """Test undecodable bytes do not abort reading."""
        path = tmp_path / "latin1.ics"
        path.write_bytes(b"SUMMARY:Caf\xe9\r\n")

        content = read_text_file(path)

        assert content.startswith("SUMMARY:Caf\ufffd")
        assert content.endswith("\r\n")

    def test_missing_file_raises(self, tmp_path):
        """Test missing files raise OSError."""
        with pytest.raises(OSError):
            read_text_file(tmp_path / "missing.ics")
