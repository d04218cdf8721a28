"""Tests for utils/dates.py - UTC timestamps and wizard clock times."""

from datetime import date, time, timezone

import pytest

from utils.dates import duration_hours, end_time_after, now_utc, parse_clock_time, parse_event_date


class TestNowUtc:
    """Tests for now_utc()."""

    def test_is_utc(self):
        """Result must be timezone-aware UTC."""
        assert now_utc().tzinfo == timezone.utc


class TestParseClockTime:
    """Tests for parse_clock_time()."""

    def test_parses_24h_time(self):
        """HH:MM in 24h form parses to a time."""
        assert parse_clock_time("07:30") == time(7, 30)
        assert parse_clock_time(" 23:05 ") == time(23, 5)

    @pytest.mark.parametrize("value", ["7pm", "25:00", "", "12:60", None])
    def test_rejects_anything_else(self, value):
        """Anything but HH:MM is a ValueError."""
        with pytest.raises(ValueError, match="HH:MM"):
            parse_clock_time(value)


class TestParseEventDate:
    """Tests for parse_event_date()."""

    def test_parses_iso_date(self):
        """Event dates are ISO dates."""
        assert parse_event_date("2026-12-12") == date(2026, 12, 12)

    def test_rejects_other_formats(self):
        """Day-first and other formats are rejected."""
        with pytest.raises(ValueError, match="YYYY-MM-DD"):
            parse_event_date("12/12/2026")


class TestDurationHours:
    """Tests for duration_hours()."""

    @pytest.mark.parametrize("start,end,expected", [
        ("07:30", "15:30", 8),
        ("10:00", "13:30", 3.5),
        ("19:00", "01:00", 6),      # past midnight
        ("12:00", "12:00", 0),
        ("23:45", "00:15", 0.5),
    ])
    def test_durations(self, start, end, expected):
        """Hours between times, wrapping past midnight."""
        assert duration_hours(start, end) == pytest.approx(expected)


class TestEndTimeAfter:
    """Tests for end_time_after()."""

    @pytest.mark.parametrize("start,hours,expected", [
        ("07:30", 8, "15:30"),
        ("07:30", 2.5, "10:00"),
        ("20:00", 6, "02:00"),
        ("07:30", 0, "07:30"),
    ])
    def test_end_times(self, start, hours, expected):
        """End time after a number of hours, wrapping past midnight."""
        assert end_time_after(start, hours) == expected
