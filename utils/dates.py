"""
Date and clock-time helpers.

Timestamps are UTC everywhere. Event schedules are different: the wizard
collects a calendar date plus wall-clock "HH:MM" times at the venue, with
no timezone. Those stay naive and are only used to derive durations.
"""

from datetime import date, datetime, time, timedelta, timezone


def now_utc() -> datetime:
    """
    Current time in UTC.

    Use this instead of datetime.now() everywhere.
    """
    return datetime.now(timezone.utc)


def parse_clock_time(value: str) -> time:
    """
    Parse a wall-clock time in 24h "HH:MM" form.

    Raises ValueError for anything else ("7pm", "25:00", "").
    """
    try:
        return datetime.strptime(value.strip(), "%H:%M").time()
    except (AttributeError, ValueError):
        raise ValueError(f"Invalid clock time '{value}', expected HH:MM")


def parse_event_date(value: str) -> date:
    """Parse an ISO calendar date (YYYY-MM-DD)."""
    try:
        return date.fromisoformat(value.strip())
    except (AttributeError, ValueError):
        raise ValueError(f"Invalid event date '{value}', expected YYYY-MM-DD")


def duration_hours(start: str, end: str) -> float:
    """
    Hours between two "HH:MM" clock times.

    An end earlier than the start is a function running past midnight
    (e.g. a reception from 19:00 to 01:00 is 6 hours). Equal times are 0.
    """
    start_t = parse_clock_time(start)
    end_t = parse_clock_time(end)

    start_minutes = start_t.hour * 60 + start_t.minute
    end_minutes = end_t.hour * 60 + end_t.minute
    if end_minutes < start_minutes:
        end_minutes += 24 * 60

    return timedelta(minutes=end_minutes - start_minutes).total_seconds() / 3600


def end_time_after(start: str, hours: float) -> str:
    """Clock time `hours` after `start`, wrapping past midnight."""
    start_t = parse_clock_time(start)
    end_minutes = start_t.hour * 60 + start_t.minute + round(hours * 60)
    end_minutes %= 24 * 60
    return f"{end_minutes // 60:02d}:{end_minutes % 60:02d}"
