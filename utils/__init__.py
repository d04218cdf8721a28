"""Utility modules for cross-cutting concerns."""

from utils.dates import now_utc, parse_clock_time, parse_event_date, duration_hours, end_time_after
