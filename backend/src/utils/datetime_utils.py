"""
Datetime utilities for consistent time handling across the application.

Time-of-day values are handled internally as integer minutes since midnight;
"HH:MM" strings only appear at the API and adapter boundaries. Clinics carry
their own IANA timezone, used to decide what "now" means for same-day slots.
"""

import logging
from datetime import datetime, date, time, timezone
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from core.config import DEFAULT_TIMEZONE
from core.constants import MINUTES_PER_DAY

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    """Get the current timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def get_timezone(name: Optional[str]) -> ZoneInfo:
    """
    Resolve an IANA timezone name, falling back to DEFAULT_TIMEZONE.

    Unknown names are logged and replaced by the default rather than failing
    the request.
    """
    if name:
        try:
            return ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning(f"Unknown timezone '{name}', using {DEFAULT_TIMEZONE}")
    return ZoneInfo(DEFAULT_TIMEZONE)


def clinic_now(timezone_name: Optional[str] = None) -> datetime:
    """Get the current datetime in the clinic's timezone."""
    return datetime.now(get_timezone(timezone_name))


def parse_date_string(date_str: str) -> date:
    """
    Parse a date string in YYYY-MM-DD format.

    Raises:
        ValueError: If the string is not a valid calendar date
    """
    return datetime.strptime(date_str, "%Y-%m-%d").date()


def parse_time_to_minutes(time_str: str) -> int:
    """
    Parse an "HH:MM" string into minutes since midnight.

    "24:00" is accepted as the end of the day (1440).

    Raises:
        ValueError: If the string is not a valid 24-hour time
    """
    parts = time_str.split(":")
    if len(parts) != 2 or not all(len(p) == 2 and p.isdigit() for p in parts):
        raise ValueError(f"Invalid time format (expected HH:MM): {time_str!r}")
    hour, minute = int(parts[0]), int(parts[1])
    if hour == 24 and minute == 0:
        return MINUTES_PER_DAY
    if hour > 23 or minute > 59:
        raise ValueError(f"Invalid time of day: {time_str!r}")
    return hour * 60 + minute


def format_minutes(minutes: int) -> str:
    """Format minutes since midnight as "HH:MM"."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def time_to_minutes(value: time) -> int:
    """Convert a ``datetime.time`` into minutes since midnight."""
    return value.hour * 60 + value.minute


def minutes_to_time(minutes: int) -> time:
    """
    Convert minutes since midnight into a ``datetime.time``.

    The end-of-day value (1440) is stored as 23:59:59 since ``time`` has no 24:00.
    """
    if minutes >= MINUTES_PER_DAY:
        return time(23, 59, 59)
    return time(minutes // 60, minutes % 60)


def stored_end_to_minutes(value: time) -> int:
    """Inverse of ``minutes_to_time`` for interval end values."""
    if value == time(23, 59, 59):
        return MINUTES_PER_DAY
    return time_to_minutes(value)


def day_of_week(value: date) -> int:
    """Day of week with 0=Sunday ... 6=Saturday (Python's weekday() starts on Monday)."""
    return (value.weekday() + 1) % 7
