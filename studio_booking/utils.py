"""Shared utilities used across the booking engine."""

import re
from datetime import date, datetime, time, timedelta

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def normalize_phone(value: str) -> str:
    """Normalize a phone number by stripping everything except digits and a leading +.

    Examples:
        >>> normalize_phone("0412 345 678")
        '0412345678'
        >>> normalize_phone("+61 (412) 345-678")
        '+61412345678'
    """
    value = value.strip()
    if value.startswith("+"):
        return "+" + re.sub(r"[^\d]", "", value[1:])
    return re.sub(r"[^\d]", "", value)


def is_valid_email(value: str) -> bool:
    return bool(_EMAIL_RE.match(value.strip()))


def day_bounds(day: date) -> tuple[datetime, datetime]:
    """Return the half-open ``[midnight, next midnight)`` window for a date."""
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)


def window_for(day: date, start_time: time, duration_hours: float) -> tuple[datetime, datetime]:
    """Build the ``[start, start + duration)`` window for a start time on a date."""
    start = datetime.combine(day, start_time)
    return start, start + timedelta(hours=duration_hours)


def split_hours(duration_hours: float) -> tuple[int, int]:
    """Split fractional hours into whole hours and remaining minutes.

    Examples:
        >>> split_hours(2.5)
        (2, 30)
        >>> split_hours(1.0)
        (1, 0)
    """
    hours = int(duration_hours)
    minutes = int(round((duration_hours - hours) * 60))
    return hours, minutes
