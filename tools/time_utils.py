"""
Time Utilities
Reminder offset parsing and time-of-day resolution
"""

import re
from typing import Optional, Union
from datetime import date, datetime, timedelta


_UNIT_MS = {
    "m": 60 * 1000,
    "h": 60 * 60 * 1000,
}

_NUMERIC_PREFIX = re.compile(r"\s*(\d+)\s*")


class InvalidDurationError(ValueError):
    """Offset string with a recognised unit but an unusable number"""


def parse_duration_ms(value: Optional[str]) -> int:
    """
    Parse a compact offset string into milliseconds

    "15m" -> 900000, "2h" -> 7200000. Empty input or a unit other than
    m/h yields 0. A bad numeric prefix ("xm", "-5m", "1.5h") raises
    InvalidDurationError.
    """
    if not value:
        return 0

    text = value.strip()
    unit = text[-1:]
    if unit not in _UNIT_MS:
        return 0

    match = _NUMERIC_PREFIX.fullmatch(text[:-1])
    if not match:
        raise InvalidDurationError(f"Malformed duration: {value!r}")

    return int(match.group(1)) * _UNIT_MS[unit]


def parse_duration(value: Optional[str]) -> timedelta:
    """Same as parse_duration_ms, as a timedelta"""
    return timedelta(milliseconds=parse_duration_ms(value))


def resolve_time(time_of_day: str, reference: Union[date, datetime]) -> datetime:
    """
    Combine an "HH:MM" time of day with the calendar date of reference

    Seconds and microseconds are zeroed. Raises ValueError for malformed
    or out-of-range input.
    """
    try:
        hours, minutes = (int(part) for part in time_of_day.split(":"))
    except (AttributeError, ValueError):
        raise ValueError(f"Malformed time of day: {time_of_day!r}")

    return datetime(reference.year, reference.month, reference.day, hours, minutes, 0)


def format_time_of_day(value: datetime) -> str:
    return value.strftime("%H:%M")
