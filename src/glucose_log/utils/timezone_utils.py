"""
Timezone and datetime utilities.

Readings carry their instant as epoch milliseconds; these helpers convert
between that representation and timezone-aware datetimes.
"""

from datetime import datetime

import pytz
from dateutil import parser

MS_PER_DAY = 24 * 60 * 60 * 1000


def make_timezone_aware(
    dt: datetime, timezone_str: str = "UTC", assume_local: bool = False
) -> datetime:
    """
    Make a datetime object timezone-aware.

    Args:
        dt: Datetime object (may be naive or aware).
        timezone_str: Timezone string (e.g., "America/Santiago").
        assume_local: If True and dt is naive, assume it's in timezone_str.

    Returns:
        Timezone-aware datetime object.
    """
    tz = pytz.timezone(timezone_str)

    if dt.tzinfo is None:
        if assume_local:
            return tz.localize(dt)
        else:
            return pytz.utc.localize(dt).astimezone(tz)
    else:
        return dt.astimezone(tz)


def parse_datetime(
    date_str: str, time_str: str | None = None, timezone_str: str = "UTC"
) -> datetime:
    """
    Parse date and optional time strings into timezone-aware datetime.

    Args:
        date_str: ISO date string ("YYYY-MM-DD").
        time_str: Optional ISO time string ("HH:MM" or "HH:MM:SS").
        timezone_str: Timezone the wall-clock values are expressed in.

    Returns:
        Timezone-aware datetime object.

    Raises:
        ValueError: If the strings cannot be parsed.
    """
    if time_str:
        combined = f"{date_str}T{time_str}"
    else:
        combined = date_str

    dt = parser.isoparse(combined)

    return make_timezone_aware(dt, timezone_str, assume_local=True)


def to_epoch_ms(dt: datetime) -> int:
    """Convert an aware datetime to epoch milliseconds."""
    return int(round(dt.timestamp() * 1000))


def from_epoch_ms(epoch_ms: int, timezone_str: str = "UTC") -> datetime:
    """Convert epoch milliseconds to an aware datetime in ``timezone_str``."""
    return datetime.fromtimestamp(epoch_ms / 1000, tz=pytz.timezone(timezone_str))


def day_bounds_ms(start_date: str, end_date: str, timezone_str: str = "UTC") -> tuple[int, int]:
    """
    Compute the inclusive epoch-millisecond bounds of a calendar date range.

    The range runs from ``start_date`` at 00:00:00 to ``end_date`` at 23:59:59.

    Args:
        start_date: First day of the range.
        end_date: Last day of the range.
        timezone_str: Timezone the calendar days belong to.

    Returns:
        Tuple of (start_ms, end_ms).
    """
    start = parse_datetime(start_date, "00:00:00", timezone_str)
    end = parse_datetime(end_date, "23:59:59", timezone_str)
    return to_epoch_ms(start), to_epoch_ms(end)
