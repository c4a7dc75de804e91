"""
Time-of-day and date primitives shared by the availability engine.
All values are local wall-clock times; no timezone conversion is performed.

Times of day are zero-padded 24h "HH:mm" strings at the boundary and
minutes since midnight internally, so "<" on strings and on minutes agree.
"""

import re
from datetime import date, datetime, time, timedelta

MINUTES_PER_DAY = 24 * 60

_TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


def local_now() -> datetime:
    """
    Get the current local wall-clock time as a naive datetime.

    Returns:
        Current local datetime without timezone info
    """
    return datetime.now()


def parse_time_of_day(value: str) -> int:
    """
    Parse a "HH:mm" string into minutes since midnight.

    Args:
        value: Zero-padded 24h time string

    Returns:
        Minutes since midnight (0..1439)

    Raises:
        ValueError: If the string is not a valid "HH:mm" time
    """
    if not isinstance(value, str):
        raise ValueError(f"Invalid time of day: {value!r}")
    match = _TIME_PATTERN.match(value.strip())
    if not match:
        raise ValueError(f"Invalid time of day: {value!r}")
    return int(match.group(1)) * 60 + int(match.group(2))


def format_time_of_day(minutes: int) -> str:
    """Format minutes since midnight as "HH:mm"."""
    if not 0 <= minutes < MINUTES_PER_DAY:
        raise ValueError(f"Minutes out of day range: {minutes}")
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def parse_date(value) -> date:
    """
    Parse a "YYYY-MM-DD" string (or pass a date through).

    Raises:
        ValueError: If the value is not a valid calendar date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except ValueError as e:
        raise ValueError(f"Invalid date string: {value!r}") from e


def parse_iso_datetime(iso_string: str) -> datetime:
    """
    Parse ISO format datetime string to a naive wall-clock datetime.
    Handles 'Z' suffix and explicit offsets by keeping the wall-clock
    digits and dropping the offset.

    Args:
        iso_string: ISO format datetime string

    Returns:
        Naive datetime object

    Raises:
        ValueError: If datetime string cannot be parsed
    """
    if not isinstance(iso_string, str):
        raise ValueError(f"Invalid datetime string: {iso_string!r}")
    normalized = iso_string.strip().replace("Z", "+00:00")
    try:
        dt = datetime.fromisoformat(normalized)
    except ValueError as e:
        raise ValueError(f"Invalid datetime string: {iso_string}") from e
    return dt.replace(tzinfo=None)


def to_iso_string(dt: datetime) -> str:
    """Convert a datetime to an ISO string without offset."""
    return dt.replace(tzinfo=None).isoformat(timespec="seconds")


def minute_of_day(dt: datetime) -> int:
    """Minutes elapsed since midnight of the datetime's own day."""
    return dt.hour * 60 + dt.minute


def minutes_since_day_start(dt: datetime, day: date) -> int:
    """
    Minutes between midnight of `day` and `dt`.
    Values past 1439 mean the datetime falls on a later day.
    """
    delta = dt - datetime.combine(day, time.min)
    return int(delta.total_seconds() // 60)


def at_minute(day: date, minutes: int) -> datetime:
    """Build the datetime `minutes` after midnight of `day`."""
    return datetime.combine(day, time.min) + timedelta(minutes=minutes)


def start_of_day(dt: datetime) -> datetime:
    """Truncate a datetime to midnight."""
    return datetime.combine(dt.date(), time.min)


def overlaps(a_start, a_end, b_start, b_end) -> bool:
    """
    Half-open interval overlap test for [a_start, a_end) and [b_start, b_end).
    Touching intervals do not overlap.
    """
    return a_start < b_end and a_end > b_start


def window_hits(start, end, block_start, block_end) -> bool:
    """
    Three-way test used for manual selections against a closed window:
    the selection starts inside the window, ends inside it, or contains it.
    """
    return (
        (block_start <= start < block_end)
        or (block_start < end <= block_end)
        or (start <= block_start and end >= block_end)
    )


def is_in_window(point, window_start, window_end) -> bool:
    """True when `window_start <= point < window_end`."""
    return window_start <= point < window_end
