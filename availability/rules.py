"""
Sub-checks shared by the slot resolver, the interval checker and the
calendar classification: weekday closure, vacation containment, break
overlap and working-range clipping.

Times are handled as minutes since midnight.
"""

from datetime import date, datetime
from typing import Iterable, List, Optional, Tuple

from models.schedule import Break, DayOfWeek, SalonConfig, StaffAvailability, TimeRange, Vacation
from models.slot import BlockReason
from utils.datetime_utils import is_in_window, overlaps, window_hits

SLOT_STEP_MINUTES = 15

MinuteRange = Tuple[int, int]


def _as_date(value) -> date:
    return value.date() if isinstance(value, datetime) else value


def on_vacation(vacations: Iterable[Vacation], day: date) -> bool:
    """True if any vacation covers the day (both ends inclusive)."""
    day = _as_date(day)
    return any(vacation.covers(day) for vacation in vacations)


def salon_closed_on(salon: Optional[SalonConfig], day: date) -> Optional[BlockReason]:
    """
    Why the salon is closed on `day`, or None when it opens.

    A missing salon document closes every day.
    """
    if salon is None:
        return BlockReason.NO_CONFIGURATION
    day = _as_date(day)
    if not salon.is_open_on(DayOfWeek.from_date(day)):
        return BlockReason.SALON_CLOSED
    if on_vacation(salon.vacations, day):
        return BlockReason.SALON_VACATION
    return None


def staff_off_on(
    staff: Optional[StaffAvailability],
    day: date,
    staff_id: Optional[str] = None,
) -> Optional[BlockReason]:
    """
    Why the staff member does not work on `day`, or None when they do.

    A missing record, or a record belonging to another staff member,
    counts as a day off.
    """
    if staff is None or (staff_id is not None and staff.staff_id != staff_id):
        return BlockReason.STAFF_OFF
    day = _as_date(day)
    if not staff.is_working_on(DayOfWeek.from_date(day)):
        return BlockReason.STAFF_OFF
    if on_vacation(staff.vacations, day):
        return BlockReason.STAFF_VACATION
    return None


def breaks_on(breaks: Iterable[Break], weekday: DayOfWeek) -> List[Break]:
    return [b for b in breaks if b.day == weekday]


def window_overlaps_break(start: int, end: int, breaks: Iterable[Break]) -> bool:
    """Half-open overlap of [start, end) with any break; touching is allowed."""
    return any(overlaps(start, end, b.start_minute, b.end_minute) for b in breaks)


def window_hits_break(start: int, end: int, breaks: Iterable[Break]) -> bool:
    """Three-way test of a manual selection against the breaks."""
    return any(window_hits(start, end, b.start_minute, b.end_minute) for b in breaks)


def point_in_break(minute: int, breaks: Iterable[Break]) -> bool:
    return any(is_in_window(minute, b.start_minute, b.end_minute) for b in breaks)


def merge_ranges(ranges: Iterable[MinuteRange]) -> List[MinuteRange]:
    """Sort ranges and merge the overlapping ones; touching ranges stay apart."""
    merged: List[MinuteRange] = []
    for start, end in sorted(ranges):
        if merged and start < merged[-1][1]:
            last_start, last_end = merged[-1]
            merged[-1] = (last_start, max(last_end, end))
        else:
            merged.append((start, end))
    return merged


def clip_ranges(ranges: Iterable[TimeRange], window: TimeRange) -> List[MinuteRange]:
    """
    Intersect working ranges with the salon window for the day.

    Ranges that do not overlap the window are dropped; the result is
    disjoint and in ascending order.
    """
    open_at, close_at = window.start_minute, window.end_minute
    clipped = []
    for time_range in ranges:
        start, end = time_range.start_minute, time_range.end_minute
        if start < close_at and end > open_at:
            clipped.append((max(start, open_at), min(end, close_at)))
    return merge_ranges(clipped)
