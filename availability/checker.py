"""
Interval checker for manual calendar selections.

Unlike the resolver, the selection is arbitrary (not aligned to the slot
grid nor to a service duration), so the salon and staff calendars are
checked against its raw boundaries.
"""

from datetime import datetime
from typing import Optional

from availability.rules import breaks_on, salon_closed_on, staff_off_on, window_hits_break
from models.schedule import DayOfWeek, SalonConfig, StaffAvailability
from models.slot import BlockReason
from utils.datetime_utils import local_now, minute_of_day, minutes_since_day_start, start_of_day


def unavailability_reason(
    start: datetime,
    end: datetime,
    salon_config: Optional[SalonConfig] = None,
    staff_availability: Optional[StaffAvailability] = None,
    staff_filter: Optional[str] = None,
) -> Optional[BlockReason]:
    """
    Explain why [start, end) cannot be booked, or return None if it can.

    Staff rules only apply when `staff_filter` names a staff member.
    """
    if end <= start:
        return BlockReason.INVALID_INTERVAL

    day = start.date()
    reason = salon_closed_on(salon_config, day)
    if reason is not None:
        return reason

    if staff_filter:
        reason = staff_off_on(staff_availability, day, staff_filter)
        if reason is not None:
            return reason

    weekday = DayOfWeek.from_date(day)
    start_minute = minute_of_day(start)
    # measured from the start day so a selection past midnight ends late
    end_minute = minutes_since_day_start(end, day)

    salon_hours = salon_config.hours_for(weekday)
    if salon_hours is None:
        return BlockReason.OUTSIDE_SALON_HOURS
    if start_minute < salon_hours.start_minute or end_minute > salon_hours.end_minute:
        return BlockReason.OUTSIDE_SALON_HOURS

    if window_hits_break(start_minute, end_minute, breaks_on(salon_config.breaks, weekday)):
        return BlockReason.SALON_BREAK

    if staff_filter:
        schedule = staff_availability.schedule_for(weekday)
        within_range = any(
            r.start_minute <= start_minute and end_minute <= r.end_minute
            for r in schedule.effective_ranges
        )
        if not within_range:
            return BlockReason.OUTSIDE_STAFF_HOURS
        if window_hits_break(
            start_minute, end_minute, breaks_on(staff_availability.breaks, weekday)
        ):
            return BlockReason.STAFF_BREAK

    return None


def is_slot_unavailable(
    start: datetime,
    end: datetime,
    salon_config: Optional[SalonConfig] = None,
    staff_availability: Optional[StaffAvailability] = None,
    staff_filter: Optional[str] = None,
) -> bool:
    """True when the salon (and the filtered staff member) cannot take [start, end)."""
    return (
        unavailability_reason(start, end, salon_config, staff_availability, staff_filter)
        is not None
    )


def is_before_today(start: datetime, now: Optional[datetime] = None) -> bool:
    """True when `start` falls before today's midnight."""
    now = (now or local_now()).replace(tzinfo=None)
    return start.replace(tzinfo=None) < start_of_day(now)


def selection_block_reason(
    start: datetime,
    end: datetime,
    salon_config: Optional[SalonConfig] = None,
    staff_availability: Optional[StaffAvailability] = None,
    staff_filter: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Optional[BlockReason]:
    """Past-day guard first, then the calendar rules."""
    if is_before_today(start, now):
        return BlockReason.PAST_DAY
    return unavailability_reason(
        start.replace(tzinfo=None),
        end.replace(tzinfo=None),
        salon_config,
        staff_availability,
        staff_filter,
    )


def can_select_interval(
    start: datetime,
    end: datetime,
    salon_config: Optional[SalonConfig] = None,
    staff_availability: Optional[StaffAvailability] = None,
    staff_filter: Optional[str] = None,
    now: Optional[datetime] = None,
) -> bool:
    return (
        selection_block_reason(
            start, end, salon_config, staff_availability, staff_filter, now
        )
        is None
    )
