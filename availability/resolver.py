"""
Availability resolver.

Computes the bookable start times ("HH:mm") for a service of a given
duration, for one staff member on one day, from the salon calendar, the
staff calendar and the appointments already booked.
"""

from datetime import date, datetime
from typing import Iterable, List, Optional

from availability.rules import (
    SLOT_STEP_MINUTES,
    breaks_on,
    clip_ranges,
    salon_closed_on,
    staff_off_on,
    window_overlaps_break,
)
from models.appointment import Appointment
from models.schedule import Break, DayOfWeek, SalonConfig, StaffAvailability
from utils.datetime_utils import at_minute, format_time_of_day, local_now, overlaps
from utils.logging_config import get_logger
from utils.validation import validate_duration

logger = get_logger(__name__)


def appointments_for_day(
    appointments: Optional[Iterable[Appointment]], staff_id: str, day: date
) -> List[Appointment]:
    """Appointments of `staff_id` whose ISO start begins with the day's date."""
    return [
        appointment
        for appointment in appointments or []
        if appointment.staff_id == staff_id and appointment.starts_on(day)
    ]


def compute_available_slots(
    day: date,
    staff_id: str,
    duration_minutes: int,
    salon_config: Optional[SalonConfig],
    staff_availability: Optional[StaffAvailability],
    appointments: Optional[Iterable[Appointment]],
    now: Optional[datetime] = None,
    step_minutes: int = SLOT_STEP_MINUTES,
) -> List[str]:
    """
    List the start times at which a `duration_minutes` service fits.

    Candidates are walked every `step_minutes` from the start of each
    working range. A candidate is kept when the whole service fits in the
    range, starts after `now`, does not overlap a salon or staff break and
    does not overlap an appointment of the same staff member.

    Never raises: missing or unusable configuration and non-positive
    durations give an empty list.

    Args:
        day: Requested calendar day
        staff_id: Staff member the appointment is for
        duration_minutes: Service duration, positive minutes
        salon_config: Salon calendar, None if not configured
        staff_availability: Staff calendar, None if not configured
        appointments: Existing appointments (any staff, any day)
        now: Current wall-clock time; defaults to the system clock
        step_minutes: Grid step between candidate starts

    Returns:
        Start times in ascending order
    """
    if not validate_duration(duration_minutes) or step_minutes <= 0:
        logger.warning(
            f"Rejected slot request: duration={duration_minutes!r}, step={step_minutes!r}"
        )
        return []

    if isinstance(day, datetime):
        day = day.date()
    now = (now or local_now()).replace(tzinfo=None)

    if salon_closed_on(salon_config, day) is not None:
        return []
    if staff_off_on(staff_availability, day, staff_id) is not None:
        return []

    weekday = DayOfWeek.from_date(day)
    salon_hours = salon_config.hours_for(weekday)
    if salon_hours is None:
        logger.warning(f"Salon open on {weekday.label} but has no working hours")
        return []

    schedule = staff_availability.schedule_for(weekday)
    work_ranges = clip_ranges(schedule.effective_ranges, salon_hours)
    if not work_ranges:
        return []

    breaks: List[Break] = breaks_on(salon_config.breaks, weekday) + breaks_on(
        staff_availability.breaks, weekday
    )
    booked = appointments_for_day(appointments, staff_id, day)

    slots: List[str] = []
    for range_start, range_end in work_ranges:
        current = range_start
        while current <= range_end:
            slot_end = current + duration_minutes
            if slot_end > range_end:
                break

            slot_start_at = at_minute(day, current)
            slot_end_at = at_minute(day, slot_end)

            is_past = slot_start_at <= now
            on_break = window_overlaps_break(current, slot_end, breaks)
            conflicts = any(
                overlaps(slot_start_at, slot_end_at, a.start_at, a.end_at)
                for a in booked
            )

            if not (is_past or on_break or conflicts):
                slots.append(format_time_of_day(current))

            current += step_minutes

    return slots
