"""Day and cell classification for the calendar view."""

from datetime import date, datetime
from typing import List, Optional, Tuple

from availability.rules import (
    SLOT_STEP_MINUTES,
    breaks_on,
    point_in_break,
    salon_closed_on,
    staff_off_on,
)
from models.schedule import DayOfWeek, SalonConfig, StaffAvailability
from models.slot import CellStatus, DayStatus
from utils.datetime_utils import MINUTES_PER_DAY, at_minute, format_time_of_day, minute_of_day


def classify_day(
    day: date,
    salon_config: Optional[SalonConfig],
    staff_availability: Optional[StaffAvailability] = None,
    staff_filter: Optional[str] = None,
) -> DayStatus:
    if isinstance(day, datetime):
        day = day.date()
    if salon_closed_on(salon_config, day) is not None:
        return DayStatus.SALON_CLOSED
    if staff_filter and staff_off_on(staff_availability, day, staff_filter) is not None:
        return DayStatus.STAFF_OFF
    return DayStatus.OPEN


def classify_cell(
    instant: datetime,
    salon_config: Optional[SalonConfig],
    staff_availability: Optional[StaffAvailability] = None,
    staff_filter: Optional[str] = None,
) -> CellStatus:
    """
    Status of the calendar cell starting at `instant`.

    The salon calendar wins over the staff calendar; a cell is closed
    from the closing time on (`open <= t < close` is open).
    """
    day_status = classify_day(instant, salon_config, staff_availability, staff_filter)
    if day_status is DayStatus.SALON_CLOSED:
        return CellStatus.CLOSED
    if day_status is DayStatus.STAFF_OFF:
        return CellStatus.STAFF_OFF

    weekday = DayOfWeek.from_date(instant.date())
    minute = minute_of_day(instant)

    hours = salon_config.hours_for(weekday)
    if hours is None or not hours.start_minute <= minute < hours.end_minute:
        return CellStatus.CLOSED
    if point_in_break(minute, breaks_on(salon_config.breaks, weekday)):
        return CellStatus.BREAK

    if staff_filter:
        ranges = staff_availability.schedule_for(weekday).effective_ranges
        if not any(r.start_minute <= minute < r.end_minute for r in ranges):
            return CellStatus.STAFF_OFF
        if point_in_break(minute, breaks_on(staff_availability.breaks, weekday)):
            return CellStatus.STAFF_BREAK

    return CellStatus.OPEN


def day_grid(
    day: date,
    salon_config: Optional[SalonConfig],
    staff_availability: Optional[StaffAvailability] = None,
    staff_filter: Optional[str] = None,
    step_minutes: int = SLOT_STEP_MINUTES,
) -> List[Tuple[str, CellStatus]]:
    """Classify every cell of a day, `step_minutes` apart from midnight."""
    if step_minutes <= 0:
        raise ValueError("step_minutes must be positive")
    return [
        (
            format_time_of_day(minute),
            classify_cell(
                at_minute(day, minute), salon_config, staff_availability, staff_filter
            ),
        )
        for minute in range(0, MINUTES_PER_DAY, step_minutes)
    ]
