"""Calendar status models for days, cells and manual selections."""

from enum import Enum


class DayStatus(str, Enum):
    """Status of a whole calendar day."""

    OPEN = "open"
    SALON_CLOSED = "salon_closed"
    STAFF_OFF = "staff_off"


class CellStatus(str, Enum):
    """Status of a calendar cell starting at a given instant."""

    OPEN = "open"
    CLOSED = "closed"
    BREAK = "break"
    STAFF_OFF = "staff_off"
    STAFF_BREAK = "staff_break"


class BlockReason(str, Enum):
    """Why a manually selected interval cannot be booked."""

    PAST_DAY = "past_day"
    INVALID_INTERVAL = "invalid_interval"
    NO_CONFIGURATION = "no_configuration"
    SALON_CLOSED = "salon_closed"
    SALON_VACATION = "salon_vacation"
    OUTSIDE_SALON_HOURS = "outside_salon_hours"
    SALON_BREAK = "salon_break"
    STAFF_OFF = "staff_off"
    STAFF_VACATION = "staff_vacation"
    OUTSIDE_STAFF_HOURS = "outside_staff_hours"
    STAFF_BREAK = "staff_break"
