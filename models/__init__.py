"""Pydantic models for data validation and serialization."""

from .appointment import Appointment, AppointmentCreate, AppointmentSource
from .schedule import (
    Break,
    DayOfWeek,
    DaySchedule,
    SalonConfig,
    StaffAvailability,
    TimeRange,
    Vacation,
)
from .service import Service, format_duration
from .slot import BlockReason, CellStatus, DayStatus

__all__ = [
    "Appointment",
    "AppointmentCreate",
    "AppointmentSource",
    "BlockReason",
    "Break",
    "CellStatus",
    "DayOfWeek",
    "DaySchedule",
    "DayStatus",
    "SalonConfig",
    "Service",
    "StaffAvailability",
    "TimeRange",
    "Vacation",
    "format_duration",
]
