"""Salon and staff calendar models (opening hours, breaks, vacations)."""

from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from utils.datetime_utils import parse_time_of_day
from utils.logging_config import get_logger
from utils.validation import validate_time_string

logger = get_logger(__name__)


class DayOfWeek(str, Enum):
    """Day of week, ordered Monday first (ISO)."""

    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @property
    def label(self) -> str:
        """French label used by the stored salon documents."""
        return FRENCH_LABELS[self]

    @classmethod
    def from_date(cls, value: date) -> "DayOfWeek":
        return WEEK[value.weekday()]

    @classmethod
    def parse(cls, value: Any) -> "DayOfWeek":
        """
        Convert a stored day key into a DayOfWeek.

        Accepts enum members, enum values, English or French names
        (case-insensitive) and ISO indexes (0 = Monday).
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            if 0 <= value < 7:
                return WEEK[value]
            raise ValueError(f"Day index out of range: {value}")
        key = str(value).strip().lower()
        day = _LOOKUP.get(key)
        if day is None:
            raise ValueError(f"Unknown day of week: {value!r}")
        return day


WEEK: List[DayOfWeek] = list(DayOfWeek)

FRENCH_LABELS: Dict[DayOfWeek, str] = {
    DayOfWeek.MONDAY: "Lundi",
    DayOfWeek.TUESDAY: "Mardi",
    DayOfWeek.WEDNESDAY: "Mercredi",
    DayOfWeek.THURSDAY: "Jeudi",
    DayOfWeek.FRIDAY: "Vendredi",
    DayOfWeek.SATURDAY: "Samedi",
    DayOfWeek.SUNDAY: "Dimanche",
}

_LOOKUP: Dict[str, DayOfWeek] = {}
for _day in WEEK:
    _LOOKUP[_day.value] = _day
    _LOOKUP[_day.name.lower()] = _day
    _LOOKUP[FRENCH_LABELS[_day].lower()] = _day


def _keep_valid(model, entries: Any, what: str) -> Any:
    """Validate list entries one by one, dropping the malformed ones."""
    if not isinstance(entries, list):
        return entries
    kept = []
    for entry in entries:
        try:
            kept.append(model.model_validate(entry))
        except ValidationError as e:
            logger.warning(f"Ignoring invalid {what} {entry!r}: {e.error_count()} error(s)")
    return kept


def _keep_valid_days(value: Any, model=None, what: str = "entry") -> Any:
    """
    Key a stored per-day mapping by DayOfWeek.

    Unknown day names and entries `model` rejects are dropped, so a bad
    entry only closes its own weekday.
    """
    if not isinstance(value, dict):
        return value
    days = {}
    for key, entry in value.items():
        try:
            day = DayOfWeek.parse(key)
        except ValueError:
            logger.warning(f"Ignoring unknown day {key!r} in calendar document")
            continue
        if model is None:
            days[day] = entry
            continue
        try:
            days[day] = model.model_validate(entry)
        except ValidationError as e:
            logger.warning(f"Ignoring invalid {what} for {day.label}: {e.error_count()} error(s)")
    return days


class TimeRange(BaseModel):
    """Time-of-day range, "HH:mm" to "HH:mm", start strictly before end."""

    model_config = ConfigDict(populate_by_name=True)

    start: str
    end: str

    @field_validator("start", "end")
    @classmethod
    def _check_time(cls, value: str) -> str:
        if not validate_time_string(value):
            raise ValueError(f"Invalid time of day: {value!r}, expected HH:mm")
        return value.strip()

    @model_validator(mode="after")
    def _check_order(self) -> "TimeRange":
        if self.start_minute >= self.end_minute:
            raise ValueError(f"start {self.start} must be before end {self.end}")
        return self

    @property
    def start_minute(self) -> int:
        return parse_time_of_day(self.start)

    @property
    def end_minute(self) -> int:
        return parse_time_of_day(self.end)


class Break(TimeRange):
    """Recurring weekly closure window (salon-wide or for one staff member)."""

    id: Optional[str] = None
    day: DayOfWeek

    @field_validator("day", mode="before")
    @classmethod
    def _parse_day(cls, value: Any) -> DayOfWeek:
        return DayOfWeek.parse(value)


class Vacation(BaseModel):
    """Closed date range, inclusive of both ends."""

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = None
    start_date: date = Field(..., alias="startDate")
    end_date: date = Field(..., alias="endDate")
    description: Optional[str] = None

    @model_validator(mode="after")
    def _check_order(self) -> "Vacation":
        if self.start_date > self.end_date:
            raise ValueError("startDate must not be after endDate")
        return self

    def covers(self, day: date) -> bool:
        if isinstance(day, datetime):
            day = day.date()
        return self.start_date <= day <= self.end_date


class DaySchedule(BaseModel):
    """A staff member's working ranges for one weekday."""

    working: bool = False
    ranges: List[TimeRange] = Field(default_factory=list)

    @field_validator("ranges", mode="before")
    @classmethod
    def _parse_ranges(cls, value: Any) -> Any:
        return _keep_valid(TimeRange, value, "working range")

    @property
    def effective_ranges(self) -> List[TimeRange]:
        # ranges are ignored on a day off
        return list(self.ranges) if self.working else []


class SalonConfig(BaseModel):
    """Salon-wide operating calendar (single document)."""

    model_config = ConfigDict(populate_by_name=True)

    work_days: Dict[DayOfWeek, bool] = Field(default_factory=dict, alias="workDays")
    work_hours: Dict[DayOfWeek, TimeRange] = Field(
        default_factory=dict, alias="workHours"
    )
    breaks: List[Break] = Field(default_factory=list)
    vacations: List[Vacation] = Field(default_factory=list)
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")

    @field_validator("work_days", mode="before")
    @classmethod
    def _parse_work_days(cls, value: Any) -> Any:
        return _keep_valid_days(value)

    @field_validator("work_hours", mode="before")
    @classmethod
    def _parse_work_hours(cls, value: Any) -> Any:
        return _keep_valid_days(value, TimeRange, "working hours")

    @field_validator("breaks", mode="before")
    @classmethod
    def _parse_breaks(cls, value: Any) -> Any:
        return _keep_valid(Break, value, "salon break")

    @field_validator("vacations", mode="before")
    @classmethod
    def _parse_vacations(cls, value: Any) -> Any:
        return _keep_valid(Vacation, value, "salon vacation")

    def is_open_on(self, day: DayOfWeek) -> bool:
        return bool(self.work_days.get(day, False))

    def hours_for(self, day: DayOfWeek) -> Optional[TimeRange]:
        return self.work_hours.get(day)

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)

    @classmethod
    def default(cls) -> "SalonConfig":
        """Opening calendar proposed before the salon saves its own."""
        hours = {day: TimeRange(start="09:00", end="19:00") for day in WEEK[:5]}
        hours[DayOfWeek.SATURDAY] = TimeRange(start="09:00", end="17:00")
        hours[DayOfWeek.SUNDAY] = TimeRange(start="10:00", end="13:00")
        return cls(
            work_days={day: day is not DayOfWeek.SUNDAY for day in WEEK},
            work_hours=hours,
        )


class StaffAvailability(BaseModel):
    """Personal calendar of one staff member."""

    model_config = ConfigDict(populate_by_name=True)

    staff_id: str = Field(..., alias="staffId")
    working_hours: Dict[DayOfWeek, DaySchedule] = Field(
        default_factory=dict, alias="workingHours"
    )
    breaks: List[Break] = Field(default_factory=list)
    vacations: List[Vacation] = Field(default_factory=list)

    @field_validator("working_hours", mode="before")
    @classmethod
    def _parse_working_hours(cls, value: Any) -> Any:
        return _keep_valid_days(value, DaySchedule, "staff schedule")

    @field_validator("breaks", mode="before")
    @classmethod
    def _parse_breaks(cls, value: Any) -> Any:
        return _keep_valid(Break, value, "staff break")

    @field_validator("vacations", mode="before")
    @classmethod
    def _parse_vacations(cls, value: Any) -> Any:
        return _keep_valid(Vacation, value, "staff vacation")

    def schedule_for(self, day: DayOfWeek) -> Optional[DaySchedule]:
        return self.working_hours.get(day)

    def is_working_on(self, day: DayOfWeek) -> bool:
        schedule = self.schedule_for(day)
        return bool(schedule and schedule.working)

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)
