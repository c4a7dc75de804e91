"""Appointment (rdv) models."""

from datetime import date, datetime, timedelta
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from utils.datetime_utils import parse_iso_datetime, to_iso_string
from utils.validation import sanitize_text, validate_email, validate_phone


class AppointmentSource(str, Enum):
    """Who created the appointment."""

    ADMIN = "admin"
    CLIENT = "client"


_CLIENT_FIELDS = {
    "name": ("client_name", "clientName"),
    "phone": ("client_phone", "clientPhone"),
    "email": ("client_email", "clientEmail"),
}


def _flatten_client(data: Any) -> Any:
    """Lift a nested `client: {name, phone, email}` block into the flat fields."""
    if not isinstance(data, dict) or not isinstance(data.get("client"), dict):
        return data
    data = dict(data)
    client = data.pop("client")
    for key, (field, alias) in _CLIENT_FIELDS.items():
        if key in client and field not in data and alias not in data:
            data[alias] = client[key]
    return data


class Appointment(BaseModel):
    """
    Confirmed booking of one staff member.

    `start` and `end` keep the stored ISO strings; the parsed wall-clock
    values are available as `start_at` and `end_at`.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = None
    staff_id: str = Field(..., alias="staffId")
    start: str
    end: str
    service_duration: Optional[int] = Field(default=None, alias="serviceDuration", gt=0)
    service_id: Optional[str] = Field(default=None, alias="serviceId")
    service_title: Optional[str] = Field(default=None, alias="serviceTitle")
    client_name: Optional[str] = Field(default=None, alias="clientName")
    client_phone: Optional[str] = Field(default=None, alias="clientPhone")
    client_email: Optional[str] = Field(default=None, alias="clientEmail")
    notes: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    paid: bool = False
    source: str = AppointmentSource.ADMIN.value
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")

    @model_validator(mode="before")
    @classmethod
    def _nested_client(cls, data: Any) -> Any:
        return _flatten_client(data)

    @field_validator("start", "end")
    @classmethod
    def _check_iso(cls, value: str) -> str:
        parse_iso_datetime(value)
        return value.strip()

    @model_validator(mode="after")
    def _check_order(self) -> "Appointment":
        if self.start_at >= self.end_at:
            raise ValueError("appointment start must be before its end")
        return self

    @property
    def start_at(self) -> datetime:
        return parse_iso_datetime(self.start)

    @property
    def end_at(self) -> datetime:
        return parse_iso_datetime(self.end)

    def starts_on(self, day: date) -> bool:
        """Date-prefix match on the stored ISO start."""
        return self.start.startswith(day.isoformat())


class AppointmentCreate(BaseModel):
    """Booking request; the end is derived from the service duration."""

    model_config = ConfigDict(populate_by_name=True)

    staff_id: str = Field(..., alias="staffId", min_length=1)
    start: datetime
    service_duration: int = Field(..., alias="serviceDuration", gt=0)
    service_id: Optional[str] = Field(default=None, alias="serviceId")
    service_title: Optional[str] = Field(default=None, alias="serviceTitle")
    client_name: Optional[str] = Field(default=None, alias="clientName", max_length=200)
    client_phone: Optional[str] = Field(default=None, alias="clientPhone")
    client_email: Optional[str] = Field(default=None, alias="clientEmail")
    notes: Optional[str] = Field(default=None, max_length=2000)
    price: Optional[float] = Field(default=None, ge=0)
    paid: bool = False
    source: AppointmentSource = AppointmentSource.ADMIN

    @model_validator(mode="before")
    @classmethod
    def _nested_client(cls, data: Any) -> Any:
        return _flatten_client(data)

    @field_validator("start")
    @classmethod
    def _wall_clock(cls, value: datetime) -> datetime:
        return value.replace(tzinfo=None, second=0, microsecond=0)

    @field_validator("client_name", "notes")
    @classmethod
    def _clean_text(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return sanitize_text(value) or None

    @field_validator("client_phone")
    @classmethod
    def _check_phone(cls, value: Optional[str]) -> Optional[str]:
        if value and not validate_phone(value):
            raise ValueError(f"Invalid phone number: {value}")
        return value or None

    @field_validator("client_email")
    @classmethod
    def _check_email(cls, value: Optional[str]) -> Optional[str]:
        if value and not validate_email(value):
            raise ValueError(f"Invalid email address: {value}")
        return value or None

    @property
    def end(self) -> datetime:
        return self.start + timedelta(minutes=self.service_duration)

    def to_row(self) -> Dict[str, Any]:
        """Row written to the appointments table."""
        data = self.model_dump(mode="json", exclude_none=True)
        data["start"] = to_iso_string(self.start)
        data["end"] = to_iso_string(self.end)
        return data
