"""
Pytest configuration and shared fixtures.
"""

from unittest.mock import MagicMock

import pytest

from config import settings
from models.appointment import Appointment
from models.schedule import Break, DaySchedule, SalonConfig, StaffAvailability, TimeRange, Vacation


@pytest.fixture(autouse=True)
def mock_settings(monkeypatch):
    """Test values for the settings every module reads."""
    monkeypatch.setattr(settings, "supabase_url", "https://test.supabase.co")
    monkeypatch.setattr(settings, "supabase_key", "test_key")
    monkeypatch.setattr(settings, "environment", "test")
    monkeypatch.setattr(settings, "slot_step_minutes", 15)
    monkeypatch.setattr(settings, "frontend_origin", None)
    yield settings


@pytest.fixture
def mock_supabase_client():
    """Create a mock Supabase client."""
    mock_client = MagicMock()
    mock_table = MagicMock()
    mock_client.table.return_value = mock_table
    return mock_client, mock_table


def make_salon(open_days=("monday",), start="09:00", end="18:00", breaks=(), vacations=()):
    """Salon open `start`-`end` on `open_days`, closed the other days."""
    return SalonConfig(
        work_days={day: day in open_days for day in (
            "monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"
        )},
        work_hours={day: TimeRange(start=start, end=end) for day in open_days},
        breaks=[Break(day=day, start=s, end=e) for day, s, e in breaks],
        vacations=[Vacation(start_date=s, end_date=e) for s, e in vacations],
    )


def make_staff(
    staff_id="staff-1",
    ranges=None,
    working_days=("monday",),
    breaks=(),
    vacations=(),
):
    """Staff working `ranges` (default 09:00-18:00) on `working_days`."""
    ranges = ranges if ranges is not None else [("09:00", "18:00")]
    return StaffAvailability(
        staff_id=staff_id,
        working_hours={
            day: DaySchedule(
                working=True, ranges=[TimeRange(start=s, end=e) for s, e in ranges]
            )
            for day in working_days
        },
        breaks=[Break(day=day, start=s, end=e) for day, s, e in breaks],
        vacations=[Vacation(start_date=s, end_date=e) for s, e in vacations],
    )


def make_appointment(start, end, staff_id="staff-1", appointment_id="rdv-1"):
    return Appointment(id=appointment_id, staff_id=staff_id, start=start, end=end)


@pytest.fixture
def salon():
    return make_salon()


@pytest.fixture
def staff():
    return make_staff()


@pytest.fixture
def salon_factory():
    return make_salon


@pytest.fixture
def staff_factory():
    return make_staff


@pytest.fixture
def appointment_factory():
    return make_appointment
