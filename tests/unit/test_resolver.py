"""
Unit tests for the availability resolver.
"""

from datetime import date, datetime, timedelta, timezone

import pytest

from availability.checker import is_slot_unavailable
from availability.resolver import appointments_for_day, compute_available_slots
from models.schedule import DayOfWeek, DaySchedule, SalonConfig

MONDAY = date(2026, 10, 19)
EARLY = datetime(2026, 10, 19, 7, 0)


def grid(start, end, step=15):
    """Every "HH:mm" from `start` to `end` inclusive."""
    first = int(start[:2]) * 60 + int(start[3:])
    last = int(end[:2]) * 60 + int(end[3:])
    return [f"{m // 60:02d}:{m % 60:02d}" for m in range(first, last + 1, step)]


def slots(salon, staff, duration=30, appointments=(), now=EARLY, day=MONDAY, **kwargs):
    return compute_available_slots(
        day, "staff-1", duration, salon, staff, list(appointments), now=now, **kwargs
    )


class TestScenarios:
    """Reference scenarios of the slot computation."""

    def test_open_day(self, salon, staff):
        result = slots(salon, staff)

        assert result == grid("09:00", "17:30")
        assert len(result) == 35

    def test_salon_break(self, salon_factory, staff):
        salon = salon_factory(breaks=[("monday", "12:00", "13:00")])
        result = slots(salon, staff)

        assert result == grid("09:00", "11:30") + grid("13:00", "17:30")
        assert "11:30" in result
        assert "11:45" not in result
        assert "12:45" not in result

    def test_existing_appointment(self, salon, staff, appointment_factory):
        appointment = appointment_factory("2026-10-19T10:00:00", "2026-10-19T10:30:00")
        result = slots(salon, staff, appointments=[appointment])

        assert "09:30" in result
        assert "09:45" not in result
        assert "10:00" not in result
        assert "10:15" not in result
        assert "10:30" in result

    def test_staff_vacation(self, salon, staff_factory):
        staff = staff_factory(vacations=[("2026-10-12", "2026-10-25")])
        assert slots(salon, staff) == []


class TestClosedDays:
    """A closed day yields no slots whatever the rest of the data."""

    def test_missing_salon_config(self, staff):
        assert slots(None, staff) == []

    def test_missing_staff_availability(self, salon):
        assert slots(salon, None) == []

    def test_salon_closed_weekday(self, salon_factory, staff_factory):
        salon = salon_factory(open_days=("tuesday",))
        staff = staff_factory(working_days=("monday", "tuesday"))
        assert slots(salon, staff) == []

    def test_salon_vacation(self, salon_factory, staff):
        salon = salon_factory(vacations=[(MONDAY, MONDAY)])
        assert slots(salon, staff) == []

    def test_staff_not_working(self, salon, staff_factory):
        assert slots(salon, staff_factory(working_days=("tuesday",))) == []

    def test_staff_day_off_flag(self, salon, staff):
        monday = staff.working_hours[DayOfWeek.MONDAY]
        staff.working_hours[DayOfWeek.MONDAY] = DaySchedule(working=False, ranges=monday.ranges)
        assert slots(salon, staff) == []

    def test_record_of_another_staff(self, salon, staff_factory):
        assert slots(salon, staff_factory(staff_id="staff-2")) == []

    def test_salon_open_without_hours(self, salon, staff):
        salon.work_hours.clear()
        assert slots(salon, staff) == []

    def test_bad_hours_close_only_their_day(self, staff_factory):
        salon = SalonConfig.model_validate(
            {
                "workDays": {"Lundi": True, "Mardi": True, "Dimanche": False},
                "workHours": {
                    "Lundi": {"start": "09:00", "end": "18:00"},
                    "Mardi": {"start": "18:00", "end": "09:00"},
                    "Dimanche": {"start": "", "end": ""},
                },
            }
        )
        staff = staff_factory(working_days=("monday", "tuesday"))
        tuesday = date(2026, 10, 20)

        assert slots(salon, staff) == grid("09:00", "17:30")
        assert slots(salon, staff, day=tuesday) == []


class TestWorkingRanges:
    """Slots follow the staff ranges clipped to the salon hours."""

    def test_split_shift(self, salon, staff_factory):
        staff = staff_factory(ranges=[("14:00", "16:00"), ("09:00", "11:00")])
        result = slots(salon, staff, duration=60)

        assert result == grid("09:00", "10:00") + grid("14:00", "15:00")

    def test_staff_range_clipped_to_salon_hours(self, salon, staff_factory):
        staff = staff_factory(ranges=[("08:00", "10:00"), ("17:00", "20:00")])
        result = slots(salon, staff, duration=30)

        assert result == grid("09:00", "09:30") + grid("17:00", "17:30")

    def test_overlapping_ranges_merged(self, salon, staff_factory):
        staff = staff_factory(ranges=[("09:00", "11:00"), ("10:00", "12:00")])
        result = slots(salon, staff, duration=30)

        assert result == grid("09:00", "11:30")

    def test_touching_ranges_stay_apart(self, salon, staff_factory):
        staff = staff_factory(ranges=[("09:00", "12:00"), ("12:00", "15:00")])
        result = slots(salon, staff, duration=60)

        assert "11:00" in result
        assert "11:30" not in result
        assert "12:00" in result
        assert result == grid("09:00", "11:00") + grid("12:00", "14:00")

    def test_range_walked_from_its_own_start(self, salon, staff_factory):
        staff = staff_factory(ranges=[("09:00", "10:10"), ("10:10", "12:00")])
        result = slots(salon, staff, duration=30)

        assert "09:45" not in result
        assert "10:10" in result
        assert result == grid("09:00", "09:30") + ["10:10", "10:25", "10:40", "10:55", "11:10", "11:25"]

    def test_duration_longer_than_range(self, salon, staff_factory):
        staff = staff_factory(ranges=[("09:00", "10:00")])
        assert slots(salon, staff, duration=90) == []

    def test_staff_break(self, salon, staff_factory):
        staff = staff_factory(breaks=[("monday", "15:00", "15:30")])
        result = slots(salon, staff)

        assert "14:30" in result
        assert "14:45" not in result
        assert "15:15" not in result
        assert "15:30" in result

    def test_break_on_other_weekday_ignored(self, salon_factory, staff):
        salon = salon_factory(breaks=[("tuesday", "12:00", "13:00")])
        assert slots(salon, staff) == grid("09:00", "17:30")


class TestAppointments:
    """Existing bookings block overlapping candidates only."""

    def test_other_staff_appointment_ignored(self, salon, staff, appointment_factory):
        appointment = appointment_factory(
            "2026-10-19T10:00:00", "2026-10-19T10:30:00", staff_id="staff-2"
        )
        assert slots(salon, staff, appointments=[appointment]) == grid("09:00", "17:30")

    def test_other_day_appointment_ignored(self, salon, staff, appointment_factory):
        appointment = appointment_factory("2026-10-20T10:00:00", "2026-10-20T10:30:00")
        assert slots(salon, staff, appointments=[appointment]) == grid("09:00", "17:30")

    def test_no_slot_overlaps_an_appointment(self, salon, staff, appointment_factory):
        booked = [
            appointment_factory("2026-10-19T09:20:00", "2026-10-19T10:05:00", appointment_id="a"),
            appointment_factory("2026-10-19T14:00:00", "2026-10-19T16:00:00", appointment_id="b"),
        ]
        for start in slots(salon, staff, duration=45, appointments=booked):
            minute = int(start[:2]) * 60 + int(start[3:])
            assert minute + 45 <= 9 * 60 + 20 or minute >= 10 * 60 + 5
            assert minute + 45 <= 14 * 60 or minute >= 16 * 60

    def test_appointments_for_day(self, appointment_factory):
        mine = appointment_factory("2026-10-19T10:00:00", "2026-10-19T10:30:00")
        other = appointment_factory("2026-10-19T10:00:00", "2026-10-19T10:30:00", staff_id="x")
        later = appointment_factory("2026-10-20T10:00:00", "2026-10-20T10:30:00")

        assert appointments_for_day([mine, other, later], "staff-1", MONDAY) == [mine]
        assert appointments_for_day(None, "staff-1", MONDAY) == []


class TestNow:
    """Only future starts are offered."""

    def test_past_slots_removed(self, salon, staff):
        now = datetime(2026, 10, 19, 12, 0)
        result = slots(salon, staff, now=now)

        assert result[0] == "12:15"
        assert "12:00" not in result

    def test_day_in_the_past(self, salon, staff):
        assert slots(salon, staff, now=datetime(2026, 10, 20, 8, 0)) == []

    def test_timezone_aware_now(self, salon, staff):
        now = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)
        assert slots(salon, staff, now=now)[0] == "12:15"


class TestProperties:
    """Structural properties of the result."""

    def test_idempotent(self, salon, staff, appointment_factory):
        booked = [appointment_factory("2026-10-19T10:00:00", "2026-10-19T10:30:00")]
        assert slots(salon, staff, appointments=booked) == slots(salon, staff, appointments=booked)

    def test_ascending_on_grid(self, salon, staff_factory):
        staff = staff_factory(ranges=[("14:00", "16:00"), ("09:00", "11:00")])
        result = slots(salon, staff)

        assert result == sorted(result)
        assert all(int(s[3:]) % 15 == 0 for s in result)

    def test_longer_service_is_subset(self, salon_factory, staff, appointment_factory):
        salon = salon_factory(breaks=[("monday", "12:00", "13:00")])
        booked = [appointment_factory("2026-10-19T15:00:00", "2026-10-19T15:45:00")]

        short = slots(salon, staff, duration=30, appointments=booked)
        long = slots(salon, staff, duration=60, appointments=booked)

        assert set(long) <= set(short)

    def test_custom_step(self, salon, staff_factory):
        staff = staff_factory(ranges=[("09:00", "10:00")])
        assert slots(salon, staff, duration=30, step_minutes=30) == ["09:00", "09:30"]

    @pytest.mark.parametrize("duration", [0, -30, None, "30", 1.5])
    def test_malformed_duration(self, salon, staff, duration):
        assert slots(salon, staff, duration=duration) == []

    @pytest.mark.parametrize(
        "ranges,duration",
        [
            ([("09:00", "12:00"), ("12:00", "15:00")], 60),
            ([("09:00", "10:10"), ("10:10", "12:00")], 30),
            ([("09:00", "11:00"), ("10:00", "12:00")], 45),
        ],
    )
    def test_offered_slots_pass_the_checker(self, salon_factory, staff_factory, ranges, duration):
        salon = salon_factory(breaks=[("monday", "13:00", "13:30")])
        staff = staff_factory(ranges=ranges)

        for start in slots(salon, staff, duration=duration):
            start_at = datetime(2026, 10, 19, int(start[:2]), int(start[3:]))
            end_at = start_at + timedelta(minutes=duration)
            assert not is_slot_unavailable(start_at, end_at, salon, staff, "staff-1"), start
