"""
Unit tests for the shared calendar sub-checks.
"""

from datetime import date

from availability.rules import (
    breaks_on,
    clip_ranges,
    merge_ranges,
    on_vacation,
    salon_closed_on,
    staff_off_on,
    window_hits_break,
    window_overlaps_break,
)
from models.schedule import Break, DayOfWeek, TimeRange, Vacation
from models.slot import BlockReason

MONDAY = date(2026, 10, 19)
TUESDAY = date(2026, 10, 20)


def test_on_vacation_inclusive_bounds():
    vacations = [Vacation(start_date=MONDAY, end_date=TUESDAY)]
    assert on_vacation(vacations, MONDAY)
    assert on_vacation(vacations, TUESDAY)
    assert not on_vacation(vacations, date(2026, 10, 21))
    assert not on_vacation([], MONDAY)


class TestSalonClosed:
    """Test salon-level day closure."""

    def test_missing_config_closes(self):
        assert salon_closed_on(None, MONDAY) is BlockReason.NO_CONFIGURATION

    def test_closed_weekday(self, salon_factory):
        assert salon_closed_on(salon_factory(), TUESDAY) is BlockReason.SALON_CLOSED

    def test_vacation(self, salon_factory):
        salon = salon_factory(vacations=[(MONDAY, MONDAY)])
        assert salon_closed_on(salon, MONDAY) is BlockReason.SALON_VACATION

    def test_open(self, salon):
        assert salon_closed_on(salon, MONDAY) is None


class TestStaffOff:
    """Test staff-level day closure."""

    def test_missing_record(self):
        assert staff_off_on(None, MONDAY) is BlockReason.STAFF_OFF

    def test_record_of_other_staff(self, staff):
        assert staff_off_on(staff, MONDAY, "staff-2") is BlockReason.STAFF_OFF

    def test_not_working(self, staff):
        assert staff_off_on(staff, TUESDAY) is BlockReason.STAFF_OFF

    def test_vacation(self, staff_factory):
        staff = staff_factory(vacations=[(MONDAY, TUESDAY)])
        assert staff_off_on(staff, MONDAY, "staff-1") is BlockReason.STAFF_VACATION

    def test_working(self, staff):
        assert staff_off_on(staff, MONDAY, "staff-1") is None


class TestBreaks:
    """Test break filtering and overlap."""

    def test_breaks_on_weekday(self):
        breaks = [
            Break(day="monday", start="12:00", end="13:00"),
            Break(day="tuesday", start="12:00", end="13:00"),
        ]
        assert len(breaks_on(breaks, DayOfWeek.MONDAY)) == 1

    def test_overlap_is_half_open(self):
        breaks = [Break(day="monday", start="12:00", end="13:00")]
        assert window_overlaps_break(705, 735, breaks)
        assert not window_overlaps_break(690, 720, breaks)
        assert not window_overlaps_break(780, 810, breaks)

    def test_selection_containing_break(self):
        breaks = [Break(day="monday", start="12:00", end="13:00")]
        assert window_hits_break(660, 840, breaks)
        assert not window_hits_break(600, 720, breaks)


class TestRanges:
    """Test working range clipping."""

    def test_merge(self):
        assert merge_ranges([(600, 700), (540, 610), (800, 900), (900, 960)]) == [
            (540, 700),
            (800, 900),
            (900, 960),
        ]

    def test_touching_ranges_not_merged(self):
        window = TimeRange(start="09:00", end="18:00")
        ranges = [TimeRange(start="12:00", end="15:00"), TimeRange(start="09:00", end="12:00")]
        assert clip_ranges(ranges, window) == [(540, 720), (720, 900)]

    def test_clip_to_salon_window(self):
        window = TimeRange(start="09:00", end="18:00")
        ranges = [
            TimeRange(start="14:00", end="20:00"),
            TimeRange(start="07:00", end="10:00"),
            TimeRange(start="19:00", end="21:00"),
        ]
        assert clip_ranges(ranges, window) == [(540, 600), (840, 1080)]

    def test_clip_no_overlap(self):
        window = TimeRange(start="09:00", end="12:00")
        assert clip_ranges([TimeRange(start="13:00", end="15:00")], window) == []
