"""
Unit tests for time-of-day and date helpers.
"""

from datetime import date, datetime

import pytest

from utils.datetime_utils import (
    at_minute,
    format_time_of_day,
    minute_of_day,
    minutes_since_day_start,
    overlaps,
    parse_date,
    parse_iso_datetime,
    parse_time_of_day,
    to_iso_string,
    window_hits,
)


class TestTimeOfDay:
    """Test "HH:mm" parsing and formatting."""

    @pytest.mark.parametrize(
        "value,expected",
        [("00:00", 0), ("09:00", 540), ("11:45", 705), ("23:59", 1439)],
    )
    def test_parse(self, value, expected):
        assert parse_time_of_day(value) == expected

    @pytest.mark.parametrize("value", ["9:00", "24:00", "12:60", "noon", "", None, 540])
    def test_parse_rejects_malformed(self, value):
        with pytest.raises(ValueError):
            parse_time_of_day(value)

    def test_format_pads_with_zeros(self):
        assert format_time_of_day(545) == "09:05"
        assert format_time_of_day(0) == "00:00"

    def test_format_rejects_out_of_day(self):
        with pytest.raises(ValueError):
            format_time_of_day(1440)


class TestDates:
    """Test date and datetime parsing."""

    def test_parse_date_string(self):
        assert parse_date("2026-10-19") == date(2026, 10, 19)

    def test_parse_date_passes_datetime(self):
        assert parse_date(datetime(2026, 10, 19, 15, 0)) == date(2026, 10, 19)

    def test_parse_date_invalid(self):
        with pytest.raises(ValueError):
            parse_date("2026-02-30")

    def test_iso_offset_keeps_wall_clock(self):
        parsed = parse_iso_datetime("2026-10-19T10:00:00+02:00")
        assert parsed == datetime(2026, 10, 19, 10, 0)
        assert parsed.tzinfo is None

    def test_iso_z_suffix(self):
        assert parse_iso_datetime("2026-10-19T10:00:00Z") == datetime(2026, 10, 19, 10, 0)

    def test_iso_invalid(self):
        with pytest.raises(ValueError):
            parse_iso_datetime("yesterday")

    def test_to_iso_string(self):
        assert to_iso_string(datetime(2026, 10, 19, 9, 30, 0, 1234)) == "2026-10-19T09:30:00"

    def test_minutes(self):
        day = date(2026, 10, 19)
        assert minute_of_day(datetime(2026, 10, 19, 9, 15)) == 555
        assert at_minute(day, 555) == datetime(2026, 10, 19, 9, 15)
        assert minutes_since_day_start(datetime(2026, 10, 20, 0, 30), day) == 1470


class TestIntervals:
    """Test interval overlap helpers."""

    def test_touching_intervals_do_not_overlap(self):
        assert not overlaps(600, 630, 630, 660)
        assert not overlaps(630, 660, 600, 630)

    def test_overlap(self):
        assert overlaps(585, 615, 600, 630)
        assert overlaps(600, 630, 600, 630)

    def test_window_hits_start_inside(self):
        assert window_hits(720, 800, 720, 780)

    def test_window_hits_end_inside(self):
        assert window_hits(700, 780, 720, 780)

    def test_window_hits_containing(self):
        assert window_hits(700, 800, 720, 780)

    def test_window_hits_adjacent(self):
        assert not window_hits(690, 720, 720, 780)
        assert not window_hits(780, 810, 720, 780)
