"""Tests for time parsing and formatting."""

import pytest

from framescribe.models import TimeRange
from framescribe.timecode import (
    format_clock,
    format_seconds,
    parse_time_range,
    parse_timecode,
)


class TestParseTimecode:
    def test_plain_seconds(self):
        assert parse_timecode("45") == 45.0

    def test_fractional_seconds(self):
        assert parse_timecode("12.5") == 12.5

    def test_minutes_seconds(self):
        assert parse_timecode("2:00") == 120.0

    def test_hours_minutes_seconds(self):
        assert parse_timecode("1:02:03") == 3723.0

    def test_fractional_clock_seconds(self):
        assert parse_timecode("0:01.5") == 1.5

    def test_surrounding_whitespace(self):
        assert parse_timecode(" 30 ") == 30.0

    @pytest.mark.parametrize("bad", ["", "abc", "1:xx", "1:2:3:4", "-5", "1:-3", "nan", "1.5:00"])
    def test_invalid(self, bad):
        with pytest.raises(ValueError):
            parse_timecode(bad)


class TestParseTimeRange:
    def test_mixed_formats(self):
        assert parse_time_range("90", "2:00") == TimeRange(start=90.0, end=120.0)

    def test_end_before_start(self):
        with pytest.raises(ValueError, match="must be after"):
            parse_time_range("2:00", "1:00")

    def test_empty_range(self):
        with pytest.raises(ValueError, match="must be after"):
            parse_time_range("10", "10")


class TestFormatClock:
    def test_under_a_minute(self):
        assert format_clock(5) == "0:05.0"

    def test_over_a_minute(self):
        assert format_clock(65.4) == "1:05.4"

    def test_two_digit_seconds(self):
        assert format_clock(125.0) == "2:05.0"

    def test_over_an_hour_stays_in_minutes(self):
        assert format_clock(3723.0) == "62:03.0"

    def test_rounding_carries_into_minutes(self):
        assert format_clock(59.96) == "1:00.0"
        assert format_clock(119.99) == "2:00.0"


class TestFormatSeconds:
    def test_whole(self):
        assert format_seconds(10.0) == "10"

    def test_fractional(self):
        assert format_seconds(10.5) == "10.5"
