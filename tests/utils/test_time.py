"""
Tests for time utilities.

Covers duration conversion and formatting, and resolving clock times typed
by the user against the moment they were prompted.
"""

import math
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest

from third_time.utils.time import (
    deadline_after,
    format_duration,
    is_real_number,
    minutes_to_seconds,
    parse_clock_time,
    seconds_between,
    utc_now,
)


class TestUtcNow:
    """Test wall-clock fallback."""

    def test_uses_utc(self):
        with patch('third_time.utils.time.datetime') as mock_datetime:
            mock_now = datetime(2024, 3, 4, 9, 0, 0, tzinfo=timezone.utc)
            mock_datetime.now.return_value = mock_now

            assert utc_now() == mock_now
            mock_datetime.now.assert_called_once_with(timezone.utc)


class TestIsRealNumber:
    """Test numeric validation."""

    @pytest.mark.parametrize("value", [0, 1, -3, 0.5, 1 / 3])
    def test_accepts_numbers(self, value):
        assert is_real_number(value) is True

    @pytest.mark.parametrize("value", [True, False, None, "1", math.nan, math.inf, -math.inf, [1]])
    def test_rejects_others(self, value):
        assert is_real_number(value) is False


class TestDurations:
    """Test duration helpers."""

    def test_minutes_to_seconds(self):
        assert minutes_to_seconds(25) == 1500.0
        assert minutes_to_seconds(0.5) == 30.0

    def test_seconds_between_is_signed(self):
        start = datetime(2024, 3, 4, 9, 0, tzinfo=timezone.utc)
        assert seconds_between(start, start + timedelta(seconds=90)) == 90.0
        assert seconds_between(start + timedelta(seconds=90), start) == -90.0

    def test_deadline_after(self):
        start = datetime(2024, 3, 4, 9, 0, tzinfo=timezone.utc)
        assert deadline_after(start, 500) == datetime(2024, 3, 4, 9, 8, 20, tzinfo=timezone.utc)


class TestFormatDuration:
    """Test duration formatting."""

    @pytest.mark.parametrize("seconds,expected", [
        (0, "0m00s"),
        (500, "8m20s"),
        (380, "6m20s"),
        (-120, "-2m00s"),
        (3725, "1h02m05s"),
        (59.6, "1m00s"),
        (None, "-"),
    ])
    def test_format(self, seconds, expected):
        assert format_duration(seconds) == expected


class TestParseClockTime:
    """Test resolving HH:MM input."""

    def setup_method(self):
        self.reference = datetime(2024, 3, 4, 9, 15, 30, tzinfo=timezone.utc)

    def test_later_today(self):
        assert parse_clock_time("10:30", self.reference) == datetime(2024, 3, 4, 10, 30, tzinfo=timezone.utc)

    def test_earlier_time_means_tomorrow(self):
        assert parse_clock_time("7:05", self.reference) == datetime(2024, 3, 5, 7, 5, tzinfo=timezone.utc)

    def test_same_minute_already_started_rolls_over(self):
        assert parse_clock_time("09:15", self.reference) == datetime(2024, 3, 5, 9, 15, tzinfo=timezone.utc)

    def test_keeps_reference_timezone(self):
        tz = timezone(timedelta(hours=2))
        reference = datetime(2024, 3, 4, 9, 0, tzinfo=tz)
        assert parse_clock_time(" 11:00 ", reference).tzinfo == tz

    @pytest.mark.parametrize("value", ["", "noon", "24:00", "10:60", "10:5", "1030"])
    def test_invalid(self, value):
        assert parse_clock_time(value, self.reference) is None
