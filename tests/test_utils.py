"""Tests for utils.py - time arithmetic and week calculations."""

from datetime import date

import pytest

from utils import (
    STRATEGIES,
    date_for_day,
    format_clock,
    format_hours,
    format_minutes,
    format_time_difference,
    get_first_day_of_week,
    get_holidays_in_week,
    get_week_dates,
    get_week_number,
    get_week_start,
    hours_worked,
    is_day_in_past,
    minutes_since_midnight,
    time_from_minutes,
)


class TestMinutesSinceMidnight:
    """Tests for minutes_since_midnight."""

    def test_morning(self):
        assert minutes_since_midnight("09:00") == 540

    def test_with_minutes(self):
        assert minutes_since_midnight("17:45") == 1065

    def test_seconds_are_ignored(self):
        """Times read back from a database may carry seconds."""
        assert minutes_since_midnight("09:30:00") == 570

    def test_empty_is_zero(self):
        assert minutes_since_midnight("") == 0
        assert minutes_since_midnight(None) == 0

    def test_malformed_is_zero(self):
        assert minutes_since_midnight("nine") == 0
        assert minutes_since_midnight("9") == 0
        assert minutes_since_midnight("ab:cd") == 0


class TestTimeFromMinutes:
    """Tests for time_from_minutes."""

    def test_zero_padded(self):
        assert time_from_minutes(545) == "09:05"

    def test_midnight(self):
        assert time_from_minutes(0) == "00:00"

    def test_fractional_minutes_truncated(self):
        assert time_from_minutes(1102.5) == "18:22"

    def test_out_of_range_not_wrapped(self):
        """Past midnight the hour keeps counting rather than wrapping."""
        assert time_from_minutes(1500) == "25:00"

    def test_inverse_of_minutes_since_midnight(self):
        for value in ("00:00", "07:15", "12:00", "23:59"):
            assert time_from_minutes(minutes_since_midnight(value)) == value


class TestHoursWorked:
    """Tests for hours_worked."""

    def test_standard_day(self):
        assert hours_worked("09:00", "17:00", 0.5) == 7.5

    def test_no_lunch(self):
        assert hours_worked("09:00", "17:00", 0) == 8.0

    def test_negative_span_floors_to_zero(self):
        assert hours_worked("17:00", "09:00", 0) == 0

    def test_lunch_longer_than_span(self):
        assert hours_worked("09:00", "09:15", 0.5) == 0

    def test_partial_hours(self):
        assert hours_worked("09:15", "17:30", 0.5) == pytest.approx(7.75)

    def test_missing_start(self):
        assert hours_worked("", "17:00", 0.5) == 0

    def test_missing_end(self):
        assert hours_worked("09:00", "", 0.5) == 0

    def test_malformed_time(self):
        assert hours_worked("09:00", "later", 0) == 0


class TestFormatHours:
    """Tests for format_hours."""

    def test_hours_and_minutes(self):
        assert format_hours(7.5) == "7h 30m"

    def test_whole_hours(self):
        assert format_hours(8) == "8h"

    def test_minutes_only(self):
        assert format_hours(0.5) == "0h 30m"

    def test_zero(self):
        assert format_hours(0) == "0h"

    def test_half_minute_rounds_up(self):
        assert format_hours(0.875) == "0h 53m"

    def test_rounding_to_next_hour(self):
        """A value just under the hour should not show 60 minutes."""
        assert format_hours(7.999) == "8h"


class TestFormatClock:
    """Tests for format_clock."""

    def test_24_hour(self):
        assert format_clock("17:30") == "17:30"
        assert format_clock("9:05") == "09:05"

    def test_12_hour(self):
        assert format_clock("09:00", use_24_hour_format=False) == "9:00 AM"
        assert format_clock("17:30", use_24_hour_format=False) == "5:30 PM"

    def test_12_hour_noon_and_midnight(self):
        assert format_clock("12:00", use_24_hour_format=False) == "12:00 PM"
        assert format_clock("00:15", use_24_hour_format=False) == "12:15 AM"

    def test_empty_and_malformed(self):
        assert format_clock("", use_24_hour_format=False) == ""
        assert format_clock(None) == ""
        assert format_clock("later", use_24_hour_format=False) == "later"


class TestFormatMinutes:
    """Tests for format_minutes and format_time_difference."""

    def test_whole_hours(self):
        assert format_minutes(480) == "8h"

    def test_hours_and_minutes(self):
        assert format_minutes(2415) == "40h 15m"

    def test_positive_difference(self):
        assert format_time_difference(90) == "+1h 30m"

    def test_negative_difference(self):
        assert format_time_difference(-120) == "-2h"

    def test_zero_difference(self):
        assert format_time_difference(0) == "+0h"


class TestGetWeekStart:
    """Tests for get_week_start (weeks start on Sunday)."""

    def test_sunday_returns_same_day(self):
        sun = date(2026, 10, 18)
        assert sun.weekday() == 6
        assert get_week_start(sun) == sun

    def test_monday_returns_previous_sunday(self):
        mon = date(2026, 10, 19)
        assert mon.weekday() == 0
        assert get_week_start(mon) == date(2026, 10, 18)

    def test_saturday_returns_previous_sunday(self):
        sat = date(2026, 10, 24)
        assert sat.weekday() == 5
        assert get_week_start(sat) == date(2026, 10, 18)

    def test_week_start_across_year_boundary(self):
        # January 1, 2026 is a Thursday
        assert get_week_start(date(2026, 1, 1)) == date(2025, 12, 28)


class TestWeekNumbers:
    """Tests for get_week_number and get_first_day_of_week."""

    def test_first_week_of_year(self):
        # First Sunday of 2026 is January 4
        assert get_week_number(date(2026, 1, 4)) == (2026, 1)
        assert get_week_number(date(2026, 1, 10)) == (2026, 1)

    def test_days_before_first_sunday_belong_to_previous_year(self):
        assert get_week_number(date(2026, 1, 1)) == (2025, 52)

    def test_mid_year(self):
        assert get_week_number(date(2026, 10, 18)) == (2026, 42)
        assert get_week_number(date(2026, 10, 21)) == (2026, 42)

    def test_first_day_of_week(self):
        assert get_first_day_of_week(2026, 1) == date(2026, 1, 4)
        assert get_first_day_of_week(2026, 42) == date(2026, 10, 18)

    def test_round_trip(self):
        for d in (date(2025, 12, 31), date(2026, 3, 1), date(2026, 10, 22)):
            year, week = get_week_number(d)
            assert get_first_day_of_week(year, week) == get_week_start(d)


class TestDayDates:
    """Tests for date_for_day, get_week_dates and is_day_in_past."""

    def test_date_for_day(self):
        week_start = date(2026, 10, 18)
        assert date_for_day("sunday", week_start) == date(2026, 10, 18)
        assert date_for_day("monday", week_start) == date(2026, 10, 19)
        assert date_for_day("saturday", week_start) == date(2026, 10, 24)

    def test_week_dates_cover_seven_days(self):
        dates = get_week_dates(date(2026, 10, 18))
        assert len(dates) == 7
        assert sorted(dates.values())[0] == date(2026, 10, 18)
        assert sorted(dates.values())[-1] == date(2026, 10, 24)

    def test_is_day_in_past(self):
        wednesday = date(2026, 10, 21)
        assert is_day_in_past("monday", wednesday)
        assert is_day_in_past("tuesday", wednesday)
        assert not is_day_in_past("wednesday", wednesday)
        assert not is_day_in_past("friday", wednesday)

    def test_sunday_is_start_of_week(self):
        """On Sunday nothing else in the week has happened yet."""
        sunday = date(2026, 10, 18)
        assert not is_day_in_past("monday", sunday)
        assert not is_day_in_past("saturday", sunday)

    def test_explicit_week_start(self):
        """Days of an earlier week are all in the past."""
        assert is_day_in_past("friday", date(2026, 10, 21), week_start=date(2026, 10, 11))


class TestHolidays:
    """Tests for get_holidays_in_week."""

    def test_christmas_week(self):
        # Christmas 2026 is a Friday
        holidays = get_holidays_in_week(date(2026, 12, 20), "GB", "ENG")
        assert "friday" in holidays
        assert "monday" not in holidays

    def test_quiet_week(self):
        assert get_holidays_in_week(date(2026, 10, 18), "GB", "ENG") == {}


class TestStrategies:
    """Tests for the STRATEGIES constant."""

    def test_codes(self):
        codes = [code for code, _ in STRATEGIES]
        assert codes == ["equal", "custom", "early-start"]

    def test_labels(self):
        for code, label in STRATEGIES:
            assert isinstance(label, str)
            assert len(label) > 0
