"""Tests for models.py - entries, settings and records."""

from dataclasses import FrozenInstanceError
from datetime import date

import pytest

from models import (
    DAY_KEYS,
    DayRecord,
    DaySettings,
    EditResult,
    TimeEntry,
    TimeSettings,
    WeekRecord,
    default_day_settings,
)


class TestTimeEntry:
    """Tests for TimeEntry dataclass."""

    def test_defaults(self):
        entry = TimeEntry()
        assert entry.hours == 0
        assert entry.is_day_off is False
        assert entry.start_time == ""
        assert entry.end_time == ""
        assert entry.lunch_break_hours == 0.5
        assert entry.verified is False

    def test_is_immutable(self, sample_time_entry):
        with pytest.raises(FrozenInstanceError):
            sample_time_entry.hours = 10


class TestSettings:
    """Tests for DaySettings and TimeSettings."""

    def test_day_settings_defaults(self):
        settings = DaySettings()
        assert settings.default_start_time == "09:00"
        assert settings.default_end_time == "17:00"
        assert settings.default_hours == 8
        assert settings.office_hours_start == "09:00"
        assert settings.office_hours_end == "17:00"

    def test_default_day_settings_are_weekdays(self):
        settings = default_day_settings()
        assert list(settings) == list(DAY_KEYS[:5])
        assert settings["friday"].office_hours_end == "14:00"
        assert settings["monday"].office_hours_end == "17:00"

    def test_time_settings_defaults(self):
        config = TimeSettings()
        assert config.target_hours == 40
        assert config.break_duration == 30
        assert config.lunch_break_hours == 0.5
        assert config.show_weekends is False
        assert config.holiday_country is None

    def test_time_settings_do_not_share_day_settings(self):
        first = TimeSettings()
        second = TimeSettings()
        first.day_settings["saturday"] = DaySettings()
        assert "saturday" not in second.day_settings


class TestRecords:
    """Tests for DayRecord and WeekRecord."""

    def _day(self, d: date, minutes: int, is_day_off: bool = False) -> DayRecord:
        return DayRecord(
            id=1,
            week_id=1,
            date=d,
            start_time="09:00",
            end_time="17:30",
            total_minutes=minutes,
            lunch_break_minutes=30,
            is_day_off=is_day_off,
        )

    def test_day_key(self):
        assert self._day(date(2026, 10, 19), 480).day_key == "monday"
        assert self._day(date(2026, 10, 18), 0).day_key == "sunday"

    def test_day_hours(self):
        assert self._day(date(2026, 10, 19), 450).hours == 7.5

    def test_week_total_ignores_days_off(self):
        week = WeekRecord(id=1, week_number=42, year=2026, target_hours=40, break_duration=30)
        for d, minutes, off in [
            (date(2026, 10, 19), 480, False),
            (date(2026, 10, 20), 510, False),
            (date(2026, 10, 21), 480, True),
        ]:
            week.days[d] = self._day(d, minutes, off)
        assert week.total_minutes == 990


class TestEditResult:
    """Tests for EditResult."""

    def test_applied_is_truthy(self):
        assert EditResult("monday", True)

    def test_rejected_is_falsy(self):
        result = EditResult("monday", False, "verified — locked")
        assert not result
        assert result.reason == "verified — locked"
