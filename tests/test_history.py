"""Tests for history.py - week summaries."""

from datetime import date

from history import summarise_history, summarise_week
from models import DayRecord, WeekRecord


def _week(week_id: int, week_number: int, minutes: list[int], target: float = 40) -> WeekRecord:
    week = WeekRecord(id=week_id, week_number=week_number, year=2026, target_hours=target, break_duration=30)
    for offset, total in enumerate(minutes):
        d = date(2026, 10, 19 + offset)
        week.days[d] = DayRecord(offset, week_id, d, "09:00", "17:30", total, 30)
    return week


class TestSummariseWeek:
    """Tests for summarise_week."""

    def test_on_target(self):
        summary = summarise_week(_week(1, 42, [480] * 5))
        assert summary.label == "Week 42, 2026"
        assert summary.week_start == date(2026, 10, 18)
        assert summary.formatted_total == "40h"
        assert summary.difference_minutes == 0
        assert summary.formatted_difference == "+0h"
        assert summary.days_recorded == 5

    def test_over_target(self):
        summary = summarise_week(_week(1, 42, [480, 480, 480, 480, 570]))
        assert summary.formatted_total == "41h 30m"
        assert summary.formatted_difference == "+1h 30m"

    def test_under_target(self):
        summary = summarise_week(_week(1, 42, [480, 480, 480]))
        assert summary.total_minutes == 1440
        assert summary.formatted_difference == "-16h"

    def test_empty_week(self):
        summary = summarise_week(_week(1, 42, []))
        assert summary.formatted_total == "0h"
        assert summary.days_recorded == 0


def test_summarise_history_keeps_order():
    summaries = summarise_history([_week(2, 43, [480]), _week(1, 42, [480])])
    assert [s.week_id for s in summaries] == [2, 1]


def test_week_start_across_year_boundary():
    week = WeekRecord(id=3, week_number=52, year=2025, target_hours=40, break_duration=30)
    assert summarise_week(week).week_start == date(2025, 12, 28)
