"""Summaries of recorded weeks."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from models import WeekRecord
from utils import format_minutes, format_time_difference, get_first_day_of_week


@dataclass
class WeekSummary:
    week_id: int
    label: str
    week_start: date
    total_minutes: int
    formatted_total: str
    target_hours: float
    difference_minutes: int
    formatted_difference: str
    days_recorded: int


def summarise_week(week: WeekRecord) -> WeekSummary:
    total = week.total_minutes
    difference = total - round(week.target_hours * 60)
    return WeekSummary(
        week_id=week.id,
        label=f"Week {week.week_number}, {week.year}",
        week_start=get_first_day_of_week(week.year, week.week_number),
        total_minutes=total,
        formatted_total=format_minutes(total),
        target_hours=week.target_hours,
        difference_minutes=difference,
        formatted_difference=format_time_difference(difference),
        days_recorded=len(week.days),
    )


def summarise_history(weeks: list[WeekRecord]) -> list[WeekSummary]:
    return [summarise_week(week) for week in weeks]
