"""Custom widgets for the week tracker application."""

from __future__ import annotations

from datetime import date, timedelta

from textual.widgets import Static
from rich.text import Text

from models import DAY_LABELS
from planner import PlanPreview
from utils import format_clock, format_hours


class WeekHeader(Static):
    """Shows the week number and its date range."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.year = 0
        self.week_number = 0

    def update_display(self, year: int, week_number: int, week_start: date):
        self.year = year
        self.week_number = week_number
        week_end = week_start + timedelta(days=6)

        text = Text()
        text.append(f"WEEK {week_number}: {year}", style="bold")
        text.append(f"  ({week_start.strftime('%b %d')} - {week_end.strftime('%b %d')})")
        self.update(text)


def progress_bar(total: float, target: float, width: int = 30) -> str:
    """Text progress bar of total against target."""
    ratio = min(1.0, total / target) if target > 0 else 1.0
    filled = int(round(ratio * width))
    return "█" * filled + "░" * (width - filled)


class WeeklySummary(Static):
    """Shows worked hours against the weekly target."""

    def update_display(self, total: float, target: float, remaining: float):
        pct = (total / target * 100) if target else 0

        text = Text()
        text.append(f"Worked     {format_hours(total):>8}\n")
        text.append(f"Target     {format_hours(target):>8}   ({pct:.1f}%)\n")
        text.append(
            f"Remaining  {format_hours(remaining):>8}\n",
            style="dim" if remaining == 0 else "bold",
        )
        text.append(progress_bar(total, target), style="green" if remaining == 0 else "yellow")
        self.update(text)


class PlanSummary(Static):
    """Shows the effect of an early departure plan."""

    def update_display(self, preview: PlanPreview, use_24_hour_format: bool = True):
        day_label = DAY_LABELS.get(preview.selected_day, preview.selected_day)

        text = Text()
        text.append(f"Target hours          {format_hours(preview.target_hours)}\n")
        text.append(f"New hours on {day_label:<9} {format_hours(preview.hours_before_departure)}")
        text.append(f"   {format_hours(preview.deficit)} deficit\n", style="yellow")
        text.append(f"Planned this week     {format_hours(preview.total_planned_hours)}\n")
        text.append(f"Work days available   {len(preview.work_days)} days\n\n")

        for day in preview.work_days:
            label = DAY_LABELS.get(day, day)
            if day == preview.selected_day:
                departure = format_clock(preview.departure_time, use_24_hour_format)
                text.append(f"  {label:<10} leave at {departure}\n", style="bold")
            elif day in preview.excluded_days:
                text.append(f"  {label:<10} {preview.excluded_days[day]}\n", style="dim")
            elif day in preview.extra_hours:
                extra = format_hours(preview.extra_hours[day])
                text.append(f"  {label:<10} +{extra}\n")

        if preview.strategy == "custom":
            allocated = preview.allocated_hours
            style = "green" if abs(allocated - preview.deficit) < 1 / 60 else "red"
            text.append(
                f"\nAllocated {format_hours(allocated)} of {format_hours(preview.deficit)}",
                style=style,
            )
        elif preview.deficit > 0 and not preview.modifiable_days:
            text.append("\nNo days left to make up the hours", style="red")

        self.update(text)
