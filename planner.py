"""Early departure planning: move hours lost on one day onto the others."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Mapping

from models import (
    DAY_KEYS,
    LOCKED_DAY,
    PAST_DAY,
    UNKNOWN_DAY,
    WEEKEND_DAYS,
    DaySettings,
    TimeEntry,
)
from utils import (
    STRATEGIES,
    get_week_start,
    hours_worked,
    is_day_in_past,
    minutes_since_midnight,
    time_from_minutes,
)

logger = logging.getLogger(__name__)

DEFAULT_OFFICE_HOURS_START = "09:00"
DEFAULT_DAY_HOURS = 8.0
MAX_CUSTOM_HOURS = 4.0

STRATEGY_CODES = [code for code, _ in STRATEGIES]


@dataclass
class PlanPreview:
    selected_day: str
    departure_time: str
    strategy: str
    hours_before_departure: float
    deficit: float
    target_hours: float
    total_planned_hours: float
    work_days: list[str]
    modifiable_days: list[str]
    excluded_days: dict[str, str]
    extra_hours: dict[str, float]

    @property
    def allocated_hours(self) -> float:
        """Hours placed on other days. Custom plans may not match the deficit."""
        return sum(self.extra_hours.values())


@dataclass
class PlanResult:
    applied: bool
    entries: dict[str, TimeEntry] = field(default_factory=dict)
    reason: str | None = None


class EarlyDeparturePlanner:
    """Works out how to leave early on one day and still hit the week.

    The plan only ever touches days that can still change: days before
    ``today`` and verified days are left alone and reported with a label.
    """

    def __init__(
        self,
        entries: Mapping[str, TimeEntry],
        target_hours: float,
        day_settings: Mapping[str, DaySettings],
        today: date,
        week_start: date | None = None,
        show_weekends: bool = False,
    ):
        self.entries = dict(entries)
        self.target_hours = target_hours
        self.day_settings = dict(day_settings)
        self.today = today
        self.week_start = week_start or get_week_start(today)
        self.show_weekends = show_weekends

        self.selected_day = "friday"
        self.departure_time = "14:00"
        self.strategy = "equal"
        self.custom_amounts: dict[str, float] = {}

    # --- Selection ---

    def select_day(self, day: str) -> None:
        if day not in DAY_KEYS:
            raise ValueError(f"Unknown day: {day}")
        self.selected_day = day

    def set_departure_time(self, value: str) -> None:
        self.departure_time = value

    def set_strategy(self, strategy: str) -> None:
        if strategy not in STRATEGY_CODES:
            raise ValueError(f"Unknown strategy: {strategy}")
        self.strategy = strategy

    def custom_bounds(self) -> tuple[float, float]:
        return 0.0, min(MAX_CUSTOM_HOURS, self.deficit)

    def set_custom_amount(self, day: str, hours: float) -> bool:
        """Assign extra hours to a day, clamped to the allowed range.

        Returns False when the day cannot take extra hours.
        """
        if day not in self.modifiable_days:
            return False
        low, high = self.custom_bounds()
        self.custom_amounts[day] = min(max(hours, low), high)
        return True

    # --- Derived values ---

    def _settings_for(self, day: str) -> DaySettings | None:
        return self.day_settings.get(day)

    @property
    def visible_days(self) -> list[str]:
        if self.show_weekends:
            return list(DAY_KEYS)
        return [day for day in DAY_KEYS if day not in WEEKEND_DAYS]

    @property
    def work_days(self) -> list[str]:
        return [
            day for day in self.visible_days
            if day in self.entries and not self.entries[day].is_day_off
        ]

    @property
    def hours_before_departure(self) -> float:
        entry = self.entries.get(self.selected_day)
        if entry is None or entry.is_day_off:
            return 0.0
        settings = self._settings_for(self.selected_day)
        office_start = settings.office_hours_start if settings else DEFAULT_OFFICE_HOURS_START
        return hours_worked(office_start, self.departure_time, entry.lunch_break_hours)

    @property
    def deficit(self) -> float:
        settings = self._settings_for(self.selected_day)
        default_hours = settings.default_hours if settings else DEFAULT_DAY_HOURS
        return max(0.0, default_hours - self.hours_before_departure)

    def _lock_reason(self, day: str) -> str | None:
        entry = self.entries.get(day)
        if entry is None:
            return UNKNOWN_DAY
        if is_day_in_past(day, self.today, self.week_start):
            return PAST_DAY
        if entry.verified:
            return LOCKED_DAY
        return None

    @property
    def excluded_days(self) -> dict[str, str]:
        """Other work days that cannot change, with the reason why."""
        excluded = {}
        for day in self.work_days:
            if day == self.selected_day:
                continue
            reason = self._lock_reason(day)
            if reason:
                excluded[day] = reason
        return excluded

    @property
    def modifiable_days(self) -> list[str]:
        excluded = self.excluded_days
        return [d for d in self.work_days if d != self.selected_day and d not in excluded]

    @property
    def extra_per_day(self) -> float:
        days = self.modifiable_days
        if not days:
            return 0.0
        return self.deficit / len(days)

    def extra_hours(self) -> dict[str, float]:
        """Extra hours per modifiable day under the current strategy."""
        share = self.extra_per_day
        if self.strategy == "custom":
            return {day: self.custom_amounts.get(day, share) for day in self.modifiable_days}
        return {day: share for day in self.modifiable_days}

    def preview(self) -> PlanPreview:
        return PlanPreview(
            selected_day=self.selected_day,
            departure_time=self.departure_time,
            strategy=self.strategy,
            hours_before_departure=self.hours_before_departure,
            deficit=self.deficit,
            target_hours=self.target_hours,
            total_planned_hours=sum(
                e.hours for e in self.entries.values() if not e.is_day_off
            ),
            work_days=self.work_days,
            modifiable_days=self.modifiable_days,
            excluded_days=self.excluded_days,
            extra_hours=self.extra_hours(),
        )

    # --- Plan ---

    def _shift(self, entry: TimeEntry, extra: float) -> TimeEntry:
        extra_minutes = extra * 60
        if self.strategy == "early-start":
            start = minutes_since_midnight(entry.start_time) - extra_minutes
            return replace(entry, start_time=time_from_minutes(start), hours=entry.hours + extra)
        end = minutes_since_midnight(entry.end_time) + extra_minutes
        return replace(entry, end_time=time_from_minutes(end), hours=entry.hours + extra)

    def plan(self) -> PlanResult:
        """Build the adjusted entries for the whole week.

        The result is rejected when the selected day itself can no longer
        change.
        """
        reason = self._lock_reason(self.selected_day)
        if reason:
            logger.info("Early departure on %s rejected: %s", self.selected_day, reason)
            return PlanResult(False, reason=reason)

        entries = dict(self.entries)
        selected = entries[self.selected_day]
        settings = self._settings_for(self.selected_day)
        office_start = settings.office_hours_start if settings else DEFAULT_OFFICE_HOURS_START
        entries[self.selected_day] = replace(
            selected,
            start_time=selected.start_time or office_start,
            end_time=self.departure_time,
            hours=self.hours_before_departure,
        )

        for day, extra in self.extra_hours().items():
            entries[day] = self._shift(entries[day], extra)

        logger.info(
            "Planned early departure on %s at %s: %.2fh over %s (%s)",
            self.selected_day,
            self.departure_time,
            self.deficit,
            ", ".join(self.modifiable_days) or "no days",
            self.strategy,
        )
        return PlanResult(True, entries)
