"""Mirror local week changes into storage."""

from __future__ import annotations

import logging
import sqlite3
import threading
from datetime import date
from typing import Callable, Mapping

import storage
from models import DayRecord, TimeEntry, TimeSettings, WeekRecord
from utils import get_week_dates, get_week_number

logger = logging.getLogger(__name__)

FALLBACK_START = "09:00"
FALLBACK_END = "17:00"


def entries_from_week(week: WeekRecord) -> dict[str, dict[str, object]]:
    """Convert a stored week into partial entries keyed by day."""
    entries: dict[str, dict[str, object]] = {}
    for record in week.days.values():
        lunch_minutes = record.lunch_break_minutes
        if lunch_minutes is None:
            lunch_minutes = week.break_duration
        entries[record.day_key] = {
            "hours": record.hours,
            "is_day_off": record.is_day_off,
            "start_time": record.start_time,
            "end_time": record.end_time,
            "lunch_break_hours": lunch_minutes / 60,
            "verified": record.verified,
        }
    return entries


class WeekSync:
    """Writes changed days of one week to storage.

    The week record is created on the first write. Each day is written on
    its own; a failed write is logged and the rest carry on.
    """

    def __init__(self, settings: TimeSettings, week_start: date, week: WeekRecord | None = None):
        self.settings = settings
        self.week_start = week_start
        self.week = week
        self._dates = get_week_dates(week_start)
        self._lock = threading.Lock()

    def ensure_week(self) -> WeekRecord:
        with self._lock:
            if self.week is None:
                year, week_number = get_week_number(self.week_start)
                self.week = storage.create_week(
                    week_number,
                    year,
                    self.settings.target_hours,
                    self.settings.break_duration,
                )
            return self.week

    def _times_for(self, day: str, entry: TimeEntry, existing: DayRecord | None) -> tuple[str, str]:
        day_settings = self.settings.day_settings.get(day)
        start = (
            entry.start_time
            or (existing.start_time if existing else "")
            or (day_settings.default_start_time if day_settings else "")
            or FALLBACK_START
        )
        end = (
            entry.end_time
            or (existing.end_time if existing else "")
            or (day_settings.default_end_time if day_settings else "")
            or FALLBACK_END
        )
        return start, end

    def save(
        self,
        entries: Mapping[str, TimeEntry],
        changed_day: str | None = None,
        is_cancelled: Callable[[], bool] | None = None,
    ) -> list[DayRecord]:
        """Write the changed day, or every day when none is given.

        ``is_cancelled`` is checked before each write; once it returns True
        nothing further is written.
        """
        stopped = is_cancelled or (lambda: False)
        if stopped():
            return []
        try:
            week = self.ensure_week()
        except sqlite3.Error:
            logger.exception("Could not create week starting %s", self.week_start)
            return []

        days = [changed_day] if changed_day else list(entries)
        saved = []
        for day in days:
            entry = entries.get(day)
            if stopped():
                logger.info("Save of week %s cancelled", week.id)
                break
            if entry is None or day not in self._dates:
                continue
            d = self._dates[day]
            start, end = self._times_for(day, entry, week.days.get(d))
            try:
                record = storage.upsert_day(
                    week.id,
                    d,
                    start,
                    end,
                    round(entry.hours * 60),
                    round(entry.lunch_break_hours * 60),
                    entry.is_day_off,
                    entry.verified,
                )
            except sqlite3.Error:
                logger.exception("Error updating %s (%s)", day, d)
                continue
            week.days[d] = record
            saved.append(record)

        logger.debug("Saved %d of %d days for week %s", len(saved), len(days), week.id)
        return saved
