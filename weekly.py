"""In-memory state for the displayed week's time entries."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, Mapping, Optional

from models import (
    DAY_KEYS,
    DEFAULT_LUNCH_BREAK_HOURS,
    LOCKED_DAY,
    UNKNOWN_DAY,
    WEEKEND_DAYS,
    DaySettings,
    EditResult,
    TimeEntry,
)
from utils import hours_worked, minutes_since_midnight, time_from_minutes

logger = logging.getLogger(__name__)

ChangeListener = Callable[[dict[str, TimeEntry], Optional[str]], None]

# Accepted types per field when merging caller-supplied entries
_NUMBER = (int, float)
FIELD_TYPES: dict[str, tuple[type, ...]] = {
    "hours": _NUMBER,
    "is_day_off": (bool,),
    "start_time": (str,),
    "end_time": (str,),
    "lunch_break_hours": _NUMBER,
    "verified": (bool,),
}


def _accepts(field_name: str, value: object) -> bool:
    expected = FIELD_TYPES.get(field_name)
    if expected is None:
        return False
    # bool is an int subclass but never a valid number here
    if isinstance(value, bool) and bool not in expected:
        return False
    return isinstance(value, expected)


def apply_overrides(entry: TimeEntry, overrides: Mapping[str, object]) -> TimeEntry:
    """Return a copy of entry with the well-typed fields of overrides applied."""
    accepted = {k: v for k, v in overrides.items() if _accepts(k, v)}
    if not accepted:
        return entry
    return replace(entry, **accepted)


def _enforce_day_off(entry: TimeEntry) -> TimeEntry:
    if entry.is_day_off and entry.hours != 0:
        return replace(entry, hours=0.0)
    return entry


def skeleton_layer(lunch_break_hours: float) -> dict[str, dict[str, object]]:
    """Blank week with weekends off."""
    return {
        day: {"lunch_break_hours": lunch_break_hours, "is_day_off": day in WEEKEND_DAYS}
        for day in DAY_KEYS
    }


def defaults_layer(
    day_settings: Mapping[str, DaySettings], lunch_break_hours: float
) -> dict[str, dict[str, object]]:
    """Configured default schedule as a layer of overrides."""
    layer = {}
    for day, settings in day_settings.items():
        layer[day] = {
            "start_time": settings.default_start_time,
            "end_time": settings.default_end_time,
            "hours": hours_worked(
                settings.default_start_time, settings.default_end_time, lunch_break_hours
            ),
            "is_day_off": False,
        }
    return layer


def holidays_layer(holidays: Mapping[str, str]) -> dict[str, dict[str, object]]:
    return {day: {"is_day_off": True, "hours": 0.0} for day in holidays}


def build_entries(layers: list[Mapping[str, Mapping[str, object]]]) -> dict[str, TimeEntry]:
    """Apply layers in order over blank entries for every day.

    Each layer maps day keys to partial entries. A field is only taken
    when its type matches, otherwise the earlier layer's value stays.
    Days that are not part of the week are ignored.
    """
    entries = {day: TimeEntry() for day in DAY_KEYS}
    for layer in layers:
        for day, overrides in layer.items():
            if day not in entries or not overrides:
                continue
            entries[day] = apply_overrides(entries[day], overrides)
    return {day: _enforce_day_off(entry) for day, entry in entries.items()}


class WeeklyEntries:
    """Authoritative entry set for one week.

    Every applied change is reported to ``on_change`` with the new entry
    map and the changed day (``None`` for bulk changes).
    """

    def __init__(
        self,
        day_settings: Mapping[str, DaySettings],
        target_hours: float,
        initial_entries: Mapping[str, Mapping[str, object]] | None = None,
        lunch_break_hours: float = DEFAULT_LUNCH_BREAK_HOURS,
        holidays: Mapping[str, str] | None = None,
        on_change: ChangeListener | None = None,
    ):
        self.day_settings = dict(day_settings)
        self.target_hours = target_hours
        self.lunch_break_hours = lunch_break_hours
        self.on_change = on_change

        layers = [
            skeleton_layer(lunch_break_hours),
            defaults_layer(self.day_settings, lunch_break_hours),
        ]
        if holidays:
            layers.append(holidays_layer(holidays))
        if initial_entries:
            layers.append(initial_entries)
        self._entries = build_entries(layers)

    @property
    def entries(self) -> dict[str, TimeEntry]:
        return dict(self._entries)

    def get(self, day: str) -> TimeEntry | None:
        return self._entries.get(day)

    @property
    def total_hours(self) -> float:
        """Sum of hours over the week. Days off always count as zero."""
        return sum(entry.hours for entry in self._entries.values())

    @property
    def remaining_hours(self) -> float:
        return max(0.0, self.target_hours - self.total_hours)

    def _notify(self, changed_day: str | None) -> None:
        if self.on_change is not None:
            self.on_change(self.entries, changed_day)

    def _update(self, day: str, entry: TimeEntry) -> EditResult:
        self._entries[day] = _enforce_day_off(entry)
        self._notify(day)
        return EditResult(day, True)

    def _check_editable(self, day: str) -> EditResult | None:
        entry = self._entries.get(day)
        if entry is None:
            logger.warning("Ignoring edit for unknown day %r", day)
            return EditResult(day, False, UNKNOWN_DAY)
        if entry.verified:
            logger.info("Rejected edit for locked day %s", day)
            return EditResult(day, False, LOCKED_DAY)
        return None

    def _recalculated(self, entry: TimeEntry) -> TimeEntry:
        return replace(
            entry,
            hours=hours_worked(entry.start_time, entry.end_time, entry.lunch_break_hours),
        )

    def set_time(self, day: str, field_name: str, value: str) -> EditResult:
        """Change the start or end time and recompute hours."""
        if field_name not in ("start_time", "end_time"):
            raise ValueError(f"Not a time field: {field_name}")
        rejected = self._check_editable(day)
        if rejected is not None:
            return rejected
        entry = replace(self._entries[day], **{field_name: value})
        return self._update(day, self._recalculated(entry))

    def set_start_time(self, day: str, value: str) -> EditResult:
        return self.set_time(day, "start_time", value)

    def set_end_time(self, day: str, value: str) -> EditResult:
        return self.set_time(day, "end_time", value)

    def set_lunch_break(self, day: str, lunch_break_hours: float) -> EditResult:
        rejected = self._check_editable(day)
        if rejected is not None:
            return rejected
        entry = replace(self._entries[day], lunch_break_hours=lunch_break_hours)
        return self._update(day, self._recalculated(entry))

    def set_hours(self, day: str, hours: float) -> EditResult:
        """Manual override of the day's hours, times are left alone."""
        rejected = self._check_editable(day)
        if rejected is not None:
            return rejected
        return self._update(day, replace(self._entries[day], hours=max(0.0, hours)))

    def set_day_off(self, day: str, is_day_off: bool) -> EditResult:
        """Toggle the day-off flag.

        Turning a day off zeroes its hours but keeps the times. Turning it
        back on leaves hours at zero until the next time edit.
        """
        rejected = self._check_editable(day)
        if rejected is not None:
            return rejected
        return self._update(day, replace(self._entries[day], is_day_off=is_day_off))

    def set_verified(self, day: str, verified: bool) -> EditResult:
        if day not in self._entries:
            return EditResult(day, False, UNKNOWN_DAY)
        return self._update(day, replace(self._entries[day], verified=verified))

    def apply_default_hours(self) -> list[str]:
        """Reset configured work days to their default start and end times.

        Returns the days that were reset.
        """
        changed = []
        for day, settings in self.day_settings.items():
            entry = self._entries.get(day)
            if entry is None or entry.is_day_off:
                continue
            self._entries[day] = self._recalculated(
                replace(
                    entry,
                    start_time=settings.default_start_time,
                    end_time=settings.default_end_time,
                )
            )
            changed.append(day)
        if changed:
            logger.info("Applied default hours to %s", ", ".join(changed))
            self._notify(None)
        return changed

    def fill_target_hours(self) -> list[str]:
        """Spread the shortfall to the weekly target evenly over work days.

        End times move later; hours are then derived from the clock times,
        so shares finer than a minute are lost.
        """
        work_days = [day for day, e in self._entries.items() if not e.is_day_off]
        current_total = sum(self._entries[day].hours for day in work_days)
        if current_total >= self.target_hours or not work_days:
            return []

        per_day = (self.target_hours - current_total) / len(work_days)
        for day in work_days:
            entry = self._entries[day]
            end_minutes = (
                minutes_since_midnight(entry.start_time)
                + (entry.hours + per_day) * 60
                + entry.lunch_break_hours * 60
            )
            self._entries[day] = self._recalculated(
                replace(entry, end_time=time_from_minutes(end_minutes))
            )

        logger.info("Filled %.2fh across %d days", per_day * len(work_days), len(work_days))
        self._notify(None)
        return work_days

    def replace_entries(self, entries: Mapping[str, TimeEntry], changed_day: str | None = None) -> None:
        """Install a new entry map, e.g. an applied early-departure plan."""
        self._entries = {
            day: _enforce_day_off(entries.get(day, self._entries[day])) for day in DAY_KEYS
        }
        self._notify(changed_day)
