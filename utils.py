"""Utility functions for time arithmetic and week calculations."""

from __future__ import annotations

import math
from datetime import date, timedelta

from models import DAY_KEYS


def _split_clock(value: str | None) -> tuple[int, int] | None:
    """Split "HH:MM" (or "HH:MM:SS") into hours and minutes."""
    if not value:
        return None
    parts = value.strip().split(":")
    if len(parts) < 2:
        return None
    try:
        return int(parts[0]), int(parts[1])
    except ValueError:
        return None


def minutes_since_midnight(value: str | None) -> int:
    """Minutes since midnight for a clock time. Malformed input gives 0."""
    parts = _split_clock(value)
    if parts is None:
        return 0
    hours, minutes = parts
    return hours * 60 + minutes


def time_from_minutes(total: float) -> str:
    """Format minutes since midnight as "HH:MM".

    Fractional minutes are truncated. Values are not wrapped into a single
    day, so callers must keep them within 0-1439 to get a real clock time.
    """
    hours = int(total // 60)
    minutes = int(total % 60)
    return f"{hours:02d}:{minutes:02d}"


def hours_worked(start: str | None, end: str | None, lunch_break_hours: float) -> float:
    """Hours between start and end less the lunch break, never negative."""
    if _split_clock(start) is None or _split_clock(end) is None:
        return 0.0
    worked = (minutes_since_midnight(end) - minutes_since_midnight(start)) / 60
    return max(0.0, worked - lunch_break_hours)


def format_hours(hours: float) -> str:
    """Render hours as "7h 30m", or "8h" on the whole hour."""
    whole = math.floor(hours)
    minutes = math.floor((hours - whole) * 60 + 0.5)
    if minutes == 60:
        whole += 1
        minutes = 0
    if minutes == 0:
        return f"{whole}h"
    return f"{whole}h {minutes}m"


def format_clock(value: str | None, use_24_hour_format: bool = True) -> str:
    """Display a stored "HH:MM" time, e.g. "17:30" or "5:30 PM"."""
    parts = _split_clock(value)
    if parts is None:
        return value or ""
    hours, minutes = parts
    if use_24_hour_format:
        return f"{hours:02d}:{minutes:02d}"
    suffix = "AM" if hours % 24 < 12 else "PM"
    return f"{(hours % 12) or 12}:{minutes:02d} {suffix}"


def format_minutes(total: int) -> str:
    """Render a whole number of minutes as "8h" or "8h 15m"."""
    hours, minutes = divmod(abs(total), 60)
    if minutes == 0:
        return f"{hours}h"
    return f"{hours}h {minutes}m"


def format_time_difference(minutes: int) -> str:
    """Signed difference, e.g. "+1h 30m" or "-2h"."""
    sign = "-" if minutes < 0 else "+"
    return f"{sign}{format_minutes(minutes)}"


# --- Week calendar (weeks start on Sunday) ---


def get_week_start(d: date) -> date:
    """Get the Sunday that starts the week containing date d."""
    # Sunday = 6 in weekday()
    days_since_sunday = (d.weekday() + 1) % 7
    return d - timedelta(days=days_since_sunday)


def _first_sunday(year: int) -> date:
    jan1 = date(year, 1, 1)
    return jan1 + timedelta(days=(6 - jan1.weekday()) % 7)


def get_week_number(d: date) -> tuple[int, int]:
    """Get (year, week) for the Sunday-start week containing d.

    Week 1 starts on the first Sunday of the year. Days before it belong
    to the last week of the previous year.
    """
    week_start = get_week_start(d)
    first = _first_sunday(week_start.year)
    return week_start.year, (week_start - first).days // 7 + 1


def get_first_day_of_week(year: int, week_number: int) -> date:
    """Get the Sunday that starts the given week."""
    return _first_sunday(year) + timedelta(weeks=week_number - 1)


def date_for_day(day: str, week_start: date) -> date:
    """Resolve a day key ("monday"...) to its date in the week."""
    # Sunday opens the week, Monday is the day after
    offset = (DAY_KEYS.index(day) + 1) % 7
    return week_start + timedelta(days=offset)


def get_week_dates(week_start: date) -> dict[str, date]:
    """Map every day key to its date in the week starting week_start."""
    return {day: date_for_day(day, week_start) for day in DAY_KEYS}


def is_day_in_past(day: str, today: date, week_start: date | None = None) -> bool:
    """Check whether a day of the week falls before today."""
    if week_start is None:
        week_start = get_week_start(today)
    return date_for_day(day, week_start) < today


def get_holidays_in_week(
    week_start: date, country: str, subdiv: str | None = None
) -> dict[str, str]:
    """Get public holidays in the week, keyed by day."""
    import holidays

    week_end = week_start + timedelta(days=6)
    years = sorted({week_start.year, week_end.year})
    country_holidays = holidays.country_holidays(country, subdiv=subdiv, years=years)

    result = {}
    for day, d in get_week_dates(week_start).items():
        name = country_holidays.get(d)
        if name:
            result[day] = name
    return result


STRATEGIES = [
    ("equal", "Equal - spread evenly, leave later"),
    ("custom", "Custom - choose hours per day"),
    ("early-start", "Early start - spread evenly, arrive earlier"),
]
