from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date


DAYS = [
    ("monday", "Monday"),
    ("tuesday", "Tuesday"),
    ("wednesday", "Wednesday"),
    ("thursday", "Thursday"),
    ("friday", "Friday"),
    ("saturday", "Saturday"),
    ("sunday", "Sunday"),
]

DAY_KEYS = tuple(key for key, _ in DAYS)
DAY_LABELS = dict(DAYS)
WEEKEND_DAYS = ("saturday", "sunday")

DEFAULT_LUNCH_BREAK_HOURS = 0.5

# Rejection reasons shown next to days that cannot be changed
UNKNOWN_DAY = "unknown day"
PAST_DAY = "past day"
LOCKED_DAY = "verified — locked"


@dataclass(frozen=True)
class TimeEntry:
    hours: float = 0.0
    is_day_off: bool = False
    start_time: str = ""
    end_time: str = ""
    lunch_break_hours: float = DEFAULT_LUNCH_BREAK_HOURS
    verified: bool = False


@dataclass(frozen=True)
class DaySettings:
    default_start_time: str = "09:00"
    default_end_time: str = "17:00"
    default_hours: float = 8.0
    office_hours_start: str = "09:00"
    office_hours_end: str = "17:00"


def default_day_settings() -> dict[str, DaySettings]:
    """Monday to Friday, nine to five, with a shorter Friday office window."""
    settings = {day: DaySettings() for day in DAY_KEYS if day not in WEEKEND_DAYS}
    settings["friday"] = DaySettings(office_hours_end="14:00")
    return settings


@dataclass
class TimeSettings:
    target_hours: float = 40.0
    break_duration: int = 30
    use_24_hour_format: bool = True
    show_weekends: bool = False
    holiday_country: str | None = None
    holiday_subdiv: str | None = None
    day_settings: dict[str, DaySettings] = field(default_factory=default_day_settings)

    @property
    def lunch_break_hours(self) -> float:
        """Configured break duration in hours."""
        return self.break_duration / 60


@dataclass
class DayRecord:
    id: int
    week_id: int
    date: date
    start_time: str
    end_time: str
    total_minutes: int
    lunch_break_minutes: int | None = None
    is_day_off: bool = False
    verified: bool = False

    @property
    def day_key(self) -> str:
        return DAY_KEYS[self.date.weekday()]

    @property
    def hours(self) -> float:
        return self.total_minutes / 60


@dataclass
class WeekRecord:
    id: int
    week_number: int
    year: int
    target_hours: float
    break_duration: int
    days: dict[date, DayRecord] = field(default_factory=dict)

    @property
    def total_minutes(self) -> int:
        """Worked minutes across the week, ignoring days off."""
        return sum(d.total_minutes for d in self.days.values() if not d.is_day_off)


@dataclass(frozen=True)
class EditResult:
    """Outcome of a single-day change."""

    day: str
    applied: bool
    reason: str | None = None

    def __bool__(self) -> bool:
        return self.applied
