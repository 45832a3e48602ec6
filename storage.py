from __future__ import annotations

import logging
import os
import sqlite3
from datetime import date
from pathlib import Path

from models import DAY_KEYS, DayRecord, DaySettings, TimeSettings, WeekRecord
from utils import get_week_number

logger = logging.getLogger(__name__)


def _get_db_path() -> Path:
    """Get database path from environment variable or default location."""
    if env_path := os.environ.get("WEEKTRACKER_DB"):
        return Path(env_path)
    return Path(__file__).parent / "data" / "weektracker.db"


DB_PATH = _get_db_path()


def get_connection() -> sqlite3.Connection:
    DB_PATH.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(DB_PATH)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def init_db():
    """Create tables if they don't exist."""
    conn = get_connection()
    conn.executescript("""
        CREATE TABLE IF NOT EXISTS work_weeks (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            week_number INTEGER NOT NULL,
            year INTEGER NOT NULL,
            target_hours REAL NOT NULL,
            break_duration INTEGER NOT NULL,
            created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
            updated_at TEXT
        );

        CREATE TABLE IF NOT EXISTS work_days (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            week_id INTEGER NOT NULL,
            date TEXT NOT NULL,
            start_time TEXT NOT NULL,
            end_time TEXT NOT NULL,
            total_minutes INTEGER NOT NULL,
            lunch_break_minutes INTEGER,
            is_day_off INTEGER NOT NULL DEFAULT 0,
            verified INTEGER NOT NULL DEFAULT 0,
            created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
            updated_at TEXT,
            FOREIGN KEY (week_id) REFERENCES work_weeks(id),
            UNIQUE(week_id, date)
        );

        CREATE TABLE IF NOT EXISTS day_settings (
            day_name TEXT PRIMARY KEY,
            default_start_time TEXT NOT NULL DEFAULT '09:00',
            default_end_time TEXT NOT NULL DEFAULT '17:00',
            default_minutes INTEGER NOT NULL DEFAULT 480,
            office_hours_start TEXT NOT NULL DEFAULT '09:00',
            office_hours_end TEXT NOT NULL DEFAULT '17:00'
        );

        CREATE TABLE IF NOT EXISTS config (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL
        );

        CREATE INDEX IF NOT EXISTS idx_week_year ON work_weeks(week_number, year);
        CREATE INDEX IF NOT EXISTS idx_week_day ON work_days(week_id, date);
    """)
    conn.commit()
    conn.close()


def _format_time(val: str | None) -> str:
    """Store clock times as HH:MM, dropping any seconds."""
    if not val:
        return ""
    return ":".join(val.split(":")[:2])


def _row_to_day(row: sqlite3.Row) -> DayRecord:
    return DayRecord(
        id=row["id"],
        week_id=row["week_id"],
        date=date.fromisoformat(row["date"]),
        start_time=row["start_time"],
        end_time=row["end_time"],
        total_minutes=row["total_minutes"],
        lunch_break_minutes=row["lunch_break_minutes"],
        is_day_off=bool(row["is_day_off"]),
        verified=bool(row["verified"]),
    )


def _row_to_week(conn: sqlite3.Connection, row: sqlite3.Row) -> WeekRecord:
    day_rows = conn.execute(
        "SELECT * FROM work_days WHERE week_id = ? ORDER BY date",
        (row["id"],),
    ).fetchall()
    days = [_row_to_day(r) for r in day_rows]
    return WeekRecord(
        id=row["id"],
        week_number=row["week_number"],
        year=row["year"],
        target_hours=row["target_hours"],
        break_duration=row["break_duration"],
        days={d.date: d for d in days},
    )


# --- Week Functions ---


def fetch_week(year: int, week_number: int) -> WeekRecord | None:
    """Get a week with its days, or None if it was never recorded."""
    conn = get_connection()
    row = conn.execute(
        "SELECT * FROM work_weeks WHERE year = ? AND week_number = ? ORDER BY id LIMIT 1",
        (year, week_number),
    ).fetchone()
    week = _row_to_week(conn, row) if row else None
    conn.close()
    return week


def fetch_current_week(today: date) -> WeekRecord | None:
    """Get the week containing today."""
    year, week_number = get_week_number(today)
    return fetch_week(year, week_number)


def create_week(week_number: int, year: int, target_hours: float, break_duration: int) -> WeekRecord:
    """Insert a new, empty week."""
    conn = get_connection()
    cursor = conn.execute(
        """
        INSERT INTO work_weeks (week_number, year, target_hours, break_duration)
        VALUES (?, ?, ?, ?)
        """,
        (week_number, year, target_hours, break_duration),
    )
    conn.commit()
    week_id = cursor.lastrowid
    conn.close()
    logger.info("Created week %d of %d (id=%s)", week_number, year, week_id)
    return WeekRecord(
        id=week_id,
        week_number=week_number,
        year=year,
        target_hours=target_hours,
        break_duration=break_duration,
    )


def upsert_day(
    week_id: int,
    d: date,
    start_time: str,
    end_time: str,
    total_minutes: int,
    lunch_break_minutes: int | None,
    is_day_off: bool,
    verified: bool,
) -> DayRecord:
    """Insert or update the day of a week. The last write wins."""
    conn = get_connection()
    conn.execute(
        """
        INSERT INTO work_days
        (week_id, date, start_time, end_time, total_minutes, lunch_break_minutes, is_day_off, verified)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?)
        ON CONFLICT(week_id, date) DO UPDATE SET
            start_time = excluded.start_time,
            end_time = excluded.end_time,
            total_minutes = excluded.total_minutes,
            lunch_break_minutes = excluded.lunch_break_minutes,
            is_day_off = excluded.is_day_off,
            verified = excluded.verified,
            updated_at = CURRENT_TIMESTAMP
        """,
        (
            week_id,
            d.isoformat(),
            _format_time(start_time),
            _format_time(end_time),
            total_minutes,
            lunch_break_minutes,
            int(is_day_off),
            int(verified),
        ),
    )
    conn.execute(
        "UPDATE work_weeks SET updated_at = CURRENT_TIMESTAMP WHERE id = ?",
        (week_id,),
    )
    conn.commit()
    row = conn.execute(
        "SELECT * FROM work_days WHERE week_id = ? AND date = ?",
        (week_id, d.isoformat()),
    ).fetchone()
    conn.close()
    return _row_to_day(row)


def get_all_weeks() -> list[WeekRecord]:
    """Get every recorded week, newest first."""
    conn = get_connection()
    rows = conn.execute(
        "SELECT * FROM work_weeks ORDER BY year DESC, week_number DESC"
    ).fetchall()
    weeks = [_row_to_week(conn, row) for row in rows]
    conn.close()
    return weeks


# --- Settings Functions ---


def _row_to_day_settings(row: sqlite3.Row) -> DaySettings:
    return DaySettings(
        default_start_time=row["default_start_time"],
        default_end_time=row["default_end_time"],
        default_hours=row["default_minutes"] / 60,
        office_hours_start=row["office_hours_start"],
        office_hours_end=row["office_hours_end"],
    )


def get_day_settings() -> dict[str, DaySettings]:
    """Load stored per-day settings."""
    conn = get_connection()
    rows = conn.execute("SELECT * FROM day_settings").fetchall()
    conn.close()
    return {row["day_name"]: _row_to_day_settings(row) for row in rows}


def save_day_settings(day: str, settings: DaySettings) -> None:
    """Insert or update the settings of one day."""
    if day not in DAY_KEYS:
        raise ValueError(f"Unknown day: {day}")
    conn = get_connection()
    conn.execute(
        """
        INSERT OR REPLACE INTO day_settings
        (day_name, default_start_time, default_end_time, default_minutes,
         office_hours_start, office_hours_end)
        VALUES (?, ?, ?, ?, ?, ?)
        """,
        (
            day,
            _format_time(settings.default_start_time) or "09:00",
            _format_time(settings.default_end_time) or "17:00",
            round(settings.default_hours * 60),
            _format_time(settings.office_hours_start) or "09:00",
            _format_time(settings.office_hours_end) or "17:00",
        ),
    )
    conn.commit()
    conn.close()


def get_config() -> TimeSettings:
    """Load settings from the database, over the built-in defaults."""
    conn = get_connection()
    rows = conn.execute("SELECT key, value FROM config").fetchall()
    conn.close()

    config = TimeSettings()
    for row in rows:
        if row["key"] == "target_hours":
            config.target_hours = float(row["value"])
        elif row["key"] == "break_duration":
            config.break_duration = int(row["value"])
        elif row["key"] == "use_24_hour_format":
            config.use_24_hour_format = row["value"] == "1"
        elif row["key"] == "show_weekends":
            config.show_weekends = row["value"] == "1"
        elif row["key"] == "holiday_country":
            config.holiday_country = row["value"] or None
        elif row["key"] == "holiday_subdiv":
            config.holiday_subdiv = row["value"] or None

    config.day_settings.update(get_day_settings())
    return config


def save_config(config: TimeSettings):
    """Save settings, including every configured day, to the database."""
    conn = get_connection()
    values = [
        ("target_hours", str(config.target_hours)),
        ("break_duration", str(config.break_duration)),
        ("use_24_hour_format", "1" if config.use_24_hour_format else "0"),
        ("show_weekends", "1" if config.show_weekends else "0"),
        ("holiday_country", config.holiday_country or ""),
        ("holiday_subdiv", config.holiday_subdiv or ""),
    ]
    conn.executemany("INSERT OR REPLACE INTO config (key, value) VALUES (?, ?)", values)
    conn.commit()
    conn.close()

    for day, settings in config.day_settings.items():
        save_day_settings(day, settings)


def delete_all_data() -> None:
    """Remove every week, day and day setting, and reset the config."""
    conn = get_connection()
    conn.execute("DELETE FROM work_days")
    conn.execute("DELETE FROM work_weeks")
    conn.execute("DELETE FROM day_settings")
    conn.execute("DELETE FROM config")
    conn.commit()
    conn.close()
    logger.warning("Deleted all stored weeks and settings")
