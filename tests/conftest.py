"""Shared fixtures for tests."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Generator

import pytest

# Set up test database before importing storage
_test_db_fd, _test_db_path = tempfile.mkstemp(suffix=".db")
os.environ["WEEKTRACKER_DB"] = _test_db_path


@pytest.fixture(scope="session", autouse=True)
def setup_test_db() -> Generator[Path, None, None]:
    """Set up a test database for the entire test session."""
    import storage

    # Reinitialise storage module with test db path
    storage.DB_PATH = Path(_test_db_path)
    storage.init_db()

    yield Path(_test_db_path)

    # Cleanup
    os.close(_test_db_fd)
    os.unlink(_test_db_path)


@pytest.fixture
def clean_db(setup_test_db: Path) -> Generator[None, None, None]:
    """Clean database tables before each test."""
    import storage

    storage.DB_PATH = setup_test_db
    storage.init_db()
    storage.delete_all_data()

    yield


@pytest.fixture
def day_settings():
    """Monday to Friday, 09:00-17:30 so a half hour lunch leaves 8h."""
    from models import DaySettings

    return {
        day: DaySettings(default_start_time="09:00", default_end_time="17:30")
        for day in ("monday", "tuesday", "wednesday", "thursday", "friday")
    }


@pytest.fixture
def week(day_settings):
    """A 40h week built from the eight hour defaults."""
    from weekly import WeeklyEntries

    return WeeklyEntries(day_settings, target_hours=40)


@pytest.fixture
def sample_time_entry():
    """Create a sample TimeEntry for testing."""
    from models import TimeEntry

    return TimeEntry(
        hours=8.0,
        start_time="09:00",
        end_time="17:30",
        lunch_break_hours=0.5,
    )
