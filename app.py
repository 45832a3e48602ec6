#!/usr/bin/env python3
"""Week tracker TUI application."""

from __future__ import annotations

import logging
from datetime import date

from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.coordinate import Coordinate
from textual.widgets import DataTable, Footer
from textual.worker import get_current_worker
from rich.text import Text

import storage
from history import summarise_history
from logging_config import setup_logging
from models import DAY_KEYS, DAY_LABELS, LOCKED_DAY, WEEKEND_DAYS, EditResult, TimeEntry
from planner import EarlyDeparturePlanner, PlanResult
from screens import ConfirmScreen, EarlyDepartureScreen, EditDayScreen, HistoryScreen
from sync import WeekSync, entries_from_week
from utils import (
    format_clock,
    format_hours,
    get_holidays_in_week,
    get_week_dates,
    get_week_number,
    get_week_start,
    is_day_in_past,
)
from weekly import WeeklyEntries
from widgets import WeekHeader, WeeklySummary

logger = logging.getLogger(__name__)


class WeekTrackerApp(App):
    """Main week tracker application."""

    CSS = """
    Screen {
        background: $surface;
    }

    #week-header {
        height: auto;
        background: $primary;
        color: $text;
        padding: 0 1;
        text-style: bold;
    }

    #week-table {
        height: auto;
        margin: 1 2;
    }

    #weekly-summary {
        height: auto;
        padding: 1 2;
        color: $text;
    }

    DataTable > .datatable--cursor {
        background: $secondary;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("e", "edit_day", "Edit"),
        Binding("o", "toggle_day_off", "Day off"),
        Binding("v", "toggle_verified", "Verify"),
        Binding("d", "apply_defaults", "Defaults"),
        Binding("f", "fill_target", "Fill"),
        Binding("p", "early_departure", "Leave early"),
        Binding("h", "history", "History"),
        Binding("X", "wipe_data", "Wipe", show=False),
    ]

    def __init__(self, today: date | None = None):
        super().__init__()
        storage.init_db()

        # The clock is read once; everything below works from this date
        self.today = today or date.today()
        self.week_start = get_week_start(self.today)
        self.year, self.week_number = get_week_number(self.today)
        self.week_dates = get_week_dates(self.week_start)

        self.settings = storage.get_config()
        self.holidays: dict[str, str] = {}
        self._load_week()

    def _load_week(self):
        """Build the week state from storage, defaults and holidays."""
        week = storage.fetch_current_week(self.today)
        self.holidays = self._get_holidays()
        self.sync = WeekSync(self.settings, self.week_start, week)

        target = week.target_hours if week else self.settings.target_hours
        break_duration = week.break_duration if week else self.settings.break_duration
        self.week_state = WeeklyEntries(
            self.settings.day_settings,
            target,
            initial_entries=entries_from_week(week) if week else None,
            lunch_break_hours=break_duration / 60,
            holidays=self.holidays,
            on_change=self._on_entries_changed,
        )

    def _get_holidays(self) -> dict[str, str]:
        if not self.settings.holiday_country:
            return {}
        try:
            return get_holidays_in_week(
                self.week_start, self.settings.holiday_country, self.settings.holiday_subdiv
            )
        except NotImplementedError:
            logger.warning("No holiday calendar for %s", self.settings.holiday_country)
            return {}

    @property
    def visible_days(self) -> list[str]:
        if self.settings.show_weekends:
            return list(DAY_KEYS)
        return [day for day in DAY_KEYS if day not in WEEKEND_DAYS]

    def compose(self) -> ComposeResult:
        yield WeekHeader(id="week-header")
        yield DataTable(id="week-table")
        yield WeeklySummary(id="weekly-summary")
        yield Footer()

    def on_mount(self):
        table = self.query_one("#week-table", DataTable)
        table.cursor_type = "row"
        table.add_column("Day", width=10)
        table.add_column("Date", width=8)
        table.add_column("Start", width=7)
        table.add_column("End", width=7)
        table.add_column("Lunch", width=7)
        table.add_column("Hours", width=9)
        table.add_column("Status", width=24)
        self._refresh_display()
        table.focus()

    def _day_status(self, day: str, entry: TimeEntry) -> Text:
        if day in self.holidays and entry.is_day_off:
            return Text(self.holidays[day], style="dim")
        if entry.is_day_off:
            return Text("Day off", style="dim")
        if entry.verified:
            return Text("Verified", style="green")
        if is_day_in_past(day, self.today, self.week_start):
            return Text("Past", style="dim")
        return Text("")

    def _clock(self, value: str) -> str:
        return format_clock(value, self.settings.use_24_hour_format) or "--:--"

    def _refresh_display(self):
        self.query_one("#week-header", WeekHeader).update_display(
            self.year, self.week_number, self.week_start
        )

        table = self.query_one("#week-table", DataTable)
        cursor_row = table.cursor_row
        table.clear()
        entries = self.week_state.entries
        for day in self.visible_days:
            entry = entries[day]
            style = "dim" if entry.is_day_off else ""
            table.add_row(
                Text(DAY_LABELS[day], style="bold" if self.week_dates[day] == self.today else style),
                self.week_dates[day].strftime("%b %d"),
                Text(self._clock(entry.start_time), style=style),
                Text(self._clock(entry.end_time), style=style),
                Text(f"{round(entry.lunch_break_hours * 60)}m", style=style),
                Text(format_hours(entry.hours), style=style),
                self._day_status(day, entry),
                key=day,
            )
        if table.row_count:
            table.move_cursor(row=min(cursor_row, table.row_count - 1))

        self.query_one("#weekly-summary", WeeklySummary).update_display(
            self.week_state.total_hours,
            self.week_state.target_hours,
            self.week_state.remaining_hours,
        )

    def _on_entries_changed(self, entries: dict[str, TimeEntry], changed_day: str | None) -> None:
        """Refresh straight away and write to storage in the background."""
        self._save_in_background(entries, changed_day)
        if self.is_running:
            self._refresh_display()

    @work(thread=True, group="sync")
    def _save_in_background(self, entries: dict[str, TimeEntry], changed_day: str | None) -> None:
        worker = get_current_worker()
        self.sync.save(entries, changed_day, is_cancelled=lambda: worker.is_cancelled)

    def _get_selected_day(self) -> str | None:
        """Get the day key of the selected table row."""
        table = self.query_one("#week-table", DataTable)
        if table.row_count == 0:
            return None
        row_key = table.coordinate_to_cell_key(Coordinate(table.cursor_row, 0)).row_key
        return str(row_key.value) if row_key else None

    def _report(self, results: list[EditResult]) -> None:
        """Warn about edits that were refused."""
        for result in results:
            if not result.applied:
                label = DAY_LABELS.get(result.day, result.day)
                self.notify(f"{label} not changed: {result.reason}", severity="warning")

    def action_edit_day(self):
        """Open edit modal for selected day."""
        day = self._get_selected_day()
        entry = self.week_state.get(day) if day else None
        if entry is None:
            return
        if entry.verified:
            self._report([EditResult(day, False, LOCKED_DAY)])
            return
        self.push_screen(EditDayScreen(day, entry), lambda changes: self._on_edit_complete(day, changes))

    def _on_edit_complete(self, day: str, changes: dict | None) -> None:
        """Apply the changed fields in the order the hours depend on them."""
        if not changes:
            return
        results = []
        if "lunch_break_hours" in changes:
            results.append(self.week_state.set_lunch_break(day, changes["lunch_break_hours"]))
        if "start_time" in changes:
            results.append(self.week_state.set_start_time(day, changes["start_time"]))
        if "end_time" in changes:
            results.append(self.week_state.set_end_time(day, changes["end_time"]))
        if "hours" in changes:
            results.append(self.week_state.set_hours(day, changes["hours"]))
        self._report(results)

    def action_toggle_day_off(self):
        day = self._get_selected_day()
        entry = self.week_state.get(day) if day else None
        if entry is None:
            return
        self._report([self.week_state.set_day_off(day, not entry.is_day_off)])

    def action_toggle_verified(self):
        day = self._get_selected_day()
        entry = self.week_state.get(day) if day else None
        if entry is None:
            return
        self._report([self.week_state.set_verified(day, not entry.verified)])

    def action_apply_defaults(self):
        def do_apply(confirmed: bool | None) -> None:
            if confirmed:
                changed = self.week_state.apply_default_hours()
                self.notify(f"Default hours applied to {len(changed)} days")

        self.push_screen(
            ConfirmScreen("Reset all work days to their default times?"),
            do_apply,
        )

    def action_fill_target(self):
        changed = self.week_state.fill_target_hours()
        if not changed:
            self.notify("Weekly target already reached")

    def action_early_departure(self):
        planner = EarlyDeparturePlanner(
            self.week_state.entries,
            self.week_state.target_hours,
            self.settings.day_settings,
            today=self.today,
            week_start=self.week_start,
            show_weekends=self.settings.show_weekends,
        )
        selected = self._get_selected_day()
        if selected in planner.work_days:
            planner.select_day(selected)
        self.push_screen(
            EarlyDepartureScreen(planner, self.settings.use_24_hour_format),
            self._on_plan_complete,
        )

    def _on_plan_complete(self, result: PlanResult | None) -> None:
        if result is None:
            return
        if not result.applied:
            self.notify(f"Plan not applied: {result.reason}", severity="warning")
            return
        self.week_state.replace_entries(result.entries)
        self.notify("Early departure plan applied")

    def action_history(self):
        summaries = summarise_history(storage.get_all_weeks())
        self.push_screen(HistoryScreen(summaries))

    def action_wipe_data(self):
        def do_wipe(confirmed: bool | None) -> None:
            if confirmed:
                self._wipe_data()

        self.push_screen(
            ConfirmScreen("Delete every recorded week and all settings?"),
            do_wipe,
        )

    def _wipe_data(self) -> None:
        # A pending save would recreate the week after the delete
        self.workers.cancel_group(self, "sync")
        storage.delete_all_data()
        self.settings = storage.get_config()
        self._load_week()
        if self.is_running:
            self._refresh_display()
        self.notify("All your data has been deleted")


def main():
    import sys
    if len(sys.argv) > 1 and sys.argv[1] == "--db-info":
        from datetime import datetime
        db_path = storage.DB_PATH
        print(f"Database: {db_path}")
        if db_path.exists():
            mtime = datetime.fromtimestamp(db_path.stat().st_mtime)
            size = db_path.stat().st_size
            print(f"Modified: {mtime.strftime('%Y-%m-%d %H:%M:%S')}")
            print(f"Size: {size:,} bytes")
        else:
            print("Status: Does not exist (will be created on first run)")
        return

    setup_logging()
    app = WeekTrackerApp()
    app.run()


if __name__ == "__main__":
    main()
