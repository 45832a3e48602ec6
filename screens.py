"""Modal screens for the week tracker application."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, DataTable, Input, Label, Select
from textual.screen import ModalScreen

from history import WeekSummary
from models import DAY_LABELS, DAYS, TimeEntry
from planner import EarlyDeparturePlanner, PlanResult
from utils import STRATEGIES
from widgets import PlanSummary


def parse_clock(val: str) -> str | None:
    """Normalise "9:5" style input to "09:05". Blank gives "", invalid None."""
    val = val.strip()
    if not val:
        return ""
    try:
        parts = val.split(":")
        hour, minute = int(parts[0]), int(parts[1])
    except (ValueError, IndexError):
        return None
    if not (0 <= hour < 24 and 0 <= minute < 60):
        return None
    return f"{hour:02d}:{minute:02d}"


def format_custom_amount(hours: float) -> str:
    return f"{hours:g}"


def apply_custom_amount(planner: EarlyDeparturePlanner, day: str, text: str) -> bool:
    """Store hours typed for a day under the custom strategy.

    Text matching what is already shown for the day is the pre-filled share
    and is not stored, so the planner keeps the exact value. Returns True
    when an amount was stored.
    """
    try:
        hours = float(text)
    except ValueError:
        return False
    shown = planner.extra_hours().get(day)
    if shown is not None and text.strip() == format_custom_amount(shown):
        return False
    return planner.set_custom_amount(day, hours)


class ConfirmScreen(ModalScreen[bool]):
    """Simple confirmation dialog."""

    CSS = """
    ConfirmScreen {
        align: center middle;
    }

    #confirm-dialog {
        width: 50;
        height: auto;
        padding: 1 2;
        background: $surface;
        border: thick $warning;
    }

    #confirm-buttons {
        width: 100%;
        height: auto;
        margin-top: 1;
    }

    #confirm-buttons Button {
        width: 1fr;
        margin: 0 1;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
        Binding("y", "confirm", "Yes"),
        Binding("n", "cancel", "No"),
    ]

    def __init__(self, message: str):
        super().__init__()
        self.message = message

    def compose(self) -> ComposeResult:
        with Vertical(id="confirm-dialog"):
            yield Label(self.message)
            with Horizontal(id="confirm-buttons"):
                yield Button("Yes (Y)", variant="warning", id="yes")
                yield Button("No (N)", variant="default", id="no")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(event.button.id == "yes")

    def action_confirm(self) -> None:
        self.dismiss(True)

    def action_cancel(self) -> None:
        self.dismiss(False)


class EditDayScreen(ModalScreen[dict | None]):
    """Modal screen for editing a day's times.

    Dismisses with the changed fields only, so the caller can apply each
    edit through the week state.
    """

    CSS = """
    EditDayScreen {
        align: center middle;
    }

    #edit-dialog {
        width: 70;
        height: auto;
        padding: 1 2;
        background: $surface;
        border: thick $primary;
    }

    #edit-title {
        width: 100%;
        text-align: center;
        text-style: bold;
        margin-bottom: 1;
    }

    .field-group {
        width: 1fr;
        height: auto;
        margin: 0 1 0 0;
    }

    .field-label {
        height: 1;
        margin-bottom: 0;
        color: $text-muted;
    }

    .field-row {
        width: 100%;
        height: auto;
        margin-bottom: 1;
    }

    .field-row Input {
        width: 100%;
    }

    #edit-buttons {
        width: 100%;
        height: auto;
        margin-top: 1;
        align: center middle;
    }

    #edit-buttons Button {
        width: auto;
        min-width: 12;
        margin: 0 2;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
    ]

    # Field order for Enter key navigation
    FIELD_ORDER = ["start", "lunch", "end", "hours"]

    def __init__(self, day: str, entry: TimeEntry):
        super().__init__()
        self.day = day
        self.entry = entry

    def compose(self) -> ComposeResult:
        with Vertical(id="edit-dialog"):
            yield Label(f"Edit {DAY_LABELS.get(self.day, self.day)}", id="edit-title")

            with Horizontal(classes="field-row"):
                with Vertical(classes="field-group"):
                    yield Label("Start (HH:MM)", classes="field-label")
                    yield Input(value=self.entry.start_time, placeholder="09:00", id="start")
                with Vertical(classes="field-group"):
                    yield Label("Lunch (m)", classes="field-label")
                    yield Input(
                        value=str(round(self.entry.lunch_break_hours * 60)),
                        placeholder="30",
                        id="lunch",
                    )
                with Vertical(classes="field-group"):
                    yield Label("End (HH:MM)", classes="field-label")
                    yield Input(value=self.entry.end_time, placeholder="17:00", id="end")
                with Vertical(classes="field-group"):
                    yield Label("Hours (override)", classes="field-label")
                    yield Input(value="", placeholder=f"{self.entry.hours:g}", id="hours")

            with Horizontal(id="edit-buttons"):
                yield Button("Save", variant="primary", id="save")
                yield Button("Cancel", variant="default", id="cancel")

    def on_mount(self) -> None:
        """Focus the first field on mount."""
        self.query_one("#start", Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        """Move to next field on Enter, or save if on last field."""
        current_id = event.input.id
        if current_id in self.FIELD_ORDER:
            current_idx = self.FIELD_ORDER.index(current_id)
            if current_idx < len(self.FIELD_ORDER) - 1:
                next_id = self.FIELD_ORDER[current_idx + 1]
                self.query_one(f"#{next_id}", Input).focus()
            else:
                self._save_entry()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "cancel":
            self.dismiss(None)
        elif event.button.id == "save":
            self._save_entry()

    def action_cancel(self) -> None:
        self.dismiss(None)

    def _save_entry(self) -> None:
        start = parse_clock(self.query_one("#start", Input).value)
        end = parse_clock(self.query_one("#end", Input).value)
        if start is None or end is None:
            self.app.notify("Times must be HH:MM", severity="error")
            return

        lunch_val = self.query_one("#lunch", Input).value.strip()
        hours_val = self.query_one("#hours", Input).value.strip()
        try:
            lunch = int(lunch_val) / 60 if lunch_val else 0.0
            hours = float(hours_val) if hours_val else None
        except ValueError:
            self.app.notify("Lunch and hours must be numbers", severity="error")
            return

        changes: dict[str, object] = {}
        if lunch != self.entry.lunch_break_hours:
            changes["lunch_break_hours"] = lunch
        if start != self.entry.start_time:
            changes["start_time"] = start
        if end != self.entry.end_time:
            changes["end_time"] = end
        if hours is not None:
            changes["hours"] = hours
        self.dismiss(changes)


class EarlyDepartureScreen(ModalScreen[PlanResult | None]):
    """Plan leaving early on one day and making the time up elsewhere."""

    CSS = """
    EarlyDepartureScreen {
        align: center middle;
    }

    #plan-dialog {
        width: 80;
        height: auto;
        padding: 1 2;
        background: $surface;
        border: thick $primary;
    }

    #plan-title {
        width: 100%;
        text-align: center;
        text-style: bold;
        margin-bottom: 1;
    }

    .field-row {
        width: 100%;
        height: auto;
        margin-bottom: 1;
    }

    .field-group {
        width: 1fr;
        height: auto;
        margin: 0 1 0 0;
    }

    .field-label {
        height: 1;
        color: $text-muted;
    }

    #custom-row Input {
        width: 1fr;
    }

    #plan-summary {
        height: auto;
        padding: 1 0;
    }

    #plan-buttons {
        width: 100%;
        height: auto;
        align: center middle;
    }

    #plan-buttons Button {
        width: auto;
        min-width: 12;
        margin: 0 2;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
    ]

    def __init__(self, planner: EarlyDeparturePlanner, use_24_hour_format: bool = True):
        super().__init__()
        self.planner = planner
        self.use_24_hour_format = use_24_hour_format

    def compose(self) -> ComposeResult:
        planner = self.planner
        day_options = [(DAY_LABELS[day], day) for day in planner.work_days]
        if day_options and planner.selected_day not in planner.work_days:
            planner.select_day(planner.work_days[-1])

        with Vertical(id="plan-dialog"):
            yield Label("Early Departure Planner", id="plan-title")

            with Horizontal(classes="field-row"):
                with Vertical(classes="field-group"):
                    yield Label("Day to leave early", classes="field-label")
                    yield Select(
                        day_options,
                        value=planner.selected_day if day_options else Select.BLANK,
                        allow_blank=not day_options,
                        id="plan-day",
                    )
                with Vertical(classes="field-group"):
                    yield Label("Departure time", classes="field-label")
                    yield Input(value=planner.departure_time, placeholder="14:00", id="plan-time")
                with Vertical(classes="field-group"):
                    yield Label("Strategy", classes="field-label")
                    yield Select(
                        [(label, code) for code, label in STRATEGIES],
                        value=planner.strategy,
                        allow_blank=False,
                        id="plan-strategy",
                    )

            yield Label("Custom extra hours per day", classes="field-label")
            with Horizontal(classes="field-row", id="custom-row"):
                for day, label in DAYS:
                    yield Input(placeholder=label[:3], id=f"custom-{day}", disabled=True)

            yield PlanSummary(id="plan-summary")

            with Horizontal(id="plan-buttons"):
                yield Button("Apply", variant="primary", id="apply")
                yield Button("Cancel", variant="default", id="cancel")

    def on_mount(self) -> None:
        self._refresh()

    def _refresh(self) -> None:
        """Update the custom inputs and summary after any change."""
        preview = self.planner.preview()
        custom = preview.strategy == "custom"
        for day, _ in DAYS:
            field = self.query_one(f"#custom-{day}", Input)
            field.disabled = not (custom and day in preview.modifiable_days)
            if custom and day in preview.extra_hours and not field.value:
                field.value = format_custom_amount(preview.extra_hours[day])
        self.query_one("#plan-summary", PlanSummary).update_display(
            preview, self.use_24_hour_format
        )

    def on_select_changed(self, event: Select.Changed) -> None:
        if event.value is Select.BLANK:
            return
        if event.select.id == "plan-day":
            self.planner.select_day(str(event.value))
        elif event.select.id == "plan-strategy":
            self.planner.set_strategy(str(event.value))
        self._clear_custom()
        self._refresh()

    def on_input_changed(self, event: Input.Changed) -> None:
        input_id = event.input.id or ""
        if input_id == "plan-time":
            departure = parse_clock(event.value)
            if not departure:
                return
            self.planner.set_departure_time(departure)
            self._clear_custom()
        elif input_id.startswith("custom-"):
            day = input_id.removeprefix("custom-")
            if not apply_custom_amount(self.planner, day, event.value):
                return
        self._refresh()

    def _clear_custom(self) -> None:
        self.planner.custom_amounts.clear()
        for day, _ in DAYS:
            self.query_one(f"#custom-{day}", Input).value = ""

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "cancel":
            self.dismiss(None)
        elif event.button.id == "apply":
            self.dismiss(self.planner.plan())

    def action_cancel(self) -> None:
        self.dismiss(None)


class HistoryScreen(ModalScreen[None]):
    """Recorded weeks with their totals against target."""

    CSS = """
    HistoryScreen {
        align: center middle;
    }

    #history-dialog {
        width: 80;
        height: 24;
        padding: 1 2;
        background: $surface;
        border: thick $primary;
    }

    #history-title {
        width: 100%;
        text-align: center;
        text-style: bold;
        margin-bottom: 1;
    }

    #history-table {
        height: 1fr;
    }
    """

    BINDINGS = [
        Binding("escape", "close", "Close"),
    ]

    def __init__(self, summaries: list[WeekSummary]):
        super().__init__()
        self.summaries = summaries

    def compose(self) -> ComposeResult:
        with Vertical(id="history-dialog"):
            yield Label("History", id="history-title")
            yield DataTable(id="history-table")

    def on_mount(self) -> None:
        table = self.query_one("#history-table", DataTable)
        table.cursor_type = "row"
        table.add_column("Week", width=16)
        table.add_column("Starts", width=8)
        table.add_column("Worked", width=10)
        table.add_column("Target", width=8)
        table.add_column("Diff", width=10)
        table.add_column("Days", width=5)
        for summary in self.summaries:
            table.add_row(
                summary.label,
                summary.week_start.strftime("%b %d"),
                summary.formatted_total,
                f"{summary.target_hours:g}h",
                summary.formatted_difference,
                str(summary.days_recorded),
                key=str(summary.week_id),
            )
        table.focus()

    def action_close(self) -> None:
        self.dismiss(None)
