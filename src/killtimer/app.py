"""killtimer - Main Textual application."""

import sys

from rich.markup import escape
from textual import events
from textual.app import App, ComposeResult
from textual.containers import Container, Horizontal
from textual.css.query import NoMatches
from textual.widgets import DataTable, Static

from killtimer.config import Settings
from killtimer.keys import translate
from killtimer.logging_config import setup_logging
from killtimer.loop import ControlLoop, KeyQueue
from killtimer.models import Mode, ProcessEntry, StateView
from killtimer.state import StateMachine
from killtimer.timer import format_remaining

HELP_TEXT = {
    Mode.SELECTING: "↑↓: Move | /: Search | Enter: Select | Q: Quit",
    Mode.CONFIGURING_TIMER: "M:SS (e.g. 5:30) or seconds | Enter: Start | Esc: Cancel | Q: Quit",
    Mode.RUNNING: "Q/Esc: Cancel timer",
}


def describe_target(target: ProcessEntry | None) -> str:
    """Format the targeted process for display."""
    if target is None:
        return "None"
    return f"{target.name} [{target.pid}]"


class ProcessTable(DataTable, can_focus=False):
    """Process list. Keys are routed through the app, never the table."""

    DEFAULT_CSS = """
    ProcessTable {
        height: 1fr;
    }
    """

    def __init__(self, *args, **kwargs) -> None:
        """Initialize ProcessTable."""
        kwargs.setdefault("cursor_type", "row")
        super().__init__(*args, **kwargs)
        self._entries: tuple[ProcessEntry, ...] = ()

    @property
    def entries(self) -> tuple[ProcessEntry, ...]:
        return self._entries

    def on_mount(self) -> None:
        """Initialize the columns when mounted."""
        self._ensure_columns()

    def _ensure_columns(self) -> None:
        if not self.columns:
            self.add_column("PID", key="pid", width=8)
            self.add_column("Name", key="name")

    def update_processes(self, entries: tuple[ProcessEntry, ...], selection: int | None) -> None:
        """
        Show the given entries and highlight the selected row.

        Rows are only rebuilt when the list itself changed.
        """
        self._ensure_columns()
        if entries != self._entries:
            self.clear()
            for entry in entries:
                self.add_row(str(entry.pid), entry.name, key=str(entry.pid))
            self._entries = entries

        if selection is not None and selection < self.row_count:
            self.move_cursor(row=selection)


class ProcessPane(Horizontal):
    """Process list with the search box beside it."""

    DEFAULT_CSS = """
    ProcessPane {
        height: 1fr;
    }

    #process-table {
        width: 7fr;
        border: solid $primary;
    }

    #search-box {
        width: 3fr;
        border: solid $primary;
        padding: 0 1;
    }
    """

    def compose(self) -> ComposeResult:
        """Compose the process pane."""
        yield ProcessTable(id="process-table")
        yield Static(id="search-box")

    def update_view(self, view: StateView) -> None:
        self.query_one(ProcessTable).update_processes(view.processes, view.selection)
        search = self.query_one("#search-box", Static)
        if view.search_query:
            search.update(f"[green]{escape(view.search_query)}[/green]")
        else:
            search.update("[dim]Type to search (/ clears)[/dim]")


class TimerPane(Static):
    """Timer input or countdown, depending on mode."""

    DEFAULT_CSS = """
    TimerPane {
        height: auto;
        border: solid $primary;
        padding: 1;
    }
    """

    def update_view(self, view: StateView) -> None:
        target = escape(describe_target(view.target))
        if view.mode is Mode.RUNNING:
            self.border_title = "Timer running"
            remaining = format_remaining(view.remaining or 0)
            self.update(
                f"[cyan]Process: {target}[/cyan]\n\n"
                f"[bold red]Time left: {remaining}[/bold red]"
            )
        else:
            self.border_title = "Timer setup"
            self.update(
                f"[cyan]Selected process: {target}[/cyan]\n\n"
                f"[green]Duration: {escape(view.timer_input)}[/green]"
            )


class StatusBar(Static):
    """Status message line."""

    DEFAULT_CSS = """
    StatusBar {
        height: 3;
        border: solid $warning;
        color: $warning;
    }

    StatusBar.error {
        border: solid $error;
        color: $error;
    }
    """

    def update_view(self, view: StateView) -> None:
        self.set_class(view.status_is_error, "error")
        self.update(escape(view.status_message))


class KillTimerApp(App):
    """Main killtimer application."""

    TITLE = "killtimer"
    SUB_TITLE = "Process kill timer"

    CSS = """
    Screen {
        layout: vertical;
    }

    #title {
        dock: top;
        height: 3;
        content-align: center middle;
        text-style: bold;
        color: $accent;
        border: solid $primary;
    }

    #main {
        height: 1fr;
    }

    #help {
        height: 3;
        content-align: center middle;
        color: $text-muted;
        border: solid $primary;
    }
    """

    def __init__(
        self,
        settings: Settings | None = None,
        machine: StateMachine | None = None,
    ) -> None:
        """Initialize the KillTimerApp."""
        super().__init__()
        self._runtime_settings = settings if settings is not None else Settings()
        self._key_queue = KeyQueue()
        self._control = ControlLoop(
            machine if machine is not None else StateMachine(),
            self._key_queue,
            renderer=self.render_state,
            settings=self._runtime_settings,
        )

    @property
    def machine(self) -> StateMachine:
        return self._control.machine

    def compose(self) -> ComposeResult:
        """Compose the application layout."""
        yield Static(f"{self.TITLE} - {self.SUB_TITLE}", id="title")
        yield Container(
            ProcessPane(id="process-pane"),
            TimerPane(id="timer-pane"),
            id="main",
        )
        yield StatusBar(id="status")
        yield Static(id="help")

    def on_mount(self) -> None:
        """Load the process list and start ticking."""
        self._control.start()
        self.render_state(self.machine.view())
        self.set_interval(self._runtime_settings.tick_interval, self._run_tick)

    def on_key(self, event: events.Key) -> None:
        """Queue the key for the control loop and process it right away."""
        key_event = translate(event.key, event.character)
        if key_event is None:
            return
        event.stop()
        self._key_queue.put(key_event)
        self._run_tick()
        self.render_state(self.machine.view())

    def _run_tick(self) -> None:
        """Run one control loop iteration without blocking the event loop."""
        if not self._control.tick(wait=0):
            self.exit(0)

    def render_state(self, view: StateView) -> None:
        """Draw a state snapshot."""
        try:
            process_pane = self.query_one("#process-pane", ProcessPane)
            timer_pane = self.query_one("#timer-pane", TimerPane)
        except NoMatches:
            return  # Widgets not mounted yet

        selecting = view.mode is Mode.SELECTING
        process_pane.display = selecting
        timer_pane.display = not selecting
        if selecting:
            process_pane.update_view(view)
        else:
            timer_pane.update_view(view)

        self.query_one("#status", StatusBar).update_view(view)
        self.query_one("#help", Static).update(HELP_TEXT[view.mode])


def main() -> None:
    """Entry point for killtimer application."""
    settings = Settings.from_env()
    setup_logging(settings.log_level, settings.log_file)
    app = KillTimerApp(settings)
    app.run()
    sys.exit(app.return_code or 0)


if __name__ == "__main__":
    main()
