"""Application state machine for killtimer."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from killtimer.catalog import ProcessCatalog
from killtimer.errors import TimerParseError
from killtimer.models import Key, KeyEvent, Mode, ProcessEntry, StateView
from killtimer.terminator import Terminator, default_terminator
from killtimer.timer import CountdownTimer, parse_duration

logger = logging.getLogger(__name__)

SELECT_PROMPT = "Select a process (↑↓: move, /: search, Enter: select)"
TIMER_PROMPT = "Enter a duration as M:SS (e.g. 5:30) or seconds (e.g. 300)"
RUNNING_PROMPT = "Timer running... (Q/Esc: cancel)"
INVALID_DURATION = "Invalid format. Examples: 5:30 or 300"


@dataclass(slots=True)
class AppState:
    """All mutable state of one application run."""

    catalog: ProcessCatalog
    timer: CountdownTimer = field(default_factory=CountdownTimer)
    mode: Mode = Mode.SELECTING
    search_query: str = ""
    timer_input: str = ""
    target: ProcessEntry | None = None
    status_message: str = SELECT_PROMPT
    status_is_error: bool = False

    def view(self) -> StateView:
        """Take a read-only snapshot for rendering."""
        return StateView(
            mode=self.mode,
            processes=tuple(self.catalog.filtered),
            selection=self.catalog.selection,
            search_query=self.search_query,
            timer_input=self.timer_input,
            target=self.target,
            remaining=self.timer.remaining(),
            status_message=self.status_message,
            status_is_error=self.status_is_error,
        )


Handler = Callable[[KeyEvent], None]


class StateMachine:
    """
    Mediates every transition between the three modes.

    Input events are dispatched through a (mode, key) table; pairs missing
    from the table are no-ops.
    """

    def __init__(
        self,
        catalog: ProcessCatalog | None = None,
        terminator: Terminator | None = None,
        timer: CountdownTimer | None = None,
    ) -> None:
        self.state = AppState(
            catalog=catalog if catalog is not None else ProcessCatalog(),
            timer=timer if timer is not None else CountdownTimer(),
        )
        self._terminator = terminator if terminator is not None else default_terminator()
        self._quit_requested = False
        self._handlers: dict[tuple[Mode, Key], Handler] = {
            (Mode.SELECTING, Key.UP): lambda _: self._move(-1),
            (Mode.SELECTING, Key.DOWN): lambda _: self._move(1),
            (Mode.SELECTING, Key.BEGIN_SEARCH): self._begin_search,
            (Mode.SELECTING, Key.CHAR): self._append_query,
            (Mode.SELECTING, Key.BACKSPACE): self._delete_query,
            (Mode.SELECTING, Key.CONFIRM): self._select_target,
            (Mode.SELECTING, Key.QUIT): self._quit,
            (Mode.CONFIGURING_TIMER, Key.CHAR): self._append_timer_input,
            (Mode.CONFIGURING_TIMER, Key.BACKSPACE): self._delete_timer_input,
            (Mode.CONFIGURING_TIMER, Key.CONFIRM): self._start_timer,
            (Mode.CONFIGURING_TIMER, Key.CANCEL): self._cancel_configuration,
            (Mode.CONFIGURING_TIMER, Key.QUIT): self._quit,
            (Mode.RUNNING, Key.CANCEL): self._cancel_timer,
            # q cancels a running countdown rather than leaving the program
            (Mode.RUNNING, Key.QUIT): self._cancel_timer,
        }

    @property
    def mode(self) -> Mode:
        return self.state.mode

    @property
    def quit_requested(self) -> bool:
        return self._quit_requested

    @property
    def terminator(self) -> Terminator:
        return self._terminator

    def view(self) -> StateView:
        return self.state.view()

    def refresh(self) -> None:
        """Refresh the process catalog."""
        self.state.catalog.refresh()

    def handle(self, event: KeyEvent) -> bool:
        """
        Apply one input event.

        Returns:
            False once the program should exit, True otherwise.
        """
        handler = self._handlers.get((self.state.mode, event.key))
        if handler is not None:
            handler(event)
        return not self._quit_requested

    def check_expiry(self) -> bool:
        """
        Terminate the target if the running countdown has reached zero.

        Returns:
            True if a termination was dispatched.
        """
        state = self.state
        if state.mode is not Mode.RUNNING or not state.timer.expired():
            return False

        target = state.target
        succeeded = False
        if target is not None:
            succeeded = self._terminator.terminate(target.pid, expected_name=target.name)

        state.target = None
        state.timer.disarm()
        if succeeded:
            state.catalog.refresh()
            self._enter(Mode.SELECTING, f"Process {_describe(target)} was terminated.")
        else:
            self._enter(
                Mode.SELECTING,
                f"Failed to terminate process {_describe(target)}.",
                error=True,
            )
        return True

    def _enter(self, mode: Mode, message: str, error: bool = False) -> None:
        if mode is not self.state.mode:
            logger.debug("Mode %s -> %s", self.state.mode.value, mode.value)
        self.state.mode = mode
        self.state.status_message = message
        self.state.status_is_error = error

    def _move(self, delta: int) -> None:
        self.state.catalog.move(delta)

    def _begin_search(self, _: KeyEvent) -> None:
        self.state.search_query = ""
        self.state.catalog.set_query("")

    def _append_query(self, event: KeyEvent) -> None:
        if not event.char:
            return
        self.state.search_query += event.char
        self.state.catalog.set_query(self.state.search_query)

    def _delete_query(self, _: KeyEvent) -> None:
        self.state.search_query = self.state.search_query[:-1]
        self.state.catalog.set_query(self.state.search_query)

    def _select_target(self, _: KeyEvent) -> None:
        entry = self.state.catalog.selected()
        if entry is None:
            return
        self.state.target = entry
        self.state.timer_input = ""
        logger.debug("Targeted %s", _describe(entry))
        self._enter(Mode.CONFIGURING_TIMER, TIMER_PROMPT)

    def _append_timer_input(self, event: KeyEvent) -> None:
        if event.char:
            self.state.timer_input += event.char

    def _delete_timer_input(self, _: KeyEvent) -> None:
        self.state.timer_input = self.state.timer_input[:-1]

    def _start_timer(self, _: KeyEvent) -> None:
        try:
            seconds = parse_duration(self.state.timer_input)
        except TimerParseError as exc:
            logger.debug("%s", exc)
            self._enter(Mode.CONFIGURING_TIMER, INVALID_DURATION, error=True)
            return
        self.state.timer.arm(seconds)
        logger.info("Armed %ds timer for %s", seconds, _describe(self.state.target))
        self._enter(Mode.RUNNING, RUNNING_PROMPT)

    def _cancel_configuration(self, _: KeyEvent) -> None:
        self.state.target = None
        self.state.timer_input = ""
        self._enter(Mode.SELECTING, SELECT_PROMPT)

    def _cancel_timer(self, _: KeyEvent) -> None:
        self.state.timer.disarm()
        self.state.target = None
        logger.info("Timer cancelled")
        self._enter(Mode.SELECTING, "Timer cancelled.")

    def _quit(self, _: KeyEvent) -> None:
        self._quit_requested = True


def _describe(entry: ProcessEntry | None) -> str:
    if entry is None:
        return "(none)"
    return f"{entry.name} [{entry.pid}]"
