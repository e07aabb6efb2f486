"""Cooperative control loop tying input, refresh and timer expiry together."""

import logging
from collections.abc import Callable
from queue import Empty, Queue
from typing import Protocol

from killtimer.config import Settings
from killtimer.models import KeyEvent, Mode, StateView
from killtimer.state import StateMachine

logger = logging.getLogger(__name__)

Renderer = Callable[[StateView], None]


class EventSource(Protocol):
    """Supplies key events with a bounded wait."""

    def read(self, timeout: float) -> KeyEvent | None:
        """Return the next event, or None if none arrived within ``timeout``."""
        ...


class KeyQueue:
    """Thread-safe FIFO of key events."""

    def __init__(self) -> None:
        self._queue: Queue[KeyEvent] = Queue()

    def put(self, event: KeyEvent) -> None:
        self._queue.put(event)

    def read(self, timeout: float) -> KeyEvent | None:
        try:
            if timeout <= 0:
                return self._queue.get_nowait()
            return self._queue.get(timeout=timeout)
        except Empty:
            return None

    def __len__(self) -> int:
        return self._queue.qsize()


class ControlLoop:
    """
    Drives the state machine one tick at a time.

    A tick renders the current state, checks the countdown, waits a bounded
    time for one input event, then refreshes the process list while the
    user is selecting.
    """

    def __init__(
        self,
        machine: StateMachine,
        events: EventSource,
        renderer: Renderer | None = None,
        settings: Settings | None = None,
    ) -> None:
        """
        Initialize the ControlLoop.

        Args:
            machine: State machine to drive.
            events: Source of key events.
            renderer: Called with a state snapshot at the start of each tick.
            settings: Tick interval and other runtime settings.
        """
        self._machine = machine
        self._events = events
        self._renderer = renderer
        self._settings = settings if settings is not None else Settings()
        self._running = True

    @property
    def running(self) -> bool:
        """False once the user has asked to quit."""
        return self._running

    @property
    def machine(self) -> StateMachine:
        return self._machine

    def start(self) -> None:
        """Load the initial process list."""
        self._machine.refresh()

    def tick(self, wait: float | None = None) -> bool:
        """
        Run one iteration of the loop.

        Args:
            wait: Longest time to block for input, defaults to the tick interval.

        Returns:
            False once the program should exit.
        """
        if not self._running:
            return False

        if self._renderer is not None:
            self._renderer(self._machine.view())

        # Expiry is checked before input so a countdown fires mid-keystroke
        if self._machine.mode is Mode.RUNNING:
            self._machine.check_expiry()

        timeout = self._settings.tick_interval if wait is None else wait
        event = self._events.read(timeout)
        if event is not None and not self._machine.handle(event):
            logger.debug("Quit requested")
            self._running = False
            return False

        if self._machine.mode is Mode.SELECTING:
            self._machine.refresh()
        return True

    def run(self) -> int:
        """Tick until the user quits. Returns the exit code."""
        self.start()
        while self.tick():
            pass
        return 0
