"""Data models for killtimer."""

from dataclasses import dataclass
from enum import Enum


@dataclass(slots=True, frozen=True)
class ProcessEntry:
    """Immutable snapshot of one running process."""

    pid: int
    name: str


class Mode(Enum):
    """Interaction modes of the application."""

    SELECTING = "selecting"
    CONFIGURING_TIMER = "configuring_timer"
    RUNNING = "running"


class Key(Enum):
    """Kinds of input event the state machine understands."""

    UP = "up"
    DOWN = "down"
    BEGIN_SEARCH = "begin_search"
    CHAR = "char"
    BACKSPACE = "backspace"
    CONFIRM = "confirm"
    CANCEL = "cancel"
    QUIT = "quit"


@dataclass(slots=True, frozen=True)
class KeyEvent:
    """A discrete key press. ``char`` is only set for ``Key.CHAR``."""

    key: Key
    char: str | None = None

    @classmethod
    def character(cls, char: str) -> "KeyEvent":
        """Build a printable-character event."""
        return cls(Key.CHAR, char)


@dataclass(slots=True, frozen=True)
class StateView:
    """Read-only view of the application state handed to the renderer."""

    mode: Mode
    processes: tuple[ProcessEntry, ...]
    selection: int | None
    search_query: str
    timer_input: str
    target: ProcessEntry | None
    remaining: int | None  # Seconds, None when no timer is armed
    status_message: str
    status_is_error: bool
