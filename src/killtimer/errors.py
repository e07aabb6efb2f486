"""Exceptions raised by killtimer."""


class KillTimerError(Exception):
    """Base class for killtimer errors."""


class TimerParseError(KillTimerError, ValueError):
    """Timer input text is not a valid duration."""

    def __init__(self, text: str) -> None:
        super().__init__(f"Invalid duration: {text!r} (expected M:SS or seconds)")
        self.text = text


class TerminationFailure(KillTimerError):
    """A process could not be terminated."""

    def __init__(self, pid: int, reason: str) -> None:
        super().__init__(f"Could not terminate process {pid}: {reason}")
        self.pid = pid
        self.reason = reason
