"""Countdown timer and duration parsing."""

import time
from collections.abc import Callable

from killtimer.errors import TimerParseError


def _parse_count(text: str, original: str) -> int:
    # A single "+" is allowed, "-" never is
    if text.startswith("+"):
        text = text[1:]
    # str.isdigit() also accepts non-ASCII digits
    if not text or not text.isascii() or not text.isdigit():
        raise TimerParseError(original)
    return int(text)


def parse_duration(text: str) -> int:
    """
    Parse timer input into a number of seconds.

    Accepts ``"<minutes>:<seconds>"`` or a bare number of seconds. Seconds
    may exceed 59 in the first form. Each number may carry a leading
    ``+`` but never a ``-``.

    Raises:
        TimerParseError: If the text matches neither form.
    """
    stripped = text.strip()
    minutes, colon, seconds = stripped.partition(":")
    if colon:
        return _parse_count(minutes, text) * 60 + _parse_count(seconds, text)
    return _parse_count(stripped, text)


def format_remaining(seconds: int) -> str:
    """Format a number of seconds as ``MM:SS``."""
    minutes, secs = divmod(max(0, seconds), 60)
    return f"{minutes:02d}:{secs:02d}"


class CountdownTimer:
    """
    A single countdown measured against a monotonic clock.

    The timer is armed while ``started_at`` is set. Remaining time is
    counted in whole seconds and saturates at zero.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self.total_seconds: int = 0
        self.started_at: float | None = None

    @property
    def armed(self) -> bool:
        return self.started_at is not None

    def arm(self, total_seconds: int) -> None:
        """Start counting down from ``total_seconds``, resetting any previous run."""
        if total_seconds < 0:
            raise ValueError("total_seconds must be non-negative")
        self.total_seconds = total_seconds
        self.started_at = self._clock()

    def disarm(self) -> None:
        self.started_at = None

    def remaining(self) -> int | None:
        """Get the remaining whole seconds, or None if not armed."""
        if self.started_at is None:
            return None
        elapsed = int(self._clock() - self.started_at)
        return max(0, self.total_seconds - elapsed)

    def expired(self) -> bool:
        return self.remaining() == 0
