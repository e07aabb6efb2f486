"""Shared fakes for killtimer tests."""

import pytest

from killtimer.catalog import ProcessCatalog
from killtimer.models import ProcessEntry
from killtimer.state import StateMachine
from killtimer.timer import CountdownTimer


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeProvider:
    """Process provider returning a mutable list of entries."""

    def __init__(self, entries: list[ProcessEntry]) -> None:
        self.entries = list(entries)
        self.calls = 0

    def __call__(self) -> list[ProcessEntry]:
        self.calls += 1
        return list(self.entries)


class FakeTerminator:
    """Records termination requests and returns a fixed outcome."""

    def __init__(self, result: bool = True) -> None:
        self.result = result
        self.calls: list[tuple[int, str | None]] = []

    def terminate(self, pid: int, expected_name: str | None = None) -> bool:
        self.calls.append((pid, expected_name))
        return self.result


@pytest.fixture
def entries() -> list[ProcessEntry]:
    return [
        ProcessEntry(pid=1, name="p1"),
        ProcessEntry(pid=2, name="p2"),
        ProcessEntry(pid=3, name="p3"),
    ]


@pytest.fixture
def provider(entries) -> FakeProvider:
    return FakeProvider(entries)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def terminator() -> FakeTerminator:
    return FakeTerminator()


@pytest.fixture
def machine(provider, terminator, clock) -> StateMachine:
    """State machine over the three-process catalog, already refreshed."""
    sm = StateMachine(
        catalog=ProcessCatalog(provider),
        terminator=terminator,
        timer=CountdownTimer(clock=clock),
    )
    sm.refresh()
    return sm
