"""Verification Test: real process termination.

Spawns dummy processes and drives the full select, arm and expire flow
against them with the platform terminator and the psutil catalog. This
checks that:
- the countdown kills exactly the selected process
- a process that dies before expiry is reported, not raised
"""

import multiprocessing
import time

import pytest

from killtimer.catalog import ProcessCatalog
from killtimer.models import Key, KeyEvent, Mode
from killtimer.state import StateMachine
from killtimer.terminator import default_terminator
from killtimer.timer import CountdownTimer

from conftest import FakeClock


def dummy_worker(duration: float = 60.0) -> None:
    """A dummy worker process that sleeps for a given duration."""
    try:
        time.sleep(duration)
    except (KeyboardInterrupt, SystemExit):
        pass


@pytest.fixture
def dummy_processes():
    """Spawn a few sleeping processes and clean them up afterwards."""
    processes = []
    try:
        for _ in range(3):
            p = multiprocessing.Process(target=dummy_worker, args=(60.0,))
            p.start()
            processes.append(p)
        yield processes
    finally:
        for p in processes:
            if p.is_alive():
                p.kill()
            p.join(timeout=5)


def arm_against(pid: int, clock: FakeClock) -> StateMachine:
    """Build a machine targeting ``pid`` with a one second countdown."""
    machine = StateMachine(
        catalog=ProcessCatalog(),
        terminator=default_terminator(),
        timer=CountdownTimer(clock=clock),
    )
    machine.refresh()

    # Move the cursor onto the target row
    pids = [entry.pid for entry in machine.view().processes]
    index = pids.index(pid)
    for _ in range(index):
        machine.handle(KeyEvent(Key.DOWN))
    machine.handle(KeyEvent(Key.CONFIRM))
    assert machine.view().target.pid == pid

    machine.handle(KeyEvent.character("1"))
    machine.handle(KeyEvent(Key.CONFIRM))
    assert machine.mode is Mode.RUNNING
    return machine


class TestRealTermination:
    """Termination verification suite tests."""

    def test_expiry_kills_selected_process(self, dummy_processes):
        """Test the countdown kills the selected process and only that one."""
        victim, *bystanders = dummy_processes
        clock = FakeClock()
        machine = arm_against(victim.pid, clock)

        clock.advance(1)
        assert machine.check_expiry() is True

        victim.join(timeout=5)
        assert not victim.is_alive()
        assert all(p.is_alive() for p in bystanders)
        assert machine.mode is Mode.SELECTING
        assert not machine.view().status_is_error

        machine.refresh()
        assert victim.pid not in {e.pid for e in machine.view().processes}

    def test_process_gone_before_expiry(self, dummy_processes):
        """Test a target that already exited is reported as a failure."""
        victim = dummy_processes[0]
        clock = FakeClock()
        machine = arm_against(victim.pid, clock)

        victim.kill()
        victim.join(timeout=5)
        assert not victim.is_alive()

        clock.advance(1)
        assert machine.check_expiry() is True
        assert machine.mode is Mode.SELECTING
        assert machine.view().status_is_error
