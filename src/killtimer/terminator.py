"""Termination dispatch for the targeted process."""

import logging
import subprocess
import sys
from typing import Protocol

import psutil

from killtimer.errors import TerminationFailure

logger = logging.getLogger(__name__)


class Terminator(Protocol):
    """Anything that can terminate a process by pid."""

    def terminate(self, pid: int, expected_name: str | None = None) -> bool:
        """Terminate ``pid``; return whether it succeeded."""
        ...


def lookup_process(pid: int, expected_name: str | None = None) -> psutil.Process:
    """
    Find a live process, checking it is still the one that was targeted.

    Raises:
        TerminationFailure: If the process is gone, unreadable, a zombie,
            or its name no longer matches ``expected_name``.
    """
    try:
        proc = psutil.Process(pid)
        if proc.status() == psutil.STATUS_ZOMBIE:
            raise TerminationFailure(pid, "process is a zombie")
        if expected_name is not None and proc.name() != expected_name:
            raise TerminationFailure(pid, f"pid now belongs to {proc.name()!r}")
    except psutil.ZombieProcess:
        raise TerminationFailure(pid, "process is a zombie") from None
    except psutil.NoSuchProcess:
        raise TerminationFailure(pid, "process no longer exists") from None
    except psutil.AccessDenied:
        raise TerminationFailure(pid, "access denied") from None
    return proc


class PsutilTerminator:
    """Kills processes with psutil (SIGKILL on POSIX)."""

    def terminate(self, pid: int, expected_name: str | None = None) -> bool:
        try:
            proc = lookup_process(pid, expected_name)
            try:
                # psutil checks the create time again before signalling, so a
                # reused pid is never killed through this handle
                proc.kill()
            except psutil.NoSuchProcess:
                raise TerminationFailure(pid, "process exited before kill") from None
            except psutil.AccessDenied:
                raise TerminationFailure(pid, "access denied") from None
            except OSError as exc:
                raise TerminationFailure(pid, str(exc)) from exc
        except TerminationFailure as exc:
            logger.warning("%s", exc)
            return False

        logger.info("Killed process %d", pid)
        return True


class TaskkillTerminator:
    """Kills processes with the Windows ``taskkill`` command."""

    def __init__(self, timeout: float = 10.0) -> None:
        self._timeout = timeout

    def terminate(self, pid: int, expected_name: str | None = None) -> bool:
        try:
            lookup_process(pid, expected_name)
            try:
                result = subprocess.run(
                    ["taskkill", "/PID", str(pid), "/F"],
                    capture_output=True,
                    text=True,
                    timeout=self._timeout,
                    check=False,
                )
            except (OSError, subprocess.SubprocessError) as exc:
                raise TerminationFailure(pid, str(exc)) from exc
            if result.returncode != 0:
                reason = result.stderr.strip() or f"taskkill exited with {result.returncode}"
                raise TerminationFailure(pid, reason)
        except TerminationFailure as exc:
            logger.warning("%s", exc)
            return False

        logger.info("Killed process %d with taskkill", pid)
        return True


def default_terminator() -> Terminator:
    """Get the terminator for the current platform."""
    if sys.platform == "win32":
        return TaskkillTerminator()
    return PsutilTerminator()
