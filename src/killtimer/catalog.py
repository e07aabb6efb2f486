"""Process catalog: the full and filtered process lists."""

import logging
from collections.abc import Callable, Iterable, Iterator

import psutil

from killtimer.models import ProcessEntry

logger = logging.getLogger(__name__)

ProcessProvider = Callable[[], Iterable[ProcessEntry]]


def psutil_processes() -> Iterator[ProcessEntry]:
    """
    Yield an entry for every running process.

    Handles AccessDenied, NoSuchProcess and ZombieProcess errors by skipping
    the affected process.
    """
    for proc in psutil.process_iter(attrs=["pid", "name"]):
        try:
            info = proc.info
            yield ProcessEntry(pid=info["pid"], name=info.get("name") or "")
        except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
            # Process died mid-iteration or is not readable
            continue


class ProcessCatalog:
    """
    Holds the process list, its filtered view and the selection cursor.

    Both lists are rebuilt in full on every refresh or query change.
    """

    def __init__(self, provider: ProcessProvider = psutil_processes) -> None:
        """
        Initialize the ProcessCatalog.

        Args:
            provider: Callable returning the current process entries.
        """
        self._provider = provider
        self._all: list[ProcessEntry] = []
        self._filtered: list[ProcessEntry] = []
        self._query: str = ""
        self._selection: int | None = None

    @property
    def all(self) -> list[ProcessEntry]:
        """All known processes, sorted by name."""
        return list(self._all)

    @property
    def filtered(self) -> list[ProcessEntry]:
        """Processes matching the current query, in catalog order."""
        return list(self._filtered)

    @property
    def query(self) -> str:
        return self._query

    @property
    def selection(self) -> int | None:
        """Index of the highlighted entry in ``filtered``."""
        return self._selection

    def refresh(self) -> None:
        """Replace the catalog with a fresh snapshot from the provider."""
        # sorted() is stable, so equal names keep enumeration order
        self._all = sorted(self._provider(), key=lambda entry: entry.name)
        self._apply_filter()

    def set_query(self, query: str) -> None:
        """Set the search query and rebuild the filtered view."""
        self._query = query
        self._apply_filter()

    def move(self, delta: int) -> int | None:
        """
        Move the selection by ``delta`` rows, wrapping around at both ends.

        Returns the new selection index.
        """
        if not self._filtered:
            self._selection = None
            return None

        if self._selection is None:
            self._selection = 0
        else:
            self._selection = (self._selection + delta) % len(self._filtered)
        return self._selection

    def selected(self) -> ProcessEntry | None:
        """Get the highlighted entry, if any."""
        if self._selection is None or self._selection >= len(self._filtered):
            return None
        return self._filtered[self._selection]

    def _apply_filter(self) -> None:
        """Rebuild ``filtered`` from ``all`` and clamp the selection."""
        if self._query:
            needle = self._query.lower()
            self._filtered = [e for e in self._all if needle in e.name.lower()]
        else:
            self._filtered = list(self._all)

        if not self._filtered:
            self._selection = None
        elif self._selection is None:
            self._selection = 0
        elif self._selection >= len(self._filtered):
            self._selection = len(self._filtered) - 1

        logger.debug(
            "Catalog: %d processes, %d matching %r",
            len(self._all),
            len(self._filtered),
            self._query,
        )
