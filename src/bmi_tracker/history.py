"""Historial de mediciones guardadas (mas reciente primero)."""

from __future__ import annotations

import logging

import pandas as pd
from dateutil import tz

from bmi_tracker.model import HistoryEntry, HistoryLog
from bmi_tracker.storage import HistoryReadError, HistoryStorage

logger = logging.getLogger(__name__)

CHART_COLUMNS = ["date", "bmi"]


class HistoryStore:
    """Ordered log of saved entries backed by a storage capability.

    Every mutation rewrites the whole log through ``persist()`` while
    ``persist_enabled`` is set.
    """

    def __init__(
        self, storage: HistoryStorage, *, persist_enabled: bool = False
    ) -> None:
        self._storage = storage
        self._entries: HistoryLog = ()
        self.persist_enabled = persist_enabled

    @property
    def entries(self) -> HistoryLog:
        """Current log, newest first."""
        return self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, entry_id: str) -> HistoryEntry | None:
        """Return the entry with ``entry_id`` or None."""
        for entry in self._entries:
            if entry.entry_id == entry_id:
                return entry
        return None

    def load(self) -> HistoryLog:
        """Read the stored log; unreadable data leaves the log empty."""
        try:
            self._entries = self._storage.load()
        except HistoryReadError as exc:
            logger.warning("Discarding unreadable history: %s", exc)
            self._entries = ()
        logger.debug("Loaded %d history entries", len(self._entries))
        return self._entries

    def persist(self) -> None:
        """Write the full log to storage."""
        self._storage.save(self._entries)

    def add(self, entry: HistoryEntry) -> None:
        """Prepend ``entry``.

        Raises:
            ValueError: If an entry with the same id is already stored.
        """
        if self.get(entry.entry_id) is not None:
            raise ValueError(f"Duplicate history entry id: {entry.entry_id}")
        self._replace((entry, *self._entries))

    def remove(self, entry_id: str) -> None:
        """Drop the entry with ``entry_id``; unknown ids are ignored."""
        remaining = tuple(e for e in self._entries if e.entry_id != entry_id)
        if len(remaining) == len(self._entries):
            return
        self._replace(remaining)

    def clear(self) -> None:
        """Empty the log. Asking the user first is up to the caller."""
        self._replace(())

    def _replace(self, entries: HistoryLog) -> None:
        self._entries = entries
        if self.persist_enabled:
            self.persist()


def chart_series(log: HistoryLog) -> pd.DataFrame:
    """Date/BMI pairs in chronological order (oldest first)."""
    if not log:
        return pd.DataFrame(columns=CHART_COLUMNS)
    local = tz.tzlocal()
    rows = [
        {"date": entry.timestamp.astimezone(local).date(), "bmi": entry.bmi}
        for entry in reversed(log)
    ]
    return pd.DataFrame(rows, columns=CHART_COLUMNS)
