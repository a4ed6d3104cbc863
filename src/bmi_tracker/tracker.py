"""Sesion de seguimiento: recibe eventos y expone los datos para la UI."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

import pandas as pd
from dateutil import tz

from bmi_tracker.export import to_csv
from bmi_tracker.history import HistoryStore, chart_series
from bmi_tracker.model import HistoryEntry, HistoryLog, UnitSystem
from bmi_tracker.state import (
    Action,
    Evaluation,
    ResetNote,
    SelectTier,
    TrackerState,
    evaluate,
    reduce,
)
from bmi_tracker.storage import HistoryStorage
from bmi_tracker.tiers import capabilities_for
from bmi_tracker.units import format_number

logger = logging.getLogger(__name__)

_HEIGHT_UNITS = {UnitSystem.METRIC: "cm", UnitSystem.IMPERIAL: "in"}
_WEIGHT_UNITS = {UnitSystem.METRIC: "kg", UnitSystem.IMPERIAL: "lb"}


def _utc_now() -> datetime:
    return datetime.now(tz=tz.UTC)


def _new_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class TrackerView:
    """Everything a UI needs to render the current session."""

    evaluation: Evaluation
    history: HistoryLog
    chart: pd.DataFrame


def make_entry(
    evaluation: Evaluation,
    note: str,
    *,
    entry_id: str,
    timestamp: datetime,
) -> HistoryEntry:
    """Freeze an evaluation into a history entry.

    Raises:
        ValueError: If the evaluation has no BMI or category.
    """
    if evaluation.bmi is None or evaluation.category is None:
        raise ValueError("Cannot save a measurement without BMI and category")
    current = evaluation.measurement
    system = UnitSystem(current.unit_system)
    return HistoryEntry(
        entry_id=entry_id,
        timestamp=timestamp,
        height_label=f"{format_number(current.height_value)} {_HEIGHT_UNITS[system]}",
        weight_label=f"{format_number(current.weight_value)} {_WEIGHT_UNITS[system]}",
        bmi=round(evaluation.bmi, 2),
        category=evaluation.category,
        note=note.strip(),
    )


class BmiTracker:
    """Single-user session over a state value and a history store."""

    def __init__(
        self,
        storage: HistoryStorage,
        state: TrackerState | None = None,
        *,
        clock: Callable[[], datetime] = _utc_now,
        id_factory: Callable[[], str] = _new_id,
    ) -> None:
        self._state = state if state is not None else TrackerState()
        self._clock = clock
        self._id_factory = id_factory
        self.history = HistoryStore(
            storage, persist_enabled=capabilities_for(self._state.tier).persists
        )
        self.history.load()

    @property
    def state(self) -> TrackerState:
        return self._state

    def dispatch(self, action: Action) -> TrackerState:
        """Apply an input event and return the new state."""
        previous = self._state
        self._state = reduce(previous, action)
        if isinstance(action, SelectTier):
            persists = capabilities_for(self._state.tier).persists
            self.history.persist_enabled = persists
            if persists and previous.tier != self._state.tier:
                self.history.persist()
        return self._state

    def evaluate(self) -> Evaluation:
        return evaluate(self._state)

    def save(self) -> HistoryEntry | None:
        """Save the current measurement if eligible and clear the note.

        Returns:
            The saved entry, or None when saving is not allowed right now.
        """
        evaluation = evaluate(self._state)
        if not evaluation.can_save:
            logger.info("Save skipped: %s", evaluation.errors or "not eligible")
            return None
        entry = make_entry(
            evaluation,
            self._state.note,
            entry_id=self._id_factory(),
            timestamp=self._clock(),
        )
        self.history.add(entry)
        self._state = reduce(self._state, ResetNote())
        logger.info("Saved entry %s (BMI %s)", entry.entry_id, entry.bmi)
        return entry

    def delete(self, entry_id: str) -> None:
        self.history.remove(entry_id)

    def clear(self) -> None:
        """Drop every saved entry; confirm with the user before calling."""
        self.history.clear()

    def export_csv(self) -> str:
        return to_csv(self.history.entries)

    def view(self) -> TrackerView:
        entries = self.history.entries
        return TrackerView(
            evaluation=evaluate(self._state),
            history=entries,
            chart=chart_series(entries),
        )
