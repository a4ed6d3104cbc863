from __future__ import annotations

from datetime import datetime

import pytest
from dateutil import tz

from bmi_tracker.model import Category, HistoryEntry


def make_entry(
    entry_id: str,
    *,
    day: int = 1,
    bmi: float = 22.86,
    category: Category = Category.NORMAL,
    note: str = "",
) -> HistoryEntry:
    return HistoryEntry(
        entry_id=entry_id,
        timestamp=datetime(2025, 1, day, 12, 0, tzinfo=tz.UTC),
        height_label="175 cm",
        weight_label="70 kg",
        bmi=bmi,
        category=category,
        note=note,
    )


@pytest.fixture
def entry_factory():
    return make_entry
