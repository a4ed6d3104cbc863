from __future__ import annotations

import json
from datetime import date

import pytest

from bmi_tracker.history import HistoryStore, chart_series
from bmi_tracker.storage import HISTORY_KEY, MemoryStorage, encode_history


def test_add_prepends_newest_first(entry_factory) -> None:
    store = HistoryStore(MemoryStorage())
    store.add(entry_factory("a"))
    store.add(entry_factory("b"))
    assert [e.entry_id for e in store.entries] == ["b", "a"]
    assert len(store) == 2


def test_remove_keeps_relative_order(entry_factory) -> None:
    store = HistoryStore(MemoryStorage())
    for entry_id in ("a", "b", "c", "d"):
        store.add(entry_factory(entry_id))
    store.remove("b")
    assert [e.entry_id for e in store.entries] == ["d", "c", "a"]
    assert store.get("b") is None


def test_remove_unknown_is_noop(entry_factory) -> None:
    storage = MemoryStorage()
    store = HistoryStore(storage, persist_enabled=True)
    store.add(entry_factory("a"))
    before = storage.values[HISTORY_KEY]
    store.remove("missing")
    assert [e.entry_id for e in store.entries] == ["a"]
    assert storage.values[HISTORY_KEY] == before


def test_duplicate_id_rejected(entry_factory) -> None:
    store = HistoryStore(MemoryStorage())
    store.add(entry_factory("a"))
    with pytest.raises(ValueError):
        store.add(entry_factory("a", day=2))


def test_clear_empties_and_persists(entry_factory) -> None:
    storage = MemoryStorage()
    store = HistoryStore(storage, persist_enabled=True)
    store.add(entry_factory("a"))
    store.clear()
    assert store.entries == ()
    assert json.loads(storage.values[HISTORY_KEY]) == []


def test_mutations_not_written_when_persistence_disabled(entry_factory) -> None:
    storage = MemoryStorage()
    store = HistoryStore(storage)
    store.add(entry_factory("a"))
    assert HISTORY_KEY not in storage.values
    store.persist()
    assert len(json.loads(storage.values[HISTORY_KEY])) == 1


def test_load_round_trips_through_storage(entry_factory) -> None:
    storage = MemoryStorage()
    writer = HistoryStore(storage, persist_enabled=True)
    writer.add(entry_factory("a", note="after run"))
    writer.add(entry_factory("b", day=2))

    reader = HistoryStore(storage)
    loaded = reader.load()
    assert loaded == writer.entries


@pytest.mark.parametrize(
    "raw",
    [
        "not json",
        "{}",
        '[{"id": "x"}]',
        '[{"id": "x", "date": "2025-01-01T00:00:00Z", "height": "1", '
        '"weight": "1", "bmi": 20, "category": "Huge", "note": ""}]',
    ],
)
def test_load_discards_unreadable_history(raw: str, caplog) -> None:
    store = HistoryStore(MemoryStorage({HISTORY_KEY: raw}))
    assert store.load() == ()
    assert "Discarding unreadable history" in caplog.text


def test_load_discards_deeply_nested_history(caplog) -> None:
    store = HistoryStore(MemoryStorage({HISTORY_KEY: "[" * 200000}))
    assert store.load() == ()
    assert "Discarding unreadable history" in caplog.text


def test_load_absent_history_is_empty() -> None:
    assert HistoryStore(MemoryStorage()).load() == ()


def test_chart_series_is_chronological(entry_factory) -> None:
    store = HistoryStore(MemoryStorage())
    store.add(entry_factory("a", day=1, bmi=23.0))
    store.add(entry_factory("b", day=5, bmi=22.5))
    df = chart_series(store.entries)
    assert list(df.columns) == ["date", "bmi"]
    assert list(df["bmi"]) == [23.0, 22.5]
    assert df.iloc[0]["date"] <= df.iloc[1]["date"]
    assert isinstance(df.iloc[0]["date"], date)


def test_chart_series_empty() -> None:
    df = chart_series(())
    assert df.empty
    assert list(df.columns) == ["date", "bmi"]


def test_load_drops_duplicate_ids_keeping_newest(entry_factory, caplog) -> None:
    raw = encode_history(
        (entry_factory("a", day=3, bmi=24.0), entry_factory("a"), entry_factory("b"))
    )
    store = HistoryStore(MemoryStorage({HISTORY_KEY: raw}))
    loaded = store.load()
    assert [(e.entry_id, e.bmi) for e in loaded] == [("a", 24.0), ("b", 22.86)]
    assert "Dropping duplicate history entry a" in caplog.text

    store.remove("a")
    assert [e.entry_id for e in store.entries] == ["b"]
