"""Persistencia del historial (clave JSON) y de la configuracion en SQLite."""

from __future__ import annotations

import json
import logging
import sqlite3
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

from dateutil import tz
from dateutil.parser import isoparse

from bmi_tracker.model import Category, HistoryEntry, HistoryLog, UnitSystem
from bmi_tracker.tiers import FeatureTier

logger = logging.getLogger(__name__)

HISTORY_KEY = "bmi-tracker-history-v1"

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS app_config (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS app_storage (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
);
"""


class HistoryReadError(ValueError):
    """Stored history is present but cannot be decoded."""


@dataclass(frozen=True)
class AppConfig:
    """Configuracion persistida de la app."""

    tier: FeatureTier = FeatureTier.BASIC
    unit_system: UnitSystem = UnitSystem.METRIC
    export_dir: str = ""


class HistoryStorage(ABC):
    """Storage capability holding one serialized history log."""

    @abstractmethod
    def load(self) -> HistoryLog:
        """Read the stored log.

        Returns:
            The stored entries, newest first; empty when nothing is stored.

        Raises:
            HistoryReadError: If stored data is malformed.
        """

    @abstractmethod
    def save(self, log: HistoryLog) -> None:
        """Replace the stored log with ``log``."""


class MemoryStorage(HistoryStorage):
    """Key/value storage kept in a dict (tests, throwaway sessions)."""

    def __init__(self, values: dict[str, str] | None = None) -> None:
        self.values: dict[str, str] = {} if values is None else values

    def load(self) -> HistoryLog:
        return decode_history(self.values.get(HISTORY_KEY))

    def save(self, log: HistoryLog) -> None:
        self.values[HISTORY_KEY] = encode_history(log)


class SQLiteStore(HistoryStorage):
    """Repositorio SQLite para la app."""

    def __init__(self, db_path: Path) -> None:
        """Create store and ensure schema exists."""
        self._db_path = db_path
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_schema(self) -> None:
        with self._connect() as conn:
            conn.executescript(SCHEMA_SQL)
            conn.commit()

    def load_config(self) -> AppConfig:
        """Devuelve configuracion guardada o defaults."""
        defaults = AppConfig()
        with self._connect() as conn:
            rows = conn.execute("SELECT key, value FROM app_config").fetchall()
        values = {row["key"]: row["value"] for row in rows}
        return AppConfig(
            tier=_parse_tier(values.get("tier"), defaults.tier),
            unit_system=_parse_unit_system(
                values.get("unit_system"), defaults.unit_system
            ),
            export_dir=values.get("export_dir", defaults.export_dir),
        )

    def save_config(self, config: AppConfig) -> None:
        """Guarda la configuracion en tabla key/value."""
        payload = {
            "tier": str(int(config.tier)),
            "unit_system": UnitSystem(config.unit_system).value,
            "export_dir": config.export_dir,
        }
        with self._connect() as conn:
            conn.executemany(
                """
                INSERT INTO app_config(key, value) VALUES(?, ?)
                ON CONFLICT(key) DO UPDATE SET value=excluded.value
                """,
                payload.items(),
            )
            conn.commit()

    def load(self) -> HistoryLog:
        # Read as bytes so a corrupt value fails in decode_history, not in sqlite3.
        with self._connect() as conn:
            row = conn.execute(
                "SELECT CAST(value AS BLOB) AS value FROM app_storage WHERE key = ?",
                (HISTORY_KEY,),
            ).fetchone()
        return decode_history(None if row is None else row["value"])

    def save(self, log: HistoryLog) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO app_storage(key, value) VALUES(?, ?)
                ON CONFLICT(key) DO UPDATE SET value=excluded.value
                """,
                (HISTORY_KEY, encode_history(log)),
            )
            conn.commit()
        logger.debug("Saved %d history entries to %s", len(log), self._db_path)


def format_timestamp(value: datetime) -> str:
    """ISO-8601 in UTC with millisecond precision and a ``Z`` suffix."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=tz.UTC)
    text = value.astimezone(tz.UTC).isoformat(timespec="milliseconds")
    return text.replace("+00:00", "Z")


def entry_to_record(entry: HistoryEntry) -> dict[str, Any]:
    """Serialize an entry with the persisted field names."""
    return {
        "id": entry.entry_id,
        "date": format_timestamp(entry.timestamp),
        "height": entry.height_label,
        "weight": entry.weight_label,
        "bmi": entry.bmi,
        "category": Category(entry.category).value,
        "note": entry.note,
    }


def entry_from_record(record: Any) -> HistoryEntry:
    """Parse one persisted record.

    Raises:
        HistoryReadError: If a field is missing or has the wrong shape.
    """
    if not isinstance(record, dict):
        raise HistoryReadError(f"History record is not an object: {record!r}")
    try:
        timestamp = isoparse(str(record["date"]))
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=tz.UTC)
        return HistoryEntry(
            entry_id=str(record["id"]),
            timestamp=timestamp,
            height_label=str(record["height"]),
            weight_label=str(record["weight"]),
            bmi=float(record["bmi"]),
            category=Category(record["category"]),
            note=str(record.get("note") or ""),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise HistoryReadError(f"Invalid history record {record!r}: {exc}") from exc


def encode_history(log: HistoryLog) -> str:
    """JSON array of records, newest first."""
    return json.dumps([entry_to_record(entry) for entry in log], ensure_ascii=False)


def decode_history(raw: str | bytes | None) -> HistoryLog:
    """Parse the stored JSON array; absent or blank data is an empty log.

    Records repeating an id already seen are dropped, keeping the newest.

    Raises:
        HistoryReadError: If ``raw`` is not UTF-8 text holding a JSON array of
            valid records.
    """
    if not raw:
        return ()
    try:
        text = raw.decode("utf-8") if isinstance(raw, bytes) else raw
        parsed: Any = json.loads(text)
    except UnicodeDecodeError as exc:
        raise HistoryReadError(f"History is not UTF-8 text: {exc}") from exc
    except (json.JSONDecodeError, RecursionError) as exc:
        raise HistoryReadError(f"History is not valid JSON: {exc}") from exc
    if not isinstance(parsed, list):
        raise HistoryReadError("History is not a JSON array")

    entries: list[HistoryEntry] = []
    seen: set[str] = set()
    for record in parsed:
        entry = entry_from_record(record)
        if entry.entry_id in seen:
            logger.warning("Dropping duplicate history entry %s", entry.entry_id)
            continue
        seen.add(entry.entry_id)
        entries.append(entry)
    return tuple(entries)


def _parse_tier(raw: str | None, default: FeatureTier) -> FeatureTier:
    try:
        return FeatureTier(int(raw)) if raw is not None else default
    except ValueError:
        logger.warning("Ignoring invalid stored tier %r", raw)
        return default


def _parse_unit_system(raw: str | None, default: UnitSystem) -> UnitSystem:
    try:
        return UnitSystem(raw) if raw is not None else default
    except ValueError:
        logger.warning("Ignoring invalid stored unit system %r", raw)
        return default
