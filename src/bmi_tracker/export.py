"""Serializacion del historial a CSV para descarga."""

from __future__ import annotations

import csv
import io
from datetime import date

from bmi_tracker.model import HistoryEntry, HistoryLog
from bmi_tracker.storage import entry_to_record
from bmi_tracker.units import format_number

CSV_HEADER = ["date", "height", "weight", "bmi", "category", "note"]


def _csv_row(entry: HistoryEntry) -> list[str]:
    record = entry_to_record(entry)
    record["bmi"] = format_number(entry.bmi)
    return [str(record[key]) for key in CSV_HEADER]


def to_csv(log: HistoryLog) -> str:
    """Serialize the log, newest first, with every cell double-quoted.

    Args:
        log: History entries in stored order.

    Returns:
        CSV text with a header row, ``\\n`` line breaks and no trailing newline.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    writer.writerows(_csv_row(entry) for entry in log)
    return buffer.getvalue().removesuffix("\n")


def export_filename(day: date) -> str:
    """Nombre de archivo sugerido para la exportacion del dia."""
    return f"bmi_history_{day.isoformat()}.csv"
