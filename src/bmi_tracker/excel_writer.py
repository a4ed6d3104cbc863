"""Generación de Excel formateado con el historial de IMC."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pandas as pd
from openpyxl.styles import Alignment, Border, Font, Side

from bmi_tracker.model import Category, HistoryLog

_HEADER_MAP: dict[str, str] = {
    "datetime": "Date / Time",
    "height": "Height",
    "weight": "Weight",
    "bmi": "BMI",
    "category": "Category",
    "note": "Note",
}

_THIN = Side(style="thin")
_BORDER = Border(left=_THIN, right=_THIN, top=_THIN, bottom=_THIN)
_CENTER = Alignment(horizontal="center", vertical="center", wrap_text=True)
_LEFT = Alignment(horizontal="left", vertical="center", wrap_text=True)

_COLUMN_WIDTHS: tuple[tuple[str, int], ...] = (
    ("Date / Time", 18),
    ("Height", 10),
    ("Weight", 10),
    ("BMI", 8),
    ("Category", 13),
    ("Note", 40),
)


@dataclass(frozen=True)
class ExcelLayout:
    """Layout/formatting configuration for the history sheet."""

    sheet_name: str = "BMI history"


def history_frame(log: HistoryLog) -> pd.DataFrame:
    """Build a DataFrame of the log, newest first, with naive UTC datetimes."""
    rows = [
        {
            "datetime": entry.timestamp,
            "height": entry.height_label,
            "weight": entry.weight_label,
            "bmi": entry.bmi,
            "category": Category(entry.category).value,
            "note": entry.note,
        }
        for entry in log
    ]
    df = pd.DataFrame(rows, columns=list(_HEADER_MAP))
    if not df.empty:
        df["datetime"] = pd.to_datetime(df["datetime"], utc=True).dt.tz_convert(None)
    return df


def write_history_xlsx(log: HistoryLog, out_path: Path, layout: ExcelLayout) -> None:
    """Write a formatted Excel file suitable for printing.

    Args:
        log: History entries, newest first.
        out_path: Output path for the XLSX file.
        layout: Excel layout parameters.
    """
    out_path.parent.mkdir(parents=True, exist_ok=True)
    export_df = history_frame(log).rename(columns=_HEADER_MAP)

    with pd.ExcelWriter(out_path, engine="openpyxl") as writer:
        export_df.to_excel(writer, index=False, sheet_name=layout.sheet_name)
        ws = writer.book[layout.sheet_name]
        _format_sheet(ws)


def _style_header_row(ws: Any) -> None:
    """Negrita, centrado y borde en la fila de cabecera."""
    header_font = Font(bold=True)
    for cell in ws[1]:
        cell.font = header_font
        cell.alignment = _CENTER
        cell.border = _BORDER


def _style_body_rows(ws: Any, col_index: dict[str, int]) -> None:
    """Borde en cada celda de datos; la nota va a la izquierda, el resto centrado."""
    note_idx = col_index.get("Note")
    for row in ws.iter_rows(min_row=2):
        for cell in row:
            cell.alignment = _LEFT if cell.column == note_idx else _CENTER
            cell.border = _BORDER


def _get_header_col_index(ws: Any) -> dict[str, int]:
    """Devuelve mapa nombre de cabecera -> índice de columna (1-based)."""
    headers = [str(cell.value) for cell in ws[1]]
    return {name: idx + 1 for idx, name in enumerate(headers)}


def _apply_column_widths(ws: Any, col_index: dict[str, int]) -> None:
    for header, width in _COLUMN_WIDTHS:
        idx = col_index.get(header)
        if idx is not None:
            letter = ws.cell(row=1, column=idx).column_letter
            ws.column_dimensions[letter].width = width


def _apply_number_formats(ws: Any, col_index: dict[str, int]) -> None:
    fmt_map: dict[str, str] = {
        "Date / Time": "dd/mm/yyyy hh:mm",
        "BMI": "0.00",
    }
    for row in ws.iter_rows(min_row=2):
        for header, fmt in fmt_map.items():
            idx = col_index.get(header)
            if idx is not None:
                row[idx - 1].number_format = fmt


def _format_sheet(ws: Any) -> None:
    """Apply borders, widths and number formats to a worksheet.

    Args:
        ws: openpyxl worksheet.
    """
    col_index = _get_header_col_index(ws)
    _style_header_row(ws)
    _style_body_rows(ws, col_index)
    _apply_column_widths(ws, col_index)
    _apply_number_formats(ws, col_index)
