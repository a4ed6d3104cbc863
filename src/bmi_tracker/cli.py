"""CLI para calcular, guardar y exportar mediciones de IMC."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from dataclasses import replace
from datetime import datetime
from pathlib import Path

from dateutil import tz

from bmi_tracker.excel_writer import ExcelLayout, write_history_xlsx
from bmi_tracker.export import export_filename
from bmi_tracker.model import UnitSystem
from bmi_tracker.state import EditHeight, EditNote, EditWeight, TrackerState, reduce
from bmi_tracker.storage import AppConfig, SQLiteStore
from bmi_tracker.tiers import FeatureTier
from bmi_tracker.tracker import BmiTracker

logger = logging.getLogger(__name__)

_PLACEHOLDER = "—"


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed argparse namespace.
    """
    parser = argparse.ArgumentParser(
        description="Calculadora y registro de IMC (metrico/imperial)."
    )
    parser.add_argument(
        "--db",
        default=str(Path.cwd() / "bmi_tracker.sqlite3"),
        help="Archivo SQLite (default: ./bmi_tracker.sqlite3).",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log DEBUG.")
    sub = parser.add_subparsers(dest="command", required=True)

    def add_measurement_args(cmd: argparse.ArgumentParser) -> None:
        cmd.add_argument("--height", help="Altura (cm o pulgadas).")
        cmd.add_argument("--weight", help="Peso (kg o libras).")
        cmd.add_argument(
            "--units",
            choices=[u.value for u in UnitSystem],
            help="Sistema de unidades (default: configuracion).",
        )

    calc = sub.add_parser("calc", help="Calcular IMC sin guardar.")
    add_measurement_args(calc)
    calc.add_argument(
        "--tier",
        type=int,
        choices=[int(t) for t in FeatureTier],
        help="Nivel de funcionalidad (default: configuracion).",
    )

    save = sub.add_parser(
        "save",
        help="Calcular y guardar en el historial (siempre con nivel 3).",
    )
    add_measurement_args(save)
    save.add_argument("--note", default="", help="Nota opcional.")

    sub.add_parser("history", help="Listar mediciones guardadas.")

    delete = sub.add_parser("delete", help="Borrar una medicion por id.")
    delete.add_argument("entry_id")

    clear = sub.add_parser("clear", help="Borrar todo el historial.")
    clear.add_argument("--yes", action="store_true", help="Confirmar borrado.")

    export = sub.add_parser("export", help="Exportar historial a CSV o Excel.")
    export.add_argument("--format", choices=["csv", "xlsx"], default="csv")
    export.add_argument("--out-dir", help="Directorio de salida.")

    config = sub.add_parser("config", help="Ver o cambiar la configuracion.")
    config.add_argument("--tier", type=int, choices=[int(t) for t in FeatureTier])
    config.add_argument("--units", choices=[u.value for u in UnitSystem])
    config.add_argument("--export-dir")

    return parser.parse_args(argv)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def _build_state(
    ns: argparse.Namespace, config: AppConfig, tier: FeatureTier
) -> TrackerState:
    units = UnitSystem(ns.units) if ns.units else config.unit_system
    state = TrackerState(tier=tier, unit_system=units)
    if ns.height is not None:
        state = reduce(state, EditHeight(ns.height))
    if ns.weight is not None:
        state = reduce(state, EditWeight(ns.weight))
    if getattr(ns, "note", ""):
        state = reduce(state, EditNote(ns.note))
    return state


def _format_bmi(bmi: float | None) -> str:
    return _PLACEHOLDER if bmi is None else f"{bmi:.2f}"


def _cmd_calc(ns: argparse.Namespace, store: SQLiteStore, config: AppConfig) -> int:
    tier = FeatureTier(ns.tier) if ns.tier else config.tier
    tracker = BmiTracker(store, _build_state(ns, config, tier))
    evaluation = tracker.evaluate()
    print(f"BMI: {_format_bmi(evaluation.bmi)}")
    if evaluation.category is not None:
        print(f"Category: {evaluation.category.value}")
        print(evaluation.advice)
    for field, message in evaluation.errors.items():
        print(f"{field}: {message}")
    return 0


def _cmd_save(ns: argparse.Namespace, store: SQLiteStore, config: AppConfig) -> int:
    tracker = BmiTracker(store, _build_state(ns, config, FeatureTier.HISTORY))
    entry = tracker.save()
    if entry is None:
        evaluation = tracker.evaluate()
        print(f"No se guardo (BMI {_format_bmi(evaluation.bmi)}).")
        for field, message in evaluation.errors.items():
            print(f"{field}: {message}")
        return 1
    print(f"OK: {entry.entry_id} BMI {entry.bmi} ({entry.category.value})")
    return 0


def _history_tracker(store: SQLiteStore) -> BmiTracker:
    return BmiTracker(store, TrackerState(tier=FeatureTier.HISTORY))


def _cmd_history(store: SQLiteStore) -> int:
    entries = _history_tracker(store).history.entries
    if not entries:
        print("No entries saved.")
        return 0
    for entry in entries:
        local = entry.timestamp.astimezone(tz.tzlocal())
        line = (
            f"{entry.entry_id}  {local:%Y-%m-%d %H:%M}  {entry.height_label}  "
            f"{entry.weight_label}  BMI {entry.bmi}  {entry.category.value}"
        )
        if entry.note:
            line += f"  Note: {entry.note}"
        print(line)
    return 0


def _cmd_delete(ns: argparse.Namespace, store: SQLiteStore) -> int:
    tracker = _history_tracker(store)
    if tracker.history.get(ns.entry_id) is None:
        print(f"No existe la medicion {ns.entry_id}.")
        return 1
    tracker.delete(ns.entry_id)
    print(f"OK: {ns.entry_id} borrada.")
    return 0


def _cmd_clear(ns: argparse.Namespace, store: SQLiteStore) -> int:
    if not ns.yes:
        print("Usa --yes para confirmar el borrado de todo el historial.")
        return 1
    tracker = _history_tracker(store)
    count = len(tracker.history)
    tracker.clear()
    print(f"OK: {count} mediciones borradas.")
    return 0


def _cmd_export(ns: argparse.Namespace, store: SQLiteStore, config: AppConfig) -> int:
    tracker = _history_tracker(store)
    if not tracker.history.entries:
        print("No hay datos para exportar.")
        return 1
    if ns.out_dir:
        out_dir = Path(ns.out_dir).expanduser()
    elif config.export_dir:
        out_dir = Path(config.export_dir).expanduser()
    else:
        out_dir = Path.cwd() / "salidas"
    out_dir.mkdir(parents=True, exist_ok=True)

    today = datetime.now(tz=tz.tzlocal()).date()
    out_path = out_dir / export_filename(today)
    if ns.format == "xlsx":
        out_path = out_path.with_suffix(".xlsx")
        write_history_xlsx(tracker.history.entries, out_path, ExcelLayout())
    else:
        out_path.write_text(tracker.export_csv(), encoding="utf-8")
    logger.debug("Exported %d entries", len(tracker.history))
    print(f"OK: Output: {out_path}")
    return 0


def _cmd_config(ns: argparse.Namespace, store: SQLiteStore, config: AppConfig) -> int:
    updated = config
    if ns.tier is not None:
        updated = replace(updated, tier=FeatureTier(ns.tier))
    if ns.units is not None:
        updated = replace(updated, unit_system=UnitSystem(ns.units))
    if ns.export_dir is not None:
        updated = replace(updated, export_dir=ns.export_dir)
    if updated != config:
        store.save_config(updated)
    print(f"tier: {int(updated.tier)}")
    print(f"units: {updated.unit_system.value}")
    print(f"export_dir: {updated.export_dir}")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Run the BMI tracker CLI.

    Returns:
        Exit code (0 on success).
    """
    ns = parse_args(argv)
    _configure_logging(ns.verbose)

    store = SQLiteStore(Path(ns.db).expanduser().resolve())
    config = store.load_config()

    if ns.command == "calc":
        return _cmd_calc(ns, store, config)
    if ns.command == "save":
        return _cmd_save(ns, store, config)
    if ns.command == "history":
        return _cmd_history(store)
    if ns.command == "delete":
        return _cmd_delete(ns, store)
    if ns.command == "clear":
        return _cmd_clear(ns, store)
    if ns.command == "export":
        return _cmd_export(ns, store, config)
    return _cmd_config(ns, store, config)
