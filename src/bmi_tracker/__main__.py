"""Punto de entrada de la CLI."""

from __future__ import annotations

import sqlite3

from bmi_tracker.cli import main as cli_main


def main() -> int:
    """Run CLI entrypoint."""
    try:
        return cli_main()
    except (sqlite3.Error, OSError) as exc:
        print(f"No se pudo acceder al almacenamiento: {exc}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
