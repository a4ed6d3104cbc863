"""Tests for CLI entrypoints."""

from __future__ import annotations

import sqlite3
from pathlib import Path

import pytest

from bmi_tracker import __main__ as entrypoint
from bmi_tracker import cli


def test_parse_args_custom_values() -> None:
    ns = cli.parse_args(
        ["--db", "/tmp/x.sqlite3", "calc", "--height", "69", "--units", "imperial"]
    )
    assert ns.db == "/tmp/x.sqlite3"
    assert ns.command == "calc"
    assert ns.height == "69"
    assert ns.weight is None
    assert ns.units == "imperial"


def test_calc_prints_category_at_validated_tier(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    db = str(tmp_path / "app.sqlite3")
    code = cli.main(
        ["--db", db, "calc", "--height", "175", "--weight", "70", "--tier", "2"]
    )
    out = capsys.readouterr().out
    assert code == 0
    assert "BMI: 22.86" in out
    assert "Category: Normal" in out


def test_calc_undefined_bmi_uses_placeholder(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    db = str(tmp_path / "app.sqlite3")
    assert cli.main(["--db", db, "calc", "--weight", "0"]) == 0
    assert "BMI: —" in capsys.readouterr().out


def test_save_history_export_and_clear(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    db = str(tmp_path / "app.sqlite3")
    out_dir = tmp_path / "exports"

    assert cli.main(["--db", db, "save", "--note", 'He said "hi"']) == 0
    assert cli.main(["--db", db, "save", "--height", "300"]) == 1
    assert cli.main(["--db", db, "history"]) == 0
    listing = capsys.readouterr().out
    assert "175 cm" in listing
    assert "Normal" in listing

    assert cli.main(["--db", db, "export", "--out-dir", str(out_dir)]) == 0
    (csv_file,) = out_dir.glob("bmi_history_*.csv")
    text = csv_file.read_text(encoding="utf-8")
    assert text.splitlines()[0] == '"date","height","weight","bmi","category","note"'
    assert '"He said ""hi"""' in text

    assert cli.main(["--db", db, "clear"]) == 1
    assert cli.main(["--db", db, "clear", "--yes"]) == 0
    assert cli.main(["--db", db, "export", "--out-dir", str(out_dir)]) == 1


def test_export_xlsx(tmp_path: Path) -> None:
    db = str(tmp_path / "app.sqlite3")
    out_dir = tmp_path / "exports"
    assert cli.main(["--db", db, "save"]) == 0
    args = ["--db", db, "export", "--format", "xlsx", "--out-dir", str(out_dir)]
    assert cli.main(args) == 0
    assert len(list(out_dir.glob("bmi_history_*.xlsx"))) == 1


def test_delete_unknown_id(tmp_path: Path) -> None:
    db = str(tmp_path / "app.sqlite3")
    assert cli.main(["--db", db, "delete", "nope"]) == 1


def test_config_persists_defaults(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    db = str(tmp_path / "app.sqlite3")
    assert cli.main(["--db", db, "config", "--tier", "2", "--units", "imperial"]) == 0
    capsys.readouterr()

    assert cli.main(["--db", db, "calc"]) == 0
    out = capsys.readouterr().out
    assert "Category: Normal" in out


def test_entrypoint_reports_storage_errors(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    def _boom() -> int:
        raise sqlite3.OperationalError("disk I/O error")

    monkeypatch.setattr(entrypoint, "cli_main", _boom)
    assert entrypoint.main() == 1
    assert "disk I/O error" in capsys.readouterr().out


def test_save_ignores_configured_tier(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    db = str(tmp_path / "app.sqlite3")
    assert cli.main(["--db", db, "config", "--tier", "1"]) == 0
    assert cli.main(["--db", db, "save"]) == 0
    capsys.readouterr()
    assert cli.main(["--db", db, "history"]) == 0
    assert "BMI 22.86" in capsys.readouterr().out
