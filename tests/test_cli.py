"""Tests for the fluent-gwt command line over a record database."""
from __future__ import annotations

import subprocess
import sys
from typing import TYPE_CHECKING

import pytest

from fluent_gwt.cli import main
from fluent_gwt.store.records import RecordStore
from fluent_gwt.types import Stage, StepRecord, TestRecord

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def project(tmp_path: Path, monkeypatch) -> Path:
    """A working directory with a config file and two recorded tests."""
    (tmp_path / "fluent-gwt.yaml").write_text("record_db: records.db\n", encoding="utf-8")
    store = RecordStore(tmp_path / "records.db")
    try:
        store.save_record(TestRecord(
            "tests/test_weather.py::test_light_rain_in_london",
            "passed",
            Stage.THEN,
            history=[
                StepRecord(Stage.GIVEN, "given", "StubWeatherProvider"),
                StepRecord(Stage.WHEN, "when", "RequestWeather"),
                StepRecord(Stage.THEN, "then", "WeatherAssertions"),
            ],
            givens={"City": "London"},
            captured={"request from the user to WeatherApp": {"city": "London"}},
            recorded_at="2026-10-19 09:00:00",
        ))
        store.save_record(TestRecord(
            "tests/test_weather.py::test_forgot_then",
            "failed",
            Stage.WHEN,
            history=[StepRecord(Stage.WHEN, "when", "RequestWeather")],
        ))
    finally:
        store.close()
    monkeypatch.chdir(tmp_path)
    return tmp_path


def run_cli(monkeypatch, *args: str) -> int:
    monkeypatch.setattr(sys, "argv", ["fluent-gwt", *args])
    try:
        main()
    except SystemExit as e:
        return e.code or 0
    return 0


def test_list(project, monkeypatch, capsys):
    assert run_cli(monkeypatch, "list") == 0
    out = capsys.readouterr().out
    assert "✗ tests/test_weather.py::test_forgot_then  [when, 1 steps]" in out
    assert "✓ tests/test_weather.py::test_light_rain_in_london  [then, 3 steps]" in out
    assert "1/2 passed" in out


def test_show(project, monkeypatch, capsys):
    assert run_cli(monkeypatch, "show", "light_rain") == 0
    out = capsys.readouterr().out
    assert out.startswith("# Light rain in london")
    assert "| City | London |" in out
    assert "```mermaid" in out


def test_show_unknown(project, monkeypatch, capsys):
    assert run_cli(monkeypatch, "show", "hail") == 1
    assert "No single record matches" in capsys.readouterr().err


def test_show_without_name(project, monkeypatch, capsys):
    assert run_cli(monkeypatch, "show") == 1
    assert "Usage" in capsys.readouterr().err


def test_report(project, monkeypatch, capsys):
    assert run_cli(monkeypatch, "report", "docs") == 0
    assert "Wrote 2 record(s)" in capsys.readouterr().out
    pages = sorted(p.name for p in (project / "docs").iterdir())
    assert pages == [
        "index.md",
        "tests-test-weather-py-test-forgot-then.md",
        "tests-test-weather-py-test-light-rain-in-london.md",
    ]
    assert "1/2 passed" in (project / "docs" / "index.md").read_text(encoding="utf-8")


def test_reset(project, monkeypatch, capsys):
    assert run_cli(monkeypatch, "reset") == 0
    assert "Deleted 2 record(s)" in capsys.readouterr().out
    assert run_cli(monkeypatch, "list") == 0
    assert "No records yet." in capsys.readouterr().out


def test_no_database(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    assert run_cli(monkeypatch, "list") == 1
    assert "No records found" in capsys.readouterr().out
    assert run_cli(monkeypatch, "reset") == 0
    assert "Nothing to reset" in capsys.readouterr().out


def test_bad_config(tmp_path, monkeypatch, capsys):
    (tmp_path / "fluent-gwt.yaml").write_text("colour: blue\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    assert run_cli(monkeypatch, "list") == 1
    assert "Config error" in capsys.readouterr().err


def test_unknown_command(monkeypatch, capsys):
    assert run_cli(monkeypatch, "explode") == 1
    assert "Unknown command: explode" in capsys.readouterr().err


def test_module_entry_point_prints_usage(tmp_path):
    result = subprocess.run(
        [sys.executable, "-m", "fluent_gwt", "help"],
        capture_output=True,
        text=True,
        cwd=tmp_path,
    )
    assert result.returncode == 0
    assert "fluent-gwt list" in result.stdout
