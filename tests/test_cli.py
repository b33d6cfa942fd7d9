import json
import sys

import pytest

from divesim import cli


def run_cli(monkeypatch, *argv):
    monkeypatch.setattr(sys, "argv", ["divesim", *argv])
    cli.main()


def test_fast_headless_run(monkeypatch, capsys):
    run_cli(monkeypatch, "--fast", "--duration", "12")
    out = capsys.readouterr().out
    assert "Starting Headless Simulation (Duration: 12.0s)" in out
    assert "Simulation completed: 12 ticks, 0 errors" in out
    assert "00:00:12 | Depth: 10.0m" in out


def test_leak_is_reported(monkeypatch, capsys):
    run_cli(monkeypatch, "--fast", "--duration", "5", "--leak-at", "2.5")
    out = capsys.readouterr().out
    assert "Emergency: Air leak detected" in out


def test_config_file(monkeypatch, capsys, tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"stage_seconds": 2, "unknown": 1}))
    run_cli(monkeypatch, "--fast", "--duration", "4", "--config", str(path))
    out = capsys.readouterr().out
    assert "Max depth 20.0m" in out


def test_bad_config_exits(monkeypatch, capsys, tmp_path):
    with pytest.raises(SystemExit):
        run_cli(monkeypatch, "--fast", "--config", str(tmp_path / "missing.json"))
    assert "Error loading config" in capsys.readouterr().out


def test_simple_profile_keeps_depth(monkeypatch, capsys):
    run_cli(monkeypatch, "--fast", "--simple", "--duration", "3")
    out = capsys.readouterr().out
    assert "Max depth 20.0m" in out
