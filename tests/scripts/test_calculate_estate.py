"""Tests for the calculate_estate command-line front end."""

import importlib.util
import json
import sys
from pathlib import Path

import pytest

SCRIPT = Path(__file__).resolve().parents[2] / "scripts" / "calculate_estate.py"


@pytest.fixture(scope="module")
def cli():
    spec = importlib.util.spec_from_file_location("calculate_estate", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def _run(cli, monkeypatch, *argv):
    monkeypatch.setattr(sys, "argv", ["calculate_estate.py", *argv])
    return cli.main()


class TestCalculateEstateScript:
    def test_prints_result_json(self, cli, monkeypatch, capsys):
        code = _run(
            cli, monkeypatch,
            "--madhab", "shafii", "--total", "120000",
            "--heir", "husband=1", "--heir", "father=1", "--heir", "mother=1",
        )
        out = json.loads(capsys.readouterr().out)
        assert code == 0
        assert out["success"] is True
        assert {s["key"]: s["amount"] for s in out["shares"]} == {
            "husband": "60000.00",
            "mother": "20000.00",
            "father": "40000.00",
        }

    def test_compare_keys_by_madhab(self, cli, monkeypatch, capsys):
        code = _run(cli, monkeypatch, "--compare", "--total", "9000", "--heir", "son=1")
        out = json.loads(capsys.readouterr().out)
        assert code == 0
        assert set(out) == {"shafii", "hanafi", "maliki", "hanbali"}

    def test_failure_exit_status(self, cli, monkeypatch, capsys):
        code = _run(cli, monkeypatch, "--madhab", "shafii", "--total", "0", "--heir", "son=1")
        captured = capsys.readouterr()
        assert code == 1
        assert "ERROR: total estate must be positive" in captured.err

    def test_invalid_rule_book(self, cli, monkeypatch, capsys, tmp_path):
        broken = tmp_path / "broken.yaml"
        broken.write_text("madhabs: []\n", encoding="utf-8")
        code = _run(
            cli, monkeypatch,
            "--madhab", "shafii", "--total", "100", "--heir", "son=1", "--config", str(broken),
        )
        assert code == 1
        assert capsys.readouterr().err.startswith("ERROR: ")

    def test_malformed_heir_argument(self, cli, monkeypatch):
        with pytest.raises(SystemExit):
            _run(cli, monkeypatch, "--madhab", "shafii", "--total", "100", "--heir", "son")
