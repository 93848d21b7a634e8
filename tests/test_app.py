"""
Tests for the command line interface.
"""
import json
import logging
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from app import app
from models.errors import StorageError

runner = CliRunner()


@pytest.fixture(autouse=True)
def restore_root_handlers():
    # setup_logging binds a handler to the runner's stdout
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


@pytest.fixture
def bill_file(tmp_path, electricity_form):
    path = tmp_path / "electricity.json"
    path.write_text(json.dumps(electricity_form))
    return path


def test_calculate_prints_summary(bill_file, history_dir):
    result = runner.invoke(app, ["calculate", str(bill_file)])

    assert result.exit_code == 0
    assert "=== Electricity Bill Split ===" in result.output
    assert "Room B pays Room A ¥100.00" in result.output
    assert not (history_dir / "electricity_bill_history.jsonl").exists()


def test_calculate_save_and_list_history(bill_file, history_dir):
    saved = runner.invoke(app, ["calculate", str(bill_file), "--save"])
    assert saved.exit_code == 0
    assert "Saved to history as" in saved.output

    listed = runner.invoke(app, ["history", "electricity"])
    assert listed.exit_code == 0
    assert "2024-01-01 to 2024-03-31" in listed.output
    assert "¥300.00" in listed.output


def test_calculate_export(bill_file, tmp_path, history_dir):
    out = tmp_path / "exports"
    result = runner.invoke(app, ["calculate", str(bill_file), "--export", "csv", "--out", str(out)])

    assert result.exit_code == 0
    exported = list(out.glob("electricity_split_*.csv"))
    assert len(exported) == 1


def test_calculate_invalid_bill(tmp_path, electricity_form, history_dir):
    electricity_form["totalAmount"] = 0
    path = tmp_path / "bad.json"
    path.write_text(json.dumps(electricity_form))

    result = runner.invoke(app, ["calculate", str(path)])

    assert result.exit_code == 1
    assert "Total amount must be a positive number" in result.output


def test_delete_and_clear(bill_file, history_dir):
    runner.invoke(app, ["calculate", str(bill_file), "--save"])
    record = json.loads((history_dir / "electricity_bill_history.jsonl").read_text().splitlines()[0])

    deleted = runner.invoke(app, ["delete", "electricity", record["id"]])
    assert deleted.exit_code == 0

    missing = runner.invoke(app, ["delete", "electricity", record["id"]])
    assert missing.exit_code == 1

    cleared = runner.invoke(app, ["clear", "--yes"])
    assert cleared.exit_code == 0
    assert "electricity: 0 deleted" in cleared.output


def test_unknown_kind(history_dir):
    result = runner.invoke(app, ["history", "gas"])
    assert result.exit_code == 1


@pytest.mark.parametrize("args", [
    ["history", "water", "--backend", "redis"],
    ["delete", "water", "abc", "--backend", "redis"],
    ["clear", "--yes", "--backend", "redis"],
    ["calculate", "{bill}", "--save", "--backend", "redis"],
])
def test_unknown_backend_is_reported(args, bill_file, history_dir):
    args = [str(bill_file) if a == "{bill}" else a for a in args]
    result = runner.invoke(app, args)

    assert result.exit_code == 1
    assert "Error: Unknown history backend 'redis'" in result.output


@pytest.mark.parametrize("args, method", [
    (["history", "electricity"], "electricity_history"),
    (["delete", "electricity", "abc"], "delete_electricity_result"),
    (["clear", "--yes"], "clear_all"),
])
def test_storage_failure_is_reported(args, method, history_dir):
    with patch(f"storage.history.BillHistory.{method}", side_effect=StorageError("history API down")):
        result = runner.invoke(app, args)

    assert result.exit_code == 1
    assert "Error: history API down" in result.output
    assert result.exception is None or isinstance(result.exception, SystemExit)
