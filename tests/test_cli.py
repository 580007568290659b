import json
import time

import pytest
from typer.testing import CliRunner

from conftest import make_tx
from database.db_manager import DatabaseManager
from database.transaction_dao import TransactionDAO
import main
from main import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def _no_log_handlers(monkeypatch):
    """Keep the root logger untouched; CliRunner swaps stderr per invocation."""
    monkeypatch.setattr(main, "configure_logging", lambda level: None)


@pytest.fixture
def ledger_dir(tmp_path):
    return str(tmp_path / "ledger")


def invoke(ledger_dir, *args):
    return runner.invoke(app, ["--db-folder", ledger_dir, *args])


def test_add_list_and_summary(ledger_dir):
    result = invoke(ledger_dir, "add", "expense", "35.5", "餐饮", "--note", "午饭")
    assert result.exit_code == 0, result.output
    assert "餐饮" in result.output

    result = invoke(ledger_dir, "add", "income", "8000", "salary")
    assert result.exit_code == 0, result.output

    listed = invoke(ledger_dir, "list")
    assert listed.exit_code == 0
    assert "今天" in listed.output
    assert "午饭" in listed.output

    summary = invoke(ledger_dir, "summary")
    assert "¥8,000.00" in summary.output
    assert "¥7,964.50" in summary.output
    assert "笔数 2" in summary.output


def test_add_rejects_bad_input(ledger_dir):
    result = invoke(ledger_dir, "add", "expense", "-1", "food")
    assert result.exit_code == 1
    assert "Amount must be a positive number" in result.output


def test_add_rejects_non_finite_amount(ledger_dir):
    result = invoke(ledger_dir, "add", "expense", "nan", "food")

    assert result.exit_code == 1
    assert "No transactions yet." in invoke(ledger_dir, "list").output


def test_stats_and_trend(ledger_dir):
    invoke(ledger_dir, "add", "expense", "30", "food")
    invoke(ledger_dir, "add", "expense", "10", "transport")

    stats = invoke(ledger_dir, "stats", "--type", "expense")
    assert stats.exit_code == 0
    assert "75.0%" in stats.output
    assert "25.0%" in stats.output

    trend = invoke(ledger_dir, "trend")
    assert trend.exit_code == 0
    assert len(trend.output.strip().splitlines()) == 6


def test_export_import_round_trip(ledger_dir, tmp_path):
    invoke(ledger_dir, "add", "expense", "12", "food")
    out = tmp_path / "backup.json"

    exported = invoke(ledger_dir, "export", "json", "--out", str(out))
    assert exported.exit_code == 0, exported.output
    assert len(json.loads(out.read_text(encoding="utf-8"))) == 1

    again = invoke(ledger_dir, "import", str(out))
    assert again.exit_code == 0
    assert "Imported 0 of 1 records." in again.output

    other = str(tmp_path / "other")
    fresh = invoke(other, "import", str(out))
    assert "Imported 1 of 1 records." in fresh.output


def test_import_failure_is_reported(ledger_dir, tmp_path):
    bad = tmp_path / "bad.json"
    bad.write_text('{"not": "a list"}', encoding="utf-8")

    result = invoke(ledger_dir, "import", str(bad))

    assert result.exit_code == 1
    assert "Import failed" in result.output


def test_clear_requires_confirmation(ledger_dir):
    invoke(ledger_dir, "add", "expense", "12", "food")

    assert invoke(ledger_dir, "clear").exit_code == 1
    assert invoke(ledger_dir, "clear", "--yes").exit_code == 0
    assert "No transactions yet." in invoke(ledger_dir, "list").output


def test_config_persists_preferences(ledger_dir, tmp_path, monkeypatch):
    from utils import app_config

    monkeypatch.setattr(app_config, "CONFIG_DIR", tmp_path / "cfg")
    monkeypatch.setattr(app_config, "CONFIG_FILE", tmp_path / "cfg" / "config.json")
    monkeypatch.delenv(app_config.LOG_LEVEL_ENV, raising=False)

    result = invoke(ledger_dir, "config", "--set-db-folder", "/srv/ledger", "--set-log-level", "debug")

    assert result.exit_code == 0, result.output
    assert "db_folder: /srv/ledger" in result.output
    assert "log_level: DEBUG" in result.output
    assert app_config.get_db_folder() == "/srv/ledger"


@pytest.fixture
def shanghai_tz(monkeypatch):
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is unavailable on this platform")
    monkeypatch.setenv("TZ", "Asia/Shanghai")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()


def test_list_shows_local_time_of_day(ledger_dir, shanghai_tz):
    db = DatabaseManager.open_default(ledger_dir)
    TransactionDAO(db).replace_all([make_tx(id="t1", created_at="2024-03-05T15:35:00.000Z")])
    db.close()

    listed = invoke(ledger_dir, "list")

    assert listed.exit_code == 0, listed.output
    assert "23:35" in listed.output
    assert "15:35" not in listed.output


def test_summary_includes_all_time_balance(ledger_dir):
    invoke(ledger_dir, "add", "expense", "20", "food", "--date", "2023-12-01")
    invoke(ledger_dir, "add", "income", "100", "salary", "--date", "2024-01-02")

    summary = invoke(ledger_dir, "summary", "--month", "2024-01")

    assert summary.exit_code == 0, summary.output
    assert "笔数 1" in summary.output
    assert "累计结余 ¥80.00  (共 2 笔)" in summary.output


def test_delete_reports_missing_id(ledger_dir):
    added = invoke(ledger_dir, "add", "expense", "5", "food")
    tx_id = added.output.split()[1].rstrip(":")

    missing = invoke(ledger_dir, "delete", "nope")
    assert missing.exit_code == 0
    assert "nothing deleted" in missing.output

    deleted = invoke(ledger_dir, "delete", tx_id)
    assert f"Deleted {tx_id}" in deleted.output
    assert "No transactions yet." in invoke(ledger_dir, "list").output
