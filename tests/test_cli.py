"""Tests for the command-line interface."""

import json
from datetime import date
from unittest.mock import patch

import pytest
import requests
from click.testing import CliRunner

from flipjournal.cli import main
from flipjournal.config import Config
from flipjournal.sync import BackupResult


@pytest.fixture
def config(tmp_path):
    return Config(storage_file=str(tmp_path / "storage.json"), autosave_delay=60)


@pytest.fixture
def runner(config):
    offline = requests.ConnectionError("journal server not running")
    with patch("flipjournal.cli.load_config", return_value=config), patch(
        "flipjournal.adapters.backup_server.BackupServerTarget.fetch_config", side_effect=offline
    ):
        yield CliRunner()


@pytest.fixture
def backup_results():
    results = [BackupResult("cloud", ok=False, skipped=True, reason="not configured"), BackupResult("server", ok=True)]
    with patch("flipjournal.sync.BackupSync.backup", return_value=results) as backup:
        yield backup


class TestWrite:
    def test_write_then_show(self, runner, backup_results):
        result = runner.invoke(main, ["write", "--date", "2024-03-01", "--text", "Spring is near"])
        assert result.exit_code == 0, result.output
        assert "Saved letter for 2024-03-01" in result.output
        backup_results.assert_called_once()

        result = runner.invoke(main, ["show", "--date", "2024-03-01"])
        assert result.exit_code == 0
        assert "Spring is near" in result.output

    def test_write_section(self, runner, backup_results):
        runner.invoke(main, ["write", "-d", "2024-03-01", "-s", "notes", "-t", "Groceries"])

        result = runner.invoke(main, ["show", "-d", "2024-03-01", "--json"])
        record = json.loads(result.output)
        assert record["notes"]["content"] == "Groceries"

    def test_future_date_rejected(self, runner, backup_results):
        result = runner.invoke(main, ["write", "--date", "2999-01-01", "--text", "Hello future"])
        assert result.exit_code == 1
        assert "future" in result.output
        backup_results.assert_not_called()

    def test_bad_date(self, runner):
        result = runner.invoke(main, ["write", "--date", "yesterday", "--text", "x"])
        assert result.exit_code == 2

    def test_does_not_create_entry_for_today(self, runner, backup_results):
        runner.invoke(main, ["write", "-d", "2024-03-01", "-t", "Only this day"])

        result = runner.invoke(main, ["entries", "--json"])
        assert [e["date"] for e in json.loads(result.output)] == ["2024-03-01"]


class TestEntries:
    def test_empty(self, runner):
        result = runner.invoke(main, ["entries"])
        assert result.exit_code == 0
        assert "No entries yet" in result.output

    def test_newest_first(self, runner, backup_results):
        runner.invoke(main, ["write", "-d", "2024-01-05", "-t", "Older"])
        runner.invoke(main, ["write", "-d", "2024-02-10", "-t", "Newer"])

        result = runner.invoke(main, ["entries", "--json"])

        assert json.loads(result.output) == [
            {"date": "2024-02-10", "preview": "Newer"},
            {"date": "2024-01-05", "preview": "Older"},
        ]

    def test_show_unreadable_entry(self, runner, config):
        with open(config.storage_file, "w", encoding="utf-8") as f:
            json.dump({"journal_2024-01-01": json.dumps({"letter": "x"})}, f)

        result = runner.invoke(main, ["show", "--date", "2024-01-01"])

        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "Error:" in result.output

    def test_show_missing(self, runner):
        result = runner.invoke(main, ["show", "--date", "2020-01-01"])
        assert result.exit_code == 0
        assert "No journal entry" in result.output


class TestBackupCommands:
    def test_backup_reports_results(self, runner, backup_results):
        result = runner.invoke(main, ["backup"])
        assert result.exit_code == 0
        assert "server" in result.output

    def test_backup_failure_exits_nonzero(self, runner):
        failed = [BackupResult("server", ok=False, reason="Connection refused")]
        with patch("flipjournal.sync.BackupSync.backup", return_value=failed):
            result = runner.invoke(main, ["backup"])
        assert result.exit_code == 1
        assert "Connection refused" in result.output

    def test_restore_unconfigured_cloud(self, runner):
        result = runner.invoke(main, ["restore", "cloud"])
        assert result.exit_code == 1

    def test_export_then_import(self, runner, backup_results, config, tmp_path):
        runner.invoke(main, ["write", "-d", "2024-03-01", "-t", "Keep me"])
        out_dir = tmp_path / "exports"

        result = runner.invoke(main, ["export", "--output", str(out_dir)])
        assert result.exit_code == 0, result.output
        exported = out_dir / f"journal-backup-{date.today().isoformat()}.json"
        bundle = json.loads(exported.read_text(encoding="utf-8"))
        assert bundle["journal_2024-03-01"]["letter"]["body"] == "Keep me"

        config.storage_file = str(tmp_path / "fresh.json")
        result = runner.invoke(main, ["import", str(exported)])
        assert result.exit_code == 0, result.output

        result = runner.invoke(main, ["show", "-d", "2024-03-01"])
        assert "Keep me" in result.output

    def test_import_invalid_file(self, runner, tmp_path):
        bad = tmp_path / "bad.json"
        bad.write_text("[1, 2, 3]")

        result = runner.invoke(main, ["import", str(bad)])

        assert result.exit_code == 1
        assert "Invalid backup file" in result.output


class TestTheme:
    def test_cycles_and_persists(self, runner):
        assert "Theme: dark" in runner.invoke(main, ["theme"]).output
        assert "Theme: sepia" in runner.invoke(main, ["theme"]).output
        assert "Theme: light" in runner.invoke(main, ["theme"]).output
