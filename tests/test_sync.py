"""Tests for backup export/import and remote targets."""

import json
from datetime import date
from unittest.mock import MagicMock

import pytest
import requests

from flipjournal.adapters.backup_server import BackupServerError, BackupServerTarget
from flipjournal.adapters.jsonbin import API_BASE, JsonBinError, JsonBinTarget
from flipjournal.adapters.memory_storage import MemoryStorage
from flipjournal.core.bundle import InvalidBundleError
from flipjournal.core.entry import JournalEntry, Letter
from flipjournal.store import EntryStore
from flipjournal.sync import BackupResult, BackupSync


def _response(status_code=200, payload=None):
    resp = MagicMock()
    resp.status_code = status_code
    resp.ok = 200 <= status_code < 300
    resp.json.return_value = payload if payload is not None else {}
    resp.text = json.dumps(payload)
    return resp


class FakeTarget:
    """In-memory BackupTarget for exercising BackupSync."""

    def __init__(self, name, enabled=True, error=None, remote=None):
        self.name = name
        self.enabled = enabled
        self.error = error
        self.remote = remote
        self.pushed = []

    def push(self, bundle):
        if self.error:
            raise self.error
        self.pushed.append(bundle)

    def pull(self):
        if self.error:
            raise self.error
        return self.remote


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def populated(storage):
    store = EntryStore(storage)
    store.put(date(2024, 1, 1), JournalEntry(letter=Letter(body="New year")))
    store.put(date(2024, 1, 2), JournalEntry(letter=Letter(body="Second day")), page=2)
    store.set_theme("dark")
    store.set_bin_id("bin-1")
    return storage


class TestExportImport:
    def test_export_collects_bundle_keys(self, populated):
        bundle = BackupSync(populated, []).export_all()

        assert bundle == {
            "journal_2024-01-01": {"letter": {"body": "New year"}},
            "journal_lastDate": "2024-01-02",
            "journal_lastPage": 2,
            "journal_2024-01-02": {"letter": {"body": "Second day"}},
            "flipJournalTheme": "dark",
        }

    def test_export_excludes_bin_id(self, populated):
        assert "jsonbin_bin_id" not in BackupSync(populated, []).export_all()

    def test_import_of_export_is_idempotent(self, populated):
        before = {k: populated.get(k) for k in populated.keys()}
        sync = BackupSync(populated, [])

        sync.import_all(sync.export_all())

        assert {k: populated.get(k) for k in populated.keys()} == before

    def test_import_overwrites_existing_entry_entirely(self, populated):
        sync = BackupSync(populated, [])
        sync.import_all({"journal_2024-01-01": {"notes": {"content": "Replaced"}}})

        entry = EntryStore(populated).get(date(2024, 1, 1))
        assert entry.letter is None
        assert entry.notes.content == "Replaced"

    def test_import_into_empty_storage(self, populated, storage):
        bundle = BackupSync(populated, []).export_all()
        fresh = MemoryStorage()

        count = BackupSync(fresh, []).import_all(bundle)

        assert count == 5
        assert EntryStore(fresh).get(date(2024, 1, 2)).letter.body == "Second day"
        assert fresh.get("journal_lastPage") == "2"

    def test_malformed_import_writes_nothing(self, populated):
        before = {k: populated.get(k) for k in populated.keys()}
        sync = BackupSync(populated, [])

        with pytest.raises(InvalidBundleError):
            sync.import_all({"journal_2024-02-02": {"letter": {}}, "journal_2024-02-03": 7})

        assert {k: populated.get(k) for k in populated.keys()} == before


    def test_wrongly_shaped_entry_keeps_stored_entry(self, populated):
        before = {k: populated.get(k) for k in populated.keys()}
        sync = BackupSync(populated, [])

        with pytest.raises(InvalidBundleError):
            sync.import_all({"journal_2024-01-01": {"letter": "oops", "gratitude": {"cards": 5}}})

        assert {k: populated.get(k) for k in populated.keys()} == before
        assert EntryStore(populated).get(date(2024, 1, 1)).letter.body == "New year"


class TestDownloadUpload:
    def test_download_filename_and_contents(self, populated, tmp_path):
        sync = BackupSync(populated, [])
        path = sync.download(tmp_path, date(2024, 1, 2))

        assert path.name == "journal-backup-2024-01-02.json"
        assert path.read_text(encoding="utf-8") == json.dumps(sync.export_all(), indent=2, ensure_ascii=False)

    def test_upload_restores(self, populated, tmp_path):
        path = BackupSync(populated, []).download(tmp_path, date(2024, 1, 2))
        fresh = MemoryStorage()

        BackupSync(fresh, []).upload(path)

        assert EntryStore(fresh).get(date(2024, 1, 1)).letter.body == "New year"

    def test_upload_invalid_json(self, storage, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("not json at all")

        with pytest.raises(InvalidBundleError):
            BackupSync(storage, []).upload(path)
        assert list(storage.keys()) == []


class TestBackup:
    def test_pushes_to_every_target(self, populated):
        cloud, server = FakeTarget("cloud"), FakeTarget("server")
        results = BackupSync(populated, [cloud, server], on_result=lambda r: None).backup()

        assert results == [BackupResult("cloud", ok=True), BackupResult("server", ok=True)]
        assert cloud.pushed[0]["flipJournalTheme"] == "dark"
        assert server.pushed == cloud.pushed

    def test_failure_does_not_stop_other_targets(self, populated):
        cloud = FakeTarget("cloud", error=JsonBinError("Failed to update JSONBin"))
        server = FakeTarget("server")
        results = BackupSync(populated, [cloud, server], on_result=lambda r: None).backup()

        assert results[0].ok is False
        assert "Failed to update JSONBin" in results[0].reason
        assert results[1].ok is True

    def test_unreachable_server_is_a_result(self, populated):
        server = FakeTarget("server", error=requests.ConnectionError("refused"))
        results = BackupSync(populated, [server], on_result=lambda r: None).backup()
        assert results == [BackupResult("server", ok=False, reason="refused")]

    def test_disabled_target_is_skipped(self, populated):
        cloud = FakeTarget("cloud", enabled=False)
        results = BackupSync(populated, [cloud], on_result=lambda r: None).backup()

        assert results[0].skipped is True
        assert cloud.pushed == []

    def test_results_reach_hook(self, populated):
        seen = []
        BackupSync(populated, [FakeTarget("cloud"), FakeTarget("server")], on_result=seen.append).backup()
        assert [r.target for r in seen] == ["cloud", "server"]


class TestRestore:
    def test_restore_imports_remote_bundle(self, storage):
        remote = {"journal_2024-05-05": {"letter": {"body": "From the cloud"}}}
        sync = BackupSync(storage, [FakeTarget("cloud", remote=remote)], on_result=lambda r: None)

        result = sync.restore("cloud")

        assert result.ok is True
        assert EntryStore(storage).get(date(2024, 5, 5)).letter.body == "From the cloud"

    def test_invalid_remote_bundle_leaves_store(self, populated):
        before = {k: populated.get(k) for k in populated.keys()}
        sync = BackupSync(populated, [FakeTarget("server", remote=[1, 2, 3])], on_result=lambda r: None)

        result = sync.restore("server")

        assert result.ok is False
        assert "invalid backup" in result.reason
        assert {k: populated.get(k) for k in populated.keys()} == before

    def test_restore_over_quota(self):
        storage = MemoryStorage(quota=10)
        remote = {"journal_2024-05-05": {"letter": {"body": "Too big for this storage"}}}
        sync = BackupSync(storage, [FakeTarget("server", remote=remote)], on_result=lambda r: None)

        result = sync.restore("server")

        assert result.ok is False
        assert "could not save" in result.reason
        assert list(storage.keys()) == []

    def test_unreachable_target(self, storage):
        target = FakeTarget("server", error=requests.ConnectionError("no server"))
        result = BackupSync(storage, [target], on_result=lambda r: None).restore("server")
        assert result == BackupResult("server", ok=False, reason="no server")

    def test_disabled_target(self, storage):
        result = BackupSync(storage, [FakeTarget("cloud", enabled=False)], on_result=lambda r: None).restore("cloud")
        assert result.skipped is True

    def test_unknown_target(self, storage):
        result = BackupSync(storage, [], on_result=lambda r: None).restore("floppy")
        assert result.ok is False


class TestJsonBinTarget:
    def test_disabled_without_key(self):
        assert JsonBinTarget("").enabled is False
        assert JsonBinTarget("YOUR_API_KEY_HERE").enabled is False
        assert JsonBinTarget("$2b$10$real").enabled is True

    def test_push_creates_bin_and_remembers_id(self):
        session = MagicMock()
        session.post.return_value = _response(200, {"metadata": {"id": "new-bin"}})
        remembered = []
        target = JsonBinTarget("key", session=session, on_bin_created=remembered.append)

        target.push({"flipJournalTheme": "light"})

        args, kwargs = session.post.call_args
        assert args[0] == f"{API_BASE}/b"
        assert kwargs["headers"]["X-Master-Key"] == "key"
        assert kwargs["headers"]["X-Bin-Private"] == "true"
        assert kwargs["json"] == {"flipJournalTheme": "light"}
        assert target.bin_id == "new-bin"
        assert remembered == ["new-bin"]

    def test_push_updates_known_bin(self):
        session = MagicMock()
        session.put.return_value = _response(200, {})
        target = JsonBinTarget("key", bin_id="bin-1", session=session)

        target.push({"a": 1})

        session.post.assert_not_called()
        assert session.put.call_args[0][0] == f"{API_BASE}/b/bin-1"

    def test_failed_update_raises(self):
        session = MagicMock()
        session.put.return_value = _response(401, {"message": "bad key"})
        target = JsonBinTarget("key", bin_id="bin-1", session=session)

        with pytest.raises(JsonBinError):
            target.push({})

    def test_pull_reads_latest_record(self):
        session = MagicMock()
        session.get.return_value = _response(200, {"record": {"flipJournalTheme": "dark"}, "metadata": {}})
        target = JsonBinTarget("key", bin_id="bin-1", session=session)

        assert target.pull() == {"flipJournalTheme": "dark"}
        assert session.get.call_args[0][0] == f"{API_BASE}/b/bin-1/latest"

    def test_pull_without_bin(self):
        with pytest.raises(JsonBinError):
            JsonBinTarget("key", session=MagicMock()).pull()


class TestBackupServerTarget:
    def test_push_posts_bundle(self):
        session = MagicMock()
        session.post.return_value = _response(200, {"success": True, "message": "Backup saved!"})
        target = BackupServerTarget("http://localhost:8080/", session=session)

        target.push({"a": 1})

        session.post.assert_called_once_with("http://localhost:8080/api/backup", json={"a": 1}, timeout=10)

    def test_push_failure_raises(self):
        session = MagicMock()
        session.post.return_value = _response(500, {"success": False, "message": "disk full"})
        with pytest.raises(BackupServerError, match="disk full"):
            BackupServerTarget("http://x", session=session).push({})

    def test_pull_missing_backup(self):
        session = MagicMock()
        session.get.return_value = _response(404, {"success": False})
        with pytest.raises(BackupServerError):
            BackupServerTarget("http://x", session=session).pull()

    def test_pull_returns_bundle(self):
        session = MagicMock()
        session.get.return_value = _response(200, {"flipJournalTheme": "sepia"})
        assert BackupServerTarget("http://x", session=session).pull() == {"flipJournalTheme": "sepia"}

    def test_fetch_config(self):
        session = MagicMock()
        session.get.return_value = _response(200, {"apiKey": "k", "binId": "b"})
        assert BackupServerTarget("http://x", session=session).fetch_config() == {"apiKey": "k", "binId": "b"}
