"""Backup sync - mirrors the whole store to backup targets and back."""

import json
import logging
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Callable

import requests

from .adapters.backup_server import BackupServerError
from .adapters.jsonbin import JsonBinError
from .core.bundle import InvalidBundleError, is_bundle_key, validate_bundle
from .ports.backup_target import BackupTarget
from .ports.storage import KeyValueStorage, StorageError

logger = logging.getLogger(__name__)

# Errors a target may raise; anything else is a bug and propagates
TARGET_ERRORS = (requests.RequestException, JsonBinError, BackupServerError, KeyError, ValueError)


@dataclass
class BackupResult:
    """Outcome of one backup or restore attempt against one target."""

    target: str
    ok: bool
    skipped: bool = False
    reason: str = ""

    def describe(self) -> str:
        if self.skipped:
            return f"{self.target}: skipped ({self.reason})"
        if self.ok:
            return f"{self.target}: ok"
        return f"{self.target}: failed ({self.reason})"


def log_result(result: BackupResult) -> None:
    """Default observability hook."""
    if result.ok:
        logger.info(f"Backup target {result.describe()}")
    elif result.skipped:
        logger.debug(f"Backup target {result.describe()}")
    else:
        logger.warning(f"Backup target {result.describe()}")


def backup_filename(active_date: date) -> str:
    return f"journal-backup-{active_date.isoformat()}.json"


class BackupSync:
    """
    Export/import of the full store, and best-effort remote mirroring.

    Target failures never raise: every attempt becomes a BackupResult that is
    returned and handed to `on_result`.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        targets: list[BackupTarget],
        on_result: Callable[[BackupResult], None] = log_result,
    ):
        self.storage = storage
        self.targets = targets
        self.on_result = on_result

    def export_all(self) -> dict:
        """Snapshot of every entry and preference key."""
        bundle = {}
        for key in self.storage.keys():
            if not is_bundle_key(key):
                continue
            raw = self.storage.get(key)
            if raw is None:
                continue
            try:
                bundle[key] = json.loads(raw)
            except json.JSONDecodeError:
                bundle[key] = raw
        return bundle

    def import_all(self, data: object) -> int:
        """
        Overwrite storage with every key in a bundle.

        The bundle is validated first; InvalidBundleError leaves storage
        untouched. Returns the number of keys written.
        """
        bundle = validate_bundle(data)
        items = [
            (key, value if isinstance(value, str) else json.dumps(value, ensure_ascii=False))
            for key, value in bundle.items()
        ]
        self.storage.set_many(items)
        return len(items)

    def _report(self, result: BackupResult) -> BackupResult:
        self.on_result(result)
        return result

    def _target(self, name: str) -> BackupTarget | None:
        return next((t for t in self.targets if t.name == name), None)

    def backup(self) -> list[BackupResult]:
        """Push a fresh export to every target independently."""
        bundle = self.export_all()
        results = []
        for target in self.targets:
            if not target.enabled:
                results.append(self._report(BackupResult(target.name, ok=False, skipped=True, reason="not configured")))
                continue
            try:
                target.push(bundle)
            except TARGET_ERRORS as e:
                results.append(self._report(BackupResult(target.name, ok=False, reason=str(e))))
                continue
            results.append(self._report(BackupResult(target.name, ok=True)))
        return results

    def restore(self, target_name: str) -> BackupResult:
        """Pull a bundle from one target and import it."""
        target = self._target(target_name)
        if target is None:
            return self._report(BackupResult(target_name, ok=False, reason="unknown backup target"))
        if not target.enabled:
            return self._report(
                BackupResult(target_name, ok=False, skipped=True, reason="not configured")
            )

        try:
            data = target.pull()
            count = self.import_all(data)
        except InvalidBundleError as e:
            return self._report(BackupResult(target_name, ok=False, reason=f"invalid backup: {e}"))
        except StorageError as e:
            return self._report(BackupResult(target_name, ok=False, reason=f"could not save backup locally: {e}"))
        except TARGET_ERRORS as e:
            return self._report(BackupResult(target_name, ok=False, reason=str(e)))

        logger.info(f"Restored {count} keys from {target_name}")
        return self._report(BackupResult(target_name, ok=True))

    def download(self, directory: Path | str, active_date: date) -> Path:
        """Write the export to journal-backup-<date>.json in `directory`."""
        path = Path(directory).expanduser() / backup_filename(active_date)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(self.export_all(), indent=2, ensure_ascii=False), encoding="utf-8")
        return path

    def upload(self, path: Path | str) -> int:
        """Import a previously downloaded backup file."""
        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise InvalidBundleError(f"Invalid backup file: {e}") from e
        return self.import_all(data)
