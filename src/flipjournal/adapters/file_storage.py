"""JSON-file key-value storage adapter."""

import json
import logging
import os
from pathlib import Path

from flipjournal.ports.storage import StorageError

from .memory_storage import DEFAULT_QUOTA, MemoryStorage

logger = logging.getLogger(__name__)


class JsonFileStorage(MemoryStorage):
    """
    Storage persisted to a single JSON file.

    Implements KeyValueStorage protocol. The whole file is rewritten on every
    change, through a temporary file so a failed write leaves the previous
    contents intact.
    """

    def __init__(self, path: Path | str, quota: int = DEFAULT_QUOTA):
        self.path = Path(path).expanduser()
        super().__init__(quota=quota, data=self._load())

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(f"Could not read storage file {self.path}: {e}") from e
        if not isinstance(data, dict) or not all(isinstance(v, str) for v in data.values()):
            raise StorageError(f"Storage file {self.path} is not a string map")
        return data

    def _replace(self, data: dict[str, str]) -> None:
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
            os.replace(tmp, self.path)
        except OSError as e:
            logger.error(f"Failed to write storage file {self.path}: {e}")
            raise StorageError(f"Could not write storage file {self.path}: {e}") from e
        super()._replace(data)
