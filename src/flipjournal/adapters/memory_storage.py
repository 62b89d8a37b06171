"""In-memory key-value storage adapter."""

import threading
from typing import Iterable, Iterator

from flipjournal.ports.storage import StorageError, StorageQuotaError

# Browser local storage allows roughly 5M UTF-16 code units per origin
DEFAULT_QUOTA = 5 * 1024 * 1024


def storage_size(key: str, value: str) -> int:
    """Size of one item in UTF-16 code units, as browsers count it."""
    return (len(key.encode("utf-16-le")) + len(value.encode("utf-16-le"))) // 2


class MemoryStorage:
    """
    Dict-backed storage.

    Implements KeyValueStorage protocol. Enforces the quota on every write;
    keys iterate in insertion order.
    """

    def __init__(self, quota: int = DEFAULT_QUOTA, data: dict[str, str] | None = None):
        self.quota = quota
        self._data: dict[str, str] = dict(data or {})
        # Background auto-saves and backups write from scheduler threads
        self._lock = threading.RLock()

    def used(self) -> int:
        return sum(storage_size(k, v) for k, v in self._data.items())

    def _replace(self, data: dict[str, str]) -> None:
        """Swap in new contents. Subclasses persist here before the swap."""
        self._data = data

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self.set_many([(key, value)])

    def set_many(self, items: Iterable[tuple[str, str]]) -> None:
        pending = dict(items)
        for key, value in pending.items():
            if not isinstance(key, str) or not isinstance(value, str):
                raise StorageError(f"Storage only holds strings, got {key!r}: {type(value).__name__}")

        with self._lock:
            data = {**self._data, **pending}
            used = sum(storage_size(k, v) for k, v in data.items())
            if used > self.quota:
                raise StorageQuotaError(f"Storage quota exceeded: {used} of {self.quota} units")
            self._replace(data)

    def remove(self, key: str) -> None:
        with self._lock:
            if key in self._data:
                self._replace({k: v for k, v in self._data.items() if k != key})

    def keys(self) -> Iterator[str]:
        return iter(list(self._data))

    def clear(self) -> None:
        with self._lock:
            self._replace({})
