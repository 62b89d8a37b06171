"""Key-value storage interface."""

from typing import Iterable, Iterator, Protocol


class StorageError(Exception):
    """Raised when a value cannot be written to storage."""

    pass


class StorageQuotaError(StorageError):
    """Raised when a write would exceed the storage quota."""

    pass


class KeyValueStorage(Protocol):
    """Interface for string key-value storage with a size quota."""

    def get(self, key: str) -> str | None:
        """Read a value. Returns None if the key is not set."""
        ...

    def set(self, key: str, value: str) -> None:
        """Write/overwrite a value."""
        ...

    def set_many(self, items: Iterable[tuple[str, str]]) -> None:
        """Write several values at once. Nothing is written if any write would fail."""
        ...

    def remove(self, key: str) -> None:
        """Remove a key if present."""
        ...

    def keys(self) -> Iterator[str]:
        """Iterate over stored keys in storage order."""
        ...

    def clear(self) -> None:
        """Remove every key."""
        ...
