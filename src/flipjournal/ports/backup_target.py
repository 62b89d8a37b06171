"""Remote backup target interface."""

from typing import Protocol


class BackupTarget(Protocol):
    """Interface for anywhere a full journal bundle can be pushed to or pulled from."""

    name: str

    @property
    def enabled(self) -> bool:
        """False when the target is not configured (treated as skipped)."""
        ...

    def push(self, bundle: dict) -> None:
        """Replace the remote copy with `bundle`."""
        ...

    def pull(self) -> object:
        """Fetch the remote copy. The result is validated by the caller."""
        ...
