"""Ports - interfaces/protocols for external dependencies."""

from .storage import KeyValueStorage, StorageError, StorageQuotaError
from .backup_target import BackupTarget

__all__ = [
    "KeyValueStorage",
    "StorageError",
    "StorageQuotaError",
    "BackupTarget",
]
