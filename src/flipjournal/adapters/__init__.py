"""Adapters - I/O implementations of ports."""

from .memory_storage import MemoryStorage
from .file_storage import JsonFileStorage
from .jsonbin import JsonBinError, JsonBinTarget
from .backup_server import BackupServerError, BackupServerTarget

__all__ = [
    "MemoryStorage",
    "JsonFileStorage",
    "JsonBinTarget",
    "JsonBinError",
    "BackupServerTarget",
    "BackupServerError",
]
