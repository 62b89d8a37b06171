"""Functional core - pure journal logic with no I/O."""

from .entry import (
    BackCover,
    Cover,
    Dreams,
    EntryFormatError,
    Gratitude,
    JournalEntry,
    Letter,
    Memories,
    MemoryPhoto,
    Notes,
)
from .page import JournalPage, PhotoSlot, TOTAL_PAGES
from .codec import serialize, deserialize, reset_page
from .bundle import InvalidBundleError, date_from_key, entry_key, validate_bundle

__all__ = [
    # Entry
    "JournalEntry",
    "Cover",
    "Letter",
    "Gratitude",
    "Dreams",
    "Memories",
    "MemoryPhoto",
    "Notes",
    "BackCover",
    "EntryFormatError",
    # Page
    "JournalPage",
    "PhotoSlot",
    "TOTAL_PAGES",
    # Codec
    "serialize",
    "deserialize",
    "reset_page",
    # Bundle
    "InvalidBundleError",
    "date_from_key",
    "entry_key",
    "validate_bundle",
]
