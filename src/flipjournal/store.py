"""Entry store - per-date journal entries on top of key-value storage."""

import logging
from dataclasses import dataclass
from datetime import date

from .core.bundle import BIN_ID_KEY, LAST_DATE_KEY, LAST_PAGE_KEY, THEME_KEY, date_from_key, entry_key
from .core.entry import EntryFormatError, JournalEntry
from .ports.storage import KeyValueStorage, StorageError

logger = logging.getLogger(__name__)


@dataclass
class EntrySummary:
    """One line of the entries list."""

    date: date
    preview: str


class EntryStore:
    """
    Journal entries keyed by date, plus the small set of preference keys.

    Writes are synchronous and last-write-wins; there is no merging.
    """

    def __init__(self, storage: KeyValueStorage):
        self.storage = storage

    def put(self, entry_date: date, entry: JournalEntry, page: int = 0) -> None:
        """
        Write the entry for a date and remember it as the last active one.

        Raises StorageError (StorageQuotaError when over quota); in that case
        nothing is written.
        """
        try:
            payload = entry.to_json()
        except (TypeError, ValueError) as e:
            raise StorageError(f"Entry for {entry_date} could not be serialized: {e}") from e

        self.storage.set_many(
            [
                (entry_key(entry_date), payload),
                (LAST_DATE_KEY, entry_date.isoformat()),
                (LAST_PAGE_KEY, str(page)),
            ]
        )

    def get(self, entry_date: date) -> JournalEntry | None:
        """Read the entry for a date. Returns None if not found."""
        raw = self.storage.get(entry_key(entry_date))
        if raw is None:
            return None
        return JournalEntry.from_json(raw)

    def exists(self, entry_date: date) -> bool:
        return self.storage.get(entry_key(entry_date)) is not None

    def list_entries(self) -> list[EntrySummary]:
        """
        Summaries of every stored entry, in storage key order.

        Callers sort; see recent_entries(). Unreadable entries are skipped.
        """
        summaries = []
        for key in self.storage.keys():
            entry_date = date_from_key(key)
            if entry_date is None:
                continue
            try:
                entry = self.get(entry_date)
            except EntryFormatError as e:
                logger.warning(f"Skipping unreadable entry {key}: {e}")
                continue
            if entry is not None:
                summaries.append(EntrySummary(date=entry_date, preview=entry.preview()))
        return summaries

    def recent_entries(self) -> list[EntrySummary]:
        """Entries sorted newest first, for display."""
        return sorted(self.list_entries(), key=lambda s: s.date, reverse=True)

    # ============== Preferences ==============

    def last_date(self) -> date | None:
        value = self.storage.get(LAST_DATE_KEY)
        if not value:
            return None
        try:
            return date.fromisoformat(value)
        except ValueError:
            return None

    def last_page(self) -> int:
        value = self.storage.get(LAST_PAGE_KEY)
        try:
            return int(value) if value else 0
        except ValueError:
            return 0

    def theme(self) -> str | None:
        return self.storage.get(THEME_KEY)

    def set_theme(self, theme: str) -> None:
        self.storage.set(THEME_KEY, theme)

    def bin_id(self) -> str:
        return self.storage.get(BIN_ID_KEY) or ""

    def set_bin_id(self, bin_id: str) -> None:
        self.storage.set(BIN_ID_KEY, bin_id)
