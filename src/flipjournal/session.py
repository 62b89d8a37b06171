"""Session context - the journal's state that outlives a single page view."""

from dataclasses import dataclass
from datetime import date

from .core.page import TOTAL_PAGES
from .store import EntryStore

THEMES = ("light", "dark", "sepia")


@dataclass
class JournalSession:
    """Active date, page, theme and cached cloud bin id."""

    active_date: date
    active_page: int = 0
    theme: str = "light"
    bin_id: str = ""

    @classmethod
    def load(cls, store: EntryStore, today: date, config_bin_id: str = "") -> "JournalSession":
        """
        Restore preferences from storage.

        The journal always opens on today's date; a bin id cached in storage
        wins over one from configuration.
        """
        theme = store.theme()
        page = store.last_page()
        return cls(
            active_date=today,
            active_page=page if 0 <= page <= TOTAL_PAGES else 0,
            theme=theme if theme in THEMES else "light",
            bin_id=store.bin_id() or config_bin_id,
        )

    def next_theme(self) -> str:
        index = THEMES.index(self.theme) if self.theme in THEMES else -1
        return THEMES[(index + 1) % len(THEMES)]
