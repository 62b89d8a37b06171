"""Entry navigation and the journal's open/close lifecycle."""

import logging
from contextlib import nullcontext
from datetime import date, timedelta
from typing import Callable

import requests
from apscheduler.schedulers.background import BackgroundScheduler

from .adapters.backup_server import BackupServerError, BackupServerTarget
from .adapters.file_storage import JsonFileStorage
from .adapters.jsonbin import JsonBinTarget
from .autosave import PendingWrite
from .config import Config
from .core.codec import deserialize, reset_page, serialize
from .core.entry import EntryFormatError
from .core.page import TOTAL_PAGES, JournalPage
from .ports.storage import KeyValueStorage
from .session import JournalSession
from .store import EntryStore
from .sync import BackupSync

logger = logging.getLogger(__name__)


class EntryNavigator:
    """
    Moves the journal between dates.

    Every date change saves the page under the date being left before the
    next date is loaded, so no edit is lost by navigating.
    """

    def __init__(
        self,
        session: JournalSession,
        store: EntryStore,
        page: JournalPage,
        pending: PendingWrite | None = None,
        today: Callable[[], date] = date.today,
    ):
        self.session = session
        self.store = store
        self.page = page
        self.pending = pending
        self.today = today

    def _locked(self):
        """Hold off background auto-saves while the page or date changes."""
        return self.pending.lock if self.pending else nullcontext()

    def save(self) -> None:
        """Save the page for the active date now. Raises StorageError."""
        with self._locked():
            if self.pending:
                self.pending.cancel()
            self.store.put(self.session.active_date, serialize(self.page), self.session.active_page)

    def load(self, target: date) -> bool:
        """Show the stored entry for a date, or the fresh-day defaults."""
        try:
            entry = self.store.get(target)
        except EntryFormatError as e:
            logger.warning(f"Entry for {target} is unreadable, showing defaults: {e}")
            entry = None

        if entry is None:
            reset_page(self.page)
            return False
        deserialize(entry, self.page)
        return True

    def go_to(self, target: date) -> bool:
        """
        Switch to another date. Returns False if the date is in the future.

        The current page is saved under the previous date first; if that
        save fails the error propagates and the active date is unchanged.
        """
        if target > self.today():
            logger.debug(f"Refusing to navigate to future date {target}")
            return False

        with self._locked():
            self.save()
            self.session.active_date = target
            self.load(target)
        return True

    def previous_day(self) -> bool:
        return self.go_to(self.session.active_date - timedelta(days=1))

    def next_day(self) -> bool:
        if self.session.active_date >= self.today():
            return False
        return self.go_to(self.session.active_date + timedelta(days=1))

    def go_to_today(self) -> bool:
        return self.go_to(self.today())

    def edit(self, change: Callable[[JournalPage], None]) -> None:
        """Apply a change to the page and schedule a debounced save."""
        with self._locked():
            change(self.page)
        self.touch()

    def touch(self) -> None:
        if self.pending:
            self.pending.schedule()
        else:
            self.save()

    def set_page(self, number: int) -> None:
        if not 0 <= number <= TOTAL_PAGES:
            raise ValueError(f"Page must be between 0 and {TOTAL_PAGES}, got {number}")
        self.session.active_page = number
        self.touch()

    def toggle_theme(self) -> str:
        self.session.theme = self.session.next_theme()
        self.store.set_theme(self.session.theme)
        return self.session.theme


class Journal:
    """
    One open journal: session, page, store, navigator and backups.

    open() restores preferences and shows today's entry; close() flushes any
    pending auto-save.
    """

    def __init__(
        self,
        store: EntryStore,
        session: JournalSession,
        sync: BackupSync,
        autosave_delay: float = 1.5,
        today: Callable[[], date] = date.today,
        scheduler: BackgroundScheduler | None = None,
        on_save_error: Callable[[Exception], None] | None = None,
    ):
        self.store = store
        self.session = session
        self.sync = sync
        self.page = JournalPage.blank()
        self.pending = PendingWrite(
            self._autosave, delay=autosave_delay, scheduler=scheduler, on_error=on_save_error
        )
        self.navigator = EntryNavigator(session, store, self.page, self.pending, today=today)

    def _autosave(self) -> None:
        self.store.put(self.session.active_date, serialize(self.page), self.session.active_page)

    @classmethod
    def open(
        cls,
        config: Config,
        storage: KeyValueStorage | None = None,
        today: Callable[[], date] = date.today,
        start_date: date | None = None,
        http: requests.Session | None = None,
        **kwargs,
    ) -> "Journal":
        """
        Open the journal on `start_date` (default today) with saved preferences.

        Without a local JSONBin key, the cloud credentials are fetched from
        the journal server; its bin id is only used when none is cached.
        """
        storage = storage or JsonFileStorage(config.storage_file, quota=config.storage_quota)
        store = EntryStore(storage)
        session = JournalSession.load(store, start_date or today(), config_bin_id=config.jsonbin_bin_id)
        server = BackupServerTarget(config.server_url, session=http, timeout=config.request_timeout)

        api_key = config.jsonbin_api_key
        if not api_key:
            try:
                remote = server.fetch_config()
            except (requests.RequestException, BackupServerError) as e:
                logger.debug(f"No cloud config from journal server (not running?): {e}")
            else:
                api_key = remote["apiKey"] or ""
                if not store.bin_id() and remote["binId"]:
                    session.bin_id = remote["binId"]

        def remember_bin(bin_id: str) -> None:
            session.bin_id = bin_id
            store.set_bin_id(bin_id)

        targets = [
            JsonBinTarget(
                api_key,
                bin_id=session.bin_id,
                on_bin_created=remember_bin,
                session=http,
                timeout=config.request_timeout,
            ),
            server,
        ]
        sync = BackupSync(storage, targets)

        journal = cls(store, session, sync, autosave_delay=config.autosave_delay, today=today, **kwargs)
        journal.navigator.load(session.active_date)
        journal.pending.start()
        return journal

    def save(self, backup: bool = True) -> None:
        """
        Explicit save. Raises StorageError if the local write fails.

        Backups run afterwards in the background and never delay the save.
        """
        self.navigator.save()
        if backup:
            self.backup_in_background()

    def backup_in_background(self) -> None:
        self.pending.scheduler.add_job(self.sync.backup, id="flipjournal-backup", replace_existing=True)

    def close(self) -> None:
        self.pending.shutdown()

    def __enter__(self) -> "Journal":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
