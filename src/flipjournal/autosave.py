"""Debounced auto-save as an explicit pending write."""

import logging
import threading
from datetime import datetime, timedelta
from typing import Callable

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.background import BackgroundScheduler

logger = logging.getLogger(__name__)

JOB_ID = "flipjournal-autosave"


class PendingWrite:
    """
    Coalesces rapid edits into one write.

    Each schedule() re-arms a one-shot job `delay` seconds out, so the write
    runs once input has paused. flush() runs a pending write immediately and
    returns after it has completed.
    """

    def __init__(
        self,
        write: Callable[[], None],
        delay: float = 1.5,
        scheduler: BackgroundScheduler | None = None,
        on_error: Callable[[Exception], None] | None = None,
    ):
        self._write = write
        self.delay = delay
        self.on_error = on_error
        self._owns_scheduler = scheduler is None
        self.scheduler = scheduler or BackgroundScheduler(daemon=True)
        self.lock = threading.RLock()
        self._pending = False

    @property
    def pending(self) -> bool:
        return self._pending

    def start(self) -> None:
        if not self.scheduler.running:
            self.scheduler.start()

    def schedule(self) -> None:
        """Mark a write as pending, resetting the timer."""
        with self.lock:
            self._pending = True
            self.scheduler.add_job(
                self._fire,
                "date",
                run_date=datetime.now() + timedelta(seconds=self.delay),
                id=JOB_ID,
                replace_existing=True,
                misfire_grace_time=None,
            )

    def _remove_job(self) -> None:
        try:
            self.scheduler.remove_job(JOB_ID)
        except JobLookupError:
            pass

    def cancel(self) -> None:
        """Drop the pending write without running it."""
        with self.lock:
            self._pending = False
            self._remove_job()

    def _fire(self) -> None:
        with self.lock:
            if not self._pending:
                return
            self._pending = False
            try:
                self._write()
            except Exception as e:
                logger.exception("Auto-save failed")
                if self.on_error:
                    self.on_error(e)

    def flush(self) -> bool:
        """
        Run the pending write now, if any.

        Errors propagate to the caller. Returns True if a write ran.
        """
        with self.lock:
            if not self._pending:
                return False
            self._pending = False
            self._remove_job()
            self._write()
            return True

    def shutdown(self) -> None:
        """Flush, then stop the scheduler if this object started it."""
        try:
            self.flush()
        finally:
            if self._owns_scheduler and self.scheduler.running:
                self.scheduler.shutdown(wait=False)
