"""Periodic driver for the rollover → invoice → notification → settlement tick."""
import sqlite3
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from services.invoice_service import InvoiceService
from services.notification_service import NotificationService
from services.rollover_service import RolloverService
from services.settings_service import SettingsService
from services.settlement_service import SettlementService
from utils.errors import StorageError
from utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class TickResult:
    started_at: datetime
    dates_rolled: int = 0
    invoices_created: int = 0
    invoice_totals_changed: int = 0
    notifications_queued: int = 0
    expenses_settled: int = 0
    completed: bool = False

    def summary(self) -> str:
        return (
            f"rolled {self.dates_rolled}, "
            f"invoices +{self.invoices_created} (totals changed {self.invoice_totals_changed}), "
            f"notifications +{self.notifications_queued}, settled {self.expenses_settled}"
        )


class Scheduler:
    """Owns the tick loop.

    `run_tick(now)` can be called directly with a synthetic clock; `start()`
    runs it on a daemon thread every `tick_interval_minutes`, or sooner when
    `wake()` is called. Ticks never overlap: a tick requested while another
    is running is skipped.
    """

    def __init__(
        self,
        invoice_service: InvoiceService,
        notification_service: NotificationService,
        settlement_service: SettlementService,
        rollover_service: RolloverService,
        settings: SettingsService,
        clock: Callable[[], datetime] = datetime.now,
        on_tick: Callable[[TickResult], None] | None = None,
    ):
        self._invoices = invoice_service
        self._notifications = notification_service
        self._settlement = settlement_service
        self._rollover = rollover_service
        self._settings = settings
        self._clock = clock
        self._on_tick = on_tick
        self._tick_lock = threading.Lock()
        self._stop_event = threading.Event()
        self._wake_event = threading.Event()
        self._thread: threading.Thread | None = None
        self.last_result: TickResult | None = None

    # ── Tick ─────────────────────────────────────────────────────────────────

    def run_tick(self, now: datetime | None = None) -> TickResult | None:
        """Run one tick. Returns None if another tick was already running.

        A storage failure aborts the remaining steps; the result then has
        completed=False and the next tick starts over.
        """
        if not self._tick_lock.acquire(blocking=False):
            logger.warning("Tick skipped: previous tick still running")
            return None
        try:
            now = now or self._clock()
            result = TickResult(started_at=now)
            try:
                # Dates roll first so invoices and reminders see current occurrences.
                result.dates_rolled = self._rollover.roll_forward(now)
                result.invoices_created = self._invoices.ensure_current_invoices(now.date())
                result.invoice_totals_changed = self._invoices.refresh_totals()
                result.notifications_queued = self._notifications.queue_upcoming(
                    now,
                    self._settings.horizon_days,
                    include_incomes=self._settings.income_reminders,
                )
                result.expenses_settled = self._settlement.settle_due(now)
                result.completed = True
                logger.info(f"Tick {now:%Y-%m-%d %H:%M} done: {result.summary()}")
            except (StorageError, sqlite3.Error):
                logger.exception(f"Tick {now:%Y-%m-%d %H:%M} aborted by a storage error")
            self.last_result = result
            return result
        finally:
            self._tick_lock.release()

    def deliver_pending(self) -> int:
        """Flush unread notifications to the delivery channel."""
        if not self._settings.notifications_enabled:
            return 0
        try:
            return self._notifications.flush(self._settings.flush_limit)
        except (StorageError, sqlite3.Error):
            logger.exception("Notification flush aborted by a storage error")
            return 0

    # ── Lifecycle ────────────────────────────────────────────────────────────

    def set_on_tick(self, callback: Callable[[TickResult], None] | None):
        self._on_tick = callback

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self):
        if self.running:
            return
        self._stop_event.clear()
        self._wake_event.clear()
        self._thread = threading.Thread(target=self._loop, name="scheduler", daemon=True)
        self._thread.start()
        logger.info(
            f"Scheduler started (every {self._settings.tick_interval_seconds / 60:.0f} min)"
        )

    def wake(self) -> bool:
        """Ask the loop thread to tick now. Returns False if it is not running."""
        if not self.running:
            return False
        self._wake_event.set()
        return True

    def stop(self, timeout: float | None = 5.0):
        self._stop_event.set()
        self._wake_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        logger.info("Scheduler stopped")

    def _loop(self):
        while not self._stop_event.is_set():
            try:
                result = self.run_tick()
                self.deliver_pending()
                if result is not None and self._on_tick:
                    self._on_tick(result)
            except Exception:
                # Keep the loop alive no matter what a single pass does.
                logger.exception("Unexpected error in scheduler loop")
            self._wake_event.wait(self._settings.tick_interval_seconds)
            self._wake_event.clear()
