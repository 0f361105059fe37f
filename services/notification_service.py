from datetime import datetime, timedelta
from typing import Protocol

from database.expense_dao import ExpenseDAO
from database.income_dao import IncomeDAO
from database.invoice_dao import InvoiceDAO
from database.notification_dao import NotificationDAO
from models.notification import NotificationRecord
from utils.date_helpers import format_timestamp
from utils.errors import DeliveryError
from utils.logger import get_logger

logger = get_logger(__name__)


class DeliveryChannel(Protocol):
    """Anything that can put a notification in front of the user.
    Raises DeliveryError when it cannot."""

    def show(self, title: str, body: str) -> None: ...


class LogChannel:
    """Delivery channel that only writes to the log (headless runs)."""

    def show(self, title: str, body: str) -> None:
        logger.info(f"[notification] {title}: {body}")


class NotificationService:
    def __init__(
        self,
        notification_dao: NotificationDAO,
        expense_dao: ExpenseDAO,
        invoice_dao: InvoiceDAO,
        income_dao: IncomeDAO,
        channel: DeliveryChannel | None = None,
    ):
        self._dao = notification_dao
        self._expense_dao = expense_dao
        self._invoice_dao = invoice_dao
        self._income_dao = income_dao
        self.channel: DeliveryChannel = channel or LogChannel()

    def list_notifications(self) -> list[NotificationRecord]:
        return self._dao.get_all()

    def unread_count(self) -> int:
        return self._dao.count(unread_only=True)

    def mark_all_read(self):
        self._dao.mark_all_read()

    # ── Queueing ──────────────────────────────────────────────────────────────

    def queue_upcoming(
        self, now: datetime, horizon_days: int, include_incomes: bool = False
    ) -> int:
        """Insert a record for every obligation due in [today, today + horizon].
        Existing records for the same (kind, ref_id, due_date) are left alone,
        read or not. Returns how many were inserted."""
        today = now.date()
        horizon = today + timedelta(days=horizon_days)
        created_at = format_timestamp(now)
        queued = 0

        for kind, ref_id, title, due in self._candidates(include_incomes):
            if due is None or not today <= due <= horizon:
                continue
            if self._dao.insert_if_absent(kind, ref_id, title, due, created_at):
                queued += 1
                logger.debug(f"Queued {kind} #{ref_id} due {due}")
        return queued

    def _candidates(self, include_incomes: bool):
        for expense in self._expense_dao.get_active():
            if expense.paid_at is None and not expense.is_paid:
                yield "expense", expense.id, expense.name, expense.next_date
        for invoice in self._invoice_dao.get_unpaid():
            title = f"Card invoice · {invoice.card_name}" if invoice.card_name else "Card invoice"
            yield "invoice", invoice.id, title, invoice.due_date
        if include_incomes:
            for income in self._income_dao.get_active():
                yield "income", income.id, income.name, income.next_date

    # ── Delivery ──────────────────────────────────────────────────────────────

    def flush(self, limit: int) -> int:
        """Deliver up to `limit` unread records, newest first, and mark each read.

        A record is consumed even when delivery fails (at-most-once), so a dead
        display channel can never wedge the queue. Returns records consumed.
        """
        consumed = 0
        for record in self._dao.get_unread(limit):
            self.deliver(record)
            self._dao.mark_read(record.id)
            consumed += 1
        return consumed

    def deliver(self, record: NotificationRecord) -> bool:
        """Show one record on the channel. Returns False if the channel failed."""
        try:
            self.channel.show(record.title, record.body)
            return True
        except DeliveryError as e:
            logger.warning(f"Could not deliver notification #{record.id}: {e}")
        except Exception as e:
            logger.warning(
                f"Notification channel failed for #{record.id}: {type(e).__name__}: {e}"
            )
        return False
