from datetime import date, datetime
from decimal import Decimal

from database.card_dao import CardDAO
from database.expense_dao import ExpenseDAO
from database.invoice_dao import InvoiceDAO
from models.card import Card
from models.expense import Expense
from models.invoice import Invoice
from services.recurrence import occurrences_between
from utils.currency import ZERO
from utils.date_helpers import clamped_date, first_of_month, format_timestamp, now as _now
from utils.errors import ConstraintViolation, NotFound
from utils.logger import get_logger

logger = get_logger(__name__)


def billing_period(card: Card, ref: date) -> tuple[int, int, date, date]:
    """(year, month, closing_date, due_date) of the card's invoice for ref's month.

    Closing and payment days are clamped to the month length.
    """
    closing = clamped_date(ref.year, ref.month, card.closing_day)
    due = clamped_date(ref.year, ref.month, card.payment_day)
    return closing.year, closing.month, closing, due


class InvoiceService:
    """Keeps one invoice per (card, billing month) and its total in sync with
    the card's expenses."""

    def __init__(self, invoice_dao: InvoiceDAO, card_dao: CardDAO, expense_dao: ExpenseDAO):
        self._dao = invoice_dao
        self._card_dao = card_dao
        self._expense_dao = expense_dao

    def list_invoices(self, card_id: int | None = None) -> list[Invoice]:
        return self._dao.get_all(card_id)

    def get_by_id(self, invoice_id: int) -> Invoice:
        invoice = self._dao.get_by_id(invoice_id)
        if invoice is None:
            raise NotFound("Invoice", invoice_id)
        return invoice

    def ensure_current_invoices(self, ref: date) -> int:
        """Create the current-period invoice for every card that lacks one.
        Returns how many were created."""
        created = 0
        for card in self._card_dao.get_all():
            year, month, closing, due = billing_period(card, ref)
            if self._dao.insert_if_absent(card.id, year, month, closing, due):
                created += 1
                logger.info(f"Opened invoice {year}-{month:02d} for card '{card.name}'")
        return created

    def refresh_totals(self) -> int:
        """Recompute every unpaid invoice total from scratch. Returns how many changed.

        A card expense adds its amount once per occurrence between the first
        of the billing month and the closing date. Occurrences before the
        expense's first date are not billed. Paid invoices keep their total.
        """
        changed = 0
        billable: dict[int, list[Expense]] = {}
        for invoice in self._dao.get_unpaid():
            if invoice.card_id not in billable:
                billable[invoice.card_id] = self._expense_dao.get_billable_for_card(invoice.card_id)
            total = sum(
                (self._billed_amount(e, invoice) for e in billable[invoice.card_id]), ZERO
            )
            if total != invoice.total_amount:
                changed += 1
            # Always written, so the stored value never drifts from the expenses.
            self._dao.update_total(invoice.id, total)
        return changed

    @staticmethod
    def _billed_amount(expense: Expense, invoice: Invoice) -> Decimal:
        anchor = expense.first_date or expense.next_date
        start = first_of_month(invoice.closing_date)
        if anchor and anchor > start:
            start = anchor
        count = len(occurrences_between(anchor, expense.rule, start, invoice.closing_date))
        return expense.amount * count

    def pay_invoice(self, invoice_id: int, paid_at: datetime | None = None) -> Invoice:
        """Mark an invoice paid. The card's expenses keep their own paid status."""
        invoice = self.get_by_id(invoice_id)
        if invoice.is_paid:
            raise ConstraintViolation(f"Invoice #{invoice_id} is already paid.")
        self._dao.mark_paid(invoice_id, format_timestamp(paid_at or _now()))
        logger.info(
            f"Paid invoice #{invoice_id} ({invoice.card_name} "
            f"{invoice.year}-{invoice.month:02d}, {invoice.total_amount})"
        )
        return self._dao.get_by_id(invoice_id)
