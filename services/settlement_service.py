from datetime import datetime

from database.expense_dao import ExpenseDAO
from models.recurrence_rule import Single
from utils.date_helpers import format_timestamp
from utils.logger import get_logger

logger = get_logger(__name__)


class SettlementService:
    """Closes one-time expenses once their due date has arrived.

    A settled expense is recorded as paid at `now` and deactivated; recurring
    expenses are never touched here.
    """

    def __init__(self, expense_dao: ExpenseDAO):
        self._dao = expense_dao

    def settle_due(self, now: datetime) -> int:
        today = now.date()
        paid_at = format_timestamp(now)
        settled = 0
        for expense in self._dao.get_active():
            if not isinstance(expense.rule, Single):
                continue
            if expense.next_date is None or expense.paid_at is not None:
                continue
            if expense.next_date <= today:
                self._dao.update_fields(
                    expense.id, paid_at=paid_at, is_active=False, status="paid"
                )
                settled += 1
                logger.info(f"Auto-settled expense #{expense.id} '{expense.name}' due {expense.next_date}")
        return settled
