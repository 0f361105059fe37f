from datetime import datetime, timedelta

from database.expense_dao import ExpenseDAO
from database.income_dao import IncomeDAO
from models.recurrence_rule import Single
from services.recurrence import next_occurrence
from utils.date_helpers import format_date
from utils.logger import get_logger

logger = get_logger(__name__)


class RolloverService:
    """Moves recurring incomes and expenses whose next date has passed onto
    their first occurrence on or after today.

    A rolled expense starts the new occurrence unpaid. Incomes past their end
    date are retired instead.
    """

    def __init__(self, expense_dao: ExpenseDAO, income_dao: IncomeDAO):
        self._expense_dao = expense_dao
        self._income_dao = income_dao

    def roll_forward(self, now: datetime) -> int:
        today = now.date()
        yesterday = today - timedelta(days=1)
        rolled = 0

        for expense in self._expense_dao.get_active():
            if isinstance(expense.rule, Single) or expense.next_date is None:
                continue
            if expense.next_date >= today:
                continue
            anchor = expense.first_date or expense.next_date
            next_date = next_occurrence(anchor, expense.rule, yesterday)
            self._expense_dao.update_fields(
                expense.id, next_date=format_date(next_date), status="unpaid", paid_at=None
            )
            rolled += 1
            logger.debug(f"Expense #{expense.id} rolled {expense.next_date} -> {next_date}")

        for income in self._income_dao.get_active():
            if isinstance(income.rule, Single) or income.next_date is None:
                continue
            if income.next_date >= today:
                continue
            next_date = next_occurrence(income.start_date, income.rule, yesterday)
            if income.end_date and next_date > income.end_date:
                self._income_dao.set_schedule(income.id, None, is_active=False)
                logger.info(f"Income #{income.id} '{income.name}' ended on {income.end_date}")
            else:
                self._income_dao.set_schedule(income.id, next_date)
            rolled += 1

        return rolled
