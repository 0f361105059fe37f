from datetime import date

from database.income_dao import IncomeDAO
from models.income import Income
from models.recurrence_rule import RecurrenceRule, Single
from services.recurrence import first_on_or_after
from utils.constants import INCOME_STATUSES, MAX_NAME_LENGTH, MAX_COMPANY_LENGTH
from utils.date_helpers import today as _today
from utils.errors import NotFound, ValidationError
from utils.validation import require_text, optional_text, require_amount


class IncomeService:
    def __init__(self, income_dao: IncomeDAO):
        self._dao = income_dao

    def get_all(self) -> list[Income]:
        return self._dao.get_all()

    def get_by_id(self, income_id: int) -> Income:
        income = self._dao.get_by_id(income_id)
        if income is None:
            raise NotFound("Income", income_id)
        return income

    def create(
        self,
        name: str,
        amount,
        rule: RecurrenceRule,
        start_date: date,
        company: str | None = None,
        end_date: date | None = None,
        today: date | None = None,
    ) -> Income:
        name, company, amount = self._validate(name, company, amount, start_date, end_date)
        next_date = self.compute_next_date(rule, start_date, end_date, today)
        return self._dao.create(
            name=name, company=company, amount=amount, rule=rule,
            start_date=start_date, end_date=end_date, next_date=next_date,
        )

    def update(
        self,
        income_id: int,
        name: str,
        amount,
        rule: RecurrenceRule,
        start_date: date,
        company: str | None = None,
        end_date: date | None = None,
        is_active: bool = True,
        today: date | None = None,
    ) -> Income:
        self.get_by_id(income_id)
        name, company, amount = self._validate(name, company, amount, start_date, end_date)
        next_date = self.compute_next_date(rule, start_date, end_date, today)
        return self._dao.update(
            income_id=income_id, name=name, company=company, amount=amount, rule=rule,
            start_date=start_date, end_date=end_date, next_date=next_date,
            is_active=is_active,
        )

    def set_status(self, income_id: int, status: str) -> Income:
        if status not in INCOME_STATUSES:
            raise ValidationError(f"Status must be one of: {', '.join(INCOME_STATUSES)}.")
        self.get_by_id(income_id)
        self._dao.set_status(income_id, status)
        return self._dao.get_by_id(income_id)

    def confirm(self, income_id: int) -> Income:
        return self.set_status(income_id, "confirmed")

    def delete(self, income_id: int):
        self.get_by_id(income_id)
        self._dao.delete(income_id)

    @staticmethod
    def compute_next_date(
        rule: RecurrenceRule,
        start_date: date,
        end_date: date | None = None,
        today: date | None = None,
    ) -> date | None:
        """Next receive date on or after the start date, None once past end_date."""
        ref = today or _today()
        if isinstance(rule, Single):
            candidate = start_date
        else:
            candidate = first_on_or_after(start_date, rule, max(ref, start_date))
        if end_date and candidate and candidate > end_date:
            return None
        return candidate

    @staticmethod
    def _validate(name, company, amount, start_date, end_date):
        name = require_text(name, MAX_NAME_LENGTH)
        company = optional_text(company, MAX_COMPANY_LENGTH, "Company")
        amount = require_amount(amount)
        if not isinstance(start_date, date):
            raise ValidationError("Invalid start date.")
        if end_date is not None and end_date < start_date:
            raise ValidationError("End date cannot be before the start date.")
        return name, company, amount
