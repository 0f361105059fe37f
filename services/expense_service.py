from datetime import date, datetime

from database.card_dao import CardDAO
from database.expense_dao import ExpenseDAO
from models.expense import Expense
from models.recurrence_rule import RecurrenceRule, Single, Monthly, Annual
from services.recurrence import first_on_or_after
from utils.constants import PAYMENT_METHODS, MAX_NAME_LENGTH, MAX_DESCRIPTION_LENGTH
from utils.date_helpers import today as _today, now as _now, format_timestamp
from utils.errors import NotFound, ValidationError
from utils.validation import require_text, optional_text, require_amount


class ExpenseService:
    def __init__(self, expense_dao: ExpenseDAO, card_dao: CardDAO):
        self._dao = expense_dao
        self._card_dao = card_dao

    def get_all(self) -> list[Expense]:
        return self._dao.get_all()

    def get_by_id(self, expense_id: int) -> Expense:
        expense = self._dao.get_by_id(expense_id)
        if expense is None:
            raise NotFound("Expense", expense_id)
        return expense

    def create(
        self,
        name: str,
        amount,
        rule: RecurrenceRule,
        payment_method: str = "manual",
        card_id: int | None = None,
        due_date: date | None = None,
        description: str = "",
        today: date | None = None,
    ) -> Expense:
        fields = self._validate(name, description, amount, payment_method, card_id)
        next_date = self.compute_next_date(rule, due_date, today)
        return self._dao.create(
            rule=rule,
            due_day=self._due_day(rule),
            first_date=next_date,
            next_date=next_date,
            **fields,
        )

    def update(
        self,
        expense_id: int,
        name: str,
        amount,
        rule: RecurrenceRule,
        payment_method: str = "manual",
        card_id: int | None = None,
        due_date: date | None = None,
        description: str = "",
        today: date | None = None,
    ) -> Expense:
        self.get_by_id(expense_id)
        fields = self._validate(name, description, amount, payment_method, card_id)
        next_date = self.compute_next_date(rule, due_date, today)
        return self._dao.update(
            expense_id=expense_id,
            rule=rule,
            due_day=self._due_day(rule),
            first_date=next_date,
            next_date=next_date,
            **fields,
        )

    def mark_paid(self, expense_id: int, paid_at: datetime | None = None) -> Expense:
        self.get_by_id(expense_id)
        self._dao.update_fields(
            expense_id, paid_at=format_timestamp(paid_at or _now()), status="paid"
        )
        return self._dao.get_by_id(expense_id)

    def mark_unpaid(self, expense_id: int) -> Expense:
        expense = self.get_by_id(expense_id)
        fields = {"paid_at": None, "status": "unpaid"}
        if isinstance(expense.rule, Single):
            fields["is_active"] = True
        self._dao.update_fields(expense_id, **fields)
        return self._dao.get_by_id(expense_id)

    def delete(self, expense_id: int):
        self.get_by_id(expense_id)
        self._dao.delete(expense_id)

    @staticmethod
    def compute_next_date(
        rule: RecurrenceRule, due_date: date | None, today: date | None = None
    ) -> date | None:
        """Single rules keep the entered due date; recurring rules take the
        first occurrence on or after max(today, due_date)."""
        if isinstance(rule, Single):
            return due_date
        ref = today or _today()
        start = max(ref, due_date) if due_date else ref
        return first_on_or_after(due_date, rule, start)

    @staticmethod
    def _due_day(rule: RecurrenceRule) -> int | None:
        if isinstance(rule, (Monthly, Annual)):
            return rule.day
        return None

    def _validate(self, name, description, amount, payment_method, card_id) -> dict:
        name = require_text(name, MAX_NAME_LENGTH)
        description = optional_text(description, MAX_DESCRIPTION_LENGTH, "Description") or ""
        amount = require_amount(amount)
        if payment_method not in PAYMENT_METHODS:
            raise ValidationError(
                f"Invalid payment method '{payment_method}'. "
                f"Must be one of: {', '.join(PAYMENT_METHODS)}."
            )
        if payment_method == "card":
            if card_id is None:
                raise ValidationError("A card must be selected for card payments.")
            if self._card_dao.get_by_id(card_id) is None:
                raise NotFound("Card", card_id)
        elif card_id is not None:
            raise ValidationError("Only card payments can reference a card.")
        return {
            "name": name,
            "description": description,
            "amount": amount,
            "payment_method": payment_method,
            "card_id": card_id,
        }
