from datetime import date, datetime

import pytest

from models.recurrence_rule import Annual, Biweekly, Monthly, Single, Weekly
from services.expense_service import ExpenseService
from services.income_service import IncomeService
from utils.errors import NotFound, ValidationError

TODAY = date(2024, 3, 1)


class TestExpenseService:
    def test_create_monthly_expense(self, expenses):
        expense = expenses.create("Rent", "900.00", Monthly(10), today=TODAY)
        assert expense.next_date == date(2024, 3, 10)
        assert expense.due_day == 10
        assert expense.status == "unpaid"
        assert expense.is_active
        assert expense.rule == Monthly(10)

    def test_card_expense_requires_card(self, expenses):
        with pytest.raises(ValidationError):
            expenses.create("Phone", 50, Monthly(5), payment_method="card", today=TODAY)

    def test_card_expense_unknown_card(self, expenses):
        with pytest.raises(NotFound):
            expenses.create("Phone", 50, Monthly(5), payment_method="card", card_id=7,
                            today=TODAY)

    def test_card_only_for_card_payments(self, expenses, cards):
        card = cards.create("Visa", 1000, 10, 20)
        with pytest.raises(ValidationError):
            expenses.create("Phone", 50, Monthly(5), payment_method="auto-debit", card_id=card.id,
                            today=TODAY)

    @pytest.mark.parametrize("kwargs", [
        {"name": "  ", "amount": 10},
        {"name": "x" * 51, "amount": 10},
        {"name": "Rent", "amount": 0},
        {"name": "Rent", "amount": -5},
        {"name": "Rent", "amount": "1.234"},
        {"name": "Rent", "amount": 10, "payment_method": "cheque"},
        {"name": "Rent", "amount": 10, "description": "d" * 201},
    ])
    def test_invalid_expense(self, expenses, kwargs):
        with pytest.raises(ValidationError):
            expenses.create(rule=Monthly(1), today=TODAY, **kwargs)

    def test_mark_paid_and_unpaid(self, expenses):
        expense = expenses.create("Rent", 900, Monthly(10), today=TODAY)
        paid = expenses.mark_paid(expense.id, datetime(2024, 3, 10, 12, 0))
        assert paid.is_paid
        assert paid.paid_at == datetime(2024, 3, 10, 12, 0)
        assert not expenses.mark_unpaid(expense.id).is_paid

    def test_update_recomputes_next_date(self, expenses):
        expense = expenses.create("Gym", 80, Monthly(10), today=TODAY)
        updated = expenses.update(expense.id, "Gym", 80, Weekly(3), today=TODAY)
        assert updated.next_date == date(2024, 3, 6)
        assert updated.due_day is None

    def test_unknown_expense(self, expenses):
        with pytest.raises(NotFound):
            expenses.mark_paid(99)
        with pytest.raises(NotFound):
            expenses.delete(99)

    @pytest.mark.parametrize("rule, due, expected", [
        (Single(), date(2024, 2, 1), date(2024, 2, 1)),
        (Single(), None, None),
        (Monthly(31), None, date(2024, 3, 31)),
        (Monthly(1), date(2024, 5, 1), date(2024, 5, 1)),
        (Annual(2, 29), None, date(2025, 2, 28)),
        (Biweekly(5), date(2024, 2, 16), date(2024, 3, 1)),
    ])
    def test_compute_next_date(self, rule, due, expected):
        assert ExpenseService.compute_next_date(rule, due, TODAY) == expected


class TestIncomeService:
    def test_create_income(self, incomes):
        income = incomes.create("Salary", 3000, Monthly(5), start_date=date(2024, 1, 1),
                                company=" ACME ", today=TODAY)
        assert income.company == "ACME"
        assert income.next_date == date(2024, 3, 5)
        assert income.status == "pending"
        assert not income.is_confirmed

    def test_confirm(self, incomes):
        income = incomes.create("Salary", 3000, Monthly(5), start_date=TODAY, today=TODAY)
        assert incomes.confirm(income.id).is_confirmed

    def test_invalid_status(self, incomes):
        income = incomes.create("Salary", 3000, Monthly(5), start_date=TODAY, today=TODAY)
        with pytest.raises(ValidationError):
            incomes.set_status(income.id, "lost")

    def test_end_before_start(self, incomes):
        with pytest.raises(ValidationError):
            incomes.create("Gig", 100, Weekly(1), start_date=TODAY,
                           end_date=date(2024, 2, 1), today=TODAY)

    def test_unknown_income(self, incomes):
        with pytest.raises(NotFound):
            incomes.confirm(5)

    @pytest.mark.parametrize("rule, start, end, expected", [
        (Single(), date(2024, 1, 15), None, date(2024, 1, 15)),
        (Monthly(5), date(2024, 1, 1), None, date(2024, 3, 5)),
        (Monthly(5), date(2024, 4, 1), None, date(2024, 4, 5)),
        (Monthly(5), date(2024, 1, 1), date(2024, 3, 4), None),
        (Weekly(5), date(2024, 1, 1), None, date(2024, 3, 1)),
    ])
    def test_compute_next_date(self, rule, start, end, expected):
        assert IncomeService.compute_next_date(rule, start, end, TODAY) == expected
