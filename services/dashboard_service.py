import math
from decimal import Decimal

from database.card_dao import CardDAO
from database.expense_dao import ExpenseDAO
from database.income_dao import IncomeDAO
from database.invoice_dao import InvoiceDAO
from models.dashboard import CardUsage, DashboardSnapshot, DistributionItem
from models.expense import Expense
from models.recurrence_rule import RECURRENCE_KINDS
from utils.constants import SAVING_RATE_TARGET, CREDIT_USE_CEILING, SUGGESTIONS
from utils.currency import ZERO


def _total(items) -> Decimal:
    return sum((i.amount for i in items), ZERO)


def percentage(part: Decimal, whole: Decimal) -> int:
    """floor(part / whole * 100) clamped to [0, 100]; 0 when whole is 0."""
    if whole <= 0:
        return 0
    return max(0, min(100, math.floor(part / whole * 100)))


def suggestions_for(saving_rate: int, credit_use: int, balance: Decimal) -> list[str]:
    suggestions = []
    if saving_rate < SAVING_RATE_TARGET:
        suggestions.append(SUGGESTIONS["saving_rate"])
    if credit_use > CREDIT_USE_CEILING:
        suggestions.append(SUGGESTIONS["credit_use"])
    if balance < 0:
        suggestions.append(SUGGESTIONS["balance"])
    return suggestions or [SUGGESTIONS["default"]]


class DashboardService:
    """Read-only figures for the dashboard. Safe to call while a tick runs."""

    def __init__(
        self,
        income_dao: IncomeDAO,
        expense_dao: ExpenseDAO,
        card_dao: CardDAO,
        invoice_dao: InvoiceDAO,
    ):
        self._income_dao = income_dao
        self._expense_dao = expense_dao
        self._card_dao = card_dao
        self._invoice_dao = invoice_dao

    def compute(self) -> DashboardSnapshot:
        incomes = self._income_dao.get_all()
        expenses = self._expense_dao.get_all()
        cards = self._card_dao.get_all()

        total_income = _total(incomes)
        total_expense = _total(expenses)
        balance = (
            _total(i for i in incomes if i.is_confirmed)
            - _total(e for e in expenses if e.is_paid)
        )

        unpaid_card = [e for e in expenses if e.is_card and not e.is_paid]
        total_limits = sum((c.limit_amount for c in cards), ZERO)

        saving_rate = percentage(total_income - total_expense, total_income)
        credit_use = percentage(_total(unpaid_card), total_limits)

        return DashboardSnapshot(
            balance=balance,
            monthly_projection=total_income - total_expense,
            total_income=total_income,
            total_expense=total_expense,
            open_invoices_total=sum(
                (i.total_amount for i in self._invoice_dao.get_unpaid()), ZERO
            ),
            saving_rate=saving_rate,
            credit_use=credit_use,
            distribution=self._distribution(expenses),
            suggestions=suggestions_for(saving_rate, credit_use, balance),
            cards_usage=[
                CardUsage(
                    card_id=c.id,
                    name=c.name,
                    limit=c.limit_amount,
                    used=_total(e for e in unpaid_card if e.card_id == c.id),
                )
                for c in cards
            ],
            empty=not (incomes or expenses or cards),
        )

    @staticmethod
    def _distribution(expenses: list[Expense]) -> list[DistributionItem]:
        by_kind: dict[str, Decimal] = {}
        for e in expenses:
            by_kind[e.rule.kind] = by_kind.get(e.rule.kind, ZERO) + e.amount
        return [
            DistributionItem(kind=k, amount=by_kind[k])
            for k in RECURRENCE_KINDS if k in by_kind
        ]
