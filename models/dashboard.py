from dataclasses import dataclass, field
from decimal import Decimal


@dataclass
class DistributionItem:
    kind: str
    amount: Decimal


@dataclass
class CardUsage:
    card_id: int
    name: str
    limit: Decimal
    used: Decimal

    @property
    def available(self) -> Decimal:
        return max(Decimal("0.00"), self.limit - self.used)


@dataclass
class DashboardSnapshot:
    balance: Decimal
    monthly_projection: Decimal
    total_income: Decimal
    total_expense: Decimal
    open_invoices_total: Decimal
    saving_rate: int
    credit_use: int
    distribution: list[DistributionItem] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)
    cards_usage: list[CardUsage] = field(default_factory=list)
    empty: bool = True
