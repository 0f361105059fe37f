from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from models.recurrence_rule import RecurrenceRule, Single


@dataclass
class Expense:
    id: int
    name: str
    amount: Decimal
    rule: RecurrenceRule = field(default_factory=Single)
    description: str = ""
    payment_method: str = "manual"   # 'manual' | 'auto-debit' | 'card'
    due_day: Optional[int] = None    # day of month for monthly/annual rules
    card_id: Optional[int] = None
    first_date: Optional[date] = None    # first occurrence; bounds invoice billing
    next_date: Optional[date] = None
    is_active: bool = True
    paid_at: Optional[datetime] = None
    status: str = "unpaid"           # 'unpaid' | 'paid'
    created_at: str = ""

    @property
    def is_card(self) -> bool:
        return self.payment_method == "card"

    @property
    def is_paid(self) -> bool:
        return self.status == "paid"
