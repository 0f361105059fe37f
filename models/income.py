from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Optional

from models.recurrence_rule import RecurrenceRule, Single


@dataclass
class Income:
    id: int
    name: str
    amount: Decimal
    start_date: date
    rule: RecurrenceRule = field(default_factory=Single)
    company: Optional[str] = None
    end_date: Optional[date] = None
    next_date: Optional[date] = None
    is_active: bool = True
    status: str = "pending"     # 'pending' | 'confirmed'
    created_at: str = ""

    @property
    def is_confirmed(self) -> bool:
        return self.status == "confirmed"
