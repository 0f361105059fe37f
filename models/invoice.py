from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional


@dataclass
class Invoice:
    id: int
    card_id: int
    year: int
    month: int              # 1-12
    closing_date: date
    due_date: date
    total_amount: Decimal
    is_paid: bool = False
    paid_at: Optional[datetime] = None
    card_name: str = ""

    @property
    def period(self) -> tuple[int, int]:
        return self.year, self.month
