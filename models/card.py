from dataclasses import dataclass
from decimal import Decimal


@dataclass
class Card:
    id: int
    name: str
    limit_amount: Decimal
    closing_day: int    # 1-31, clamped to month length
    payment_day: int    # 1-31, always > closing_day
    created_at: str = ""
