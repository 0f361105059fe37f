from dataclasses import dataclass
from datetime import date


@dataclass
class NotificationRecord:
    id: int
    kind: str           # 'income' | 'expense' | 'invoice'
    ref_id: int
    title: str
    due_date: date
    created_at: str
    is_read: bool = False

    @property
    def dedup_key(self) -> tuple[str, int, date]:
        return self.kind, self.ref_id, self.due_date

    @property
    def body(self) -> str:
        return f"Due {self.due_date.isoformat()}"
