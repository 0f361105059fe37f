from typing import Optional
from database.db_manager import DatabaseManager
from models.expense import Expense
from models.recurrence_rule import RecurrenceRule, rule_from_row, rule_to_columns
from utils.currency import to_money
from utils.date_helpers import parse_date, format_date, parse_timestamp

# Columns update_fields() may touch.
_UPDATABLE = {"next_date", "is_active", "paid_at", "status", "payment_method", "card_id"}


class ExpenseDAO:
    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> Expense:
        return Expense(
            id=row["id"],
            name=row["name"],
            description=row["description"],
            amount=to_money(row["amount"]),
            rule=rule_from_row(row),
            payment_method=row["payment_method"],
            due_day=row["due_day"],
            card_id=row["card_id"],
            first_date=parse_date(row["first_date"]),
            next_date=parse_date(row["next_date"]),
            is_active=bool(row["is_active"]),
            paid_at=parse_timestamp(row["paid_at"]),
            status=row["status"],
            created_at=row["created_at"],
        )

    def get_all(self) -> list[Expense]:
        conn = self._db.get_connection()
        rows = conn.execute("SELECT * FROM expenses ORDER BY id DESC").fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_active(self) -> list[Expense]:
        conn = self._db.get_connection()
        rows = conn.execute(
            "SELECT * FROM expenses WHERE is_active = 1 ORDER BY id"
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_by_id(self, expense_id: int) -> Optional[Expense]:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT * FROM expenses WHERE id = ?", (expense_id,)
        ).fetchone()
        return self._row_to_model(row) if row else None

    def get_billable_for_card(self, card_id: int) -> list[Expense]:
        """Card expenses that still count towards invoices: active ones, plus
        single expenses that were paid or auto-settled."""
        conn = self._db.get_connection()
        rows = conn.execute(
            """SELECT * FROM expenses
               WHERE payment_method = 'card' AND card_id = ?
                 AND (is_active = 1 OR (recurrence = 'single' AND paid_at IS NOT NULL))
               ORDER BY id""",
            (card_id,),
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def create(
        self,
        name: str,
        description: str,
        amount,
        rule: RecurrenceRule,
        payment_method: str,
        due_day: int | None = None,
        card_id: int | None = None,
        first_date=None,
        next_date=None,
    ) -> Expense:
        cols = rule_to_columns(rule)
        conn = self._db.get_connection()
        with self._db.lock:
            cursor = conn.execute(
                """INSERT INTO expenses
                   (name, description, amount, recurrence, rec_weekday, rec_day, rec_month,
                    payment_method, due_day, card_id, first_date, next_date)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                (
                    name, description, float(amount), cols["kind"], cols["weekday"],
                    cols["day"], cols["month"], payment_method, due_day, card_id,
                    format_date(first_date), format_date(next_date),
                ),
            )
            conn.commit()
        return self.get_by_id(cursor.lastrowid)

    def update(
        self,
        expense_id: int,
        name: str,
        description: str,
        amount,
        rule: RecurrenceRule,
        payment_method: str,
        due_day: int | None = None,
        card_id: int | None = None,
        first_date=None,
        next_date=None,
    ) -> Expense:
        cols = rule_to_columns(rule)
        conn = self._db.get_connection()
        with self._db.lock:
            conn.execute(
                """UPDATE expenses SET
                   name=?, description=?, amount=?, recurrence=?, rec_weekday=?,
                   rec_day=?, rec_month=?, payment_method=?, due_day=?, card_id=?,
                   first_date=?, next_date=?
                   WHERE id=?""",
                (
                    name, description, float(amount), cols["kind"], cols["weekday"],
                    cols["day"], cols["month"], payment_method, due_day, card_id,
                    format_date(first_date), format_date(next_date), expense_id,
                ),
            )
            conn.commit()
        return self.get_by_id(expense_id)

    def update_fields(self, expense_id: int, **fields):
        """Partial update of scheduler-owned columns (next_date, paid_at, ...)."""
        unknown = set(fields) - _UPDATABLE
        if unknown:
            raise ValueError(f"Cannot update expense columns: {', '.join(sorted(unknown))}")
        if not fields:
            return
        assignments = ", ".join(f"{col} = ?" for col in fields)
        values = [
            1 if v is True else 0 if v is False else v
            for v in fields.values()
        ]
        conn = self._db.get_connection()
        with self._db.lock:
            conn.execute(
                f"UPDATE expenses SET {assignments} WHERE id = ?",
                (*values, expense_id),
            )
            conn.commit()

    def delete(self, expense_id: int):
        conn = self._db.get_connection()
        with self._db.lock:
            conn.execute(
                "DELETE FROM notifications WHERE kind = 'expense' AND ref_id = ?",
                (expense_id,),
            )
            conn.execute("DELETE FROM expenses WHERE id = ?", (expense_id,))
            conn.commit()
