from typing import Optional
from database.db_manager import DatabaseManager
from models.income import Income
from models.recurrence_rule import RecurrenceRule, rule_from_row, rule_to_columns
from utils.currency import to_money
from utils.date_helpers import parse_date, format_date


class IncomeDAO:
    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> Income:
        return Income(
            id=row["id"],
            name=row["name"],
            company=row["company"],
            amount=to_money(row["amount"]),
            rule=rule_from_row(row),
            start_date=parse_date(row["start_date"]),
            end_date=parse_date(row["end_date"]),
            next_date=parse_date(row["next_date"]),
            is_active=bool(row["is_active"]),
            status=row["status"],
            created_at=row["created_at"],
        )

    def get_all(self) -> list[Income]:
        conn = self._db.get_connection()
        rows = conn.execute("SELECT * FROM incomes ORDER BY id DESC").fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_active(self) -> list[Income]:
        conn = self._db.get_connection()
        rows = conn.execute(
            "SELECT * FROM incomes WHERE is_active = 1 ORDER BY id"
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_by_id(self, income_id: int) -> Optional[Income]:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT * FROM incomes WHERE id = ?", (income_id,)
        ).fetchone()
        return self._row_to_model(row) if row else None

    def create(
        self,
        name: str,
        company: str | None,
        amount,
        rule: RecurrenceRule,
        start_date,
        end_date=None,
        next_date=None,
    ) -> Income:
        cols = rule_to_columns(rule)
        conn = self._db.get_connection()
        with self._db.lock:
            cursor = conn.execute(
                """INSERT INTO incomes
                   (name, company, amount, recurrence, rec_weekday, rec_day, rec_month,
                    start_date, end_date, next_date)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                (
                    name, company, float(amount), cols["kind"], cols["weekday"],
                    cols["day"], cols["month"], format_date(start_date),
                    format_date(end_date), format_date(next_date),
                ),
            )
            conn.commit()
        return self.get_by_id(cursor.lastrowid)

    def update(
        self,
        income_id: int,
        name: str,
        company: str | None,
        amount,
        rule: RecurrenceRule,
        start_date,
        end_date=None,
        next_date=None,
        is_active: bool = True,
    ) -> Income:
        cols = rule_to_columns(rule)
        conn = self._db.get_connection()
        with self._db.lock:
            conn.execute(
                """UPDATE incomes SET
                   name=?, company=?, amount=?, recurrence=?, rec_weekday=?, rec_day=?,
                   rec_month=?, start_date=?, end_date=?, next_date=?, is_active=?
                   WHERE id=?""",
                (
                    name, company, float(amount), cols["kind"], cols["weekday"],
                    cols["day"], cols["month"], format_date(start_date),
                    format_date(end_date), format_date(next_date),
                    1 if is_active else 0, income_id,
                ),
            )
            conn.commit()
        return self.get_by_id(income_id)

    def set_schedule(self, income_id: int, next_date, is_active: bool = True):
        """Scheduler-owned update: move the next receive date, or retire the
        income once its end date has passed."""
        conn = self._db.get_connection()
        with self._db.lock:
            conn.execute(
                "UPDATE incomes SET next_date = ?, is_active = ? WHERE id = ?",
                (format_date(next_date), 1 if is_active else 0, income_id),
            )
            conn.commit()

    def set_status(self, income_id: int, status: str):
        conn = self._db.get_connection()
        with self._db.lock:
            conn.execute(
                "UPDATE incomes SET status = ? WHERE id = ?", (status, income_id)
            )
            conn.commit()

    def delete(self, income_id: int):
        conn = self._db.get_connection()
        with self._db.lock:
            conn.execute(
                "DELETE FROM notifications WHERE kind = 'income' AND ref_id = ?",
                (income_id,),
            )
            conn.execute("DELETE FROM incomes WHERE id = ?", (income_id,))
            conn.commit()
