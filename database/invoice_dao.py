from typing import Optional
from database.db_manager import DatabaseManager
from models.invoice import Invoice
from utils.currency import to_money
from utils.date_helpers import parse_date, format_date, parse_timestamp


class InvoiceDAO:
    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> Invoice:
        return Invoice(
            id=row["id"],
            card_id=row["card_id"],
            year=row["year"],
            month=row["month"],
            closing_date=parse_date(row["closing_date"]),
            due_date=parse_date(row["due_date"]),
            total_amount=to_money(row["total_amount"]),
            is_paid=bool(row["paid"]),
            paid_at=parse_timestamp(row["paid_at"]),
            card_name=row["card_name"] if "card_name" in row.keys() else "",
        )

    def _select(self) -> str:
        return """
            SELECT i.*, c.name AS card_name
            FROM invoices i
            JOIN cards c ON i.card_id = c.id
        """

    def get_all(self, card_id: int | None = None) -> list[Invoice]:
        conn = self._db.get_connection()
        order = " ORDER BY i.year DESC, i.month DESC, c.name"
        if card_id is None:
            rows = conn.execute(self._select() + order).fetchall()
        else:
            rows = conn.execute(
                self._select() + " WHERE i.card_id = ?" + order, (card_id,)
            ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_unpaid(self) -> list[Invoice]:
        conn = self._db.get_connection()
        rows = conn.execute(
            self._select() + " WHERE i.paid = 0 ORDER BY i.due_date"
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_by_id(self, invoice_id: int) -> Optional[Invoice]:
        conn = self._db.get_connection()
        row = conn.execute(
            self._select() + " WHERE i.id = ?", (invoice_id,)
        ).fetchone()
        return self._row_to_model(row) if row else None

    def get_for_period(self, card_id: int, year: int, month: int) -> Optional[Invoice]:
        conn = self._db.get_connection()
        row = conn.execute(
            self._select() + " WHERE i.card_id = ? AND i.year = ? AND i.month = ?",
            (card_id, year, month),
        ).fetchone()
        return self._row_to_model(row) if row else None

    def count(self) -> int:
        conn = self._db.get_connection()
        return conn.execute("SELECT COUNT(*) FROM invoices").fetchone()[0]

    def insert_if_absent(
        self, card_id: int, year: int, month: int, closing_date, due_date
    ) -> bool:
        """Create an empty invoice for (card, year, month). Returns True if a row
        was inserted, False if the period already had one."""
        conn = self._db.get_connection()
        with self._db.lock:
            cursor = conn.execute(
                """INSERT OR IGNORE INTO invoices
                   (card_id, year, month, closing_date, due_date, total_amount, paid)
                   VALUES (?, ?, ?, ?, ?, 0, 0)""",
                (card_id, year, month, format_date(closing_date), format_date(due_date)),
            )
            conn.commit()
        return cursor.rowcount == 1

    def update_total(self, invoice_id: int, total):
        conn = self._db.get_connection()
        with self._db.lock:
            conn.execute(
                "UPDATE invoices SET total_amount = ? WHERE id = ?",
                (float(total), invoice_id),
            )
            conn.commit()

    def mark_paid(self, invoice_id: int, paid_at: str):
        conn = self._db.get_connection()
        with self._db.lock:
            conn.execute(
                "UPDATE invoices SET paid = 1, paid_at = ? WHERE id = ?",
                (paid_at, invoice_id),
            )
            conn.commit()
