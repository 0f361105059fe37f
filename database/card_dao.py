import sqlite3
from typing import Optional
from database.db_manager import DatabaseManager
from models.card import Card
from utils.currency import to_money
from utils.errors import StorageError


class CardDAO:
    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> Card:
        return Card(
            id=row["id"],
            name=row["name"],
            limit_amount=to_money(row["limit_amount"]),
            closing_day=row["closing_day"],
            payment_day=row["payment_day"],
            created_at=row["created_at"],
        )

    def get_all(self) -> list[Card]:
        conn = self._db.get_connection()
        rows = conn.execute("SELECT * FROM cards ORDER BY name").fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_by_id(self, card_id: int) -> Optional[Card]:
        conn = self._db.get_connection()
        row = conn.execute("SELECT * FROM cards WHERE id = ?", (card_id,)).fetchone()
        return self._row_to_model(row) if row else None

    def get_by_name(self, name: str) -> Optional[Card]:
        """Case-insensitive lookup (the column is COLLATE NOCASE)."""
        conn = self._db.get_connection()
        row = conn.execute("SELECT * FROM cards WHERE name = ?", (name,)).fetchone()
        return self._row_to_model(row) if row else None

    def create(self, name: str, limit_amount, closing_day: int, payment_day: int) -> Card:
        conn = self._db.get_connection()
        with self._db.lock:
            cursor = conn.execute(
                """INSERT INTO cards(name, limit_amount, closing_day, payment_day)
                   VALUES (?, ?, ?, ?)""",
                (name, float(limit_amount), closing_day, payment_day),
            )
            conn.commit()
        return self.get_by_id(cursor.lastrowid)

    def update(
        self, card_id: int, name: str, limit_amount, closing_day: int, payment_day: int
    ) -> Card:
        conn = self._db.get_connection()
        with self._db.lock:
            conn.execute(
                """UPDATE cards SET name = ?, limit_amount = ?, closing_day = ?,
                   payment_day = ? WHERE id = ?""",
                (name, float(limit_amount), closing_day, payment_day, card_id),
            )
            conn.commit()
        return self.get_by_id(card_id)

    def has_expenses(self, card_id: int) -> bool:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT COUNT(*) AS cnt FROM expenses WHERE card_id = ?", (card_id,)
        ).fetchone()
        return row["cnt"] > 0

    def delete_cascade(self, card_id: int):
        """Drop the card's invoice notifications and invoices, detach its
        expenses, then delete the card. All or nothing."""
        conn = self._db.get_connection()
        with self._db.lock:
            try:
                conn.execute(
                    """DELETE FROM notifications
                       WHERE kind = 'invoice'
                         AND ref_id IN (SELECT id FROM invoices WHERE card_id = ?)""",
                    (card_id,),
                )
                conn.execute("DELETE FROM invoices WHERE card_id = ?", (card_id,))
                conn.execute(
                    """UPDATE expenses SET payment_method = 'manual', card_id = NULL
                       WHERE card_id = ?""",
                    (card_id,),
                )
                conn.execute("DELETE FROM cards WHERE id = ?", (card_id,))
                conn.commit()
            except sqlite3.Error as e:
                conn.rollback()
                raise StorageError(f"Could not delete card #{card_id}: {e}") from e
