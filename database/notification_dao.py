from typing import Optional
from database.db_manager import DatabaseManager
from models.notification import NotificationRecord
from utils.date_helpers import parse_date, format_date


class NotificationDAO:
    """Notification records, unique per (kind, ref_id, due_date)."""

    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> NotificationRecord:
        return NotificationRecord(
            id=row["id"],
            kind=row["kind"],
            ref_id=row["ref_id"],
            title=row["title"],
            due_date=parse_date(row["due_date"]),
            created_at=row["created_at"],
            is_read=bool(row["read"]),
        )

    def get_all(self) -> list[NotificationRecord]:
        conn = self._db.get_connection()
        rows = conn.execute(
            "SELECT * FROM notifications ORDER BY created_at DESC, id DESC"
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_unread(self, limit: int) -> list[NotificationRecord]:
        conn = self._db.get_connection()
        rows = conn.execute(
            """SELECT * FROM notifications WHERE read = 0
               ORDER BY created_at DESC, id DESC LIMIT ?""",
            (limit,),
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def count(self, unread_only: bool = False) -> int:
        conn = self._db.get_connection()
        sql = "SELECT COUNT(*) FROM notifications"
        if unread_only:
            sql += " WHERE read = 0"
        return conn.execute(sql).fetchone()[0]

    def find(self, kind: str, ref_id: int, due_date) -> Optional[NotificationRecord]:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT * FROM notifications WHERE kind = ? AND ref_id = ? AND due_date = ?",
            (kind, ref_id, format_date(due_date)),
        ).fetchone()
        return self._row_to_model(row) if row else None

    def insert_if_absent(
        self, kind: str, ref_id: int, title: str, due_date, created_at: str
    ) -> bool:
        """Conditional insert on the dedup key. A read record for the same key
        blocks re-insertion too. Returns True if a row was inserted."""
        conn = self._db.get_connection()
        with self._db.lock:
            cursor = conn.execute(
                """INSERT OR IGNORE INTO notifications
                   (kind, ref_id, title, due_date, created_at, read)
                   VALUES (?, ?, ?, ?, ?, 0)""",
                (kind, ref_id, title, format_date(due_date), created_at),
            )
            conn.commit()
        return cursor.rowcount == 1

    def mark_read(self, notification_id: int):
        conn = self._db.get_connection()
        with self._db.lock:
            conn.execute(
                "UPDATE notifications SET read = 1 WHERE id = ?", (notification_id,)
            )
            conn.commit()

    def mark_all_read(self):
        conn = self._db.get_connection()
        with self._db.lock:
            conn.execute("UPDATE notifications SET read = 1 WHERE read = 0")
            conn.commit()
