import os
import sqlite3
import threading

from utils.constants import (
    DB_FILE, TICK_INTERVAL_MINUTES, UPCOMING_REMINDER_DAYS, NOTIFICATION_FLUSH_LIMIT,
)
from utils.errors import StorageError
from utils.logger import get_logger

logger = get_logger(__name__)


class DatabaseManager:
    def __init__(self, db_path: str | None = None):
        self.db_path = db_path or DB_FILE
        self._conn: sqlite3.Connection | None = None
        # Serializes write+commit pairs coming from the scheduler thread and the UI thread.
        self.lock = threading.RLock()

    def get_connection(self) -> sqlite3.Connection:
        if self._conn is None:
            try:
                self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
                self._conn.row_factory = sqlite3.Row
                self._conn.execute("PRAGMA foreign_keys = ON")
                if self.db_path != ":memory:":
                    self._conn.execute("PRAGMA journal_mode = WAL")
            except sqlite3.Error as e:
                self._conn = None
                logger.error(f"Failed to open database {self.db_path}: {e}")
                raise StorageError(f"Cannot open database: {e}") from e
        return self._conn

    def initialize(self):
        """Create schema and seed defaults."""
        conn = self.get_connection()
        with self.lock:
            self._create_schema(conn)
            self._seed_defaults(conn)
            conn.commit()
        logger.info(f"Database ready at {self.db_path}")

    def _create_schema(self, conn: sqlite3.Connection):
        conn.executescript("""
            CREATE TABLE IF NOT EXISTS incomes (
                id          INTEGER PRIMARY KEY AUTOINCREMENT,
                name        TEXT NOT NULL,
                company     TEXT,
                amount      REAL NOT NULL CHECK(amount > 0),
                recurrence  TEXT NOT NULL CHECK(recurrence IN
                                ('single','weekly','biweekly','monthly','annual')),
                rec_weekday INTEGER,
                rec_day     INTEGER,
                rec_month   INTEGER,
                start_date  TEXT NOT NULL,
                end_date    TEXT,
                next_date   TEXT,
                is_active   INTEGER NOT NULL DEFAULT 1,
                status      TEXT NOT NULL DEFAULT 'pending'
                                CHECK(status IN ('pending','confirmed')),
                created_at  TEXT NOT NULL DEFAULT (datetime('now'))
            );

            CREATE TABLE IF NOT EXISTS cards (
                id           INTEGER PRIMARY KEY AUTOINCREMENT,
                name         TEXT NOT NULL UNIQUE COLLATE NOCASE,
                limit_amount REAL NOT NULL CHECK(limit_amount >= 0),
                closing_day  INTEGER NOT NULL CHECK(closing_day BETWEEN 1 AND 31),
                payment_day  INTEGER NOT NULL CHECK(payment_day BETWEEN 1 AND 31),
                created_at   TEXT NOT NULL DEFAULT (datetime('now')),
                CHECK(payment_day > closing_day)
            );

            CREATE TABLE IF NOT EXISTS expenses (
                id             INTEGER PRIMARY KEY AUTOINCREMENT,
                name           TEXT NOT NULL,
                description    TEXT NOT NULL DEFAULT '',
                amount         REAL NOT NULL CHECK(amount > 0),
                recurrence     TEXT NOT NULL CHECK(recurrence IN
                                   ('single','weekly','biweekly','monthly','annual')),
                rec_weekday    INTEGER,
                rec_day        INTEGER,
                rec_month      INTEGER,
                payment_method TEXT NOT NULL DEFAULT 'manual'
                                   CHECK(payment_method IN ('manual','auto-debit','card')),
                due_day        INTEGER,
                card_id        INTEGER REFERENCES cards(id),
                first_date     TEXT,
                next_date      TEXT,
                is_active      INTEGER NOT NULL DEFAULT 1,
                paid_at        TEXT,
                status         TEXT NOT NULL DEFAULT 'unpaid'
                                   CHECK(status IN ('unpaid','paid')),
                created_at     TEXT NOT NULL DEFAULT (datetime('now')),
                CHECK((payment_method = 'card') = (card_id IS NOT NULL))
            );

            CREATE TABLE IF NOT EXISTS invoices (
                id           INTEGER PRIMARY KEY AUTOINCREMENT,
                card_id      INTEGER NOT NULL REFERENCES cards(id),
                year         INTEGER NOT NULL,
                month        INTEGER NOT NULL CHECK(month BETWEEN 1 AND 12),
                closing_date TEXT NOT NULL,
                due_date     TEXT NOT NULL,
                total_amount REAL NOT NULL DEFAULT 0,
                paid         INTEGER NOT NULL DEFAULT 0,
                paid_at      TEXT,
                UNIQUE(card_id, year, month)
            );

            CREATE TABLE IF NOT EXISTS notifications (
                id         INTEGER PRIMARY KEY AUTOINCREMENT,
                kind       TEXT NOT NULL CHECK(kind IN ('income','expense','invoice')),
                ref_id     INTEGER NOT NULL,
                title      TEXT NOT NULL,
                due_date   TEXT NOT NULL,
                created_at TEXT NOT NULL,
                read       INTEGER NOT NULL DEFAULT 0,
                UNIQUE(kind, ref_id, due_date)
            );

            CREATE INDEX IF NOT EXISTS idx_expenses_card_id     ON expenses(card_id);
            CREATE INDEX IF NOT EXISTS idx_expenses_next_date   ON expenses(next_date);
            CREATE INDEX IF NOT EXISTS idx_notifications_unread ON notifications(read, created_at);

            CREATE TABLE IF NOT EXISTS app_settings (
                key   TEXT PRIMARY KEY,
                value TEXT NOT NULL
            );
        """)

    def _seed_defaults(self, conn: sqlite3.Connection):
        defaults = [
            ("user_name", "User"),
            ("appearance_mode", "system"),
            ("currency_symbol", "$"),
            ("date_format", "MM/DD/YYYY"),
            ("notifications_enabled", "1"),
            ("income_reminders", "0"),
            ("notification_horizon_days", str(UPCOMING_REMINDER_DAYS)),
            ("notification_flush_limit", str(NOTIFICATION_FLUSH_LIMIT)),
            ("tick_interval_minutes", str(TICK_INTERVAL_MINUTES)),
        ]
        for key, value in defaults:
            conn.execute(
                "INSERT OR IGNORE INTO app_settings(key, value) VALUES (?, ?)",
                (key, value),
            )

    def get_setting(self, key: str, default: str = "") -> str:
        conn = self.get_connection()
        row = conn.execute(
            "SELECT value FROM app_settings WHERE key = ?", (key,)
        ).fetchone()
        return row["value"] if row else default

    def set_setting(self, key: str, value: str):
        conn = self.get_connection()
        with self.lock:
            conn.execute(
                "INSERT OR REPLACE INTO app_settings(key, value) VALUES (?, ?)",
                (key, value),
            )
            conn.commit()

    @staticmethod
    def open(db_folder: str | None = None) -> "DatabaseManager":
        """Startup factory: opens (creating if needed) the DB in db_folder or CWD."""
        if db_folder:
            os.makedirs(db_folder, exist_ok=True)
            path = os.path.join(db_folder, DB_FILE)
        else:
            path = DB_FILE
        db = DatabaseManager(path)
        db.initialize()
        return db

    def close(self):
        if self._conn:
            self._conn.close()
            self._conn = None
