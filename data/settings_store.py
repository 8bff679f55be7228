"""
SQLite-backed key/value storage for vidbrowse.
Holds small pieces of client state that must survive restarts.
"""

import logging
import sqlite3
import threading
from pathlib import Path

logger = logging.getLogger(__name__)


class SettingsStore:
    """SQLite settings table, one string value per key."""

    def __init__(self, db_path: str = "db/vidbrowse.db"):
        """Initialize database connection and create schema."""
        db_file = Path(db_path)
        db_file.parent.mkdir(parents=True, exist_ok=True)

        self._lock = threading.Lock()
        self.conn = sqlite3.connect(db_file, check_same_thread=False)
        self.conn.row_factory = sqlite3.Row
        self.conn.execute("PRAGMA journal_mode=WAL")
        self._create_tables()

    def _create_tables(self) -> None:
        self.conn.execute("""
            CREATE TABLE IF NOT EXISTS settings (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at TEXT NOT NULL DEFAULT (datetime('now'))
            )
        """)
        self.conn.commit()

    def get_setting(self, key: str, default: str = "") -> str:
        """Read a setting value."""
        with self._lock:
            cursor = self.conn.execute(
                "SELECT value FROM settings WHERE key = ?", (key,)
            )
            row = cursor.fetchone()
            return row[0] if row else default

    def set_setting(self, key: str, value: str) -> None:
        """Write a setting (upsert)."""
        with self._lock:
            self.conn.execute(
                """INSERT INTO settings (key, value) VALUES (?, ?)
                   ON CONFLICT(key) DO UPDATE SET value = ?, updated_at = datetime('now')""",
                (key, value, value),
            )
            self.conn.commit()

    def close(self) -> None:
        """Close database connection."""
        self.conn.close()
