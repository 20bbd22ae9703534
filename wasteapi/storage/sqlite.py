"""
SQLite-backed key-value storage.

Durable slot storage for the client's persisted state (the bearer token).

Design:
- One table: kv_store
- Columns: key (primary key), value, updated_at
- One connection per operation; no connection is held between calls
"""

import logging
import sqlite3
from typing import Optional

from .base import KeyValueStorage

logger = logging.getLogger(__name__)


class SQLiteStorage(KeyValueStorage):
    """
    SQLite key-value storage.

    Errors propagate: a storage failure is a real failure for the caller.
    """

    def __init__(self, db_path: Optional[str] = None):
        """
        Initialize SQLite storage.

        Args:
            db_path: Path to SQLite database file.
                    If None, uses ':memory:' with a single shared connection.
        """
        self.db_path = db_path or ":memory:"
        # ':memory:' databases vanish with their connection, so keep one open
        self._shared_conn = (
            sqlite3.connect(self.db_path) if self.db_path == ":memory:" else None
        )
        self._initialize_db()

    def _connect(self) -> sqlite3.Connection:
        if self._shared_conn is not None:
            return self._shared_conn
        return sqlite3.connect(self.db_path)

    def _release(self, conn: sqlite3.Connection) -> None:
        if conn is not self._shared_conn:
            conn.close()

    def _initialize_db(self) -> None:
        """Create the kv_store table if it does not exist."""
        conn = self._connect()
        try:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS kv_store (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            """)
            conn.commit()
        finally:
            self._release(conn)
        logger.debug(f"SQLite storage initialized: {self.db_path}")

    def get_item(self, key: str) -> Optional[str]:
        conn = self._connect()
        try:
            row = conn.execute(
                "SELECT value FROM kv_store WHERE key = ?", (key,)
            ).fetchone()
        finally:
            self._release(conn)
        return row[0] if row else None

    def set_item(self, key: str, value: str) -> None:
        conn = self._connect()
        try:
            conn.execute(
                """
                INSERT INTO kv_store (key, value, updated_at)
                VALUES (?, ?, CURRENT_TIMESTAMP)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = CURRENT_TIMESTAMP
                """,
                (key, value),
            )
            conn.commit()
        finally:
            self._release(conn)

    def remove_item(self, key: str) -> None:
        conn = self._connect()
        try:
            conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
            conn.commit()
        finally:
            self._release(conn)

    def close(self) -> None:
        """Close the shared in-memory connection, if any."""
        if self._shared_conn is not None:
            self._shared_conn.close()
            self._shared_conn = None
