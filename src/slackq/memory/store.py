"""SQLite key-value storage for per-user thread state."""

import json
import sqlite3
from pathlib import Path
from typing import Any


class KeyValueStore:
    """Persistent (namespace, key) -> JSON value storage using SQLite.

    Writes are last-writer-wins; there are no transactions spanning
    more than one key.
    """

    def __init__(self, db_path: Path) -> None:
        """Initialize the store with a database path.

        Args:
            db_path: Path to the SQLite database file.
        """
        self.db_path = db_path
        self._conn: sqlite3.Connection | None = None

    def _get_connection(self) -> sqlite3.Connection:
        """Get or create the database connection."""
        if self._conn is None:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(self.db_path)
            self._conn.row_factory = sqlite3.Row
        return self._conn

    def init_db(self) -> None:
        """Create the kv table if it doesn't exist."""
        conn = self._get_connection()
        conn.execute("""
            CREATE TABLE IF NOT EXISTS kv (
                namespace   TEXT NOT NULL,
                key         TEXT NOT NULL,
                value       TEXT NOT NULL,
                updated_at  TEXT NOT NULL DEFAULT (datetime('now')),
                PRIMARY KEY (namespace, key)
            )
        """)
        conn.commit()

    def get(self, namespace: str, key: str) -> Any | None:
        """Get a value, or None if the key does not exist."""
        conn = self._get_connection()
        cursor = conn.execute(
            "SELECT value FROM kv WHERE namespace = ? AND key = ?",
            (namespace, key),
        )
        row = cursor.fetchone()
        if row is None:
            return None
        return json.loads(row["value"])

    def set(self, namespace: str, key: str, value: Any) -> None:
        """Store a JSON-serializable value, replacing any previous one."""
        conn = self._get_connection()
        conn.execute(
            """
            INSERT INTO kv (namespace, key, value)
            VALUES (?, ?, ?)
            ON CONFLICT(namespace, key) DO UPDATE SET
                value = excluded.value,
                updated_at = datetime('now')
            """,
            (namespace, key, json.dumps(value)),
        )
        conn.commit()

    def close(self) -> None:
        """Close the database connection."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None
