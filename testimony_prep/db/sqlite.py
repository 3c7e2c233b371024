"""SQLite key-value store"""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import List, Optional

from testimony_prep.db.base import KeyValueStore


class SQLiteStore(KeyValueStore):
    """Durable store: one row per key in a single kv_store table"""

    def __init__(self, path: str):
        self.path = Path(path)
        self.init_db()

    @contextmanager
    def get_connection(self):
        """Get a database connection as context manager"""
        self.path.parent.mkdir(parents=True, exist_ok=True)

        conn = sqlite3.connect(str(self.path))
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def init_db(self) -> None:
        """Create the table if needed"""
        with self.get_connection() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS kv_store (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            """)

    def get(self, key: str) -> Optional[str]:
        with self.get_connection() as conn:
            row = conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,)).fetchone()
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        with self.get_connection() as conn:
            conn.execute(
                "INSERT OR REPLACE INTO kv_store (key, value, updated_at) "
                "VALUES (?, ?, CURRENT_TIMESTAMP)",
                (key, value),
            )

    def remove(self, key: str) -> None:
        with self.get_connection() as conn:
            conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))

    def keys(self, prefix: str = "") -> List[str]:
        escaped = prefix.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        with self.get_connection() as conn:
            rows = conn.execute(
                "SELECT key FROM kv_store WHERE key LIKE ? ESCAPE '\\' ORDER BY key",
                (escaped + "%",),
            ).fetchall()
        # LIKE ignores ASCII case
        return [row[0] for row in rows if row[0].startswith(prefix)]
