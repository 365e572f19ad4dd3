from typing import Optional
from call_tracker.db.database import get_db


class KeyValueStore:
    """String keys to string values, one SQLite row per key.

    Every call is its own transaction through ``get_db``, so reads
    always see the last completed write.
    """

    def __init__(self, db_path: str):
        self.db_path = db_path

    def get(self, key: str) -> Optional[str]:
        with get_db(self.db_path) as conn:
            row = conn.execute(
                "SELECT value FROM kv_store WHERE key = ?",
                (key,)
            ).fetchone()
        return row["value"] if row else None

    def set(self, key: str, value: str):
        with get_db(self.db_path) as conn:
            conn.execute("""
                INSERT INTO kv_store (key, value)
                VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value
            """, (key, value))

    def remove(self, key: str):
        with get_db(self.db_path) as conn:
            conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))

    def clear(self):
        with get_db(self.db_path) as conn:
            conn.execute("DELETE FROM kv_store")
