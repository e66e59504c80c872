from __future__ import annotations

import sqlite3
from typing import Dict, Iterable, Optional


class PreferencesRepo:
    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def get(self, key: str) -> Optional[bool]:
        cur = self.conn.cursor()
        cur.execute("SELECT value FROM preferences WHERE key = ?", (key,))
        row = cur.fetchone()
        if row is None:
            return None
        return bool(row[0])

    def get_many(self, keys: Iterable[str]) -> Dict[str, bool]:
        """Return stored values for the given keys; keys never written are omitted."""
        out: Dict[str, bool] = {}
        for key in keys:
            value = self.get(key)
            if value is not None:
                out[key] = value
        return out

    def insert_defaults(self, defaults: Dict[str, bool]) -> None:
        """Write defaults only for keys that were never set."""
        self.conn.executemany(
            "INSERT OR IGNORE INTO preferences (key, value) VALUES (?, ?)",
            [(k, int(bool(v))) for k, v in defaults.items()],
        )
        self.conn.commit()

    def save(self, values: Dict[str, bool]) -> None:
        self.conn.executemany(
            (
                "INSERT INTO preferences (key, value, updated_at) VALUES (?, ?, datetime('now')) "
                "ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at"
            ),
            [(k, int(bool(v))) for k, v in values.items()],
        )
        self.conn.commit()
