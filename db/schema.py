from __future__ import annotations

import sqlite3


def bootstrap(conn: sqlite3.Connection) -> None:
    """Create preference and mailbox tables (idempotent)."""
    cur = conn.cursor()

    # Device-local preference values, one row per mirrored key
    cur.execute(
        (
            "CREATE TABLE IF NOT EXISTS preferences (\n"
            "  key TEXT PRIMARY KEY,\n"
            "  value INTEGER NOT NULL,\n"
            "  updated_at TEXT NOT NULL DEFAULT (datetime('now'))\n"
            ")"
        )
    )

    # Durable peer deliveries; rows are removed once handled by the recipient
    cur.execute(
        (
            "CREATE TABLE IF NOT EXISTS peer_mailbox (\n"
            "  id INTEGER PRIMARY KEY AUTOINCREMENT,\n"
            "  recipient TEXT NOT NULL,\n"
            "  kind TEXT NOT NULL CHECK (kind IN ('message', 'user_info')),\n"
            "  payload_json TEXT NOT NULL,\n"
            "  created_at TEXT NOT NULL DEFAULT (datetime('now'))\n"
            ")"
        )
    )
    cur.execute("CREATE INDEX IF NOT EXISTS idx_peer_mailbox_recipient ON peer_mailbox(recipient, id);")

    conn.commit()
