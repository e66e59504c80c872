from __future__ import annotations

import json
import sqlite3
from typing import Any, Dict, List, Tuple


class MailboxRepo:
    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def enqueue(self, recipient: str, kind: str, payload: Dict[str, Any]) -> int:
        cur = self.conn.cursor()
        cur.execute(
            "INSERT INTO peer_mailbox (recipient, kind, payload_json) VALUES (?, ?, ?)",
            (recipient, kind, json.dumps(payload, ensure_ascii=False)),
        )
        self.conn.commit()
        return int(cur.lastrowid)

    def pending(self, recipient: str, limit: int = 100) -> List[Tuple[int, str, Dict[str, Any]]]:
        """Oldest-first rows still addressed to recipient, as (id, kind, payload)."""
        cur = self.conn.cursor()
        cur.execute(
            "SELECT id, kind, payload_json FROM peer_mailbox WHERE recipient = ? ORDER BY id LIMIT ?",
            (recipient, limit),
        )
        rows = []
        for row_id, kind, payload_json in cur.fetchall():
            try:
                payload = json.loads(payload_json)
            except ValueError:
                payload = {}
            rows.append((int(row_id), kind, payload))
        return rows

    def ack(self, row_id: int) -> None:
        self.conn.execute("DELETE FROM peer_mailbox WHERE id = ?", (row_id,))
        self.conn.commit()

    def count_pending(self, recipient: str) -> int:
        cur = self.conn.cursor()
        cur.execute("SELECT COUNT(*) FROM peer_mailbox WHERE recipient = ?", (recipient,))
        return int(cur.fetchone()[0])
