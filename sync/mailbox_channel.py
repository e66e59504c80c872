from __future__ import annotations

import logging
import sqlite3
import threading
from typing import Any, Dict, Optional

from db import schema
from db.repos.mailbox_repo import MailboxRepo
from ports.peer import PeerDelegate


logger = logging.getLogger(__name__)


class MailboxPeerChannel:
    """Peer link over a SQLite file shared by two local processes.

    There is no live connection, so the peer is never reported reachable and
    both message kinds are stored as rows addressed to the peer. poll() hands
    this device's rows to the delegate and deletes each one only after it was
    handled, so a crash mid-poll redelivers it (at-least-once).
    """

    def __init__(self, conn: sqlite3.Connection, device_id: str, peer_id: str) -> None:
        schema.bootstrap(conn)
        self.repo = MailboxRepo(conn)
        self.device_id = device_id
        self.peer_id = peer_id
        self.delegate: Optional[PeerDelegate] = None
        self._lock = threading.Lock()

    def is_supported(self) -> bool:
        return True

    def is_reachable(self) -> bool:
        return False

    def activate(self, delegate: PeerDelegate) -> None:
        self.delegate = delegate

    def send_message(self, message: Dict[str, Any]) -> None:
        with self._lock:
            self.repo.enqueue(self.peer_id, "message", message)

    def transfer_user_info(self, payload: Dict[str, Any]) -> None:
        with self._lock:
            self.repo.enqueue(self.peer_id, "user_info", payload)

    def pending_for_peer(self) -> int:
        with self._lock:
            return self.repo.count_pending(self.peer_id)

    def poll(self) -> int:
        """Deliver rows addressed to this device; returns the number handled."""
        if self.delegate is None:
            return 0
        with self._lock:
            rows = self.repo.pending(self.device_id)
        handled = 0
        for row_id, kind, payload in rows:
            if kind == "message":
                self.delegate.on_message(payload)
            else:
                self.delegate.on_user_info(payload)
            with self._lock:
                self.repo.ack(row_id)
            handled += 1
        if handled:
            logger.info("Mailbox delivered", extra={"step": "mailbox.poll", "status": handled})
        return handled
