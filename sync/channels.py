from __future__ import annotations

import copy
import logging
import threading
from collections import deque
from typing import Any, Deque, Dict, Optional, Tuple

from ports.peer import PeerDelegate


logger = logging.getLogger(__name__)


class PeerUnreachableError(RuntimeError):
    pass


class NullPeerChannel:
    """Platform without a paired device: every operation is a no-op."""

    def is_supported(self) -> bool:
        return False

    def is_reachable(self) -> bool:
        return False

    def activate(self, delegate: PeerDelegate) -> None:
        return None

    def send_message(self, message: Dict[str, Any]) -> None:
        return None

    def transfer_user_info(self, payload: Dict[str, Any]) -> None:
        return None


class LocalPeerLink:
    """In-process link between two endpoints; connect()/disconnect() toggle reachability."""

    def __init__(self, connected: bool = True) -> None:
        self.connected = connected
        self.endpoints: list[LocalPeerEndpoint] = []

    @classmethod
    def pair(cls, connected: bool = True) -> Tuple["LocalPeerEndpoint", "LocalPeerEndpoint"]:
        link = cls(connected=connected)
        first = LocalPeerEndpoint(link, "a")
        second = LocalPeerEndpoint(link, "b")
        link.endpoints = [first, second]
        return first, second

    def connect(self) -> None:
        self.connected = True
        for endpoint in self.endpoints:
            endpoint.flush()

    def disconnect(self) -> None:
        self.connected = False


class LocalPeerEndpoint:
    def __init__(self, link: LocalPeerLink, name: str) -> None:
        self.link = link
        self.name = name
        self.delegate: Optional[PeerDelegate] = None
        self.messages_sent = 0
        self._outbox: Deque[Dict[str, Any]] = deque()
        self._lock = threading.Lock()

    @property
    def peer(self) -> "LocalPeerEndpoint":
        return next(e for e in self.link.endpoints if e is not self)

    @property
    def pending_transfers(self) -> int:
        with self._lock:
            return len(self._outbox)

    def is_supported(self) -> bool:
        return True

    def is_reachable(self) -> bool:
        return self.link.connected and self.peer.delegate is not None

    def activate(self, delegate: PeerDelegate) -> None:
        self.delegate = delegate
        # A peer that just came up may have transfers waiting for it
        self.peer.flush()

    def send_message(self, message: Dict[str, Any]) -> None:
        if not self.is_reachable():
            raise PeerUnreachableError(f"peer of {self.name} is not reachable")
        self.messages_sent += 1
        self.peer.delegate.on_message(copy.deepcopy(message))

    def transfer_user_info(self, payload: Dict[str, Any]) -> None:
        with self._lock:
            self._outbox.append(copy.deepcopy(payload))
        self.flush()

    def flush(self) -> int:
        """Deliver queued transfers while the peer is reachable; returns the number delivered."""
        delivered = 0
        while self.is_reachable():
            with self._lock:
                if not self._outbox:
                    break
                payload = self._outbox[0]
            # Removed only after the peer handled it
            self.peer.delegate.on_user_info(copy.deepcopy(payload))
            with self._lock:
                if self._outbox and self._outbox[0] is payload:
                    self._outbox.popleft()
            delivered += 1
        if delivered:
            logger.debug("Delivered queued transfers", extra={"step": "peer.flush", "status": delivered})
        return delivered
