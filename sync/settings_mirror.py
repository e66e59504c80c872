from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional

from ports.peer import PeerChannelPort
from services.preference_store import ORIGIN_LOCAL, ORIGIN_PEER, PreferenceStore


logger = logging.getLogger(__name__)

SETTINGS_REQUEST: Dict[str, str] = {"request": "settings"}


class SettingsMirror:
    """Keeps the mirrored preferences in step with the paired peer.

    All channel failures are logged and swallowed; on a platform without a
    peer channel every operation is a no-op.
    """

    def __init__(self, store: PreferenceStore, channel: PeerChannelPort) -> None:
        self.store = store
        self.channel = channel
        self._unsubscribe: Optional[Callable[[], None]] = None

    def activate(self) -> None:
        if not self._supported():
            return
        try:
            self.channel.activate(self)
        except Exception as e:
            logger.warning("Peer channel activation failed", extra={"step": "sync.activate", "error": str(e)})

    def register_defaults(self) -> None:
        self.store.register_defaults()

    def current_snapshot(self) -> Dict[str, bool]:
        return self.store.snapshot()

    def push_now(self) -> None:
        if not self._supported():
            return
        payload = {"settings": self.current_snapshot()}
        try:
            if self.channel.is_reachable():
                self.channel.send_message(payload)
                mode = "message"
            else:
                # Durable fallback: delivered once the peer is reachable again
                self.channel.transfer_user_info(payload)
                mode = "transfer"
        except Exception as e:
            logger.warning("Settings push failed", extra={"step": "sync.push", "status": "error", "error": str(e)})
            return
        logger.debug("Settings pushed", extra={"step": "sync.push", "status": mode})

    def request_from_peer(self) -> None:
        """Ask the peer for its settings; its push arrives through on_message/on_user_info."""
        if not self._supported():
            return
        try:
            self.channel.send_message(dict(SETTINGS_REQUEST))
        except Exception as e:
            logger.info("Settings request not delivered", extra={"step": "sync.request", "status": "error", "error": str(e)})

    def attach_auto_push(self) -> None:
        """Push to the peer after every local change; changes received from the peer are not echoed."""
        if self._unsubscribe is not None:
            return
        self._unsubscribe = self.store.subscribe(self._on_store_change)

    def detach_auto_push(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    # --- Inbound (PeerDelegate) ---
    def on_message(self, message: Dict[str, Any]) -> None:
        if not isinstance(message, dict):
            return
        if message.get("request") == SETTINGS_REQUEST["request"]:
            self.push_now()
        elif isinstance(message.get("settings"), dict):
            self._apply(message["settings"])

    def on_user_info(self, payload: Dict[str, Any]) -> None:
        if isinstance(payload, dict) and isinstance(payload.get("settings"), dict):
            self._apply(payload["settings"])

    def _apply(self, incoming: Dict[str, Any]) -> None:
        changed = self.store.apply(incoming, origin=ORIGIN_PEER)
        if changed:
            logger.info("Settings synced from peer", extra={"step": "sync.apply", "status": ",".join(sorted(changed))})

    def _on_store_change(self, changed: Dict[str, bool], origin: str) -> None:
        if origin == ORIGIN_LOCAL:
            self.push_now()

    def _supported(self) -> bool:
        try:
            return bool(self.channel.is_supported())
        except Exception:
            return False
