from __future__ import annotations

from typing import Any, Dict, Protocol


class PeerDelegate(Protocol):
    def on_message(self, message: Dict[str, Any]) -> None:
        ...

    def on_user_info(self, payload: Dict[str, Any]) -> None:
        ...


class PeerChannelPort(Protocol):
    """Messaging link to the paired device.

    send_message is immediate and fire-and-forget: no delivery confirmation,
    and it may raise when the peer is unreachable.
    transfer_user_info is durable: delivered at least once once the peer is
    reachable, with no ordering guarantee across separate transfers.
    """

    def is_supported(self) -> bool:
        ...

    def is_reachable(self) -> bool:
        ...

    def activate(self, delegate: PeerDelegate) -> None:
        ...

    def send_message(self, message: Dict[str, Any]) -> None:
        ...

    def transfer_user_info(self, payload: Dict[str, Any]) -> None:
        ...
