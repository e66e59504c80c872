from .http import HttpSessionPort
from .peer import PeerChannelPort, PeerDelegate

__all__ = [
    "HttpSessionPort",
    "PeerChannelPort",
    "PeerDelegate",
]
