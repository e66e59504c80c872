from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv


DEVICE_ROLES = ("phone", "watch")
PEER_CHANNELS = ("none", "mailbox")


def _load_env() -> None:
    # Centralized dotenv loading; safe if .env missing
    load_dotenv()


def _as_bool(value: str | None) -> bool:
    return (value or "").strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    # Upstream inference services
    genderize_url: str
    agify_url: str
    nationalize_url: str

    # Transport default for every request; never overridden per call
    http_timeout_seconds: float

    log_level: str

    # Core/runtime
    db_path: str
    run_env: str

    # Settings mirroring
    device_role: str
    peer_channel: str
    mailbox_path: str
    device_id: str
    peer_id: str

    # Logging/tracing
    api_trace: bool = False
    api_log_path: str = "logs/api_calls.jsonl"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    _load_env()
    role = os.getenv("DEVICE_ROLE", "phone").lower()
    if role not in DEVICE_ROLES:
        raise RuntimeError(f"DEVICE_ROLE must be one of {', '.join(DEVICE_ROLES)} (got {role!r})")
    channel = os.getenv("PEER_CHANNEL", "none").lower()
    if channel not in PEER_CHANNELS:
        raise RuntimeError(f"PEER_CHANNEL must be one of {', '.join(PEER_CHANNELS)} (got {channel!r})")

    default_peer = "watch" if role == "phone" else "phone"
    device_id = os.getenv("DEVICE_ID", role)
    peer_id = os.getenv("PEER_ID", default_peer)
    if channel != "none" and device_id == peer_id:
        raise RuntimeError("DEVICE_ID and PEER_ID must differ when a peer channel is configured")

    return Settings(
        genderize_url=os.getenv("GENDERIZE_URL", "https://api.genderize.io/"),
        agify_url=os.getenv("AGIFY_URL", "https://api.agify.io"),
        nationalize_url=os.getenv("NATIONALIZE_URL", "https://api.nationalize.io/"),
        http_timeout_seconds=float(os.getenv("HTTP_TIMEOUT_SECONDS", "20")),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        db_path=os.getenv("DB_PATH", "prefs.db"),
        run_env=os.getenv("RUN_ENV", "local"),
        device_role=role,
        peer_channel=channel,
        mailbox_path=os.getenv("MAILBOX_PATH", "mailbox.db"),
        device_id=device_id,
        peer_id=peer_id,
        api_trace=_as_bool(os.getenv("API_TRACE")),
        api_log_path=os.getenv("API_LOG_PATH", "logs/api_calls.jsonl"),
    )
