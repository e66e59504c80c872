from __future__ import annotations

import logging

import pytest

from config.settings import get_settings
from utils.logging_setup import SafeExtraFormatter


@pytest.fixture(autouse=True)
def _fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults(monkeypatch):
    for var in ("DEVICE_ROLE", "DEVICE_ID", "PEER_ID", "GENDERIZE_URL", "HTTP_TIMEOUT_SECONDS"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("PEER_CHANNEL", "none")
    s = get_settings()
    assert s.device_role == "phone"
    assert s.device_id == "phone" and s.peer_id == "watch"
    assert s.genderize_url == "https://api.genderize.io/"
    assert s.http_timeout_seconds == 20.0


def test_watch_role_pairs_with_phone(monkeypatch):
    monkeypatch.setenv("DEVICE_ROLE", "Watch")
    monkeypatch.delenv("DEVICE_ID", raising=False)
    monkeypatch.delenv("PEER_ID", raising=False)
    s = get_settings()
    assert s.device_role == "watch"
    assert s.peer_id == "phone"


@pytest.mark.parametrize(
    "env",
    [
        {"DEVICE_ROLE": "tablet"},
        {"PEER_CHANNEL": "bluetooth"},
        {"PEER_CHANNEL": "mailbox", "DEVICE_ID": "same", "PEER_ID": "same"},
    ],
)
def test_invalid_configuration_raises(monkeypatch, env):
    for key, value in env.items():
        monkeypatch.setenv(key, value)
    with pytest.raises(RuntimeError):
        get_settings()


def test_formatter_fills_missing_extras():
    formatter = SafeExtraFormatter(fmt="%(message)s step=%(step)s endpoint=%(endpoint)s")
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "hello", None, None)
    record.step = "fetch"
    assert formatter.format(record) == "hello step=fetch endpoint=-"
