from __future__ import annotations

import logging
import sqlite3
import threading
from typing import Any, Callable, Dict, List, Mapping, Optional

from db import schema
from db.repos.preferences_repo import PreferencesRepo
from models.preferences import MIRRORED_KEYS, Preferences


logger = logging.getLogger(__name__)

ORIGIN_LOCAL = "local"
ORIGIN_PEER = "peer"

ChangeListener = Callable[[Dict[str, bool], str], None]

DEFAULTS: Dict[str, bool] = {key: False for key in MIRRORED_KEYS}


class PreferenceStore:
    """Device-local store for the mirrored boolean preferences.

    Every change is persisted immediately. Listeners receive one notification
    per set()/apply() call, and only when at least one value actually changed.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        schema.bootstrap(conn)
        self.repo = PreferencesRepo(conn)
        self._lock = threading.RLock()
        self._listeners: List[ChangeListener] = []

    def register_defaults(self, defaults: Optional[Dict[str, bool]] = None) -> None:
        with self._lock:
            self.repo.insert_defaults(dict(defaults or DEFAULTS))

    def get(self, key: str) -> bool:
        if key not in MIRRORED_KEYS:
            raise KeyError(f"Unknown preference: {key}")
        with self._lock:
            value = self.repo.get(key)
        return DEFAULTS[key] if value is None else value

    def snapshot(self) -> Dict[str, bool]:
        with self._lock:
            stored = self.repo.get_many(MIRRORED_KEYS)
        return {key: stored.get(key, DEFAULTS[key]) for key in MIRRORED_KEYS}

    def preferences(self) -> Preferences:
        return Preferences.model_validate(self.snapshot())

    def set(self, key: str, value: bool, origin: str = ORIGIN_LOCAL) -> bool:
        if key not in MIRRORED_KEYS:
            raise KeyError(f"Unknown preference: {key}")
        return bool(self.apply({key: value}, origin=origin))

    def apply(self, values: Mapping[str, Any], origin: str = ORIGIN_LOCAL) -> Dict[str, bool]:
        """Apply recognised boolean keys; returns the keys whose value changed."""
        with self._lock:
            current = self.snapshot()
            changed: Dict[str, bool] = {}
            for key, value in values.items():
                if key not in MIRRORED_KEYS:
                    continue
                if not isinstance(value, bool):
                    logger.warning("Ignoring non-boolean preference value", extra={"step": "prefs.apply", "error": key})
                    continue
                if current[key] != value:
                    changed[key] = value
            if changed:
                self.repo.save(changed)
        if changed:
            logger.info("Preferences changed", extra={"step": "prefs.apply", "status": origin})
            self._notify(changed, origin)
        return changed

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def _unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self, changed: Dict[str, bool], origin: str) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            listener(dict(changed), origin)
