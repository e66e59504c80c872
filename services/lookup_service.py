from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

from models.age_result import AgeResult
from models.errors import FetchError, NameLookupError
from models.gender_result import GenderResult
from models.lookup_outcome import LookupOutcome
from models.lookup_query import LookupQuery
from models.nationality_result import NationalityResult
from models.preferences import Preferences
from services.name_api_client import NameApiClient
from services.preference_store import ORIGIN_LOCAL


logger = logging.getLogger(__name__)


class NameLookupService:
    """Mandatory gender lookup followed by optional, preference-gated enrichments."""

    def __init__(self, client: NameApiClient) -> None:
        self.client = client

    def lookup(self, name: Optional[str], prefs: Preferences) -> LookupOutcome:
        try:
            query = LookupQuery.parse(name)
        except NameLookupError as err:
            return LookupOutcome.failure(err)

        try:
            gender = self.client.fetch_gender(query.name)
        except FetchError as err:
            return LookupOutcome.failure(err)

        age: Optional[AgeResult] = None
        if prefs.guess_age_enabled:
            age = self._optional(self.client.fetch_age, query.name, "age")

        nationality: Optional[NationalityResult] = None
        if prefs.guess_nationality_enabled:
            nationality = self._optional(self.client.fetch_nationality, query.name, "nationality")

        return LookupOutcome(gender=gender, age=age, nationality=nationality)

    @staticmethod
    def _optional(fetch: Callable[[str], object], name: str, step: str):
        # Enrichment failures only ever show up as an absent result
        try:
            return fetch(name)
        except FetchError as err:
            logger.info("Optional enrichment dropped", extra={"step": step, "status": "skipped", "error": err.kind})
            return None


class LookupController:
    """Holds what the front end displays for the most recent submission.

    Each submit() takes a new generation number; a lookup that finishes after a
    newer submission started is discarded, so a slow earlier response can never
    overwrite a later one.
    """

    def __init__(self, service: NameLookupService, prefs_provider: Callable[[], Preferences]) -> None:
        self.service = service
        self.prefs_provider = prefs_provider
        self.name: str = ""
        self.gender: Optional[GenderResult] = None
        self.age: Optional[AgeResult] = None
        self.nationality: Optional[NationalityResult] = None
        self.error: Optional[NameLookupError] = None
        self._lock = threading.Lock()
        self._generation = 0
        self._in_flight = 0

    @property
    def is_loading(self) -> bool:
        with self._lock:
            return self._in_flight > 0

    def submit(self, name: Optional[str]) -> LookupOutcome:
        prefs = self.prefs_provider()
        with self._lock:
            self._generation += 1
            generation = self._generation
            self.name = name or ""
            self.error = None
            self._in_flight += 1
        try:
            outcome = self.service.lookup(name, prefs)
        finally:
            with self._lock:
                self._in_flight -= 1
        self._apply(generation, outcome)
        return outcome

    def refresh(self) -> Optional[LookupOutcome]:
        """Re-run the last submitted name, if any (e.g. after preferences changed)."""
        if not self.name.strip():
            return None
        return self.submit(self.name)

    def on_preferences_changed(self, changed: dict, origin: str) -> None:
        # Peer snapshots only update the store; the next submit picks them up
        if origin != ORIGIN_LOCAL:
            return
        self.refresh()

    def _apply(self, generation: int, outcome: LookupOutcome) -> None:
        with self._lock:
            if generation != self._generation:
                logger.debug("Superseded lookup discarded", extra={"step": "lookup", "status": "superseded"})
                return
            if outcome.error is not None:
                self.error = outcome.error
                self.gender = None
                self.age = None
                self.nationality = None
                return
            self.error = None
            self.gender = outcome.gender
            self.age = outcome.age
            self.nationality = outcome.nationality
