"""
Client for the genderize.io / agify.io / nationalize.io name-inference services.
"""
from __future__ import annotations

import logging
import time
from typing import Any, Optional, Type, TypeVar
from urllib.parse import parse_qsl, quote, urlencode, urlsplit, urlunsplit

import requests
from pydantic import BaseModel, ValidationError

from config.settings import Settings, get_settings
from models.age_result import AgeResult
from models.errors import DecodingError, FetchError, NetworkError, error_from_response
from models.gender_result import GenderResult
from models.nationality_result import NationalityResult
from ports.http import HttpSessionPort
from utils.api_logger import log_call


logger = logging.getLogger(__name__)

ShapeT = TypeVar("ShapeT", bound=BaseModel)


def build_url(base_url: str, name: str) -> str:
    """Return base_url with a percent-encoded ``name`` query parameter.

    Query items already on base_url (an ``apikey``, say) are kept; a ``name``
    among them is replaced.
    """
    parts = urlsplit(base_url)
    items = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if k != "name"]
    items.append(("name", name))
    query = urlencode(items, quote_via=quote)
    return urlunsplit((parts.scheme, parts.netloc, parts.path or "/", query, ""))


def _endpoint_of(url: str) -> str:
    return urlsplit(url).netloc or url


def _json_or_none(response: Any) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


class NameApiClient:
    """Single-shot GET helper: no retries, no caching."""

    def __init__(self, settings: Optional[Settings] = None, session: Optional[HttpSessionPort] = None):
        self.settings = settings or get_settings()
        self.session = session
        self.api_calls_made = 0

    def fetch(self, url: str, shape: Type[ShapeT]) -> ShapeT:
        """GET ``url`` and decode the body into ``shape``; raises a FetchError subclass on any deviation."""
        endpoint = _endpoint_of(url)
        getter = self.session.get if self.session is not None else requests.get
        t0 = time.time()
        try:
            response = getter(url, timeout=self.settings.http_timeout_seconds)
        except requests.exceptions.RequestException as e:
            duration_ms = int((time.time() - t0) * 1000)
            logger.warning(
                "Request failed",
                extra={"step": "fetch", "status": "network_error", "endpoint": endpoint, "duration_ms": duration_ms, "error": type(e).__name__},
            )
            log_call(settings=self.settings, caller="name_api_client.fetch", endpoint=endpoint, url=url, duration_ms=duration_ms, status="error", error=str(e))
            raise NetworkError(e) from e
        finally:
            self.api_calls_made += 1

        duration_ms = int((time.time() - t0) * 1000)
        status_code = response.status_code
        try:
            result = self._interpret(response, shape)
        except FetchError as err:
            logger.info(
                "Request returned an error",
                extra={"step": "fetch", "status": err.kind, "endpoint": endpoint, "duration_ms": duration_ms, "error": status_code},
            )
            log_call(settings=self.settings, caller="name_api_client.fetch", endpoint=endpoint, url=url, status_code=status_code, duration_ms=duration_ms, status="error", error=err.kind)
            raise

        logger.debug(
            "Request ok",
            extra={"step": "fetch", "status": "ok", "endpoint": endpoint, "duration_ms": duration_ms},
        )
        log_call(settings=self.settings, caller="name_api_client.fetch", endpoint=endpoint, url=url, status_code=status_code, duration_ms=duration_ms)
        return result

    @staticmethod
    def _interpret(response: Any, shape: Type[ShapeT]) -> ShapeT:
        if not 200 <= response.status_code < 300:
            raise error_from_response(response.status_code, _json_or_none(response))
        try:
            data = response.json()
        except ValueError:
            raise DecodingError() from None
        try:
            return shape.model_validate(data)
        except ValidationError:
            raise DecodingError() from None

    # --- Per-service helpers ---
    def fetch_gender(self, name: str) -> GenderResult:
        return self.fetch(build_url(self.settings.genderize_url, name), GenderResult)

    def fetch_age(self, name: str) -> AgeResult:
        return self.fetch(build_url(self.settings.agify_url, name), AgeResult)

    def fetch_nationality(self, name: str) -> NationalityResult:
        return self.fetch(build_url(self.settings.nationalize_url, name), NationalityResult)
