from __future__ import annotations

import json

import pytest
import requests

from fakes import AGE_HOST, GENDER_HOST, FakeResponse, FakeSession, gender_ok, make_settings
from models.age_result import AgeResult
from models.errors import (
    DecodingError,
    NetworkError,
    PaymentRequiredError,
    TooManyRequestsError,
    UnauthorizedError,
    UnknownFetchError,
    UnprocessableError,
)
from models.gender_result import GenderResult
from services.name_api_client import NameApiClient, build_url


def _client(tmp_path, routes):
    session = FakeSession(routes)
    return NameApiClient(settings=make_settings(tmp_path), session=session), session


def test_build_url_percent_encodes_name():
    assert build_url("https://api.genderize.io/", "Anna Lena") == "https://api.genderize.io/?name=Anna%20Lena"
    assert build_url("https://api.agify.io", "zoë") == "https://api.agify.io/?name=zo%C3%AB"
    assert build_url("https://api.nationalize.io/", "a&b=c") == "https://api.nationalize.io/?name=a%26b%3Dc"


def test_fetch_gender_decodes_and_passes_timeout(tmp_path):
    client, session = _client(tmp_path, {GENDER_HOST: gender_ok()})
    result = client.fetch_gender("peter")
    assert result == GenderResult(count=1094417, name="peter", gender="male", probability=0.75)
    assert session.names_called() == ["peter"]
    assert session.timeouts == [client.settings.http_timeout_seconds]
    assert client.api_calls_made == 1


def test_422_carries_server_message(tmp_path):
    client, _ = _client(tmp_path, {GENDER_HOST: FakeResponse(422, {"error": "name is required"})})
    with pytest.raises(UnprocessableError) as exc:
        client.fetch_gender("x")
    assert exc.value.message == "name is required"
    assert exc.value.describe() == "name is required"


@pytest.mark.parametrize(
    "status,error_cls",
    [
        (401, UnauthorizedError),
        (402, PaymentRequiredError),
        (422, UnprocessableError),
        (429, TooManyRequestsError),
        (500, UnknownFetchError),
        (404, UnknownFetchError),
    ],
)
def test_status_codes_map_to_error_kinds(tmp_path, status, error_cls):
    client, _ = _client(tmp_path, {GENDER_HOST: FakeResponse(status, {"error": "nope"})})
    with pytest.raises(error_cls) as exc:
        client.fetch_gender("peter")
    assert type(exc.value) is error_cls
    assert exc.value.message == "nope"


def test_error_body_without_message_is_not_a_decoding_failure(tmp_path):
    client, _ = _client(tmp_path, {GENDER_HOST: FakeResponse(401, text="<html>Unauthorized</html>")})
    with pytest.raises(UnauthorizedError) as exc:
        client.fetch_gender("peter")
    assert exc.value.message is None
    assert exc.value.describe() == "Invalid API key."


def test_non_string_error_field_is_treated_as_absent(tmp_path):
    client, _ = _client(tmp_path, {GENDER_HOST: FakeResponse(503, {"error": {"code": 7}})})
    with pytest.raises(UnknownFetchError) as exc:
        client.fetch_gender("peter")
    assert exc.value.message is None


@pytest.mark.parametrize(
    "response",
    [
        FakeResponse(200, text="not json"),
        FakeResponse(200, ["peter"]),
        FakeResponse(200, {"gender": "robot"}),
        FakeResponse(200, {"count": "many"}),
    ],
)
def test_bad_2xx_body_is_decoding_error(tmp_path, response):
    client, _ = _client(tmp_path, {GENDER_HOST: response})
    with pytest.raises(DecodingError) as exc:
        client.fetch_gender("peter")
    assert exc.value.message is None


def test_transport_failure_is_network_error(tmp_path):
    cause = requests.exceptions.ConnectionError("connection reset")
    client, _ = _client(tmp_path, {AGE_HOST: cause})
    with pytest.raises(NetworkError) as exc:
        client.fetch_age("peter")
    assert exc.value.cause is cause
    assert exc.value.kind == "network"
    assert client.api_calls_made == 1


def test_fetch_without_session_uses_requests_get(tmp_path, monkeypatch):
    seen = {}

    def _fake_get(url, timeout=None):
        seen["url"] = url
        seen["timeout"] = timeout
        return FakeResponse(200, {"count": 3, "name": "ida", "age": None})

    monkeypatch.setattr(requests, "get", _fake_get)
    client = NameApiClient(settings=make_settings(tmp_path, http_timeout_seconds=5.0))
    result = client.fetch_age("ida")
    assert result == AgeResult(count=3, name="ida", age=None)
    assert seen == {"url": "https://api.agify.io/?name=ida", "timeout": 5.0}


def test_build_url_keeps_existing_query_items():
    assert build_url("https://api.genderize.io/?apikey=k3y", "peter") == "https://api.genderize.io/?apikey=k3y&name=peter"
    assert build_url("https://api.agify.io/?name=old&country_id=US", "Anna Lena") == "https://api.agify.io/?country_id=US&name=Anna%20Lena"


def test_api_trace_writes_jsonl(tmp_path, monkeypatch):
    log_file = tmp_path / "api_calls.jsonl"
    monkeypatch.setenv("RUN_ID", "test-run-123")
    session = FakeSession({GENDER_HOST: FakeResponse(429, {"error": "slow down"})})
    client = NameApiClient(settings=make_settings(tmp_path, api_trace=True, api_log_path=str(log_file)), session=session)

    with pytest.raises(TooManyRequestsError):
        client.fetch_gender("peter")

    lines = log_file.read_text(encoding="utf-8").strip().splitlines()
    rec = json.loads(lines[-1])
    assert rec["endpoint"] == GENDER_HOST
    assert rec["status_code"] == 429
    assert rec["status"] == "error"
    assert rec["error"] == "too_many_requests"
    assert rec["run_id"] == "test-run-123"


def test_trace_follows_client_settings_not_environment(tmp_path, monkeypatch):
    log_file = tmp_path / "api_calls.jsonl"
    settings = make_settings(tmp_path, api_trace=True, api_log_path=str(log_file))
    monkeypatch.setenv("API_TRACE", "false")
    client = NameApiClient(settings=settings, session=FakeSession({GENDER_HOST: gender_ok()}))

    client.fetch_gender("peter")

    rec = json.loads(log_file.read_text(encoding="utf-8").strip().splitlines()[-1])
    assert rec["status"] == "ok"
    assert rec["status_code"] == 200


def test_invalid_environment_does_not_break_configured_client(tmp_path, monkeypatch):
    settings = make_settings(tmp_path)
    monkeypatch.setenv("DEVICE_ROLE", "tablet")
    client = NameApiClient(settings=settings, session=FakeSession({GENDER_HOST: gender_ok()}))

    assert client.fetch_gender("peter").gender == "male"
