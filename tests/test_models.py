from __future__ import annotations

import pytest
from pydantic import ValidationError

from models import (
    AgeResult,
    GenderResult,
    LookupOutcome,
    LookupQuery,
    NationalityResult,
    Preferences,
)
from models.errors import EmptyNameError, UnprocessableError


def test_gender_probability_is_clamped():
    assert GenderResult.model_validate({"probability": 1.4}).probability == 1.0
    assert GenderResult.model_validate({"probability": -0.2}).probability == 0.0
    assert GenderResult.model_validate({"probability": 0.73}).probability == 0.73


def test_absent_and_zero_are_distinct():
    absent = GenderResult.model_validate({"name": "kim"})
    zero = GenderResult.model_validate({"name": "kim", "probability": 0.0, "count": 0})
    assert absent.probability is None and absent.count is None
    assert zero.probability == 0.0 and zero.count == 0


def test_gender_label_normalized_and_closed():
    assert GenderResult.model_validate({"gender": "Female"}).gender == "female"
    assert GenderResult.model_validate({"gender": None}).gender is None
    with pytest.raises(ValidationError):
        GenderResult.model_validate({"gender": "unknown"})


def test_unknown_keys_ignored():
    res = AgeResult.model_validate({"count": 2, "name": "ida", "age": 71, "extra": True})
    assert res.age == 71
    assert not hasattr(res, "extra")


def test_nationality_keeps_server_order_and_clamps():
    res = NationalityResult.model_validate({
        "name": "peter",
        "country": [
            {"country_id": "SK", "probability": 1.2},
            {"country_id": "UA"},
            {"probability": 0.1},
            {"country_id": "DE", "probability": 0.05},
        ],
    })
    assert [c.country_id for c in res.country] == ["SK", "UA", None, "DE"]
    assert res.country[0].probability == 1.0
    assert res.country[1].probability is None


def test_preferences_default_false_and_snapshot_keys():
    prefs = Preferences()
    assert prefs.guess_age_enabled is False
    assert prefs.guess_nationality_enabled is False
    assert prefs.to_snapshot() == {"guessAgeEnabled": False, "guessNationalityEnabled": False}
    assert Preferences.model_validate({"guessAgeEnabled": True}).guess_age_enabled is True


@pytest.mark.parametrize("raw", ["", "   ", "\n\t", None])
def test_lookup_query_rejects_blank(raw):
    with pytest.raises(EmptyNameError):
        LookupQuery.parse(raw)


def test_lookup_query_trims():
    assert LookupQuery.parse("  Jo Ann \n").name == "Jo Ann"


def test_outcome_is_either_result_or_error():
    ok = LookupOutcome(gender=GenderResult(gender="male"))
    failed = LookupOutcome.failure(UnprocessableError("name is required"))
    assert ok.ok and not failed.ok
    with pytest.raises(ValueError):
        LookupOutcome()
    with pytest.raises(ValueError):
        LookupOutcome(gender=GenderResult(), error=UnprocessableError())
    with pytest.raises(ValueError):
        LookupOutcome(error=UnprocessableError(), age=AgeResult(age=3))
