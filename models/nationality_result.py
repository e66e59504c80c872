from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from .gender_result import clamp_probability


class CountryProbability(BaseModel):
    country_id: str | None = None
    probability: float | None = None

    model_config = ConfigDict(extra="ignore")

    @field_validator("probability")
    @classmethod
    def _clamp(cls, value: Optional[float]) -> Optional[float]:
        return clamp_probability(value)


class NationalityResult(BaseModel):
    """nationalize.io response. Country order is the server's; nothing is truncated here."""

    count: int | None = None
    name: str | None = None
    country: list[CountryProbability] | None = None

    model_config = ConfigDict(extra="ignore")
