from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, field_validator


def clamp_probability(value: Optional[float]) -> Optional[float]:
    if value is None:
        return None
    return max(0.0, min(value, 1.0))


class GenderResult(BaseModel):
    """genderize.io response: every key may be absent or null."""

    count: int | None = None
    name: str | None = None
    gender: Literal["male", "female"] | None = None
    probability: float | None = None

    model_config = ConfigDict(extra="ignore")

    @field_validator("gender", mode="before")
    @classmethod
    def _lower_gender(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("probability")
    @classmethod
    def _clamp(cls, value: Optional[float]) -> Optional[float]:
        return clamp_probability(value)
