from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class AgeResult(BaseModel):
    """agify.io response."""

    count: int | None = None
    name: str | None = None
    age: int | None = None

    model_config = ConfigDict(extra="ignore")
