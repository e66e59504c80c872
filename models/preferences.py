from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


GUESS_AGE_KEY = "guessAgeEnabled"
GUESS_NATIONALITY_KEY = "guessNationalityEnabled"

# Keys persisted locally and replicated to the paired peer
MIRRORED_KEYS: tuple[str, ...] = (GUESS_AGE_KEY, GUESS_NATIONALITY_KEY)


class Preferences(BaseModel):
    """User preferences gating the optional enrichments."""

    guess_age_enabled: bool = Field(default=False, alias=GUESS_AGE_KEY)
    guess_nationality_enabled: bool = Field(default=False, alias=GUESS_NATIONALITY_KEY)

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    def to_snapshot(self) -> dict[str, bool]:
        return self.model_dump(by_alias=True)
