from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .errors import NameLookupError

from .age_result import AgeResult
from .gender_result import GenderResult
from .nationality_result import NationalityResult


@dataclass(frozen=True)
class LookupOutcome:
    """Either a gender result with optional enrichments, or exactly one error."""

    gender: Optional[GenderResult] = None
    age: Optional[AgeResult] = None
    nationality: Optional[NationalityResult] = None
    error: Optional[NameLookupError] = None

    def __post_init__(self) -> None:
        if (self.gender is None) == (self.error is None):
            raise ValueError("LookupOutcome needs either a gender result or an error, not both or neither")
        if self.error is not None and (self.age is not None or self.nationality is not None):
            raise ValueError("A failed LookupOutcome carries no results")

    @classmethod
    def failure(cls, error: NameLookupError) -> "LookupOutcome":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None
