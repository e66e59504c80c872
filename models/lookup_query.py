from __future__ import annotations

from dataclasses import dataclass

from .errors import EmptyNameError


@dataclass(frozen=True)
class LookupQuery:
    name: str

    @classmethod
    def parse(cls, raw: str | None) -> "LookupQuery":
        """Trim the user input; reject empty or whitespace-only names before any request."""
        trimmed = (raw or "").strip()
        if not trimmed:
            raise EmptyNameError()
        return cls(name=trimmed)
