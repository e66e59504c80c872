from __future__ import annotations

from typing import Any, Dict, List, Optional

from models.lookup_outcome import LookupOutcome
from models.nationality_result import NationalityResult


TOP_COUNTRIES = 3


def _percent(probability: Optional[float]) -> int:
    # Truncated, not rounded: 0.999 shows as 99%
    return int(max(0.0, min(probability or 0.0, 1.0)) * 100)


def samples_line(count: Optional[int], name: Optional[str]) -> Optional[str]:
    """'Based on N samples for "name"', shown only when both values are known."""
    if count is None or name is None:
        return None
    return f'Based on {count} samples for "{name}"'


def _countries(result: NationalityResult) -> List[Dict[str, Any]]:
    out: List[Dict[str, Any]] = []
    for c in (result.country or [])[:TOP_COUNTRIES]:
        out.append({
            "country_id": c.country_id or "?",
            "percent": _percent(c.probability),
        })
    return out


def format_outcome(outcome: LookupOutcome) -> Dict[str, Any]:
    """Shape a lookup outcome for display."""
    if outcome.error is not None:
        return {
            "ok": False,
            "error": {"kind": outcome.error.kind, "message": outcome.error.describe()},
        }

    g = outcome.gender
    data: Dict[str, Any] = {
        "ok": True,
        "gender": {
            "label": g.gender or "unknown",
            "probability": g.probability,
            "percent": _percent(g.probability) if g.probability is not None else None,
            "samples": samples_line(g.count, g.name),
        },
    }
    if outcome.age is not None:
        data["age"] = {
            "age": outcome.age.age if outcome.age.age is not None else "unknown",
            "samples": samples_line(outcome.age.count, outcome.age.name),
        }
    if outcome.nationality is not None and outcome.nationality.country:
        data["nationality"] = {
            "countries": _countries(outcome.nationality),
            "samples": samples_line(outcome.nationality.count, outcome.nationality.name),
        }
    return data
