from .gender_result import GenderResult
from .age_result import AgeResult
from .nationality_result import CountryProbability, NationalityResult
from .preferences import MIRRORED_KEYS, Preferences
from .lookup_query import LookupQuery
from .lookup_outcome import LookupOutcome

__all__ = [
    "GenderResult",
    "AgeResult",
    "CountryProbability",
    "NationalityResult",
    "MIRRORED_KEYS",
    "Preferences",
    "LookupQuery",
    "LookupOutcome",
]
