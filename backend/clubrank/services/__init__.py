"""Internal application services (pure helpers, no I/O)."""

from .validation import (
    ValidationError,
    normalize_deciding_set_type,
    validate_match_structure,
)
from .ranking import RESULT_POINTS, MatchResults, StandingsRow, compute_standings

__all__ = [
    "ValidationError",
    "normalize_deciding_set_type",
    "validate_match_structure",
    "RESULT_POINTS",
    "MatchResults",
    "StandingsRow",
    "compute_standings",
]
