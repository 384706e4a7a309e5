"""Scoring rules for racquet-sport scorelines."""

from . import sets
from .sets import (
    AdvantageSet,
    ScoreTable,
    SetContext,
    SetOutcome,
    StandardSet,
    SuperTiebreakSet,
    deciding_set_rule,
    resolve_set,
)

__all__ = [
    "sets",
    "AdvantageSet",
    "ScoreTable",
    "SetContext",
    "SetOutcome",
    "StandardSet",
    "SuperTiebreakSet",
    "deciding_set_rule",
    "resolve_set",
]
