from dataclasses import dataclass
from typing import Any, List, Optional, Sequence


class ValidationError(Exception):
    """Raised when a submitted match is structurally invalid or its scores are illegal."""

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


TEAM_SIZES: dict[str, int] = {"SINGLES": 1, "DOUBLES": 2}
DECIDING_SET_TYPES = (
    "STANDARD",
    "ADVANTAGE",
    "SUPER_TIEBREAK_7",
    "SUPER_TIEBREAK_10",
)
DEFAULT_DECIDING_SET_TYPE = "STANDARD"
# Non-standard deciding sets are only allowed for this best-of count.
DECIDING_SET_BEST_OF = 3


def normalize_deciding_set_type(value: Any) -> str:
    """Return ``value`` when it is a known deciding-set type, else ``STANDARD``."""

    if isinstance(value, str) and value in DECIDING_SET_TYPES:
        return value
    return DEFAULT_DECIDING_SET_TYPE


@dataclass(frozen=True)
class NormalizedMatch:
    """Structural facts about a match that passed :func:`validate_match_structure`."""

    deciding_set_type: str
    team_size: int
    teams: List[List[str]]
    player_ids: List[str]


def validate_match_structure(
    *,
    match_format: str,
    best_of: int,
    teams: Sequence[Sequence[str]],
    set_count: int,
    deciding_set_type: Optional[str] = None,
) -> NormalizedMatch:
    """Validate the shape of a match submission.

    Rules, checked in order (the first failure is raised):
    - ``best_of`` must be a positive odd integer
    - a non-standard ``deciding_set_type`` requires ``best_of == 3``
    - exactly two teams
    - every team holds the number of players required by ``match_format``
    - no player appears twice across both teams
    - no more sets than ``best_of``
    """

    if isinstance(best_of, bool) or not isinstance(best_of, int) or best_of < 1:
        raise ValidationError("bestOf must be a positive odd number")
    if best_of % 2 == 0:
        raise ValidationError("bestOf must be an odd number")

    normalized_type = normalize_deciding_set_type(deciding_set_type)
    if (
        normalized_type != DEFAULT_DECIDING_SET_TYPE
        and best_of != DECIDING_SET_BEST_OF
    ):
        raise ValidationError("decidingSetType only applies to bestOf 3")

    if len(teams) != 2:
        raise ValidationError("Match must have exactly 2 teams")

    team_size = TEAM_SIZES.get(match_format)
    if team_size is None:
        formatted = ", ".join(sorted(TEAM_SIZES))
        raise ValidationError(f"format must be one of: {formatted}")
    for team in teams:
        if len(team) != team_size:
            raise ValidationError(f"Each team must have {team_size} player(s)")

    player_ids = [pid for team in teams for pid in team]
    if len(set(player_ids)) != len(player_ids):
        raise ValidationError("Duplicate players in teams")

    if set_count > best_of:
        raise ValidationError("Number of sets exceeds bestOf")

    return NormalizedMatch(
        deciding_set_type=normalized_type,
        team_size=team_size,
        teams=[list(team) for team in teams],
        player_ids=player_ids,
    )
