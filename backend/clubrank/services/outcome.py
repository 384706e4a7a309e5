"""Turn per-set winners into a match result for every participant."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, List, NamedTuple, Sequence, Tuple

from ..scoring.sets import SetContext, SetOutcome, resolve_set

WIN = "WIN"
LOSS = "LOSS"
DRAW = "DRAW"


class ParticipantResult(NamedTuple):
    player_id: str
    result: str
    team_index: int
    position: int


@dataclass(frozen=True)
class MatchOutcome:
    set_wins: Tuple[int, int]
    results: Tuple[str, str]
    participants: List[ParticipantResult]

    @property
    def winner_team(self) -> int | None:
        if WIN not in self.results:
            return None
        return self.results.index(WIN)


def team_results(set_wins: Sequence[int]) -> Tuple[str, str]:
    """Return ``(team0, team1)`` results for the given set-win counts.

    Level counts, including a match with no sets, are a draw for both teams.
    """

    team0, team1 = set_wins
    if team0 == team1:
        return DRAW, DRAW
    return (WIN, LOSS) if team0 > team1 else (LOSS, WIN)


def aggregate_outcome(
    set_outcomes: Iterable[SetOutcome], teams: Sequence[Sequence[str]]
) -> MatchOutcome:
    wins = [0, 0]
    for outcome in set_outcomes:
        wins[outcome.winner] += 1

    results = team_results(wins)
    participants = [
        ParticipantResult(
            player_id=pid,
            result=results[team_index],
            team_index=team_index,
            position=position,
        )
        for team_index, team in enumerate(teams)
        for position, pid in enumerate(team)
    ]
    return MatchOutcome(
        set_wins=(wins[0], wins[1]), results=results, participants=participants
    )


def resolve_match_outcome(
    sets: Sequence[Any],
    teams: Sequence[Sequence[str]],
    *,
    best_of: int,
    deciding_set_type: str = "STANDARD",
) -> MatchOutcome:
    """Resolve every set in order and aggregate the result.

    The first illegal set raises :class:`~clubrank.services.validation.ValidationError`.
    """

    total = len(sets)
    outcomes = [
        resolve_set(
            set_score,
            SetContext(
                index=index,
                best_of=best_of,
                total_sets=total,
                deciding_set_type=deciding_set_type,
            ),
        )
        for index, set_score in enumerate(sets)
    ]
    return aggregate_outcome(outcomes, teams)
