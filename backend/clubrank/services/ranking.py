from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, NamedTuple, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

RESULT_POINTS: dict[str, int] = {"WIN": 30, "DRAW": 10, "LOSS": 0}


class MatchResults(NamedTuple):
    """The participant results of one persisted match."""

    played_at: Optional[datetime]
    participants: Sequence[Tuple[str, str]]


@dataclass
class StandingsRow:
    player_id: str
    points: int = 0
    wins: int = 0
    losses: int = 0
    draws: int = 0
    matches: int = 0
    last_match_at: Optional[datetime] = None


def compute_standings(matches: Iterable[MatchResults]) -> list[StandingsRow]:
    """Fold match results into standings sorted by points.

    Each ``WIN`` is worth 30 points, a ``DRAW`` 10 and a ``LOSS`` nothing.
    Only players that took part in at least one match get a row. Ties on
    points are ordered by player id so the output is reproducible.
    """

    rows: dict[str, StandingsRow] = {}
    for match in matches:
        for player_id, result in match.participants:
            points = RESULT_POINTS.get(result)
            if points is None:
                logger.warning(
                    "Ignoring unknown result %r for player %s", result, player_id
                )
                continue
            row = rows.get(player_id)
            if row is None:
                row = rows[player_id] = StandingsRow(player_id=player_id)
            row.points += points
            row.matches += 1
            if result == "WIN":
                row.wins += 1
            elif result == "LOSS":
                row.losses += 1
            else:
                row.draws += 1
            if match.played_at is not None and (
                row.last_match_at is None or match.played_at > row.last_match_at
            ):
                row.last_match_at = match.played_at

    return sorted(rows.values(), key=lambda r: (-r.points, r.player_id))
