"""Set scoring rules for tennis and padel scorelines.

A submitted set carries ``games`` (one ``{teamIndex, score}`` entry per team)
and an optional ``tiebreak`` of the same shape. Only the deciding set of a
best-of-3 match may be played as an advantage set or a super tie-break; every
other set is a standard set with a tiebreak to 7 at 6-6.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, NamedTuple, Optional, Sequence, Union

from ..services.validation import ValidationError

TIEBREAK_TO = 7
TIEBREAK_WIN_BY = 2
MAX_GAMES = 7
SET_GAMES = 6
SUPER_TIEBREAK_TARGETS = {"SUPER_TIEBREAK_7": 7, "SUPER_TIEBREAK_10": 10}


class ScoreTable(NamedTuple):
    """Score of both teams for one games or tiebreak exchange."""

    team0: int
    team1: int

    @property
    def high(self) -> int:
        return max(self.team0, self.team1)

    @property
    def low(self) -> int:
        return min(self.team0, self.team1)

    @property
    def leader(self) -> int:
        return 0 if self.team0 > self.team1 else 1

    @property
    def is_level(self) -> bool:
        return self.team0 == self.team1


class SetOutcome(NamedTuple):
    index: int
    winner: int


def _get(obj: Any, name: str) -> Any:
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def _score_value(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    return None


def _collect(entries: Sequence[Any], number: int, label: str) -> Dict[int, Any]:
    scores: Dict[int, Any] = {}
    for entry in entries or []:
        team_index = _get(entry, "teamIndex")
        if team_index not in (0, 1) or isinstance(team_index, bool):
            raise ValidationError(f"Set {number}{label} has invalid team index")
        scores[team_index] = _get(entry, "score")
    return scores


def games_table(games: Sequence[Any], number: int) -> ScoreTable:
    scores = _collect(games, number, "")
    if 0 not in scores or 1 not in scores:
        raise ValidationError(f"Set {number} must have scores for both teams")
    team0, team1 = _score_value(scores[0]), _score_value(scores[1])
    if team0 is None or team1 is None:
        raise ValidationError(f"Set {number} score must be valid")
    return ScoreTable(team0, team1)


def tiebreak_table(tiebreak: Sequence[Any], number: int) -> ScoreTable:
    scores = _collect(tiebreak, number, " tiebreak")
    if 0 not in scores or 1 not in scores:
        raise ValidationError(f"Set {number} tiebreak must include both teams")
    team0, team1 = _score_value(scores[0]), _score_value(scores[1])
    if team0 is None or team1 is None or team0 < 0 or team1 < 0:
        raise ValidationError(f"Set {number} tiebreak score must be valid")
    return ScoreTable(team0, team1)


def _tiebreak_finished(score: ScoreTable, target: int) -> bool:
    return score.high >= target and score.high - score.low >= TIEBREAK_WIN_BY


@dataclass(frozen=True)
class StandardSet:
    """First to 6 games with a 2-game lead, 7-5, or 7-6 after a tiebreak."""

    def winner(
        self, games: ScoreTable, tiebreak: Sequence[Any], number: int
    ) -> int:
        if games.is_level:
            if games.team0 != SET_GAMES:
                raise ValidationError(
                    f"Set {number} cannot end in a draw unless 6-6"
                )
            return self._tiebreak_winner(tiebreak, number)

        if tiebreak:
            if games.high != MAX_GAMES or games.low != SET_GAMES:
                raise ValidationError(
                    f"Set {number} cannot include tiebreak unless 6-6 or 7-6"
                )
            winner = self._tiebreak_winner(tiebreak, number)
            if winner != games.leader:
                raise ValidationError(
                    f"Set {number} tiebreak winner must match games winner"
                )
            return winner

        if games.high == SET_GAMES and games.low <= SET_GAMES - 2:
            return games.leader
        if games.high == MAX_GAMES and games.low == SET_GAMES - 1:
            return games.leader
        raise ValidationError(
            f"Set {number} must finish 6-0..6-4 or 7-5 (tie-break at 6-6)"
        )

    def _tiebreak_winner(self, tiebreak: Sequence[Any], number: int) -> int:
        if not tiebreak:
            raise ValidationError(f"Set {number} requires tiebreak scores")
        score = tiebreak_table(tiebreak, number)
        if not _tiebreak_finished(score, TIEBREAK_TO):
            raise ValidationError(
                f"Set {number} tiebreak must reach 7 with 2-point lead"
            )
        return score.leader


@dataclass(frozen=True)
class AdvantageSet:
    """Played on until one side leads by two games; no tiebreak."""

    def winner(
        self, games: ScoreTable, tiebreak: Sequence[Any], number: int
    ) -> int:
        if tiebreak:
            raise ValidationError(
                f"Set {number} cannot include tiebreak in advantage set"
            )
        if games.high >= SET_GAMES and games.high - games.low >= 2:
            return games.leader
        raise ValidationError(
            f"Set {number} must finish with 2-game lead in advantage set"
        )


@dataclass(frozen=True)
class SuperTiebreakSet:
    """The whole set is one tiebreak to ``target`` points; no games are played."""

    target: int

    def winner(
        self, games: ScoreTable, tiebreak: Sequence[Any], number: int
    ) -> int:
        if games.team0 != 0 or games.team1 != 0:
            raise ValidationError(
                f"Set {number} must be 0-0 for super tie-break"
            )
        if not tiebreak:
            raise ValidationError(
                f"Set {number} requires super tie-break scores"
            )
        score = tiebreak_table(tiebreak, number)
        if not _tiebreak_finished(score, self.target):
            raise ValidationError(
                f"Set {number} super tie-break must reach {self.target} with 2-point lead"
            )
        return score.leader


SetRule = Union[StandardSet, AdvantageSet, SuperTiebreakSet]


def deciding_set_rule(deciding_set_type: str) -> SetRule:
    """Map a ``decidingSetType`` value to the rule used for the deciding set."""

    if deciding_set_type == "ADVANTAGE":
        return AdvantageSet()
    target = SUPER_TIEBREAK_TARGETS.get(deciding_set_type)
    if target is not None:
        return SuperTiebreakSet(target)
    return StandardSet()


@dataclass(frozen=True)
class SetContext:
    """Where a set sits in the match; ``index`` is zero-based."""

    index: int
    best_of: int
    total_sets: int
    deciding_set_type: str = "STANDARD"

    @property
    def number(self) -> int:
        return self.index + 1

    @property
    def is_deciding(self) -> bool:
        return self.best_of == 3 and self.total_sets == 3 and self.index == 2

    def rule(self) -> SetRule:
        if not self.is_deciding:
            return StandardSet()
        return deciding_set_rule(self.deciding_set_type)


def resolve_set(set_score: Any, context: SetContext) -> SetOutcome:
    """Return the winner of one set or raise :class:`ValidationError`.

    ``set_score`` may be a mapping or an object exposing ``games`` and
    ``tiebreak``. Games above 7 are rejected outside the deciding set, which
    is the only set allowed to run long (advantage sets).
    """

    number = context.number
    games = games_table(_get(set_score, "games"), number)
    if games.low < 0 or (not context.is_deciding and games.high > MAX_GAMES):
        raise ValidationError(f"Set {number} score must be valid")

    tiebreak = _get(set_score, "tiebreak") or []
    winner = context.rule().winner(games, tiebreak, number)
    return SetOutcome(index=context.index, winner=winner)
