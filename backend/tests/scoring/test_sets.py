import os, sys
import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..")))
from clubrank.scoring import sets
from clubrank.services.validation import ValidationError


def _set(a, b, tiebreak=None):
    score = {"games": [{"teamIndex": 0, "score": a}, {"teamIndex": 1, "score": b}]}
    if tiebreak is not None:
        score["tiebreak"] = [
            {"teamIndex": 0, "score": tiebreak[0]},
            {"teamIndex": 1, "score": tiebreak[1]},
        ]
    return score


def _regular(index=0):
    return sets.SetContext(index=index, best_of=3, total_sets=2)


def _deciding(kind):
    return sets.SetContext(index=2, best_of=3, total_sets=3, deciding_set_type=kind)


@pytest.mark.parametrize(
    "a, b, winner",
    [(6, 0, 0), (6, 4, 0), (4, 6, 1), (7, 5, 0), (5, 7, 1)],
)
def test_standard_set_accepts_regular_scores(a, b, winner):
    outcome = sets.resolve_set(_set(a, b), _regular())
    assert outcome == sets.SetOutcome(index=0, winner=winner)


@pytest.mark.parametrize(
    "a, b",
    [(6, 5), (5, 4), (7, 4), (3, 2)],
)
def test_standard_set_rejects_unfinished_scores(a, b):
    with pytest.raises(ValidationError) as exc:
        sets.resolve_set(_set(a, b), _regular())
    assert exc.value.detail == "Set 1 must finish 6-0..6-4 or 7-5 (tie-break at 6-6)"


def test_level_games_require_six_all():
    with pytest.raises(ValidationError) as exc:
        sets.resolve_set(_set(5, 5), _regular())
    assert exc.value.detail == "Set 1 cannot end in a draw unless 6-6"


def test_six_all_is_decided_by_tiebreak():
    assert sets.resolve_set(_set(6, 6, (7, 5)), _regular()).winner == 0
    assert sets.resolve_set(_set(6, 6, (10, 12)), _regular()).winner == 1


def test_six_all_without_tiebreak_is_rejected():
    with pytest.raises(ValidationError) as exc:
        sets.resolve_set(_set(6, 6), _regular())
    assert exc.value.detail == "Set 1 requires tiebreak scores"


@pytest.mark.parametrize("tiebreak", [(6, 6), (7, 6), (5, 3)])
def test_unfinished_tiebreak_is_rejected(tiebreak):
    with pytest.raises(ValidationError) as exc:
        sets.resolve_set(_set(6, 6, tiebreak), _regular())
    assert exc.value.detail == "Set 1 tiebreak must reach 7 with 2-point lead"


def test_seven_six_with_matching_tiebreak():
    assert sets.resolve_set(_set(7, 6, (7, 4)), _regular(1)).winner == 0
    assert sets.resolve_set(_set(6, 7, (3, 7)), _regular(1)).winner == 1


def test_seven_six_tiebreak_must_agree_with_games():
    with pytest.raises(ValidationError) as exc:
        sets.resolve_set(_set(7, 6, (4, 7)), _regular(1))
    assert exc.value.detail == "Set 2 tiebreak winner must match games winner"


def test_tiebreak_only_allowed_after_six_all():
    with pytest.raises(ValidationError) as exc:
        sets.resolve_set(_set(6, 3, (7, 0)), _regular())
    assert exc.value.detail == "Set 1 cannot include tiebreak unless 6-6 or 7-6"


def test_games_above_seven_rejected_outside_deciding_set():
    with pytest.raises(ValidationError) as exc:
        sets.resolve_set(_set(8, 6), _regular())
    assert exc.value.detail == "Set 1 score must be valid"


@pytest.mark.parametrize(
    "games, msg",
    [
        ([{"teamIndex": 0, "score": 6}], "Set 1 must have scores for both teams"),
        (
            [{"teamIndex": 0, "score": 6}, {"teamIndex": 2, "score": 3}],
            "Set 1 has invalid team index",
        ),
        (
            [{"teamIndex": 0, "score": "6"}, {"teamIndex": 1, "score": 3}],
            "Set 1 score must be valid",
        ),
        (
            [{"teamIndex": 0, "score": -1}, {"teamIndex": 1, "score": 6}],
            "Set 1 score must be valid",
        ),
    ],
    ids=["missing-team", "bad-index", "non-integer", "negative"],
)
def test_malformed_games_are_rejected(games, msg):
    with pytest.raises(ValidationError) as exc:
        sets.resolve_set({"games": games}, _regular())
    assert exc.value.detail == msg


def test_malformed_tiebreak_is_rejected():
    score = _set(6, 6)
    score["tiebreak"] = [{"teamIndex": 0, "score": 7}]
    with pytest.raises(ValidationError) as exc:
        sets.resolve_set(score, _regular())
    assert exc.value.detail == "Set 1 tiebreak must include both teams"

    with pytest.raises(ValidationError) as exc:
        sets.resolve_set(_set(6, 6, (7, -1)), _regular())
    assert exc.value.detail == "Set 1 tiebreak score must be valid"


def test_deciding_set_detection():
    assert _deciding("STANDARD").is_deciding
    assert not sets.SetContext(index=1, best_of=3, total_sets=3).is_deciding
    assert not sets.SetContext(index=2, best_of=5, total_sets=3).is_deciding
    assert not sets.SetContext(index=2, best_of=3, total_sets=2).is_deciding


def test_deciding_set_rule_mapping():
    assert sets.deciding_set_rule("STANDARD") == sets.StandardSet()
    assert sets.deciding_set_rule("ADVANTAGE") == sets.AdvantageSet()
    assert sets.deciding_set_rule("SUPER_TIEBREAK_7") == sets.SuperTiebreakSet(7)
    assert sets.deciding_set_rule("SUPER_TIEBREAK_10") == sets.SuperTiebreakSet(10)
    # only the deciding set uses the configured rule
    ctx = sets.SetContext(
        index=0, best_of=3, total_sets=3, deciding_set_type="ADVANTAGE"
    )
    assert ctx.rule() == sets.StandardSet()


def test_super_tiebreak_deciding_set():
    ctx = _deciding("SUPER_TIEBREAK_10")
    assert sets.resolve_set(_set(0, 0, (10, 8)), ctx) == sets.SetOutcome(2, 0)
    assert sets.resolve_set(_set(0, 0, (11, 13)), ctx).winner == 1

    with pytest.raises(ValidationError) as exc:
        sets.resolve_set(_set(0, 0, (10, 9)), ctx)
    assert exc.value.detail == "Set 3 super tie-break must reach 10 with 2-point lead"


def test_super_tiebreak_seven_target():
    ctx = _deciding("SUPER_TIEBREAK_7")
    assert sets.resolve_set(_set(0, 0, (7, 5)), ctx).winner == 0
    with pytest.raises(ValidationError) as exc:
        sets.resolve_set(_set(0, 0, (6, 4)), ctx)
    assert exc.value.detail == "Set 3 super tie-break must reach 7 with 2-point lead"


@pytest.mark.parametrize("kind, target", [("SUPER_TIEBREAK_7", 7), ("SUPER_TIEBREAK_10", 10)])
def test_level_super_tiebreak_is_rejected(kind, target):
    with pytest.raises(ValidationError) as exc:
        sets.resolve_set(_set(0, 0, (6, 6)), _deciding(kind))
    assert exc.value.detail == (
        f"Set 3 super tie-break must reach {target} with 2-point lead"
    )


def test_super_tiebreak_requires_zero_games_and_scores():
    ctx = _deciding("SUPER_TIEBREAK_10")
    with pytest.raises(ValidationError) as exc:
        sets.resolve_set(_set(1, 0, (10, 8)), ctx)
    assert exc.value.detail == "Set 3 must be 0-0 for super tie-break"

    with pytest.raises(ValidationError) as exc:
        sets.resolve_set(_set(0, 0), ctx)
    assert exc.value.detail == "Set 3 requires super tie-break scores"


def test_advantage_deciding_set():
    ctx = _deciding("ADVANTAGE")
    assert sets.resolve_set(_set(8, 6), ctx).winner == 0
    assert sets.resolve_set(_set(10, 12), ctx).winner == 1
    assert sets.resolve_set(_set(6, 3), ctx).winner == 0

    with pytest.raises(ValidationError) as exc:
        sets.resolve_set(_set(7, 6), ctx)
    assert exc.value.detail == "Set 3 must finish with 2-game lead in advantage set"

    with pytest.raises(ValidationError) as exc:
        sets.resolve_set(_set(7, 6, (7, 5)), ctx)
    assert exc.value.detail == "Set 3 cannot include tiebreak in advantage set"


def test_standard_deciding_set_may_not_run_long():
    with pytest.raises(ValidationError) as exc:
        sets.resolve_set(_set(8, 6), _deciding("STANDARD"))
    assert exc.value.detail == "Set 3 must finish 6-0..6-4 or 7-5 (tie-break at 6-6)"


def test_resolve_set_accepts_objects():
    class Score:
        def __init__(self, team_index, score):
            self.teamIndex = team_index
            self.score = score

    class SetScore:
        games = [Score(0, 3), Score(1, 6)]
        tiebreak = None

    assert sets.resolve_set(SetScore(), _regular()).winner == 1


def test_score_table_helpers():
    table = sets.ScoreTable(4, 6)
    assert (table.high, table.low, table.leader, table.is_level) == (6, 4, 1, False)
    assert sets.ScoreTable(6, 6).is_level
