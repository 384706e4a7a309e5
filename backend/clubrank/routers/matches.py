# backend/clubrank/routers/matches.py
import logging
import uuid
from collections import defaultdict
from typing import Any, Sequence

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import MATCH_CREATE_RATE_LIMIT
from ..db import get_session
from ..exceptions import (
    CategoryNotFound,
    ClubNotFound,
    MatchNotFound,
    PlayersNotFound,
    ProblemDetail,
    http_problem,
)
from ..models import Category, Club, Match, MatchParticipant, Player
from ..rate_limit import limiter
from ..schemas import (
    MatchCreate,
    MatchOut,
    MatchPageOut,
    ParticipantOut,
    RankingEntryOut,
    RankingOut,
)
from ..services.outcome import resolve_match_outcome
from ..services.ranking import MatchResults, compute_standings
from ..services.validation import ValidationError, validate_match_structure
from ..time_utils import coerce_utc, day_bounds, utcnow
from .categories import category_player_ids

logger = logging.getLogger(__name__)

# Resource-only prefix; versioning is added in main.py
router = APIRouter(
    prefix="/matches",
    tags=["matches"],
    responses={400: {"model": ProblemDetail}, 404: {"model": ProblemDetail}},
)


def _bad_request(detail: str, code: str = "match_validation_error"):
    return http_problem(status_code=400, detail=detail, code=code)


def _to_match_out(match: Match, participants: Sequence[MatchParticipant]) -> MatchOut:
    ordered = sorted(participants, key=lambda p: (p.team_index, p.position))
    return MatchOut(
        id=match.id,
        categoryId=match.category_id,
        clubId=match.club_id,
        format=match.format,
        bestOf=match.best_of,
        decidingSetType=match.deciding_set_type,
        teams=match.teams,
        sets=match.sets,
        playedAt=coerce_utc(match.played_at),
        createdAt=coerce_utc(match.created_at),
        participants=[
            ParticipantOut(
                playerId=p.player_id, teamIndex=p.team_index, result=p.result
            )
            for p in ordered
        ],
    )


async def _participants_by_match(
    session: AsyncSession, match_ids: Sequence[str]
) -> dict[str, list[MatchParticipant]]:
    grouped: dict[str, list[MatchParticipant]] = defaultdict(list)
    if not match_ids:
        return grouped
    rows = (
        await session.execute(
            select(MatchParticipant).where(MatchParticipant.match_id.in_(match_ids))
        )
    ).scalars().all()
    for participant in rows:
        grouped[participant.match_id].append(participant)
    return grouped


async def _get_category(session: AsyncSession, category_id: str) -> Category:
    category = await session.get(Category, category_id)
    if not category:
        raise CategoryNotFound(category_id)
    return category


def _date_conditions(start: str | None, end: str | None) -> list[Any]:
    try:
        lower, upper = day_bounds(start, end)
    except ValueError as exc:
        raise _bad_request(str(exc), code="match_invalid_date") from exc
    conditions = []
    if lower is not None:
        conditions.append(Match.played_at >= lower)
    if upper is not None:
        conditions.append(Match.played_at <= upper)
    return conditions


async def _match_page(
    session: AsyncSession, conditions: list[Any], limit: int, offset: int
) -> MatchPageOut:
    total = (
        await session.execute(
            select(func.count()).select_from(Match).where(*conditions)
        )
    ).scalar() or 0
    stmt = (
        select(Match)
        .where(*conditions)
        .order_by(Match.played_at.desc(), Match.created_at.desc(), Match.id)
        .limit(limit)
        .offset(offset)
    )
    page = (await session.execute(stmt)).scalars().all()
    participants = await _participants_by_match(session, [m.id for m in page])
    return MatchPageOut(
        items=[_to_match_out(m, participants.get(m.id, [])) for m in page],
        total=total,
        limit=limit,
        offset=offset,
    )


# POST /api/v1/matches
async def create_match(
    body: MatchCreate,
    session: AsyncSession,
    *,
    actor: str | None = None,
) -> MatchOut:
    """Validate a completed match, derive every player's result and persist it.

    Lookups and rule checks run first and stop at the first problem; the
    match and its participants are written in a single commit at the end.
    """

    club = await session.get(Club, body.clubId)
    if not club:
        raise ClubNotFound(body.clubId)

    category = await _get_category(session, body.categoryId)
    if category.club_id != body.clubId:
        raise _bad_request("Category does not belong to club")

    teams = [team.players for team in body.teams]
    try:
        normalized = validate_match_structure(
            match_format=body.format,
            best_of=body.bestOf,
            teams=teams,
            set_count=len(body.sets),
            deciding_set_type=body.decidingSetType,
        )
    except ValidationError as exc:
        raise _bad_request(exc.detail) from exc

    player_ids = normalized.player_ids
    players = (
        await session.execute(select(Player).where(Player.id.in_(player_ids)))
    ).scalars().all()
    if len(players) != len(player_ids):
        found = {p.id for p in players}
        raise PlayersNotFound([pid for pid in player_ids if pid not in found])
    if any(p.club_id != body.clubId for p in players):
        raise _bad_request("Player does not belong to club")
    roster = set(await category_player_ids(session, category.id))
    if any(pid not in roster for pid in player_ids):
        raise _bad_request("Player is not in this category")

    if len(body.sets) > body.bestOf:
        raise _bad_request("Number of sets exceeds bestOf")

    try:
        outcome = resolve_match_outcome(
            body.sets,
            normalized.teams,
            best_of=body.bestOf,
            deciding_set_type=normalized.deciding_set_type,
        )
    except ValidationError as exc:
        raise _bad_request(exc.detail) from exc

    mid = uuid.uuid4().hex
    match = Match(
        id=mid,
        category_id=category.id,
        club_id=club.id,
        format=body.format,
        best_of=body.bestOf,
        deciding_set_type=normalized.deciding_set_type,
        teams=[team.model_dump() for team in body.teams],
        sets=[s.model_dump(exclude_none=True) for s in body.sets],
        played_at=body.playedAt or utcnow(),
        created_at=utcnow(),
    )
    session.add(match)
    participants = [
        MatchParticipant(
            id=uuid.uuid4().hex,
            match_id=mid,
            player_id=p.player_id,
            team_index=p.team_index,
            position=p.position,
            result=p.result,
        )
        for p in outcome.participants
    ]
    session.add_all(participants)
    await session.commit()

    logger.info(
        "match.created match=%s category=%s club=%s sets=%s-%s actor=%s",
        mid,
        category.id,
        club.id,
        outcome.set_wins[0],
        outcome.set_wins[1],
        actor or "unknown",
    )
    return _to_match_out(match, participants)


@router.post("", response_model=MatchOut, status_code=status.HTTP_201_CREATED)
@limiter.limit(MATCH_CREATE_RATE_LIMIT)
async def create_match_route(
    request: Request,
    body: MatchCreate,
    session: AsyncSession = Depends(get_session),
) -> MatchOut:
    return await create_match(
        body, session, actor=request.headers.get("X-Actor-Id")
    )


# GET /api/v1/matches
@router.get("", response_model=MatchPageOut)
async def list_matches(
    club_id: str | None = Query(None, alias="clubId"),
    category_id: str | None = Query(None, alias="categoryId"),
    start: str | None = Query(None, alias="from"),
    end: str | None = Query(None, alias="to"),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    session: AsyncSession = Depends(get_session),
) -> MatchPageOut:
    conditions = _date_conditions(start, end)
    if club_id:
        conditions.append(Match.club_id == club_id)
    if category_id:
        await _get_category(session, category_id)
        conditions.append(Match.category_id == category_id)
    return await _match_page(session, conditions, limit, offset)


# GET /api/v1/matches/by-category/{category_id}
@router.get("/by-category/{category_id}", response_model=MatchPageOut)
async def list_matches_by_category(
    category_id: str,
    player_id: str | None = Query(None, alias="playerId"),
    start: str | None = Query(None, alias="from"),
    end: str | None = Query(None, alias="to"),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    session: AsyncSession = Depends(get_session),
) -> MatchPageOut:
    await _get_category(session, category_id)
    conditions = [Match.category_id == category_id, *_date_conditions(start, end)]
    if player_id:
        conditions.append(
            Match.id.in_(
                select(MatchParticipant.match_id).where(
                    MatchParticipant.player_id == player_id
                )
            )
        )
    return await _match_page(session, conditions, limit, offset)


# GET /api/v1/matches/ranking/{category_id}
@router.get("/ranking/{category_id}", response_model=RankingOut)
async def category_ranking(
    category_id: str,
    q: str | None = Query(None, description="Search over player name or email"),
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    session: AsyncSession = Depends(get_session),
) -> RankingOut:
    await _get_category(session, category_id)

    matches = (
        await session.execute(
            select(Match)
            .where(Match.category_id == category_id)
            .order_by(Match.played_at, Match.created_at)
        )
    ).scalars().all()
    if not matches:
        return RankingOut(categoryId=category_id, total=0, limit=limit, offset=offset)

    participants = await _participants_by_match(session, [m.id for m in matches])
    standings = compute_standings(
        MatchResults(
            played_at=coerce_utc(m.played_at or m.created_at),
            participants=[
                (p.player_id, p.result)
                for p in sorted(
                    participants.get(m.id, []),
                    key=lambda part: (part.team_index, part.position),
                )
            ],
        )
        for m in matches
    )

    player_ids = [row.player_id for row in standings]
    players = {
        p.id: p
        for p in (
            await session.execute(select(Player).where(Player.id.in_(player_ids)))
        ).scalars().all()
    }

    entries: list[RankingEntryOut] = []
    for position, row in enumerate(standings, start=1):
        player = players.get(row.player_id)
        entries.append(
            RankingEntryOut(
                position=position,
                playerId=row.player_id,
                name=player.name if player else "Unknown Player",
                email=(player.email if player else None) or "",
                phone=(player.phone if player else None) or "",
                clubId=(player.club_id if player else None) or "",
                photoUrl=(player.photo_url if player else None) or "",
                points=row.points,
                wins=row.wins,
                losses=row.losses,
                draws=row.draws,
                matches=row.matches,
                lastMatchAt=row.last_match_at,
            )
        )

    logger.debug(
        "ranking.rebuild category=%s players=%d matches=%d",
        category_id,
        len(entries),
        len(matches),
    )

    term = (q or "").strip().lower()
    if term:
        entries = [
            e for e in entries if term in e.name.lower() or term in e.email.lower()
        ]

    return RankingOut(
        categoryId=category_id,
        items=entries[offset : offset + limit],
        total=len(entries),
        limit=limit,
        offset=offset,
    )


# GET /api/v1/matches/{mid}
@router.get("/{mid}", response_model=MatchOut)
async def get_match(mid: str, session: AsyncSession = Depends(get_session)) -> MatchOut:
    match = await session.get(Match, mid)
    if not match:
        raise MatchNotFound(mid)
    participants = await _participants_by_match(session, [mid])
    return _to_match_out(match, participants.get(mid, []))
