import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..db import get_session
from ..exceptions import ClubNotFound, PlayerNotFound, ProblemDetail
from ..models import Club, Player
from ..schemas import PlayerCreate, PlayerListOut, PlayerOut

router = APIRouter(
    prefix="/players",
    tags=["players"],
    responses={400: {"model": ProblemDetail}, 404: {"model": ProblemDetail}},
)


def _to_player_out(player: Player) -> PlayerOut:
    return PlayerOut(
        id=player.id,
        name=player.name,
        email=player.email,
        phone=player.phone,
        photoUrl=player.photo_url,
        clubId=player.club_id,
    )


@router.post("", response_model=PlayerOut, status_code=status.HTTP_201_CREATED)
async def create_player(
    body: PlayerCreate,
    session: AsyncSession = Depends(get_session),
) -> PlayerOut:
    if not await session.get(Club, body.clubId):
        raise ClubNotFound(body.clubId)
    player = Player(
        id=uuid.uuid4().hex,
        name=body.name,
        email=body.email,
        phone=body.phone,
        photo_url=body.photoUrl,
        club_id=body.clubId,
    )
    session.add(player)
    await session.commit()
    return _to_player_out(player)


@router.get("", response_model=PlayerListOut)
async def list_players(
    q: str = "",
    club_id: str | None = Query(None, alias="clubId"),
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    session: AsyncSession = Depends(get_session),
) -> PlayerListOut:
    conditions = []
    if club_id:
        conditions.append(Player.club_id == club_id)
    if q:
        conditions.append(Player.name.ilike(f"%{q}%"))

    total = (
        await session.execute(
            select(func.count()).select_from(Player).where(*conditions)
        )
    ).scalar() or 0
    rows = (
        await session.execute(
            select(Player)
            .where(*conditions)
            .order_by(Player.name, Player.id)
            .limit(limit)
            .offset(offset)
        )
    ).scalars().all()
    return PlayerListOut(
        players=[_to_player_out(p) for p in rows],
        total=total,
        limit=limit,
        offset=offset,
    )


@router.get("/{player_id}", response_model=PlayerOut)
async def get_player(
    player_id: str, session: AsyncSession = Depends(get_session)
) -> PlayerOut:
    player = await session.get(Player, player_id)
    if not player:
        raise PlayerNotFound(player_id)
    return _to_player_out(player)
