import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..db import get_session
from ..exceptions import (
    CategoryNotFound,
    ClubNotFound,
    PlayerNotFound,
    ProblemDetail,
    http_problem,
)
from ..models import Category, CategoryPlayer, Club, Player
from ..schemas import CategoryCreate, CategoryOut

router = APIRouter(
    prefix="/categories",
    tags=["categories"],
    responses={400: {"model": ProblemDetail}, 404: {"model": ProblemDetail}},
)


async def category_player_ids(session: AsyncSession, category_id: str) -> list[str]:
    return list(
        (
            await session.execute(
                select(CategoryPlayer.player_id)
                .where(CategoryPlayer.category_id == category_id)
                .order_by(CategoryPlayer.player_id)
            )
        ).scalars().all()
    )


async def _to_category_out(session: AsyncSession, category: Category) -> CategoryOut:
    return CategoryOut(
        id=category.id,
        name=category.name,
        description=category.description,
        clubId=category.club_id,
        isDoubles=bool(category.is_doubles),
        players=await category_player_ids(session, category.id),
    )


@router.post("", response_model=CategoryOut, status_code=status.HTTP_201_CREATED)
async def create_category(
    body: CategoryCreate,
    session: AsyncSession = Depends(get_session),
) -> CategoryOut:
    if not await session.get(Club, body.clubId):
        raise ClubNotFound(body.clubId)
    category = Category(
        id=uuid.uuid4().hex,
        name=body.name,
        description=body.description,
        club_id=body.clubId,
        is_doubles=body.isDoubles,
    )
    session.add(category)
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise http_problem(
            status_code=409,
            detail="category already exists",
            code="category_exists",
        )
    return await _to_category_out(session, category)


@router.get("/{category_id}", response_model=CategoryOut)
async def get_category(
    category_id: str, session: AsyncSession = Depends(get_session)
) -> CategoryOut:
    category = await session.get(Category, category_id)
    if not category:
        raise CategoryNotFound(category_id)
    return await _to_category_out(session, category)


@router.post("/{category_id}/players/{player_id}", response_model=CategoryOut)
async def add_category_player(
    category_id: str,
    player_id: str,
    session: AsyncSession = Depends(get_session),
) -> CategoryOut:
    category = await session.get(Category, category_id)
    if not category:
        raise CategoryNotFound(category_id)
    player = await session.get(Player, player_id)
    if not player:
        raise PlayerNotFound(player_id)
    if player.club_id != category.club_id:
        raise http_problem(
            status_code=400,
            detail="Player does not belong to club",
            code="category_player_club_mismatch",
        )
    if await session.get(CategoryPlayer, (category_id, player_id)) is None:
        session.add(CategoryPlayer(category_id=category_id, player_id=player_id))
        await session.commit()
    return await _to_category_out(session, category)
