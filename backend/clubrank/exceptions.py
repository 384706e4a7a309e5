from fastapi import HTTPException
from pydantic import BaseModel
from typing import Optional


class ProblemDetail(BaseModel):
    """RFC 7807 compliant error response."""

    type: str = "about:blank"
    title: str
    detail: Optional[str] = None
    status: int
    instance: Optional[str] = None
    code: str


class DomainException(Exception):
    """Base class for domain-specific exceptions."""

    def __init__(
        self,
        status_code: int,
        title: str,
        *,
        code: str,
        detail: str | None = None,
        type_: str = "about:blank",
    ) -> None:
        super().__init__(detail or title)
        self.status_code = status_code
        self.title = title
        self.detail = detail
        self.type = type_
        self.code = code


class ClubNotFound(DomainException):
    def __init__(self, club_id: str) -> None:
        super().__init__(
            status_code=404,
            title="Club not found",
            detail=f"Club with id {club_id} not found",
            code="club_not_found",
        )


class CategoryNotFound(DomainException):
    def __init__(self, category_id: str) -> None:
        super().__init__(
            status_code=404,
            title="Category not found",
            detail=f"Category with id {category_id} not found",
            code="category_not_found",
        )


class PlayerNotFound(DomainException):
    def __init__(self, player_id: str) -> None:
        super().__init__(
            status_code=404,
            title="Player not found",
            detail=f"Player with id {player_id} not found",
            code="player_not_found",
        )


class PlayersNotFound(DomainException):
    def __init__(self, player_ids: list[str]) -> None:
        super().__init__(
            status_code=404,
            title="Players not found",
            detail="One or more players not found",
            code="players_not_found",
        )
        self.player_ids = player_ids


class MatchNotFound(DomainException):
    def __init__(self, match_id: str) -> None:
        super().__init__(
            status_code=404,
            title="Match not found",
            detail=f"Match with id {match_id} not found",
            code="match_not_found",
        )


def http_problem(
    status_code: int,
    detail: str,
    code: str,
    *,
    headers: Optional[dict[str, str]] = None,
) -> HTTPException:
    """Create an HTTPException with an attached problem code."""

    exc = HTTPException(status_code=status_code, detail=detail, headers=headers)
    setattr(exc, "code", code)
    return exc
