from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .time_utils import coerce_utc

MatchFormat = Literal["SINGLES", "DOUBLES"]
DecidingSetType = Literal[
    "STANDARD", "ADVANTAGE", "SUPER_TIEBREAK_7", "SUPER_TIEBREAK_10"
]
MatchResult = Literal["WIN", "LOSS", "DRAW"]


def _trimmed(value: str, field_name: str) -> str:
    if not isinstance(value, str):
        raise TypeError(f"{field_name} must be a string")
    trimmed = value.strip()
    if not trimmed:
        raise ValueError(f"{field_name} must not be empty")
    return trimmed


class ClubOut(BaseModel):
    id: str
    name: str


class ClubCreate(BaseModel):
    id: str = Field(..., min_length=1, max_length=100)
    name: str = Field(..., min_length=1, max_length=200)

    model_config = ConfigDict(extra="forbid")

    @field_validator("id", mode="before")
    @classmethod
    def _validate_id(cls, value: str) -> str:
        trimmed = _trimmed(value, "id")
        if any(ch.isspace() for ch in trimmed):
            raise ValueError("id must not contain whitespace")
        return trimmed

    @field_validator("name", mode="before")
    @classmethod
    def _validate_name(cls, value: str) -> str:
        return _trimmed(value, "name")


class PlayerCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: Optional[str] = Field(default=None, max_length=320)
    phone: Optional[str] = Field(default=None, max_length=40)
    photoUrl: Optional[str] = None
    clubId: str = Field(..., min_length=1)

    model_config = ConfigDict(extra="forbid")

    @field_validator("name", mode="before")
    @classmethod
    def _validate_name(cls, value: str) -> str:
        return _trimmed(value, "name")

    @field_validator("email", mode="before")
    @classmethod
    def _normalize_email(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        trimmed = _trimmed(value, "email").lower()
        if "@" not in trimmed:
            raise ValueError("email must contain '@'")
        return trimmed


class PlayerOut(BaseModel):
    id: str
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    photoUrl: Optional[str] = None
    clubId: Optional[str] = None


class PlayerListOut(BaseModel):
    players: List[PlayerOut]
    total: int
    limit: int
    offset: int


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=2000)
    clubId: str = Field(..., min_length=1)
    isDoubles: bool = False

    model_config = ConfigDict(extra="forbid")

    @field_validator("name", mode="before")
    @classmethod
    def _validate_name(cls, value: str) -> str:
        return _trimmed(value, "name")


class CategoryOut(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    clubId: str
    isDoubles: bool
    players: List[str] = Field(default_factory=list)


class MatchScoreIn(BaseModel):
    teamIndex: int = Field(..., ge=0)
    score: int = Field(..., ge=0)


class MatchSetIn(BaseModel):
    games: List[MatchScoreIn] = Field(..., min_length=2)
    tiebreak: Optional[List[MatchScoreIn]] = None


class MatchTeamIn(BaseModel):
    players: List[str] = Field(..., min_length=1)

    @field_validator("players")
    @classmethod
    def _validate_players(cls, value: List[str]) -> List[str]:
        return [_trimmed(pid, "player id") for pid in value]


class MatchCreate(BaseModel):
    """Request body for recording a completed match."""

    categoryId: str = Field(..., min_length=1)
    clubId: str = Field(..., min_length=1)
    format: MatchFormat
    bestOf: int = Field(..., ge=1)
    decidingSetType: Optional[DecidingSetType] = None
    teams: List[MatchTeamIn] = Field(..., min_length=2, max_length=2)
    sets: List[MatchSetIn] = Field(..., min_length=1)
    playedAt: Optional[datetime] = None

    model_config = ConfigDict(extra="forbid")

    @field_validator("playedAt")
    @classmethod
    def _normalize_played_at(cls, v: datetime | None) -> datetime | None:
        # values without an offset are taken as UTC
        return coerce_utc(v)


class ParticipantOut(BaseModel):
    playerId: str
    teamIndex: int
    result: MatchResult


class MatchOut(BaseModel):
    id: str
    categoryId: str
    clubId: str
    format: MatchFormat
    bestOf: int
    decidingSetType: DecidingSetType
    teams: List[MatchTeamIn]
    sets: List[MatchSetIn]
    playedAt: datetime
    createdAt: Optional[datetime] = None
    participants: List[ParticipantOut] = Field(default_factory=list)


class MatchPageOut(BaseModel):
    """Paginated collection of matches."""

    items: List[MatchOut] = Field(default_factory=list)
    total: int
    limit: int
    offset: int


class RankingEntryOut(BaseModel):
    position: int
    playerId: str
    name: str
    email: str = ""
    phone: str = ""
    clubId: str = ""
    photoUrl: str = ""
    points: int
    wins: int
    losses: int
    draws: int
    matches: int
    lastMatchAt: Optional[datetime] = None


class RankingOut(BaseModel):
    categoryId: str
    items: List[RankingEntryOut] = Field(default_factory=list)
    total: int
    limit: int
    offset: int
