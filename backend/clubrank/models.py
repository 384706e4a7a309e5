from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    JSON,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func

from .db import Base


class Club(Base):
    __tablename__ = "club"
    id = Column(String, primary_key=True)
    name = Column(String, nullable=False, unique=True)


class Player(Base):
    __tablename__ = "player"
    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    photo_url = Column(String, nullable=True)
    club_id = Column(String, ForeignKey("club.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (Index("ix_player_club_id", "club_id"),)


class Category(Base):
    __tablename__ = "category"
    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    club_id = Column(String, ForeignKey("club.id"), nullable=False)
    is_doubles = Column(Boolean, nullable=False, default=False)

    __table_args__ = (
        UniqueConstraint("club_id", "name", name="uq_category_club_id_name"),
    )


class CategoryPlayer(Base):
    """Membership of a player in a category roster."""

    __tablename__ = "category_player"
    category_id = Column(String, ForeignKey("category.id"), primary_key=True)
    player_id = Column(String, ForeignKey("player.id"), primary_key=True)


class Match(Base):
    __tablename__ = "match"
    id = Column(String, primary_key=True)
    category_id = Column(String, ForeignKey("category.id"), nullable=False)
    club_id = Column(String, ForeignKey("club.id"), nullable=False)
    format = Column(String, nullable=False)  # "SINGLES" | "DOUBLES"
    best_of = Column(Integer, nullable=False)
    deciding_set_type = Column(String, nullable=False, default="STANDARD")
    # [{"players": [...]}, {"players": [...]}] as submitted
    teams = Column(JSON().with_variant(JSONB, "postgresql"), nullable=False)
    # [{"games": [...], "tiebreak": [...]}, ...] as submitted
    sets = Column(JSON().with_variant(JSONB, "postgresql"), nullable=False)
    played_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        Index("ix_match_club_id_category_id", "club_id", "category_id"),
        Index("ix_match_played_at", "played_at"),
    )


class MatchParticipant(Base):
    __tablename__ = "match_participant"
    id = Column(String, primary_key=True)
    match_id = Column(String, ForeignKey("match.id"), nullable=False)
    player_id = Column(String, ForeignKey("player.id"), nullable=False)
    team_index = Column(Integer, nullable=False)
    position = Column(Integer, nullable=False, default=0)
    result = Column(String, nullable=False)  # "WIN" | "LOSS" | "DRAW"

    __table_args__ = (
        Index("ix_match_participant_match_id", "match_id"),
        Index("ix_match_participant_player_id", "player_id"),
    )
