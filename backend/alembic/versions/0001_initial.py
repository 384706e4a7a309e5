from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None

JSON_DOC = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def upgrade():
    op.create_table(
        "club",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False, unique=True),
    )
    op.create_table(
        "player",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("phone", sa.String(), nullable=True),
        sa.Column("photo_url", sa.String(), nullable=True),
        sa.Column("club_id", sa.String(), sa.ForeignKey("club.id"), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )
    op.create_index("ix_player_club_id", "player", ["club_id"])
    op.create_table(
        "category",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("club_id", sa.String(), sa.ForeignKey("club.id"), nullable=False),
        sa.Column("is_doubles", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.UniqueConstraint("club_id", "name", name="uq_category_club_id_name"),
    )
    op.create_table(
        "category_player",
        sa.Column(
            "category_id", sa.String(), sa.ForeignKey("category.id"), primary_key=True
        ),
        sa.Column("player_id", sa.String(), sa.ForeignKey("player.id"), primary_key=True),
    )
    op.create_table(
        "match",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("category_id", sa.String(), sa.ForeignKey("category.id"), nullable=False),
        sa.Column("club_id", sa.String(), sa.ForeignKey("club.id"), nullable=False),
        sa.Column("format", sa.String(), nullable=False),
        sa.Column("best_of", sa.Integer(), nullable=False),
        sa.Column(
            "deciding_set_type",
            sa.String(),
            nullable=False,
            server_default="STANDARD",
        ),
        sa.Column("teams", JSON_DOC, nullable=False),
        sa.Column("sets", JSON_DOC, nullable=False),
        sa.Column("played_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )
    op.create_index(
        "ix_match_club_id_category_id", "match", ["club_id", "category_id"]
    )
    op.create_index("ix_match_played_at", "match", ["played_at"])
    op.create_table(
        "match_participant",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("match_id", sa.String(), sa.ForeignKey("match.id"), nullable=False),
        sa.Column("player_id", sa.String(), sa.ForeignKey("player.id"), nullable=False),
        sa.Column("team_index", sa.Integer(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("result", sa.String(), nullable=False),
    )
    op.create_index(
        "ix_match_participant_match_id", "match_participant", ["match_id"]
    )
    op.create_index(
        "ix_match_participant_player_id", "match_participant", ["player_id"]
    )


def downgrade():
    op.drop_index("ix_match_participant_player_id", table_name="match_participant")
    op.drop_index("ix_match_participant_match_id", table_name="match_participant")
    op.drop_table("match_participant")
    op.drop_index("ix_match_played_at", table_name="match")
    op.drop_index("ix_match_club_id_category_id", table_name="match")
    op.drop_table("match")
    op.drop_table("category_player")
    op.drop_table("category")
    op.drop_index("ix_player_club_id", table_name="player")
    op.drop_table("player")
    op.drop_table("club")
