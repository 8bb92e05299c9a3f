"""Create players and matches tables

Revision ID: 5e0c1a7b9d21
Revises:
Create Date: 2026-10-18 12:00:00.000000+00:00
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# Revision identifiers, used by Alembic.
revision: str = "5e0c1a7b9d21"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "players",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("display_name", sa.String(length=255), nullable=False),
        sa.Column("rating_mu", sa.Float(), nullable=False),
        sa.Column("rating_phi", sa.Float(), nullable=False),
        sa.Column("rating_sigma", sa.Float(), nullable=False),
        sa.Column("wins", sa.Integer(), nullable=False),
        sa.Column("losses", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.CheckConstraint("rating_phi >= 0", name="ck_players_phi_non_negative"),
        sa.CheckConstraint("rating_sigma > 0", name="ck_players_sigma_positive"),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "matches",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("player_a_id", sa.Integer(), nullable=False),
        sa.Column("player_b_id", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column(
            "score_structured",
            sa.JSON().with_variant(postgresql.JSONB(astext_type=sa.Text()), "postgresql"),
            nullable=True,
        ),
        sa.Column("winner_id", sa.Integer(), nullable=True),
        sa.Column("retired_player_id", sa.Integer(), nullable=True),
        sa.Column("is_walkover", sa.Boolean(), nullable=False),
        sa.Column("category", sa.String(length=20), nullable=False),
        sa.Column("is_public", sa.Boolean(), nullable=False),
        sa.Column("rating_pre_player_a", sa.Float(), nullable=True),
        sa.Column("rating_pre_player_b", sa.Float(), nullable=True),
        sa.Column("rating_post_player_a", sa.Float(), nullable=True),
        sa.Column("rating_post_player_b", sa.Float(), nullable=True),
        sa.Column("rating_weight", sa.Float(), nullable=True),
        sa.Column("rating_processed_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.CheckConstraint("player_a_id != player_b_id", name="ck_matches_distinct_players"),
        sa.ForeignKeyConstraint(["player_a_id"], ["players.id"]),
        sa.ForeignKeyConstraint(["player_b_id"], ["players.id"]),
        sa.ForeignKeyConstraint(["winner_id"], ["players.id"]),
        sa.ForeignKeyConstraint(["retired_player_id"], ["players.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_matches_status", "matches", ["status"])


def downgrade() -> None:
    op.drop_index("idx_matches_status", table_name="matches")
    op.drop_table("matches")
    op.drop_table("players")
