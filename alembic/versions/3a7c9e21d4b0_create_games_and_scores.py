"""Create games and scores

Revision ID: 3a7c9e21d4b0
Revises:
Create Date: 2026-10-18 10:04:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "3a7c9e21d4b0"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _table_exists(table_name: str) -> bool:
    bind = op.get_bind()
    insp = sa.inspect(bind)
    return table_name in insp.get_table_names()


def upgrade() -> None:
    # Games are provisioned out of band; only create the table if missing
    if not _table_exists("games"):
        op.create_table(
            "games",
            sa.Column("game_id", sa.Integer(), autoincrement=False, nullable=False),
            sa.PrimaryKeyConstraint("game_id"),
        )
    if not _table_exists("scores"):
        op.create_table(
            "scores",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("game_id", sa.Integer(), nullable=False),
            sa.Column("player_name", sa.String(), nullable=False),
            sa.Column("player_id", sa.String(), nullable=False),
            sa.Column("player_score", sa.Float(), nullable=False),
            sa.Column("created_at", sa.String(length=32), nullable=False),
            sa.ForeignKeyConstraint(["game_id"], ["games.game_id"]),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index(
            "ix_scores_game_id_player_score",
            "scores",
            ["game_id", "player_score"],
        )


def downgrade() -> None:
    if _table_exists("scores"):
        op.drop_index("ix_scores_game_id_player_score", table_name="scores")
        op.drop_table("scores")
    if _table_exists("games"):
        op.drop_table("games")
