"""001_initial_schema

Revision ID: 001
Revises:
Create Date: 2026-10-19 00:00:00.000000

Creates courts, players, matches and events.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "courts",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("type", sa.String(20), nullable=False),
        sa.CheckConstraint("type IN ('padel', 'tennis', 'badminton')", name="ck_courts_type"),
    )
    op.create_index("idx_courts_name", "courts", ["name"])

    op.create_table(
        "players",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("avatar_url", sa.String(), nullable=True),
        sa.Column("instagram_handle", sa.String(), nullable=True),
        sa.Column("points", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_match_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_court_id", sa.Integer(), sa.ForeignKey("courts.id"), nullable=True),
    )
    op.create_index("idx_players_name", "players", ["name"])
    op.create_index("idx_players_points", "players", ["points"])

    op.create_table(
        "matches",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("winner_id", sa.Integer(), sa.ForeignKey("players.id"), nullable=False),
        sa.Column("loser_id", sa.Integer(), sa.ForeignKey("players.id"), nullable=False),
        sa.Column("sport", sa.String(20), nullable=False),
        sa.Column("court_id", sa.Integer(), sa.ForeignKey("courts.id"), nullable=True),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
        sa.CheckConstraint("sport IN ('padel', 'tennis', 'badminton')", name="ck_matches_sport"),
    )
    op.create_index("idx_matches_created_at", "matches", ["created_at"])
    op.create_index("idx_matches_winner", "matches", ["winner_id"])
    op.create_index("idx_matches_loser", "matches", ["loser_id"])

    op.create_table(
        "events",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("start_date_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_date_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("organizer", sa.String(), nullable=False),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
    )
    op.create_index("idx_events_start", "events", ["start_date_time"])


def downgrade() -> None:
    op.drop_table("events")
    op.drop_table("matches")
    op.drop_table("players")
    op.drop_table("courts")
