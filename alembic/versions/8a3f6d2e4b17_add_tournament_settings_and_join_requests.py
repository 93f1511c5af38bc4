"""add tournament settings and join requests

Revision ID: 8a3f6d2e4b17
Revises: 5e2b7c1d9a40
Create Date: 2026-09-28 00:00:00.000000

"""

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str | None = "8a3f6d2e4b17"
down_revision: str | None = "5e2b7c1d9a40"
branch_labels: str | None = None
depends_on: str | None = None

join_request_status_enum = sa.Enum("PENDING", "APPROVED", "REJECTED", name="join_request_status")


def upgrade() -> None:
    op.create_table(
        "tournament_settings",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("tournament_id", sa.BigInteger(), nullable=False),
        sa.Column("team_limit", sa.Integer(), server_default="16", nullable=False),
        sa.Column("match_best_of", sa.Integer(), server_default="1", nullable=False),
        sa.Column("final_best_of", sa.Integer(), server_default="1", nullable=False),
        sa.Column("updated", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.ForeignKeyConstraint(["tournament_id"], ["tournaments.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("tournament_id"),
    )
    op.create_index(op.f("ix_tournament_settings_id"), "tournament_settings", ["id"], unique=False)

    op.create_table(
        "tournament_join_requests",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("tournament_id", sa.BigInteger(), nullable=False),
        sa.Column("team_id", sa.BigInteger(), nullable=False),
        sa.Column("requested_by_user_id", sa.BigInteger(), nullable=False),
        sa.Column("status", join_request_status_enum, server_default="PENDING", nullable=False),
        sa.Column(
            "requested_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False
        ),
        sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("reviewed_by_user_id", sa.BigInteger(), nullable=True),
        sa.Column("review_note", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(["tournament_id"], ["tournaments.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["team_id"], ["teams.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("tournament_id", "team_id"),
    )
    op.create_index(
        op.f("ix_tournament_join_requests_id"), "tournament_join_requests", ["id"], unique=False
    )
    op.create_index(
        op.f("ix_tournament_join_requests_tournament_id"),
        "tournament_join_requests",
        ["tournament_id"],
        unique=False,
    )
    op.create_index(
        op.f("ix_tournament_join_requests_team_id"),
        "tournament_join_requests",
        ["team_id"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_table("tournament_join_requests")
    op.drop_table("tournament_settings")
    join_request_status_enum.drop(op.get_bind(), checkfirst=True)
