"""Create user_current_match and match_shares tables

Revision ID: 4f1a2b3c5d6e
Revises:
Create Date: 2026-10-18 09:00:00.000000+00:00
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# Revision identifiers, used by Alembic.
revision: str = "4f1a2b3c5d6e"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "user_current_match",
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column(
            "match_data",
            sa.JSON().with_variant(postgresql.JSONB(), "postgresql"),
            nullable=False,
        ),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("user_id"),
    )

    op.create_table(
        "match_shares",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("share_code", sa.String(length=4), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_match_shares_user_id", "match_shares", ["user_id"], unique=False)
    op.create_index(
        "uq_match_shares_active_code",
        "match_shares",
        ["share_code"],
        unique=True,
        postgresql_where=sa.text("is_active = true"),
        sqlite_where=sa.text("is_active = 1"),
    )
    op.create_index(
        "uq_match_shares_active_user",
        "match_shares",
        ["user_id"],
        unique=True,
        postgresql_where=sa.text("is_active = true"),
        sqlite_where=sa.text("is_active = 1"),
    )


def downgrade() -> None:
    op.drop_index("uq_match_shares_active_user", table_name="match_shares")
    op.drop_index("uq_match_shares_active_code", table_name="match_shares")
    op.drop_index("idx_match_shares_user_id", table_name="match_shares")
    op.drop_table("match_shares")
    op.drop_table("user_current_match")
