"""Add preferences column to profiles

Revision ID: 002
Revises: 001
Create Date: 2026-06-09 00:00:00.000000+00:00

What:  `profiles.preferences` JSONB, default '{}'. Holds account-level
       preferences such as {"wordSpacing": 14} that override the
       per-device settings for signed-in users.
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.add_column(
        "profiles",
        sa.Column(
            "preferences",
            sa.JSON().with_variant(postgresql.JSONB(), "postgresql"),
            nullable=False,
            server_default=sa.text("'{}'"),
            comment="User preferences stored as JSON (e.g. wordSpacing)",
        ),
    )


def downgrade() -> None:
    op.drop_column("profiles", "preferences")
