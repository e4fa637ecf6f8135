"""Add is_admin flag to profiles

Revision ID: 005
Revises: 004
Create Date: 2026-06-30 00:00:00.000000+00:00

What:  `profiles.is_admin` boolean, default false, plus a partial index over
       the (few) admin rows. Admins may write app_defaults.

Granting admin is a manual operation:
    UPDATE profiles SET is_admin = true WHERE email = '...';
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "005"
down_revision: Union[str, None] = "004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.add_column(
        "profiles",
        sa.Column(
            "is_admin",
            sa.Boolean(),
            nullable=False,
            server_default=sa.text("false"),
            comment="Whether the user has admin privileges",
        ),
    )
    op.create_index(
        "idx_profiles_is_admin",
        "profiles",
        ["is_admin"],
        postgresql_where=sa.text("is_admin = true"),
    )


def downgrade() -> None:
    op.drop_index("idx_profiles_is_admin", table_name="profiles")
    op.drop_column("profiles", "is_admin")
