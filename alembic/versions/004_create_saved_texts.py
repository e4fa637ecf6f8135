"""Create saved_texts table

Revision ID: 004
Revises: 003
Create Date: 2026-06-23 00:00:00.000000+00:00

What:  Texts a signed-in user worked on. At most one row per user carries
       is_last_worked = true; the (user_id, is_last_worked) index serves
       the "last text" lookup. Rows go away with their profile.
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "saved_texts",
        sa.Column("id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("user_id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("original_text", sa.Text(), nullable=False),
        sa.Column("niqqud_text", sa.Text(), nullable=True),
        sa.Column(
            "clean_text",
            sa.Text(),
            nullable=False,
            comment="Original text with niqqud marks removed",
        ),
        sa.Column(
            "is_last_worked",
            sa.Boolean(),
            nullable=False,
            server_default=sa.text("true"),
        ),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "last_accessed_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["user_id"], ["profiles.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_saved_texts_user_last_worked",
        "saved_texts",
        ["user_id", "is_last_worked"],
    )


def downgrade() -> None:
    op.drop_index("idx_saved_texts_user_last_worked", table_name="saved_texts")
    op.drop_table("saved_texts")
