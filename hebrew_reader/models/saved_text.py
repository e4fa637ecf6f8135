"""
Hebrew Reader Backend — SavedText SQLAlchemy Model
==================================================

What:  ORM model for `saved_texts`, the texts an authenticated user worked on.
How:   At most one row per user has `is_last_worked = true`; the service layer
       clears the flag on older rows before inserting a new one.

Index on (user_id, is_last_worked) serves the only read pattern:
"give me this user's last text".
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Text, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from hebrew_reader.database import Base


class SavedText(Base):
    """A text the user entered, with its vocalized and clean forms."""

    __tablename__ = "saved_texts"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
    )

    original_text: Mapped[str] = mapped_column(Text, nullable=False)
    niqqud_text: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    # Original text with all niqqud marks removed
    clean_text: Mapped[str] = mapped_column(Text, nullable=False)

    is_last_worked: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default=text("true"),
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )
    last_accessed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("idx_saved_texts_user_last_worked", "user_id", "is_last_worked"),
    )

    def __repr__(self) -> str:
        return f"<SavedText(id={self.id}, user_id={self.user_id}, last={self.is_last_worked})>"
