"""
Hebrew Reader Backend — UserSettings SQLAlchemy Model
=====================================================

What:  ORM model for `user_settings`, one JSON settings object per user id.
How:   `user_id` is either the anonymous cookie id (`user_<ms>_<rand>`) or the
       string form of an authenticated account id. The `settings` object is
       keyed by snake_case field names and only ever holds values the user
       actually saved; defaults are applied at read time.
"""

from datetime import datetime, timezone
from typing import Any, Dict

from sqlalchemy import DateTime, String, text
from sqlalchemy.orm import Mapped, mapped_column

from hebrew_reader.database import Base, JSONType


class UserSettings(Base):
    """Per-user settings record (API keys, models, prompts, display values)."""

    __tablename__ = "user_settings"

    user_id: Mapped[str] = mapped_column(String(128), primary_key=True)

    settings: Mapped[Dict[str, Any]] = mapped_column(
        JSONType,
        nullable=False,
        default=dict,
        server_default=text("'{}'"),
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    def __repr__(self) -> str:
        return f"<UserSettings(user_id='{self.user_id}', fields={len(self.settings or {})})>"
