"""
Hebrew Reader Backend — AppDefault SQLAlchemy Model
===================================================

What:  ORM model for `app_defaults`, the admin-managed global fallback values.
How:   One row per setting. `key` is the snake_case setting name
       (e.g. `niqqud_system_prompt`), `value` is any JSON scalar.
"""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import DateTime, String, text
from sqlalchemy.orm import Mapped, mapped_column

from hebrew_reader.database import Base, JSONType


class AppDefault(Base):
    """A single global default value."""

    __tablename__ = "app_defaults"

    key: Mapped[str] = mapped_column(String(128), primary_key=True)
    value: Mapped[Any] = mapped_column(JSONType, nullable=False)

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
        return f"<AppDefault(key='{self.key}')>"
