"""
Hebrew Reader Backend — Profile SQLAlchemy Model
================================================

What:  ORM model for the `profiles` table, one row per signed-in account.
Who:   Read by the admin capability check and the preferences service.
When:  Created on the first preference write of an authenticated account;
       the id is the `sub` claim of the account's access token.

Table Design:
    - preferences: JSON object keyed by camelCase names ({"wordSpacing": 14}).
      Default {} so that reads never have to special-case NULL.
    - is_admin: boolean gate for writing app defaults. The partial index only
      holds admin rows, which keeps it tiny while making
      "who are the admins" a direct lookup.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy import Boolean, DateTime, Index, String, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from hebrew_reader.database import Base, JSONType


class Profile(Base):
    """Account profile with admin flag and authenticated-only preferences."""

    __tablename__ = "profiles"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        comment="Account id, matches the access token subject",
    )

    email: Mapped[Optional[str]] = mapped_column(String(320), nullable=True)
    full_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    # ── Preferences ───────────────────────────────────────────────────────
    preferences: Mapped[Dict[str, Any]] = mapped_column(
        JSONType,
        nullable=False,
        default=dict,
        server_default=text("'{}'"),
        comment="User preferences stored as JSON (e.g. wordSpacing)",
    )

    # ── Admin Flag ────────────────────────────────────────────────────────
    is_admin: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=text("false"),
        comment="Whether the user has admin privileges",
    )

    # ── Timestamps ────────────────────────────────────────────────────────
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

    __table_args__ = (
        Index(
            "idx_profiles_is_admin",
            "is_admin",
            postgresql_where=text("is_admin = true"),
        ),
    )

    def __repr__(self) -> str:
        return f"<Profile(id={self.id}, is_admin={self.is_admin})>"
