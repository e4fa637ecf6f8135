"""
Hebrew Reader Backend — User Preferences Service
================================================

What:  Authenticated-only preferences stored in `profiles.preferences`.
How:   The JSON object uses camelCase keys ({"wordSpacing": 14}). Writes
       merge into the existing object and create the profile row on first
       use. Reads return the raw stored object so that callers can tell an
       explicit preference apart from a default.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hebrew_reader.models.profile import Profile

logger = logging.getLogger(__name__)

DEFAULT_PREFERENCES: Dict[str, Any] = {"wordSpacing": 12}


class PreferencesService:

    async def get_profile(self, db: AsyncSession, user_id: uuid.UUID) -> Optional[Profile]:
        result = await db.execute(select(Profile).where(Profile.id == user_id))
        return result.scalar_one_or_none()

    async def get_stored_preferences(
        self, db: AsyncSession, user_id: uuid.UUID
    ) -> Dict[str, Any]:
        """Only what the user saved; {} when nothing was saved."""
        profile = await self.get_profile(db, user_id)
        if profile is None or not profile.preferences:
            return {}
        return dict(profile.preferences)

    async def get_preferences(self, db: AsyncSession, user_id: uuid.UUID) -> Dict[str, Any]:
        """Saved preferences merged over DEFAULT_PREFERENCES."""
        return {**DEFAULT_PREFERENCES, **await self.get_stored_preferences(db, user_id)}

    async def save_preferences(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        updates: Mapping[str, Any],
        email: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Merge `updates` into the stored preferences and return the result."""
        now = datetime.now(timezone.utc)
        profile = await self.get_profile(db, user_id)
        if profile is None:
            profile = Profile(id=user_id, email=email, preferences={}, created_at=now)
            db.add(profile)

        # Reassign rather than mutate: plain JSON columns don't track in-place changes
        profile.preferences = {**(profile.preferences or {}), **updates}
        profile.updated_at = now
        await db.flush()

        logger.info("Saved preferences for %s: %s", user_id, ", ".join(sorted(updates)))
        return dict(profile.preferences)


preferences_service = PreferencesService()
