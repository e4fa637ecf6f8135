"""
Hebrew Reader Backend — Settings Service
========================================

What:  Reads and writes per-user settings and produces effective settings.
How:   `user_settings.settings` holds only the fields a user saved (snake_case
       keys). Writes merge the partial payload into that object. Reads go
       through `resolve_settings()` which layers preferences, stored values,
       app defaults and built-ins.
Who:   Settings routes and the analysis routes (which need the user's
       models, prompts and keys).

Error Handling:
    Any failure below the route is reported as DatabaseError carrying the
    fixed route message ("Failed to fetch settings" / "Failed to save
    settings"); the underlying error is only logged.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hebrew_reader.auth import AuthenticatedUser
from hebrew_reader.exceptions import DatabaseError, ReaderError
from hebrew_reader.models.user_settings import UserSettings
from hebrew_reader.schemas.settings import AppSettings
from hebrew_reader.services.defaults_service import app_defaults_service
from hebrew_reader.services.preferences_service import preferences_service
from hebrew_reader.services.settings_resolver import PREFERENCE_KEYS, resolve_settings

logger = logging.getLogger(__name__)

FETCH_FAILED_MESSAGE = "Failed to fetch settings"
SAVE_FAILED_MESSAGE = "Failed to save settings"


class SettingsService:

    async def get_stored_settings(
        self, db: AsyncSession, owner_id: str
    ) -> Optional[Dict[str, Any]]:
        result = await db.execute(select(UserSettings).where(UserSettings.user_id == owner_id))
        record = result.scalar_one_or_none()
        return dict(record.settings or {}) if record is not None else None

    async def save_settings(
        self, db: AsyncSession, owner_id: str, values: Mapping[str, Any]
    ) -> Dict[str, Any]:
        """Merge `values` into the stored record, creating it on first write."""
        now = datetime.now(timezone.utc)
        result = await db.execute(select(UserSettings).where(UserSettings.user_id == owner_id))
        record = result.scalar_one_or_none()
        if record is None:
            record = UserSettings(user_id=owner_id, settings={}, created_at=now)
            db.add(record)

        record.settings = {**(record.settings or {}), **values}
        record.updated_at = now
        await db.flush()
        return dict(record.settings)

    async def _resolve(
        self,
        db: AsyncSession,
        owner_id: str,
        user: Optional[AuthenticatedUser],
    ) -> AppSettings:
        stored = await self.get_stored_settings(db, owner_id)
        preferences = (
            await preferences_service.get_stored_preferences(db, user.id) if user else None
        )
        defaults = await app_defaults_service.get_defaults_for_settings(db)
        return resolve_settings(stored=stored, defaults=defaults, preferences=preferences)

    async def load_settings(
        self,
        db: AsyncSession,
        owner_id: str,
        user: Optional[AuthenticatedUser] = None,
    ) -> AppSettings:
        """
        Effective settings for `owner_id`.

        Raises:
            DatabaseError: "Failed to fetch settings"
        """
        try:
            return await self._resolve(db, owner_id, user)
        except ReaderError:
            raise
        except Exception as e:
            logger.error("Error fetching settings for %s: %s", owner_id, str(e), exc_info=True)
            raise DatabaseError(
                message=FETCH_FAILED_MESSAGE,
                context={"operation": "load_settings", "error": str(e)},
            ) from e

    async def update_settings(
        self,
        db: AsyncSession,
        owner_id: str,
        values: Mapping[str, Any],
        user: Optional[AuthenticatedUser] = None,
    ) -> AppSettings:
        """
        Persist a partial update and return the re-read effective settings.

        For authenticated users, fields backed by preferences (wordSpacing)
        are written to the profile too, so they follow the account across
        devices.

        Raises:
            DatabaseError: "Failed to save settings"
        """
        try:
            if user is not None:
                preference_updates = {
                    key: values[field]
                    for field, key in PREFERENCE_KEYS.items()
                    if values.get(field) is not None
                }
                if preference_updates:
                    await preferences_service.save_preferences(
                        db, user.id, preference_updates, email=user.email
                    )

            await self.save_settings(db, owner_id, values)
            logger.info("Saved %d settings field(s) for %s", len(values), owner_id)
            return await self._resolve(db, owner_id, user)
        except ReaderError:
            raise
        except Exception as e:
            logger.error("Error saving settings for %s: %s", owner_id, str(e), exc_info=True)
            raise DatabaseError(
                message=SAVE_FAILED_MESSAGE,
                context={"operation": "update_settings", "error": str(e)},
            ) from e


settings_service = SettingsService()
