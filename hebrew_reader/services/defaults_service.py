"""
Hebrew Reader Backend — App Defaults Service
============================================

What:  Reads and writes the admin-managed global defaults (`app_defaults`).
How:   Rows are keyed by snake_case field name; the service converts to and
       from the camelCase wire names at its edges.
Who:   Admin defaults routes (both views, writes) and the settings service
       (fallback layer of the resolver).

Views:
    admin view  → every defaultable field, stored value or built-in default
    public view → only the values an admin actually stored

Authorization is not checked here; routes inject the admin capability.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Mapping

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hebrew_reader.exceptions import DatabaseError
from hebrew_reader.models.app_default import AppDefault
from hebrew_reader.schemas.settings import AppSettings
from hebrew_reader.services.settings_resolver import (
    DEFAULTABLE_FIELDS,
    resolve_defaults,
)

logger = logging.getLogger(__name__)

FETCH_FAILED_MESSAGE = "Failed to fetch app defaults"
SAVE_FAILED_MESSAGE = "Failed to save app defaults"


def to_wire(values: Mapping[str, Any]) -> Dict[str, Any]:
    """snake_case field names → camelCase wire names."""
    fields = AppSettings.model_fields
    return {fields[name].alias or name: value for name, value in values.items() if name in fields}


class AppDefaultsService:

    async def get_stored_defaults(self, db: AsyncSession) -> Dict[str, Any]:
        """
        Stored defaults keyed by field name.

        Raises:
            DatabaseError: "Failed to fetch app defaults"
        """
        try:
            result = await db.execute(select(AppDefault))
            rows = result.scalars().all()
        except Exception as e:
            logger.error("Database error fetching app defaults: %s", str(e), exc_info=True)
            raise DatabaseError(
                message=FETCH_FAILED_MESSAGE,
                context={"operation": "get_stored_defaults", "error": str(e)},
            ) from e
        return {row.key: row.value for row in rows if row.key in DEFAULTABLE_FIELDS}

    async def get_defaults_for_settings(self, db: AsyncSession) -> Dict[str, Any]:
        """Fallback layer for settings resolution; a read failure means no defaults."""
        try:
            return await self.get_stored_defaults(db)
        except DatabaseError:
            logger.warning("App defaults unavailable; using built-in defaults only")
            return {}

    async def get_admin_view(self, db: AsyncSession) -> Dict[str, Any]:
        return to_wire(resolve_defaults(await self.get_stored_defaults(db)))

    async def get_public_view(self, db: AsyncSession) -> Dict[str, Any]:
        return to_wire(await self.get_stored_defaults(db))

    async def save_defaults(self, db: AsyncSession, values: Mapping[str, Any]) -> None:
        """
        Upsert every non-None defaultable field in `values`.

        Raises:
            DatabaseError: "Failed to save app defaults"
        """
        updates = {
            name: value
            for name, value in values.items()
            if value is not None and name in DEFAULTABLE_FIELDS
        }
        if not updates:
            return

        now = datetime.now(timezone.utc)
        try:
            result = await db.execute(select(AppDefault).where(AppDefault.key.in_(updates)))
            existing = {row.key: row for row in result.scalars().all()}
            for key, value in updates.items():
                row = existing.get(key)
                if row is None:
                    db.add(AppDefault(key=key, value=value, created_at=now, updated_at=now))
                else:
                    row.value = value
                    row.updated_at = now
            await db.flush()
        except Exception as e:
            logger.error("Database error saving app defaults: %s", str(e), exc_info=True)
            raise DatabaseError(
                message=SAVE_FAILED_MESSAGE,
                context={"operation": "save_defaults", "keys": sorted(updates), "error": str(e)},
            ) from e

        logger.info("Saved %d app default(s): %s", len(updates), ", ".join(sorted(updates)))


app_defaults_service = AppDefaultsService()
