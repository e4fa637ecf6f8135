"""
Hebrew Reader Backend — Saved Text Service
==========================================

What:  Stores and returns the text a signed-in user last worked on.
How:   Each save inserts a new row flagged `is_last_worked` and clears the
       flag on the user's older rows in the same transaction. Reading the
       last text touches `last_accessed_at`.

Error Handling:
    SQLAlchemy failures are wrapped in DatabaseError; the session dependency
    rolls the transaction back.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from hebrew_reader.exceptions import DatabaseError
from hebrew_reader.models.profile import Profile
from hebrew_reader.models.saved_text import SavedText
from hebrew_reader.schemas.saved_text import SavedTextRequest
from hebrew_reader.services.preferences_service import preferences_service
from hebrew_reader.text.niqqud import remove_niqqud

logger = logging.getLogger(__name__)

FETCH_FAILED_MESSAGE = "Failed to fetch saved text"
SAVE_FAILED_MESSAGE = "Failed to save text"


class SavedTextService:

    async def get_last_text(
        self, db: AsyncSession, user_id: uuid.UUID
    ) -> Optional[SavedText]:
        """The user's last-worked text, or None."""
        try:
            result = await db.execute(
                select(SavedText)
                .where(SavedText.user_id == user_id, SavedText.is_last_worked.is_(True))
                .order_by(SavedText.created_at.desc())
                .limit(1)
            )
            record = result.scalar_one_or_none()
            if record is not None:
                record.last_accessed_at = datetime.now(timezone.utc)
                await db.flush()
            return record
        except Exception as e:
            logger.error("Error fetching last text for %s: %s", user_id, str(e), exc_info=True)
            raise DatabaseError(
                message=FETCH_FAILED_MESSAGE,
                context={"operation": "get_last_text", "error": str(e)},
            ) from e

    async def save_last_text(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        data: SavedTextRequest,
        email: Optional[str] = None,
    ) -> SavedText:
        """
        Insert `data` as the user's last-worked text.

        `clean_text` defaults to the original text with niqqud removed.
        The profile row is created when the account has none yet.
        """
        try:
            if await preferences_service.get_profile(db, user_id) is None:
                db.add(Profile(id=user_id, email=email, preferences={}))
                await db.flush()

            await db.execute(
                update(SavedText)
                .where(SavedText.user_id == user_id, SavedText.is_last_worked.is_(True))
                .values(is_last_worked=False)
            )

            now = datetime.now(timezone.utc)
            record = SavedText(
                user_id=user_id,
                original_text=data.original_text,
                niqqud_text=data.niqqud_text,
                clean_text=(
                    data.clean_text
                    if data.clean_text is not None
                    else remove_niqqud(data.original_text)
                ),
                is_last_worked=True,
                created_at=now,
                last_accessed_at=now,
            )
            db.add(record)
            await db.flush()
            await db.refresh(record)

            logger.info("Saved last text %s for %s (%d chars)", record.id, user_id, len(record.original_text))
            return record
        except Exception as e:
            logger.error("Error saving text for %s: %s", user_id, str(e), exc_info=True)
            raise DatabaseError(
                message=SAVE_FAILED_MESSAGE,
                context={"operation": "save_last_text", "error": str(e)},
            ) from e


saved_text_service = SavedTextService()
