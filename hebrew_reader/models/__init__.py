"""
Hebrew Reader Backend — ORM Models
==================================

Importing this package registers every table on `Base.metadata`, which
Alembic's env.py and the test suite's create_all() both rely on.
"""

from hebrew_reader.models.app_default import AppDefault
from hebrew_reader.models.profile import Profile
from hebrew_reader.models.saved_text import SavedText
from hebrew_reader.models.user_settings import UserSettings

__all__ = ["AppDefault", "Profile", "SavedText", "UserSettings"]
