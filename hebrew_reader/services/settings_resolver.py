"""
Hebrew Reader Backend — Settings Precedence Resolver
====================================================

What:  Computes the effective settings a client sees from four layers.
How:   Ordered fallback per field, first non-None value wins:

           1. preference overrides  (authenticated users, wordSpacing only)
           2. stored user settings  (user_settings.settings)
           3. app defaults          (app_defaults rows, admin-managed)
           4. built-in defaults     (AppSettings field defaults)

       Every layer is a plain dict keyed by snake_case field names, so the
       resolver has no database or HTTP dependencies and is tested alone.
"""

from typing import Any, Dict, Iterable, Mapping, Optional

from hebrew_reader.schemas.settings import AppSettings

Layer = Mapping[str, Any]

SETTINGS_FIELDS = tuple(AppSettings.model_fields)

# Hardcoded fallbacks, taken from the AppSettings field defaults
BUILTIN_DEFAULTS: Dict[str, Any] = AppSettings().model_dump()

# Credentials are per-user only and never become global defaults
API_KEY_FIELDS = frozenset(name for name in SETTINGS_FIELDS if name.endswith("_api_key"))
DEFAULTABLE_FIELDS = tuple(name for name in SETTINGS_FIELDS if name not in API_KEY_FIELDS)

# settings field → key inside profiles.preferences
PREFERENCE_KEYS = {"word_spacing": "wordSpacing"}


def preference_overrides(preferences: Optional[Layer]) -> Dict[str, Any]:
    """Settings fields overridden by stored preferences (only keys actually present)."""
    if not preferences:
        return {}
    return {
        field: preferences[key]
        for field, key in PREFERENCE_KEYS.items()
        if preferences.get(key) is not None
    }


def first_present(name: str, layers: Iterable[Layer]) -> Any:
    for layer in layers:
        value = layer.get(name)
        if value is not None:
            return value
    return None


def resolve_settings(
    stored: Optional[Layer] = None,
    defaults: Optional[Layer] = None,
    preferences: Optional[Layer] = None,
) -> AppSettings:
    """
    Build fully-populated settings.

    Args:
        stored:      the user's saved fields (may be partial or None)
        defaults:    app defaults keyed by field name (may be partial)
        preferences: raw profiles.preferences object (camelCase keys)
    """
    app_defaults = {k: v for k, v in (defaults or {}).items() if k not in API_KEY_FIELDS}
    layers = (preference_overrides(preferences), stored or {}, app_defaults, BUILTIN_DEFAULTS)
    return AppSettings.model_validate(
        {name: first_present(name, layers) for name in SETTINGS_FIELDS}
    )


def resolve_defaults(defaults: Optional[Layer] = None) -> Dict[str, Any]:
    """The full editable default set: stored app defaults over built-ins, keys excluded."""
    layers = (defaults or {}, BUILTIN_DEFAULTS)
    return {name: first_present(name, layers) for name in DEFAULTABLE_FIELDS}
