# Services package init
"""
Hebrew Reader Backend — Services Layer
======================================

Service Inventory:
    - SettingsService:      per-user settings, effective-settings resolution
    - AppDefaultsService:   admin-managed app defaults
    - PreferencesService:   account preferences (profiles.preferences)
    - SavedTextService:     the user's last-worked text
    - LLMService (abstract) with OpenAICompatibleService and GeminiService
    - NiqqudService / SyllablesService / MorphologyService: text analysis

Each service is a class with a module-level singleton instance that routes
import directly; tests patch the singleton.
"""
