# Routes package init
"""
Hebrew Reader Backend — API Routes Package
==========================================

Route Inventory:
    - settings.py:        GET/PUT /api/settings, GET/PUT /api/preferences
    - admin_defaults.py:  GET/PUT /api/admin/defaults
    - analysis.py:        POST /api/niqqud, /api/syllables, /api/morphology
    - saved_texts.py:     GET/PUT /api/saved-texts/last
    - presets.py:         GET /api/presets
    - health.py:          GET /health

Routes stay thin: identity, cookies and status codes live here, business
rules live in hebrew_reader.services.
"""
