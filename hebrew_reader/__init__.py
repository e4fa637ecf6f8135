"""
Hebrew Reader Backend — Application Package Initializer
=======================================================

What: Marks the `hebrew_reader` directory as a Python package.
Who:  Imported by uvicorn (`hebrew_reader.main:app`), Alembic and pytest.

Architecture Note:
    The backend follows a layered layout:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP, cookies, identity
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← settings resolution, LLM calls
    ├─────────────────────────────────────┤
    │   Models, Schemas, Text utilities   │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    The `client` subpackage sits beside this stack: it holds the morphology
    analysis state container used by UI-side callers.
"""

__version__ = "1.0.0"
