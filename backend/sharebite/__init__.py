"""
ShareBite Backend — Application Package Initializer
====================================================

What: Marks the `sharebite` directory as a Python package.
Why:  Enables module imports like `from sharebite.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    The backend follows the same layered split for every resource:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP verbs, paths, status codes
    ├─────────────────────────────────────┤
    │   Services + Access Policy (Rules)  │  ← validation, ownership checks
    ├─────────────────────────────────────┤
    │     Stores (Persistence Interface)  │  ← ListingStore / RequestStore
    ├─────────────────────────────────────┤
    │   Models + Database (SQLAlchemy)    │  ← async sessions, JSONB documents
    └─────────────────────────────────────┘

    Stores and the identity verifier are attached to the app in create_app()
    and resolved per request, so tests can swap in in-memory fakes.
"""

__version__ = "1.0.0"
