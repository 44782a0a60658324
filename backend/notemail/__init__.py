"""
Notemail Backend — Application Package Initializer
==================================================

What: Marks the `notemail` directory as a Python package.
Who:  Imported by uvicorn (`notemail.main:app`), Alembic and pytest.

Architecture Note:
    The backend keeps a layered layout:

    ┌─────────────────────────────────────┐
    │    Routes + Validation (API Layer)  │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services (NoteService, MailRelay) │  ← Domain rules, SMTP hand-off
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    The single-page client lives in `notemail/static/` and is served at `/`.
"""

__version__ = "1.0.0"
