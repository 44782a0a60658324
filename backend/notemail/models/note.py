"""
Notemail Backend — Note SQLAlchemy Model
========================================

What:  ORM model representing the `notes` table.
How:   Inherits from the shared DeclarativeBase; Alembic reads this for
       migrations and the test suite builds the schema from it.
Who:   Used by NoteService for CRUD operations.

Table Design:
    - id: integer primary key, never reused after deletion
      (SQLite needs AUTOINCREMENT for that; PostgreSQL sequences never reuse)
    - title: VARCHAR(255), required
    - content: TEXT, required, unbounded
    - created_at: set once at insertion
    - updated_at: equal to created_at at insertion, then overwritten on
      every UPDATE by the write-time hooks below

Timestamp enforcement:
    Both timestamps always come from one clock. On PostgreSQL that is the
    database clock: the mapper events stamp `now()` and a BEFORE UPDATE
    trigger (attached to `metadata.create_all` here and created by Alembic
    revision 001) stamps CURRENT_TIMESTAMP for statements issued outside the
    ORM. Other dialects (SQLite in tests) are stamped from the Python clock,
    since SQLite's CURRENT_TIMESTAMP only has one-second resolution.
"""

from datetime import datetime, timezone

from sqlalchemy import DDL, Index, Integer, String, Text, event, func, text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import TIMESTAMP

from notemail.database import Base

TITLE_MAX_LENGTH = 255

UPDATE_TIMESTAMP_FUNCTION = """
CREATE OR REPLACE FUNCTION update_updated_at_column()
RETURNS TRIGGER AS $$
BEGIN
    NEW.updated_at = CURRENT_TIMESTAMP;
    RETURN NEW;
END;
$$ language 'plpgsql';
"""

UPDATE_TIMESTAMP_TRIGGER = """
CREATE TRIGGER update_notes_updated_at BEFORE UPDATE ON notes
FOR EACH ROW EXECUTE FUNCTION update_updated_at_column();
"""


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def write_clock(dialect_name: str):
    """Timestamp value for an INSERT/UPDATE issued through `dialect_name`."""
    if dialect_name == "postgresql":
        return func.now()
    return utcnow()


class Note(Base):
    """
    A user note.

    Query Patterns:
        - List: SELECT ... ORDER BY updated_at DESC, id DESC
          → idx_notes_updated_at
        - Get/update/delete: WHERE id = :id → primary key
    """

    __tablename__ = "notes"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    title: Mapped[str] = mapped_column(
        String(TITLE_MAX_LENGTH),
        nullable=False,
    )

    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )

    # Both stored in UTC; the client formats them for display
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("idx_notes_updated_at", updated_at.desc()),
        {"sqlite_autoincrement": True},
    )

    def __repr__(self) -> str:
        return (
            f"<Note(id={self.id}, title='{self.title}', "
            f"updated_at='{self.updated_at}')>"
        )


# ── Write-time timestamp hooks ────────────────────────────────────────────

@event.listens_for(Note, "before_insert")
def _stamp_new_note(mapper, connection, target: Note) -> None:
    now = write_clock(connection.dialect.name)
    target.created_at = now
    target.updated_at = now


@event.listens_for(Note, "before_update")
def _stamp_updated_note(mapper, connection, target: Note) -> None:
    # Overrides any caller-supplied value
    target.updated_at = write_clock(connection.dialect.name)


event.listen(
    Note.__table__,
    "after_create",
    DDL(UPDATE_TIMESTAMP_FUNCTION).execute_if(dialect="postgresql"),
)
event.listen(
    Note.__table__,
    "after_create",
    DDL(UPDATE_TIMESTAMP_TRIGGER).execute_if(dialect="postgresql"),
)
