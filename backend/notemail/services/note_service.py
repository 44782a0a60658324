"""
Notemail Backend — Note Service (Business Logic)
================================================

What:  Create/read/update/delete operations over the `notes` table.
How:   Each method receives the request's AsyncSession, runs one statement
       (plus a refresh to read back storage-assigned values) and commits.
Who:   Called by the notes route handlers.

Concurrency:
    No multi-statement transactions, version checks or application locks.
    Two concurrent updates of one note race at row granularity and the
    later write wins.

Error Handling:
    Domain errors (InvalidInputError, NotFoundError) propagate as raised.
    SQLAlchemy failures are logged and wrapped in DatabaseError so no driver
    detail reaches the API response.
"""

import logging
from typing import List

from sqlalchemy import delete, desc, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.attributes import flag_modified

from notemail.exceptions import DatabaseError, InvalidInputError, NotFoundError
from notemail.models.note import TITLE_MAX_LENGTH, Note
from notemail.schemas.note import NoteResponse
from notemail.validation import is_blank

logger = logging.getLogger(__name__)


def _require_note_fields(title: str, content: str) -> None:
    if is_blank(title) or is_blank(content):
        raise InvalidInputError(
            message="Title and content are required",
            field="title" if is_blank(title) else "content",
        )
    if len(title) > TITLE_MAX_LENGTH:
        raise InvalidInputError(
            message=f"Title must be at most {TITLE_MAX_LENGTH} characters",
            field="title",
        )


class NoteService:
    """
    Business logic layer for note operations.

    Stateless: the session is passed into every call, so one shared
    instance serves all requests.
    """

    async def list_notes(self, db: AsyncSession) -> List[NoteResponse]:
        """
        All notes, most recently updated first.

        Query plan:
            SELECT * FROM notes ORDER BY updated_at DESC, id DESC
            → idx_notes_updated_at
        """
        try:
            result = await db.execute(
                select(Note).order_by(desc(Note.updated_at), desc(Note.id))
            )
            notes = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error("Database error listing notes: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to fetch notes",
                cause=e,
            ) from e

        return [NoteResponse.model_validate(note) for note in notes]

    async def get_note(self, db: AsyncSession, note_id: int) -> NoteResponse:
        """
        Retrieve a single note by ID.

        Raises:
            NotFoundError: No note has this id (→ 404)
            DatabaseError: Query execution failed (→ 500)
        """
        note = await self._load(db, note_id, action="fetch")
        return NoteResponse.model_validate(note)

    async def create_note(self, db: AsyncSession, title: str, content: str) -> NoteResponse:
        """
        Insert a note and return the stored record.

        The insert hook stamps created_at and updated_at from one clock
        reading, so a fresh note always has created_at == updated_at.
        Values are stored exactly as given.
        """
        _require_note_fields(title, content)

        note = Note(title=title, content=content)
        try:
            db.add(note)
            await db.commit()
            await db.refresh(note)
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Database error creating note: %s", str(e), exc_info=True)
            raise DatabaseError(message="Failed to create note", cause=e) from e

        logger.info("Note %s created", note.id)
        return NoteResponse.model_validate(note)

    async def update_note(
        self,
        db: AsyncSession,
        note_id: int,
        title: str,
        content: str,
    ) -> NoteResponse:
        """
        Overwrite a note's title and content.

        updated_at is recomputed by the storage hooks; created_at and id are
        left alone. An UPDATE is issued even when the values are unchanged,
        so saving always bumps the note to the top of the list.

        Raises:
            InvalidInputError: Empty title/content (checked before any I/O)
            NotFoundError: No note has this id
            DatabaseError: Storage failure
        """
        _require_note_fields(title, content)

        note = await self._load(db, note_id, action="update")
        note.title = title
        note.content = content
        flag_modified(note, "title")

        try:
            await db.commit()
            await db.refresh(note)
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Database error updating note %s: %s", note_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to update note",
                cause=e,
                context={"note_id": note_id},
            ) from e

        logger.info("Note %s updated", note_id)
        return NoteResponse.model_validate(note)

    async def delete_note(self, db: AsyncSession, note_id: int) -> None:
        """
        Permanently remove a note with a single DELETE statement.

        Raises:
            NotFoundError: Nothing was deleted (unknown or already deleted id)
            DatabaseError: Storage failure
        """
        try:
            result = await db.execute(delete(Note).where(Note.id == note_id))
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Database error deleting note %s: %s", note_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to delete note",
                cause=e,
                context={"note_id": note_id},
            ) from e

        if result.rowcount == 0:
            raise NotFoundError(resource="note", resource_id=str(note_id))

        logger.info("Note %s deleted", note_id)

    async def _load(self, db: AsyncSession, note_id: int, action: str) -> Note:
        try:
            result = await db.execute(select(Note).where(Note.id == note_id))
            note = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching note %s: %s", note_id, str(e))
            raise DatabaseError(
                message=f"Failed to {action} note",
                cause=e,
                context={"note_id": note_id},
            ) from e

        if note is None:
            raise NotFoundError(resource="note", resource_id=str(note_id))
        return note


note_service = NoteService()
