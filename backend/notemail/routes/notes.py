"""
Notemail Backend — Notes Route Handlers
=======================================

What:  REST endpoints for notes: list, get, create, update, delete.
How:   Runs the boundary validation pass on request bodies, delegates to
       NoteService, and returns the documented JSON. Errors raised below
       are turned into responses by the global handlers in main.py.
Who:   Called by the browser client (static/app.js).

Endpoints:
    GET    /api/notes        → 200 [Note]
    GET    /api/notes/{id}   → 200 Note | 404
    POST   /api/notes        → 201 Note | 400
    PUT    /api/notes/{id}   → 200 Note | 400 | 404
    DELETE /api/notes/{id}   → 200 {message} | 404
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from notemail.database import get_db_session
from notemail.exceptions import InvalidInputError
from notemail.schemas.note import (
    ErrorResponse,
    MessageResponse,
    NoteInput,
    NoteResponse,
)
from notemail.services.note_service import note_service
from notemail.validation import validate_note_payload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Notes"])

# Body is read as a plain mapping so that empty bodies and missing fields
# are reported by the validation pass as 400, not by FastAPI as 422.
NotePayload = Optional[Dict[str, Any]]


def _checked_note_input(payload: NotePayload) -> NoteInput:
    checked = validate_note_payload(payload)
    if not checked.ok:
        raise InvalidInputError(message=checked.message, field=checked.field)
    return checked.value


@router.get(
    "/notes",
    response_model=List[NoteResponse],
    responses={500: {"description": "Storage error", "model": ErrorResponse}},
    summary="List all notes",
    description="Returns every note, most recently updated first. No pagination.",
)
async def list_notes(db: AsyncSession = Depends(get_db_session)) -> List[NoteResponse]:
    return await note_service.list_notes(db)


@router.get(
    "/notes/{note_id}",
    response_model=NoteResponse,
    responses={
        404: {"description": "Note not found", "model": ErrorResponse},
        500: {"description": "Storage error", "model": ErrorResponse},
    },
    summary="Get a single note by ID",
)
async def get_note(note_id: int, db: AsyncSession = Depends(get_db_session)) -> NoteResponse:
    return await note_service.get_note(db, note_id)


@router.post(
    "/notes",
    status_code=201,
    response_model=NoteResponse,
    responses={
        400: {"description": "Missing title or content", "model": ErrorResponse},
        500: {"description": "Storage error", "model": ErrorResponse},
    },
    summary="Create a note",
)
async def create_note(
    payload: NotePayload = Body(default=None),
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    """
    Create a note from `{title, content}`.

    The server assigns the id and both timestamps; created_at equals
    updated_at in the response.
    """
    note_input = _checked_note_input(payload)
    return await note_service.create_note(db, note_input.title, note_input.content)


@router.put(
    "/notes/{note_id}",
    response_model=NoteResponse,
    responses={
        400: {"description": "Missing title or content", "model": ErrorResponse},
        404: {"description": "Note not found", "model": ErrorResponse},
        500: {"description": "Storage error", "model": ErrorResponse},
    },
    summary="Replace a note's title and content",
)
async def update_note(
    note_id: int,
    payload: NotePayload = Body(default=None),
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    note_input = _checked_note_input(payload)
    return await note_service.update_note(db, note_id, note_input.title, note_input.content)


@router.delete(
    "/notes/{note_id}",
    response_model=MessageResponse,
    responses={
        404: {"description": "Note not found", "model": ErrorResponse},
        500: {"description": "Storage error", "model": ErrorResponse},
    },
    summary="Delete a note permanently",
)
async def delete_note(note_id: int, db: AsyncSession = Depends(get_db_session)) -> MessageResponse:
    await note_service.delete_note(db, note_id)
    return MessageResponse(message="Note deleted successfully")
