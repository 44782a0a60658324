"""
Notemail Backend — Pydantic Request/Response Schemas
====================================================

What:  Pydantic models defining the API contract between client and backend.
How:   FastAPI serializes responses through these models and generates the
       OpenAPI documentation from them. Request bodies are checked by the
       validation pass in `notemail.validation`, which builds the input
       models below.

Field names are fixed for compatibility with the browser client
(`messageId` is camelCase on the wire).
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# ══════════════════════════════════════════════════════════════════════════
# Input Models — built by the validation pass
# ══════════════════════════════════════════════════════════════════════════


class NoteInput(BaseModel):
    """Title and content for create/update; both non-empty after trimming."""
    title: str
    content: str


class EmailSendRequest(BaseModel):
    """Recipient, subject and body for POST /api/email/send."""
    to: str
    subject: str
    content: str


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class NoteResponse(BaseModel):
    """
    Full representation of a note.

    Returned by every /api/notes endpoint except DELETE; the list endpoint
    returns an array of these ordered by updated_at, newest first.
    """
    id: int = Field(description="Server-assigned note identifier")
    title: str = Field(description="Note title")
    content: str = Field(description="Note body")
    created_at: datetime = Field(description="When the note was created (ISO 8601)")
    updated_at: datetime = Field(description="When the note was last modified (ISO 8601)")

    model_config = ConfigDict(from_attributes=True)


class MessageResponse(BaseModel):
    message: str


class EmailStatusResponse(BaseModel):
    """Whether the mail relay has credentials, and which sender it uses."""
    configured: bool
    email: Optional[str] = None


class EmailSendResponse(BaseModel):
    success: bool = True
    message_id: str = Field(alias="messageId", description="Message-ID of the sent email")

    model_config = ConfigDict(populate_by_name=True)


# ══════════════════════════════════════════════════════════════════════════
# Error / Health Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Example:
        {
            "error": "not_found",
            "message": "Note not found",
            "request_id": "1a2b3c4d"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    email: str = Field(description="Mail relay: configured, not_configured")
    uptime_seconds: float = Field(description="Seconds since service started")
