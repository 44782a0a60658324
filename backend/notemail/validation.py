"""
Notemail Backend — Request Validation
=====================================

What:  The single validation pass run at the API boundary.
How:   Each validator takes the raw JSON body (or None when the body was
       empty) and returns a tagged `Validated` result: either ok with the
       parsed input model, or an error kind plus a user-facing message.
       Routes turn a failed result into InvalidInputError.
Who:   Called by the notes and email routes before any service call.
"""

import re
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from notemail.schemas.note import EmailSendRequest, NoteInput

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

MISSING_FIELDS = "missing_fields"
INVALID_EMAIL = "invalid_email"

NOTE_FIELDS_REQUIRED = "Title and content are required"
EMAIL_FIELDS_REQUIRED = "Recipient, subject, and content are required"
EMAIL_ADDRESS_INVALID = "Invalid email address"


@dataclass(frozen=True)
class Validated:
    """Outcome of a validation pass."""

    ok: bool
    value: Any = None
    kind: Optional[str] = None
    message: Optional[str] = None
    field: Optional[str] = None

    @classmethod
    def success(cls, value: Any) -> "Validated":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, kind: str, message: str, field: Optional[str] = None) -> "Validated":
        return cls(ok=False, kind=kind, message=message, field=field)


def is_blank(value: Any) -> bool:
    """True for anything that is not a string with visible characters."""
    return not isinstance(value, str) or not value.strip()


def is_valid_email(address: str) -> bool:
    return bool(EMAIL_PATTERN.match(address))


def _first_blank(payload: Mapping[str, Any], fields) -> Optional[str]:
    for name in fields:
        if is_blank(payload.get(name)):
            return name
    return None


def validate_note_payload(payload: Optional[Mapping[str, Any]]) -> Validated:
    """Checks a create/update body for non-empty `title` and `content`."""
    if not payload:
        return Validated.failure(MISSING_FIELDS, NOTE_FIELDS_REQUIRED)

    blank = _first_blank(payload, ("title", "content"))
    if blank:
        return Validated.failure(MISSING_FIELDS, NOTE_FIELDS_REQUIRED, field=blank)

    return Validated.success(
        NoteInput(title=payload["title"], content=payload["content"])
    )


def validate_email_payload(payload: Optional[Mapping[str, Any]]) -> Validated:
    """
    Checks a send body: `to`, `subject` and `content` present and non-empty,
    and `to` shaped like local@domain.tld.
    """
    if not payload:
        return Validated.failure(MISSING_FIELDS, EMAIL_FIELDS_REQUIRED)

    blank = _first_blank(payload, ("to", "subject", "content"))
    if blank:
        return Validated.failure(MISSING_FIELDS, EMAIL_FIELDS_REQUIRED, field=blank)

    to = payload["to"].strip()
    if not is_valid_email(to):
        return Validated.failure(INVALID_EMAIL, EMAIL_ADDRESS_INVALID, field="to")

    return Validated.success(
        EmailSendRequest(to=to, subject=payload["subject"], content=payload["content"])
    )
