"""
Notemail Backend — Email Route Handlers
=======================================

What:  Mail relay status probe and the send-note-by-email endpoint.
How:   Validates the recipient at the boundary, then hands off to the
       MailRelay injected from app.state.

Endpoints:
    GET  /api/email/status → 200 {configured, email}
    POST /api/email/send   → 200 {success, messageId} | 400 | 500
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends

from notemail.dependencies import get_mail_relay
from notemail.exceptions import InvalidInputError
from notemail.schemas.note import EmailSendResponse, EmailStatusResponse, ErrorResponse
from notemail.services.mail_relay import MailRelay
from notemail.validation import validate_email_payload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/email", tags=["Email"])


@router.get(
    "/status",
    response_model=EmailStatusResponse,
    summary="Mail relay configuration status",
    description=(
        "Reports whether sender credentials are present. The client hides "
        "the email feature when `configured` is false."
    ),
)
async def email_status(relay: MailRelay = Depends(get_mail_relay)) -> EmailStatusResponse:
    return EmailStatusResponse(
        configured=relay.is_configured(),
        email=relay.get_sender_address(),
    )


@router.post(
    "/send",
    response_model=EmailSendResponse,
    responses={
        400: {"description": "Missing fields or invalid address", "model": ErrorResponse},
        500: {"description": "Relay not configured or SMTP failure", "model": ErrorResponse},
    },
    summary="Send a note by email",
)
async def send_email(
    payload: Optional[Dict[str, Any]] = Body(default=None),
    relay: MailRelay = Depends(get_mail_relay),
) -> EmailSendResponse:
    """
    Send `{to, subject, content}` through the mail relay.

    The request only waits on its own SMTP round-trip; other requests keep
    being served while it is in flight.
    """
    checked = validate_email_payload(payload)
    if not checked.ok:
        raise InvalidInputError(message=checked.message, field=checked.field)

    request = checked.value
    confirmation = await relay.send(request.to, request.subject, request.content)
    return EmailSendResponse(success=True, message_id=confirmation.message_id)
