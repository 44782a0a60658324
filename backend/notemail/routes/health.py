"""
Notemail Backend — Health Check Route
=====================================

What:  Health check endpoint for monitoring and container probes.
How:   Runs `SELECT 1` on the request's session and reads the mail relay's
       configuration flag (no SMTP connection is opened).

Status levels:
    - healthy:   database reachable
    - unhealthy: database unreachable (notes cannot be served)
"""

import logging
import time

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from notemail import __version__
from notemail.database import get_db_session
from notemail.dependencies import get_mail_relay
from notemail.schemas.note import HealthResponse
from notemail.services.mail_relay import MailRelay

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(
    db: AsyncSession = Depends(get_db_session),
    relay: MailRelay = Depends(get_mail_relay),
) -> HealthResponse:
    db_status = "connected"
    overall = "healthy"

    try:
        await db.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", str(e))

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        email="configured" if relay.is_configured() else "not_configured",
        uptime_seconds=round(time.time() - _start_time, 2),
    )
