"""
Notemail Backend — Request Logging Middleware
=============================================

What:  One access log line per API request.
How:   Times the handler and logs method, path, status and duration together
       with the request id and client address.

Not logged: request bodies. Note content and recipient addresses stay out
of the access log.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from notemail.middleware.request_id import request_id_var

logger = logging.getLogger("notemail.access")

# Probes and client assets would drown out the API lines
QUIET_PREFIXES = ("/health", "/static/")


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Access logger for the notes and email endpoints.

    A POST /api/email/send that opens the SMTP session takes far longer than
    later sends, which reuse it; the duration field shows the difference.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path.startswith(QUIET_PREFIXES):
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        peer = request.client.host if request.client else "unknown"
        logger.log(
            level_for_status(response.status_code),
            "%s %s -> %d in %.1fms [%s] from %s",
            request.method,
            path,
            response.status_code,
            elapsed_ms,
            request_id_var.get(""),
            peer,
        )
        return response
