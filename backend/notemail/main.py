"""
Notemail Backend — FastAPI Application Factory
==============================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn notemail.main:app).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────┐ ┌──────┐ ┌──────┐         │
    │  │ Req ID   │→│ Logging │→│ GZip │→│ CORS │         │
    │  └──────────┘ └─────────┘ └──────┘ └──────┘         │
    │                                                     │
    │  Routes:                                            │
    │  ┌────────────┐ ┌────────────┐ ┌────────┐ ┌─────┐   │
    │  │ /api/notes │ │ /api/email │ │/health │ │  /  │   │
    │  └────────────┘ └────────────┘ └────────┘ └─────┘   │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ InvalidInput→400 │ NotFound→404 │ rest→500   │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging, configuration warnings, database probe
    Shutdown: close the SMTP session, dispose the database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from notemail import __version__
from notemail.config import settings
from notemail.database import check_database_connection, dispose_engine
from notemail.exceptions import (
    DatabaseError,
    InternalError,
    InvalidInputError,
    NotConfiguredError,
    NotemailError,
    NotFoundError,
    TransportError,
)
from notemail.middleware.logging import RequestLoggingMiddleware
from notemail.middleware.request_id import RequestIDMiddleware, request_id_var
from notemail.routes import client, email, health, notes
from notemail.routes.client import STATIC_DIR
from notemail.services.mail_relay import MailRelay

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once during app startup, before any other initialization.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
        force=True,
    )

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosmtplib").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup sequence:
        1. Setup logging
        2. Log configuration warnings (missing mail credentials)
        3. Probe the database (logged, never fatal)

    Shutdown sequence:
        1. Quit the SMTP session if one was opened
        2. Dispose database engine (close all pooled connections)
    """
    setup_logging()
    logger.info("=" * 60)
    logger.info("Notemail backend %s starting up...", __version__)

    for warning in settings.validate_for_startup():
        logger.warning("Configuration: %s", warning)

    relay: MailRelay = app.state.mail_relay
    if relay.is_configured():
        logger.info("Email configured for %s", relay.get_sender_address())

    await check_database_connection()

    logger.info("Notes app listening at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("Notemail backend shutting down...")
    await relay.close()
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_body(error: str, message: str, **extra) -> dict:
    body = {"error": error, "message": message, "request_id": request_id_var.get("")}
    body.update(extra)
    return body


def register_exception_handlers(app: FastAPI) -> None:
    """
    Maps exception types to HTTP status codes and response formats.

    Handler hierarchy:
        InvalidInputError       → 400 Bad Request
        RequestValidationError  → 400 Bad Request (malformed JSON, bad path id)
        NotFoundError           → 404 Not Found
        NotConfiguredError      → 500 (mail relay has no credentials)
        TransportError          → 500 (SMTP failure; message names the cause)
        DatabaseError           → 500 (generic message, details logged)
        NotemailError (base)    → 500
        Exception (fallback)    → 500

    Stack traces and SQL never reach the response body.
    """

    @app.exception_handler(InvalidInputError)
    async def handle_invalid_input(request: Request, exc: InvalidInputError):
        logger.warning("[%s] Invalid input: %s", request_id_var.get(""), exc.message)
        return JSONResponse(
            status_code=400,
            content=_error_body("invalid_input", exc.message, details=exc.context),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        logger.warning("[%s] Malformed request: %s", request_id_var.get(""), exc.errors())
        return JSONResponse(
            status_code=400,
            content=_error_body("invalid_input", "Malformed request"),
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return JSONResponse(
            status_code=404,
            content=_error_body("not_found", exc.message),
        )

    @app.exception_handler(NotConfiguredError)
    async def handle_not_configured(request: Request, exc: NotConfiguredError):
        logger.error("[%s] Mail relay not configured", request_id_var.get(""))
        return JSONResponse(
            status_code=500,
            content=_error_body("email_not_configured", exc.message),
        )

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        logger.error(
            "[%s] Database error: %s | Context: %s",
            request_id_var.get(""),
            exc.message,
            exc.context,
        )
        return JSONResponse(
            status_code=500,
            content=_error_body("server_error", exc.message),
        )

    @app.exception_handler(TransportError)
    async def handle_transport_error(request: Request, exc: TransportError):
        logger.error(
            "[%s] Transport error: %s | Context: %s",
            request_id_var.get(""),
            exc.message,
            exc.context,
        )
        return JSONResponse(
            status_code=500,
            content=_error_body("transport_error", exc.message),
        )

    @app.exception_handler(NotemailError)
    async def handle_app_error(request: Request, exc: NotemailError):
        logger.error("[%s] Application error: %s", request_id_var.get(""), exc.message)
        return JSONResponse(
            status_code=500,
            content=_error_body("internal_server_error", exc.message),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(""),
            str(exc),
            exc_info=True,
        )
        return JSONResponse(
            status_code=500,
            content=_error_body("internal_server_error", InternalError().message),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(mail_relay: Optional[MailRelay] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        mail_relay: Relay to expose to the email routes. Built from settings
            when omitted; tests pass one backed by a fake transport.
    """
    app = FastAPI(
        title="Notemail API",
        description="Note-taking backend: CRUD over notes and sending a note by email.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.state.mail_relay = mail_relay or MailRelay.from_settings(settings)

    # ── Register Middleware ───────────────────────────────────────────────
    # Executes in reverse order of addition: RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(notes.router)
    app.include_router(email.router)
    app.include_router(health.router)
    app.include_router(client.router)
    app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")

    return app


app = create_app()
