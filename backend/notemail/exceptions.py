"""
Notemail Backend — Custom Exception Hierarchy
=============================================

What:  Application-specific exceptions for the error scenarios of the API.
How:   Each exception carries a user-facing message and an optional context
       dict. Global exception handlers (registered in main.py) catch these
       and return JSON error responses with the matching status code.
Who:   Raised by the validation pass, NoteService and MailRelay.

Exception Hierarchy:
    NotemailError (base)
    ├── InvalidInputError        → 400 Bad Request (client can fix)
    ├── NotFoundError            → 404 Not Found
    ├── NotConfiguredError       → 500 (mail relay has no credentials)
    ├── TransportError           → 500 (SMTP or storage driver failure)
    │   └── DatabaseError        → 500 (storage driver failure)
    └── InternalError            → 500 (anything uncategorized)
"""

from typing import Any, Dict, Optional


class NotemailError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class InvalidInputError(NotemailError):
    """
    Raised when client-supplied data fails validation.

    When:    Missing or empty title/content, title over 255 characters,
             malformed recipient address, unparseable request body.
    HTTP:    400 Bad Request

    Example response:
        {
            "error": "invalid_input",
            "message": "Invalid email address",
            "details": {"field": "to"}
        }
    """

    def __init__(
        self,
        message: str = "Invalid input",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(NotemailError):
    """
    Raised when a requested resource does not exist.

    When:    GET/PUT/DELETE /api/notes/{id} with an id that has no row.
    HTTP:    404 Not Found

    SQLAlchemy returns None for missing rows; the service layer turns that
    into this exception so routes stay free of status-code logic.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource.capitalize()} not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class NotConfiguredError(NotemailError):
    """
    Raised when the mail relay is asked to send without credentials.

    HTTP:    500 Internal Server Error
    """

    def __init__(
        self,
        message: str = (
            "Email not configured. Please set GMAIL_USER and "
            "GMAIL_APP_PASSWORD in .env file."
        ),
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class TransportError(NotemailError):
    """
    Raised when an external dependency call fails.

    What:    Network, authentication or protocol failure reported by the
             SMTP transport (or, via DatabaseError, the storage driver).
    HTTP:    500 Internal Server Error

    The underlying exception is kept on `cause` and chained with
    `raise ... from`.
    """

    def __init__(
        self,
        message: str = "External service call failed",
        cause: Optional[BaseException] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if cause is not None:
            ctx["cause"] = type(cause).__name__
        super().__init__(message=message, context=ctx)
        self.cause = cause


class DatabaseError(TransportError):
    """
    Raised when database operations fail unexpectedly.

    HTTP:    500 Internal Server Error

    The message returned to the client is always generic. Details (SQL,
    constraint names) are logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        cause: Optional[BaseException] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, cause=cause, context=context)


class InternalError(NotemailError):
    """Any otherwise-uncategorized failure. HTTP 500."""

    def __init__(
        self,
        message: str = "An unexpected error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
