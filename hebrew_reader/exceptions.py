"""
Hebrew Reader Backend — Custom Exception Hierarchy
==================================================

What:  Application-specific exceptions for the different error scenarios.
How:   Each exception carries a user-facing message and an optional context
       dict. Global handlers (registered in main.py) map them to HTTP status
       codes and structured JSON bodies.
Who:   Raised by services, dependencies and routes; caught by global handlers.

Exception Hierarchy:
    ReaderError (base)
    ├── ValidationError       → 400 Bad Request (client can fix)
    ├── AuthenticationError   → 401 Unauthorized
    ├── AuthorizationError    → 403 Forbidden
    ├── IdentityError         → 500 Internal Server Error
    ├── DatabaseError         → 500 Internal Server Error
    └── LLMServiceError       → 503 Service Unavailable

The message is always safe to return to the client. The context is logged
server-side and never serialized into a response.
"""

from typing import Any, Dict, Optional


class ReaderError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    status_code = 500
    code = "server_error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(ReaderError):
    """
    Raised when client input fails validation.

    When:    Body is not a JSON object, a field has the wrong type, the text
             to analyze is empty, or no model/key is configured.
    HTTP:    400 Bad Request
    """

    status_code = 400
    code = "validation_error"

    def __init__(
        self,
        message: str = "Invalid request body",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class AuthenticationError(ReaderError):
    """Raised when an endpoint requires a signed-in account and none is present."""

    status_code = 401
    code = "authentication_required"

    def __init__(
        self,
        message: str = "Authentication required",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class AuthorizationError(ReaderError):
    """
    Raised when the caller lacks a capability the endpoint requires.

    When:    A non-admin attempts to write app defaults.
    HTTP:    403 Forbidden
    """

    status_code = 403
    code = "forbidden"

    def __init__(
        self,
        message: str = "Unauthorized",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class IdentityError(ReaderError):
    """
    Raised when no user id could be resolved or issued for the request.

    Treated as an internal failure (500), not as a missing resource.
    """

    def __init__(
        self,
        message: str = "User ID not found",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class LLMServiceError(ReaderError):
    """
    Raised when a language model provider call fails.

    What:    Provider returned a non-2xx response, timed out, or produced
             output that could not be interpreted.
    HTTP:    503 Service Unavailable
    """

    status_code = 503
    code = "llm_service_error"

    def __init__(
        self,
        message: str = "Language model service is temporarily unavailable",
        raw_response: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
        self.raw_response = raw_response


class DatabaseError(ReaderError):
    """
    Raised when database operations fail unexpectedly.

    The message is one of the fixed, route-level phrases such as
    "Failed to save settings". The SQL error itself goes into context and
    only reaches the logs.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
