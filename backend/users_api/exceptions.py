"""
Users API — Custom Exception Hierarchy
=======================================

What:  Defines application-specific exceptions for the three failure outcomes
       a user request can have.
Why:   The service layer raises these instead of letting driver exceptions
       escape; global handlers in main.py map each type to one HTTP status.
How:   Each exception class carries a message and optional context dict.
       For store failures the context holds the serialized driver error.
Who:   Raised by UserService; caught by global handlers.
When:  During request processing.

Exception Hierarchy:
    UsersApiError (base)
    ├── ValidationError   → 400 Bad Request (bad input or rejected write)
    ├── NotFoundError     → 404 Not Found (empty body)
    └── DatabaseError     → 500 Internal Server Error (failed lookup/delete)
"""

from typing import Any, Dict, Optional


class UsersApiError(Exception):
    """
    Base exception for all Users API errors.

    Attributes:
        message:  Human-readable error description
        context:  Additional detail returned under "details" in the response
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(UsersApiError):
    """
    Raised when a request cannot be applied as sent.

    When:    The store rejects or cannot encode an insert/update, listing
             fails, or an update targets a malformed identifier. Body
             shape errors are caught earlier by FastAPI and rendered the
             same way.
    HTTP:    400 Bad Request
    """

    def __init__(
        self,
        message: str = "Validation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(UsersApiError):
    """
    Raised when no document matches the requested identifier.

    HTTP:    404 Not Found, sent with an empty body.
    """

    def __init__(
        self,
        resource: str = "user",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class DatabaseError(UsersApiError):
    """
    Raised when a lookup or delete fails for any reason other than "missing".

    When:    Malformed identifier on get/delete, lost connection, server error.
    HTTP:    500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "A database error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


def describe_store_error(exc: Exception) -> Dict[str, Any]:
    """
    Serialize a driver exception into a JSON-safe dict.

    Clients distinguish failure causes by these fields, so the driver's own
    name, message and numeric code (when it has one) are passed through.
    """
    described: Dict[str, Any] = {
        "name": type(exc).__name__,
        "message": str(exc),
    }
    code = getattr(exc, "code", None)
    if code is not None:
        described["code"] = code
    return described
