"""
MapIt Backend: Custom Exception Hierarchy
===========================================

What:  Application-specific exceptions for the different failure scenarios.
How:   Each exception carries a machine-stable `error` string, a human-readable
       `message`, and an optional context dict. Global exception handlers
       (registered in main.py) turn them into the JSON error envelope:

           {"success": false, "error": "<stable string>", "message": "<detail>"}

       `context` is logged server-side and never returned to the client.
Who:   Raised by services and the database layer; caught by global handlers.

Exception Hierarchy:
    MapItError (base)
    ├── ValidationError      → 400 Bad Request (missing required field/parameter)
    ├── NotFoundError        → 404 Not Found
    ├── DatabaseError        → 500 Internal Server Error (query/connection failure)
    └── ConfigurationError   → 500 Internal Server Error (store not configured)

Client code should branch on `error`; `message` is free text and may carry the
underlying store error for diagnostics.
"""

from typing import Any, Dict, Optional


class MapItError(Exception):
    """
    Base exception for all MapIt application errors.

    Attributes:
        status_code: HTTP status the global handler responds with
        error:       Machine-stable error string (returned as `error`)
        message:     Human-readable description (returned as `message`)
        context:     Additional debug info (logged but NOT returned to client)
    """

    status_code: int = 500
    default_error: str = "Server error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        error: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.error = error or self.default_error
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(MapItError):
    """
    Raised when client input is missing a required field or parameter.

    The `error` string doubles as the message so that clients that only read
    `error` still see what was missing.

    Example response:
        {"success": false, "error": "Title and customer_id are required"}
    """

    status_code = 400

    def __init__(
        self,
        error: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=error, error=error, context=ctx)
        self.field = field


class NotFoundError(MapItError):
    """
    Raised when a requested resource does not exist.

    When:  Zone lookups by id, or an insert whose foreign key points at a
           customer, map or package that is not in the store.
    """

    status_code = 404

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        error = f"{resource.capitalize()} not found"
        message = error
        if resource_id is not None:
            message = f"{resource.capitalize()} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, error=error, context=ctx)


class DatabaseError(MapItError):
    """
    Raised when a query, insert, update, or connection attempt fails.

    The underlying driver message is returned in `message`. This is an
    internal/admin tool, so diagnostics win over opacity here.
    """

    status_code = 500
    default_error = "Server error"

    def __init__(
        self,
        message: str = "A database error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ConfigurationError(MapItError):
    """
    Raised when the store cannot be used because configuration is missing.

    The configuration problem itself is the stable `error` string, e.g.
    "DATABASE_URL environment variable is not set".
    """

    status_code = 500

    def __init__(
        self,
        message: str = "DATABASE_URL environment variable is not set",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, error=message, context=context)
