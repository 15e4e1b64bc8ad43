"""
WPVite Backend — Custom Exception Hierarchy
=============================================

What:  Application-specific exceptions for the different failure scenarios.
How:   Each exception carries a user-safe message and an optional context
       dict. Global exception handlers (registered in main.py) translate them
       into structured JSON responses with the right HTTP status code.
Who:   Raised by services, API handlers and the router; caught by the
       handlers in main.py. ConfigurationError is raised at startup only.

Exception Hierarchy:
    WPViteError (base)
    ├── ValidationError          → 400 Bad Request
    ├── AuthenticationError      → 401 Unauthorized
    ├── PermissionDeniedError    → 403 Forbidden
    ├── NotFoundError            → 404 Not Found
    ├── FileStorageError         → 500 Internal Server Error
    ├── DatabaseError            → 500 Internal Server Error
    ├── OAuthError               → 502 Bad Gateway
    └── ConfigurationError       → startup failure (never reaches a client)

An unmatched API path is NOT an exception: the router returns its 404
response directly.
"""

from typing import Any, Dict, Optional


class WPViteError(Exception):
    """
    Base exception for all WPVite application errors.

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


class ValidationError(WPViteError):
    """
    Raised when client input fails validation.

    When:    Missing title/email, malformed ids, unsupported upload type, bad JSON.
    HTTP:    400 Bad Request
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class AuthenticationError(WPViteError):
    """Missing, malformed or expired auth cookie. HTTP 401."""

    def __init__(
        self,
        message: str = "Unauthorized",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class PermissionDeniedError(WPViteError):
    """
    The caller is authenticated but not allowed to do this.

    When:    Non super-admin touching /api/users, setup already completed,
             OAuth login for an email that was never invited.
    HTTP:    403 Forbidden
    """

    def __init__(
        self,
        message: str = "Forbidden",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(WPViteError):
    """
    Raised when a requested resource does not exist.

    SQLAlchemy returns None for missing records; services convert that
    into NotFoundError so the HTTP status is decided in one place.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource.capitalize()} not found"
        if resource_id:
            message = f"{resource.capitalize()} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class FileStorageError(WPViteError):
    """Could not read, write, or delete a media file. HTTP 500."""

    def __init__(
        self,
        message: str = "File storage operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(WPViteError):
    """
    Raised when database operations fail unexpectedly.

    Security Note:
        The message returned to the client is always generic.
        Query text, constraint names, etc. are logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class OAuthError(WPViteError):
    """
    Google's token or userinfo endpoint failed after all retries.

    HTTP:    502 Bad Gateway (the upstream identity provider misbehaved)
    """

    def __init__(
        self,
        message: str = "Authentication failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ConfigurationError(WPViteError):
    """
    Invalid application wiring detected at startup.

    When:    The same (method, pattern) registered twice, an unknown HTTP
             method, or a malformed route pattern.
    """

    def __init__(
        self,
        message: str = "Invalid configuration",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
