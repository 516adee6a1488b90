"""
ShareBite Backend — Custom Exception Hierarchy
================================================

What:  Application-specific exceptions for every error the API can report.
Why:   Services raise typed errors; global handlers (registered in main.py)
       turn them into structured JSON responses with the right status code.
       No handler has to try/except around a service call.
How:   Each exception carries a user-facing message and an optional context
       dict. Context is logged server-side and, for client errors, echoed
       back as `details`.

Exception Hierarchy:
    ShareBiteError (base)
    ├── ValidationError     → 400 Bad Request (malformed id, missing field)
    ├── UnauthorizedError   → 401 Unauthorized (no bearer credential)
    ├── ForbiddenError      → 403 Forbidden (invalid credential or not the owner)
    ├── NotFoundError       → 404 Not Found (well-formed id, no record)
    └── StoreError          → 500 Internal Server Error (backing store failed)

Unauthorized and Forbidden are deliberately separate types: a client that
gets 401 should sign in, a client that gets 403 should stop trying.
"""

from typing import Any, Dict, Optional


class ShareBiteError(Exception):
    """
    Base exception for all ShareBite application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(ShareBiteError):
    """
    Raised when client input fails validation.

    When:  Malformed identifier, missing required field, body that is not a JSON object.
    HTTP:  400 Bad Request
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


class UnauthorizedError(ShareBiteError):
    """
    Raised when a protected route is called without a bearer credential.

    HTTP:  401 Unauthorized, with `WWW-Authenticate: Bearer`.
    """

    def __init__(
        self,
        message: str = "Unauthorized: No token",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ForbiddenError(ShareBiteError):
    """
    Raised when the caller is known (or claims to be) but may not proceed.

    When:
        - The bearer credential is malformed, invalid, expired or revoked
        - The verified caller is not the owner of the listing being changed
    HTTP:  403 Forbidden
    """

    def __init__(
        self,
        message: str = "Forbidden",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(ShareBiteError):
    """
    Raised when a well-formed identifier matches no record.

    HTTP:  404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
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


class StoreError(ShareBiteError):
    """
    Raised when a backing-store operation fails.

    HTTP:  500 Internal Server Error

    Security Note:
        The message returned to the client is always generic. The failing
        operation and driver error are logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
