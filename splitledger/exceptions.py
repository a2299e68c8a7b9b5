"""
SplitLedger Backend — Custom Exception Hierarchy
=================================================

What:  Application-specific exceptions, one per failure kind a caller can see.
How:   Each exception carries a user-safe message and an optional context
       dict. Global handlers registered in main.py turn them into JSON error
       responses with the matching HTTP status code.
Who:   Raised by services; caught by the global handlers.

Exception Hierarchy:
    SplitLedgerError (base)
    ├── ValidationError   → 400 Bad Request
    ├── NotFoundError     → 404 Not Found
    ├── ConflictError     → 409 Conflict
    └── InternalError     → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class SplitLedgerError(Exception):
    """
    Base exception for all SplitLedger application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned for 5xx errors)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(SplitLedgerError):
    """
    Raised when client input is missing, malformed, or breaks a business rule.

    When:    Malformed email, participant without a display name, percentages
             summing past 100%, `exact` participant without an amount owed.
    HTTP:    400 Bad Request

    Example response:
        {
            "error": "validation_error",
            "message": "Total percentage exceeds 100%",
            "details": {"field": "participants", "total_percentage": "110"}
        }
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


class NotFoundError(SplitLedgerError):
    """
    Raised when a referenced user or expense does not exist, or when a listing
    has nothing to report.

    HTTP:    404 Not Found

    SQLAlchemy returns None (or an empty list) for missing records; services
    convert that into this exception so routes stay free of lookups.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        if message is None:
            message = f"The requested {resource} was not found"
            if resource_id:
                message = f"{resource.capitalize()} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class ConflictError(SplitLedgerError):
    """
    Raised when a unique field (email, mobile number) is already taken.

    HTTP:    409 Conflict
    """

    def __init__(
        self,
        message: str = "Email or mobile number already exists",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class InternalError(SplitLedgerError):
    """
    Raised when persistence or serialization fails unexpectedly.

    HTTP:    500 Internal Server Error

    The message returned to the client is always generic. Details (SQL
    errors, exception types) stay in `context` and are logged server-side only.
    """

    def __init__(
        self,
        message: str = "An internal error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
