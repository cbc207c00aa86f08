"""
ExportDesk Backend: Custom Exception Hierarchy
==============================================

What:  Application-specific exceptions for the error kinds the API reports.
How:   Each exception carries a message and an optional context dict.
       Global exception handlers (registered in main.py) map them to
       structured JSON error responses with the right HTTP status code.
Who:   Raised by services and routes; caught by the global handlers.

Exception Hierarchy:
    ExportDeskError (base)
    ├── ValidationError    → 400 Bad Request
    ├── NotFoundError      → 404 Not Found
    ├── ConflictError      → 409 Conflict (concurrent write on the same row)
    ├── FileStorageError   → 500 Internal Server Error
    └── DatabaseError      → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class ExportDeskError(Exception):
    """
    Base exception for all ExportDesk application errors.

    Attributes:
        message:  User-facing error description (returned in the API response)
        context:  Additional debug info (logged; echoed only where a handler says so)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(ExportDeskError):
    """
    Raised when client input fails validation.

    When:    Missing required fields, non-positive rates, malformed variant JSON,
             unsupported upload type.
    HTTP:    400 Bad Request

    Example response:
        {
            "error": "validation_error",
            "message": "rate_45kg: Input should be greater than 0",
            "details": {"field": "rate_45kg"}
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


class NotFoundError(ExportDeskError):
    """
    Raised when a requested resource does not exist.

    SQLAlchemy returns None for missing rows; services convert that into
    NotFoundError so the handler can answer 404.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        message: Optional[str] = None,
    ):
        if message is None:
            message = f"The requested {resource} was not found"
            if resource_id:
                message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class ConflictError(ExportDeskError):
    """
    Raised when a row changed between our read and our conditional write.

    When:    A variant read-modify-write kept losing the version check after
             all configured attempts, or a product update hit a stale version.
    HTTP:    409 Conflict (the client may simply repeat the request)
    """

    def __init__(
        self,
        message: str = "The record was modified concurrently. Please retry.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class FileStorageError(ExportDeskError):
    """
    Raised when the object store cannot write or read a file.

    When:    Disk full, permission denied, storage root not writable.
    HTTP:    500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "File storage operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(ExportDeskError):
    """
    Raised when a datastore operation fails unexpectedly.

    HTTP:    500 Internal Server Error, with the underlying driver message
             echoed under ``details.error``.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
