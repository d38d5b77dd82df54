"""
Inventory API — Custom Exception Hierarchy
============================================

What:  Application-specific exceptions for the inventory service.
Why:   Services raise domain errors; the global handlers registered in main.py
       turn them into HTTP responses with the right status code.
How:   Each exception carries a user-facing message and an optional context
       dict. Context is logged server-side and only returned for validation
       errors (it tells the client which field to fix).
Who:   Raised by the repository, the photo store and the route handlers.

Exception Hierarchy:
    InventoryError (base)
    ├── ValidationError   → 400 Bad Request (client can fix)
    ├── NotFoundError     → 404 Not Found
    └── StorageError      → 500 Internal Server Error

Unmatched routes never raise one of these: the router fallback answers 405
directly (see main.register_exception_handlers).
"""

from typing import Any, Dict, Optional


class InventoryError(Exception):
    """
    Base exception for all inventory service errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, not returned except for 400s)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(InventoryError):
    """
    Raised when client input fails a presence or format check.

    When:    Missing inventory_name, missing photo upload, malformed JSON body.
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


class NotFoundError(InventoryError):
    """
    Raised when a requested resource does not exist.

    When:    Unknown item id, item without a photo, photo file gone from disk.
    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id is not None:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = str(resource_id)
        super().__init__(message=message, context=ctx)


class StorageError(InventoryError):
    """
    Raised when a file system operation on the photo cache fails.

    When:    Disk full, permission denied, cache directory removed, I/O error.
    HTTP:    500 Internal Server Error

    The OS error and the path go into context for the logs; the client only
    sees the generic message. Failed operations are not retried.
    """

    def __init__(
        self,
        message: str = "Photo storage operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
