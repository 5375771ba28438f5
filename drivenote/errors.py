"""
Error Types

Exception hierarchy shared by the analytics core and its services.

- PreconditionError: caller passed invalid input (negative counts or limits).
- PersistenceError: the store failed to commit. The computed value is attached
  as ``result`` so callers can still use it and retry the save.
- NotFoundError / InvalidRouteTransitionError: route lifecycle misuse.

Usage:
    from drivenote.errors import PersistenceError

    try:
        selection = service.select_today_cards()
    except PersistenceError as e:
        selection = e.result  # show it anyway, retry store.save() later
"""

from typing import Any, Optional


class ServiceError(Exception):
    """
    Base exception for service errors.

    Provides consistent error handling with:
    - Error code for categorization
    - Optional details for debugging

    Example:
        raise ServiceError("Store unavailable", error_code="store_error")
    """

    error_code: str = "service_error"

    def __init__(
        self,
        message: str,
        error_code: str = None,
        details: dict = None,
    ):
        super().__init__(message)
        self.message = message
        if error_code:
            self.error_code = error_code
        self.details = details


class PreconditionError(ServiceError, ValueError):
    """
    Invalid input error.

    Raised immediately when a caller violates an operation's preconditions.
    Not recoverable by the core.
    """

    error_code = "precondition_failed"


class PersistenceError(ServiceError):
    """
    Store commit error.

    Raised when ``save()`` fails. Staged changes stay pending in the store so
    the save can be retried.
    """

    error_code = "persistence_error"

    def __init__(
        self,
        message: str,
        result: Optional[Any] = None,
        details: dict = None,
    ):
        super().__init__(message, details=details)
        self.result = result


class NotFoundError(ServiceError):
    """Raised when a requested record doesn't exist."""

    error_code = "not_found"


class InvalidRouteTransitionError(ServiceError):
    """Raised when a route status change is not allowed."""

    error_code = "invalid_route_transition"


def require_non_negative(**values: int) -> None:
    """Raise PreconditionError if any named value is negative."""
    negative = {name: value for name, value in values.items() if value < 0}
    if negative:
        raise PreconditionError(
            f"Expected non-negative values, got {negative}",
            details=negative,
        )
