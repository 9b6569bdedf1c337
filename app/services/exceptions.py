"""
Domain exceptions for the book and review services.

Each exception carries the HTTP status it is reported with, so routers
never translate errors themselves: app.main registers one handler for
ServiceError and the kind is preserved end to end.
"""

from fastapi import status


class ServiceError(Exception):
    """Base exception for all book/review service errors."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(ServiceError):
    """Missing or out-of-range input. The caller must correct and resubmit."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY


class NotFoundError(ServiceError):
    """Target book or review does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class ForbiddenError(ServiceError):
    """Authenticated, but not the owner/author of the target."""

    status_code = status.HTTP_403_FORBIDDEN


class ConflictError(ServiceError):
    """User already reviewed this book."""

    status_code = status.HTTP_409_CONFLICT


class StorageError(ServiceError):
    """Underlying persistence failure. Reported without internal detail."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
