"""
Unified base exception classes for all services.

Services extend ServiceError with their own base (e.g. OrderHistoryError);
the API layer turns any of them into an HTTPException with the same
message and status code.
"""
from fastapi import HTTPException


class ServiceError(Exception):
    """Base exception for all service-layer errors."""

    def __init__(self, message: str, status_code: int = 400):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


def to_http_exception(error: ServiceError) -> HTTPException:
    """Convert a service exception to the HTTP error returned to clients."""
    return HTTPException(status_code=error.status_code, detail=error.message)
