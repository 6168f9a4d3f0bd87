"""
Error taxonomy for consistent error replies.

Every error carries the HTTP status it maps to and the category string
rendered as ``data.error`` in the response envelope.
"""

from fastapi import status
from typing import Any, Dict


class AppException(Exception):
    """Base application exception."""

    category = "Internal Server Error"
    default_status = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, status_code: int = None):
        self.message = message
        self.status_code = status_code or self.default_status
        super().__init__(message)

    def to_payload(self) -> Dict[str, Any]:
        """Error object placed in the envelope's ``data`` field."""
        return {
            "error": self.category,
            "message": self.message,
        }


class BadRequestError(AppException):
    """Raised when caller input is missing or invalid."""

    category = "Bad Request"
    default_status = status.HTTP_400_BAD_REQUEST


class MissingFieldsError(BadRequestError):
    """Raised when required payload fields are absent or empty."""

    def __init__(self, fields):
        self.fields = list(fields)
        super().__init__(f"Missing required parameters: {', '.join(self.fields)}")


class InvoiceStateConflict(BadRequestError):
    """
    Raised when a receive/reverse precondition is not met.

    The conditional update found no row in the required prior state, either
    because the invoice is already in the target state or because it vanished
    between the existence check and the update.
    """


class UnauthorizedError(AppException):
    """Raised when the API key check fails."""

    category = "Unauthorized"
    default_status = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "Invalid or missing API key"):
        super().__init__(message)


class NotFoundError(AppException):
    """Raised when no route or no entity matches."""

    category = "Not Found"
    default_status = status.HTTP_404_NOT_FOUND


class ConflictError(AppException):
    """Raised on duplicate creation."""

    category = "Conflict"
    default_status = status.HTTP_409_CONFLICT


class InternalServerError(AppException):
    """Raised for store or unexpected failures."""

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)
