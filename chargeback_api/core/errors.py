"""
Domain-specific exceptions for the Chargeback API.

These exceptions represent business rule violations and infrastructure
failures. Transport adapters (FastAPI app, Lambda handler) map them to
HTTP status codes through get_status_code.
"""

from typing import Any


class ChargebackError(Exception):
    """Base exception for all chargeback domain errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(ChargebackError):
    """
    Raised when a creation request fails business validation.

    Examples:
    - Blank transaction or merchant ID
    - Non-positive amount
    - Unknown chargeback reason

    HTTP Status: 400 Bad Request
    """

    pass


class NotFoundError(ChargebackError):
    """
    Raised when a requested chargeback does not exist.

    HTTP Status: 404 Not Found
    """

    pass


class ConflictError(ChargebackError):
    """
    Raised when an operation conflicts with stored state.

    Examples:
    - Chargeback already recorded for the transaction

    HTTP Status: 409 Conflict
    """

    pass


class InvalidStatusTransitionError(ChargebackError):
    """
    Raised when approve/reject is called on a chargeback that is not pending.

    HTTP Status: 409 Conflict
    """

    pass


class StorageError(ChargebackError):
    """
    Raised when the backing store fails on read or write.

    HTTP Status: 500 Internal Server Error
    """

    pass


ERROR_STATUS_MAP = {
    ValidationError: 400,
    NotFoundError: 404,
    ConflictError: 409,
    InvalidStatusTransitionError: 409,
    StorageError: 500,
}


def get_status_code(error: Exception) -> int:
    """
    Get the HTTP status code for a given exception.

    Args:
        error: The exception instance

    Returns:
        HTTP status code (defaults to 500 for unknown errors)
    """
    return ERROR_STATUS_MAP.get(type(error), 500)
