"""Custom application exceptions."""

from typing import Any


class AppException(Exception):
    """Base application exception."""

    code = "ApplicationError"

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ):
        """Initialize exception with message, status code and optional details."""
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class NotAuthenticatedException(AppException):
    """No caller identity was supplied or it could not be verified."""

    code = "NotAuthenticated"

    def __init__(self, message: str = "Not authenticated"):
        """Initialize with 401 status code."""
        super().__init__(message, status_code=401)


class UnauthorizedException(AppException):
    """Caller lacks the role or ownership required for the target entity."""

    code = "Unauthorized"

    def __init__(self, message: str = "Unauthorized"):
        """Initialize with 403 status code."""
        super().__init__(message, status_code=403)


class NotFoundException(AppException):
    """Resource not found exception."""

    code = "NotFound"

    def __init__(self, message: str = "Resource not found"):
        """Initialize with 404 status code."""
        super().__init__(message, status_code=404)


class SlotUnavailableException(AppException):
    """The requested slot is taken, was removed, or never existed."""

    code = "SlotUnavailable"

    def __init__(self, message: str = "Time slot is no longer available"):
        """Initialize with 409 status code."""
        super().__init__(message, status_code=409)


class DepositRequiredException(AppException):
    """Confirmation attempted before the deposit was paid."""

    code = "DepositRequired"

    def __init__(self, message: str = "Deposit must be paid before confirming appointment"):
        """Initialize with 409 status code."""
        super().__init__(message, status_code=409)


class PaymentDeclinedException(AppException):
    """The payment processor declined the charge."""

    code = "PaymentDeclined"

    def __init__(
        self,
        message: str = "Payment failed. Please try again.",
        details: dict[str, Any] | None = None,
    ):
        """Initialize with 402 status code."""
        super().__init__(message, status_code=402, details=details)


class InvalidTransitionException(AppException):
    """Appointment state machine guard violation."""

    code = "InvalidTransition"

    def __init__(self, message: str = "Invalid appointment status transition"):
        """Initialize with 409 status code."""
        super().__init__(message, status_code=409)


class ConflictException(AppException):
    """Conflict exception."""

    code = "Conflict"

    def __init__(self, message: str = "Conflict"):
        """Initialize with 409 status code."""
        super().__init__(message, status_code=409)


class ValidationException(AppException):
    """Validation error exception."""

    code = "ValidationError"

    def __init__(self, message: str = "Validation error"):
        """Initialize with 422 status code."""
        super().__init__(message, status_code=422)
