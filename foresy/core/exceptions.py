"""Custom exceptions for the Foresy application.

Every domain exception carries a stable ``error_code`` and the key of the
canonical HTTP status map it renders to.
"""

from __future__ import annotations


class ForesyException(Exception):
    """Base exception for Foresy application."""

    status_key = "internal_error"
    default_code = "error"
    default_message = "An error occurred"

    def __init__(self, message: str | None = None, code: str | None = None, field: str | None = None) -> None:
        self.message = message or self.default_message
        self.error_code = code or self.default_code
        self.field = field
        super().__init__(self.message)

    def to_dict(self) -> dict:
        payload = {"error": self.message, "code": self.error_code}
        if self.field:
            payload["field"] = self.field
        return payload


class ConfigurationError(ForesyException):
    """Raised when configuration is invalid."""

    default_code = "configuration_error"
    default_message = "Invalid configuration"


class ContractViolation(ForesyException):
    """Raised when a payload is malformed or missing required fields."""

    status_key = "bad_request"
    default_code = "bad_request"
    default_message = "Bad Request"


class AuthenticationError(ForesyException):
    """Raised when authentication fails."""

    status_key = "unauthorized"
    default_code = "unauthorized"
    default_message = "Unauthorized"


class PermissionDenied(ForesyException):
    """Raised when an authenticated user is not allowed to act."""

    status_key = "forbidden"
    default_code = "forbidden"
    default_message = "Forbidden"


class NotFoundError(ForesyException):
    """Raised when a resource is not found."""

    status_key = "not_found"
    default_code = "not_found"
    default_message = "Not Found"


class ConflictError(ForesyException):
    """Raised on duplicates or state conflicts."""

    status_key = "conflict"
    default_code = "conflict"
    default_message = "Conflict"


class DomainValidationError(ForesyException):
    """Raised when a business rule rejects a well-formed payload."""

    status_key = "validation_error"
    default_code = "validation_failed"
    default_message = "Validation failed"


class InvalidTransitionError(DomainValidationError):
    """Raised when a disallowed state transition is attempted."""

    default_code = "invalid_transition"
    default_message = "Invalid status transition"

    def __init__(self, current: str | None = None, target: str | None = None, message: str | None = None) -> None:
        if message is None and current is not None and target is not None:
            message = f"Invalid transition from '{current}' to '{target}'"
        super().__init__(message)


class RateLimitExceeded(ForesyException):
    """Raised when a client exceeds the request budget of an endpoint."""

    status_key = "too_many_requests"
    default_code = "rate_limited"
    default_message = "Rate limit exceeded"

    def __init__(self, retry_after: int, message: str | None = None) -> None:
        self.retry_after = retry_after
        super().__init__(message)


class InternalError(ForesyException):
    """Raised when an operation fails for an unexpected reason."""

    default_code = "internal_error"
    default_message = "Internal server error"
