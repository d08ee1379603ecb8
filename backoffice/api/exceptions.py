"""API exception hierarchy.

All API exceptions inherit from BackofficeAPIError, whose status_code and
error_code drive the global exception handler.
"""

from backoffice.api.models.errors import ErrorCode


class BackofficeAPIError(Exception):
    """Base exception for all API errors."""

    status_code: int = 500
    error_code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str, field: str | None = None) -> None:
        self.message = message
        self.field = field
        super().__init__(message)


class InvalidRequestError(BackofficeAPIError):
    """Raised when a query parameter is rejected."""

    status_code = 400
    error_code = ErrorCode.INVALID_REQUEST


class InvalidIdentifierError(BackofficeAPIError):
    """Raised when an identifier is malformed."""

    status_code = 400
    error_code = ErrorCode.INVALID_IDENTIFIER


class AuditRecordNotFoundError(BackofficeAPIError):
    """Raised when an audit record id does not exist."""

    status_code = 404
    error_code = ErrorCode.AUDIT_RECORD_NOT_FOUND


class UnauthorizedError(BackofficeAPIError):
    """Raised when the bearer token is missing or invalid."""

    status_code = 401
    error_code = ErrorCode.UNAUTHORIZED


class ForbiddenError(BackofficeAPIError):
    """Raised when the operator lacks the required role."""

    status_code = 403
    error_code = ErrorCode.FORBIDDEN

