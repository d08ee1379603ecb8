"""Error codes and details carried by failed responses."""

from enum import Enum

from pydantic import BaseModel


class ErrorCode(str, Enum):
    """Machine-readable error codes for API responses."""

    INVALID_REQUEST = "INVALID_REQUEST"
    """Request validation failed (bad query parameter, malformed value)."""

    INVALID_IDENTIFIER = "INVALID_IDENTIFIER"
    """A path or query identifier is not a valid entity reference."""

    AUDIT_RECORD_NOT_FOUND = "AUDIT_RECORD_NOT_FOUND"
    """No audit record exists with the requested id."""

    UNAUTHORIZED = "UNAUTHORIZED"
    """Missing, invalid or expired bearer token."""

    FORBIDDEN = "FORBIDDEN"
    """The caller lacks the role required for this endpoint."""

    NOT_FOUND = "NOT_FOUND"
    """No route matches the request path."""

    STORAGE_UNAVAILABLE = "STORAGE_UNAVAILABLE"
    """The storage backend could not serve the request."""

    INTERNAL_ERROR = "INTERNAL_ERROR"
    """An unexpected internal error occurred."""


class ErrorDetail(BaseModel):
    """Field-level error information for validation failures."""

    field: str | None = None
    """The offending parameter, if applicable."""

    message: str
    """Human-readable error description."""
