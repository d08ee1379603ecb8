"""Response envelope shared by every endpoint."""

from typing import Generic, TypeVar

from pydantic import BaseModel

from backoffice.api.models.errors import ErrorCode, ErrorDetail

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """``{success, message, result}`` envelope.

    Failed responses carry ``result: null`` plus a machine-readable code
    and, for validation failures, per-field details.
    """

    success: bool
    message: str
    result: T | None = None
    code: ErrorCode | None = None
    details: list[ErrorDetail] | None = None

    @classmethod
    def ok(cls, message: str, result: T) -> "ApiResponse[T]":
        """Successful response."""
        return cls(success=True, message=message, result=result)

    @classmethod
    def fail(
        cls,
        code: ErrorCode,
        message: str,
        details: list[ErrorDetail] | None = None,
    ) -> "ApiResponse[T]":
        """Failed response."""
        return cls(success=False, message=message, code=code, details=details)
