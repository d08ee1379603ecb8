"""Audit subsystem exceptions."""


class AuditError(Exception):
    """Base exception for the audit subsystem."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause


class AuditWriteError(AuditError):
    """An audit record could not be built or persisted.

    The domain mutation that triggered the write has already committed;
    nothing is rolled back.
    """


class InvalidFilterError(AuditError):
    """A search parameter or record identifier was rejected."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field
