"""Store error hierarchy.

Postgres-backed stores wrap asyncpg failures in these so the API can map
every storage failure to a single 503 handler.
"""


class StoreError(Exception):
    """Base for storage failures; ``cause`` keeps the driver exception."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause


class ConnectionError(StoreError):
    """Database unreachable, unconfigured, or the connection dropped."""


class ConflictError(StoreError):
    """Insert of an audit record id that already exists."""


class ValidationError(StoreError):
    """Row rejected by a CHECK or NOT NULL constraint."""
