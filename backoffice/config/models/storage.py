"""Storage backend configuration models."""

from typing import Literal

from pydantic import BaseModel, Field

BackendType = Literal["inmemory", "postgres"]


class StoreBackendConfig(BaseModel):
    """Configuration for a single store backend.

    Pool settings only apply to the postgres backend.
    """

    backend: BackendType = Field(
        default="postgres",
        description="Backend type",
    )
    connection_url: str | None = Field(
        default=None,
        description="Connection URL; falls back to BACKOFFICE_DATABASE_URL / DATABASE_URL",
    )
    min_pool_size: int = Field(
        default=5,
        gt=0,
        description="Minimum connections to keep open",
    )
    max_pool_size: int = Field(
        default=20,
        gt=0,
        description="Maximum connections in pool",
    )
    max_inactive_connection_lifetime: float = Field(
        default=300.0,
        gt=0,
        description="Close connections idle longer than this (seconds)",
    )
    command_timeout: float = Field(
        default=60.0,
        gt=0,
        description="Default timeout for queries (seconds)",
    )


class StorageConfig(BaseModel):
    """Configuration for all storage backends."""

    audit: StoreBackendConfig = Field(
        default_factory=StoreBackendConfig,
        description="AuditStore backend",
    )
    operators: StoreBackendConfig = Field(
        default_factory=StoreBackendConfig,
        description="OperatorDirectory backend (reads the users table)",
    )
