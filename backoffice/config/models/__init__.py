"""Configuration section models."""

from backoffice.config.models.api import APIConfig
from backoffice.config.models.audit import AuditConfig, FailurePolicy
from backoffice.config.models.observability import LoggingConfig, MetricsConfig, ObservabilityConfig
from backoffice.config.models.storage import BackendType, StorageConfig, StoreBackendConfig

__all__ = [
    "APIConfig",
    "AuditConfig",
    "BackendType",
    "FailurePolicy",
    "LoggingConfig",
    "MetricsConfig",
    "ObservabilityConfig",
    "StorageConfig",
    "StoreBackendConfig",
]
