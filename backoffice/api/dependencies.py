"""Dependency injection for API routes.

Provides FastAPI dependencies for stores and services used by API endpoints.
Dependencies are configured from settings and can be overridden for testing.
"""

import asyncio
from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from backoffice.audit.recorder import AuditRecorder
from backoffice.audit.search import AuditQueryService
from backoffice.audit.store import AuditStore
from backoffice.audit.stores.inmemory import InMemoryAuditStore
from backoffice.audit.stores.postgres import PostgresAuditStore
from backoffice.config.loader import load_config
from backoffice.config.models.storage import StoreBackendConfig
from backoffice.config.settings import Settings, set_toml_config
from backoffice.db.pool import PostgresPool
from backoffice.observability.logging import get_logger
from backoffice.operators.store import OperatorDirectory
from backoffice.operators.stores.inmemory import InMemoryOperatorDirectory
from backoffice.operators.stores.postgres import PostgresOperatorDirectory

logger = get_logger(__name__)

# Connection pool shared by every postgres-backed store
_postgres_pool: PostgresPool | None = None
_postgres_pool_lock = asyncio.Lock()

# Store and service instances - created once and reused
_audit_store: AuditStore | None = None
_operator_directory: OperatorDirectory | None = None
_audit_recorder: AuditRecorder | None = None
_audit_query_service: AuditQueryService | None = None


@lru_cache
def get_settings() -> Settings:
    """Get application settings.

    Loads configuration from TOML files and environment variables.
    Cached to avoid reloading on every request.
    """
    try:
        toml_config = load_config()
        set_toml_config(toml_config)
    except FileNotFoundError:
        logger.warning("config_file_not_found", msg="Using default configuration")
        set_toml_config({})

    return Settings()


async def get_postgres_pool(config: StoreBackendConfig) -> PostgresPool:
    """Get the shared PostgreSQL connection pool.

    Creates and connects the pool on first access; later calls reuse it
    whatever config they pass. Connection failures propagate as
    ConnectionError and nothing is cached, so the next call retries.
    """
    global _postgres_pool
    async with _postgres_pool_lock:
        if _postgres_pool is None:
            pool = PostgresPool(
                dsn=config.connection_url,
                min_size=config.min_pool_size,
                max_size=config.max_pool_size,
                max_inactive_connection_lifetime=config.max_inactive_connection_lifetime,
                command_timeout=config.command_timeout,
            )
            await pool.connect()
            _postgres_pool = pool
    return _postgres_pool


async def get_audit_store(
    settings: Annotated[Settings, Depends(get_settings)],
) -> AuditStore:
    """Get the AuditStore instance.

    Uses PostgresAuditStore unless configured for memory. An unreachable
    database raises ConnectionError, rendered as 503.
    """
    global _audit_store
    if _audit_store is None:
        config = settings.storage.audit
        if config.backend == "inmemory":
            _audit_store = InMemoryAuditStore()
        else:
            _audit_store = PostgresAuditStore(await get_postgres_pool(config))
        logger.info("audit_store_initialized", store_type=type(_audit_store).__name__)
    return _audit_store


async def get_operator_directory(
    settings: Annotated[Settings, Depends(get_settings)],
) -> OperatorDirectory:
    """Get the OperatorDirectory instance.

    Uses PostgresOperatorDirectory unless configured for memory. An
    unreachable database raises ConnectionError.
    """
    global _operator_directory
    if _operator_directory is None:
        config = settings.storage.operators
        if config.backend == "inmemory":
            _operator_directory = InMemoryOperatorDirectory()
        else:
            _operator_directory = PostgresOperatorDirectory(await get_postgres_pool(config))
        logger.info(
            "operator_directory_initialized",
            store_type=type(_operator_directory).__name__,
        )
    return _operator_directory


def get_audit_recorder(
    store: Annotated[AuditStore, Depends(get_audit_store)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> AuditRecorder:
    """Get the AuditRecorder every domain-mutation route records through."""
    global _audit_recorder
    if _audit_recorder is None:
        _audit_recorder = AuditRecorder(
            store,
            failure_policy=settings.audit.failure_policy,
            extra_redacted_fields=settings.audit.extra_redacted_fields,
        )
        logger.info("audit_recorder_initialized", failure_policy=settings.audit.failure_policy)
    return _audit_recorder


def get_audit_query_service(
    store: Annotated[AuditStore, Depends(get_audit_store)],
    operators: Annotated[OperatorDirectory, Depends(get_operator_directory)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> AuditQueryService:
    """Get the AuditQueryService instance."""
    global _audit_query_service
    if _audit_query_service is None:
        _audit_query_service = AuditQueryService(
            store,
            operators,
            default_page_size=settings.audit.default_page_size,
            max_page_size=settings.audit.max_page_size,
        )
        logger.info("audit_query_service_initialized")
    return _audit_query_service


# Type aliases for dependency injection
SettingsDep = Annotated[Settings, Depends(get_settings)]
AuditStoreDep = Annotated[AuditStore, Depends(get_audit_store)]
OperatorDirectoryDep = Annotated[OperatorDirectory, Depends(get_operator_directory)]
AuditRecorderDep = Annotated[AuditRecorder, Depends(get_audit_recorder)]
AuditQueryServiceDep = Annotated[AuditQueryService, Depends(get_audit_query_service)]


async def reset_dependencies() -> None:
    """Reset all cached dependencies.

    Used for testing to ensure fresh instances.
    Closes the pool before resetting.
    """
    global _postgres_pool, _postgres_pool_lock, _audit_store, _operator_directory
    global _audit_recorder, _audit_query_service

    if _postgres_pool is not None:
        await _postgres_pool.close()
        _postgres_pool = None
    _postgres_pool_lock = asyncio.Lock()

    _audit_store = None
    _operator_directory = None
    _audit_recorder = None
    _audit_query_service = None
    get_settings.cache_clear()
