"""PostgreSQL connection pool shared by the audit and operator stores."""

import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import asyncpg

from backoffice.db.errors import ConnectionError
from backoffice.observability.logging import get_logger

logger = get_logger(__name__)

DSN_ENV_VARS = ("BACKOFFICE_DATABASE_URL", "DATABASE_URL")


def resolve_dsn(dsn: str | None = None) -> str | None:
    """Return the explicit DSN or the first one set in the environment."""
    if dsn:
        return dsn
    for name in DSN_ENV_VARS:
        value = os.environ.get(name)
        if value:
            return value
    return None


class PostgresPool:
    """asyncpg pool wrapper that turns driver failures into StoreErrors.

    Usage:
        pool = PostgresPool(dsn="postgresql://...")
        await pool.connect()
        async with pool.acquire() as conn:
            await conn.fetch("SELECT ...")
    """

    def __init__(
        self,
        dsn: str | None = None,
        min_size: int = 5,
        max_size: int = 20,
        max_inactive_connection_lifetime: float = 300.0,
        command_timeout: float = 60.0,
    ) -> None:
        self._dsn = resolve_dsn(dsn)
        self._min_size = min_size
        self._max_size = max_size
        self._max_inactive_connection_lifetime = max_inactive_connection_lifetime
        self._command_timeout = command_timeout
        self._pool: asyncpg.Pool | None = None

    async def connect(self) -> None:
        """Open the pool; raises ConnectionError when no DSN is set or the server is unreachable."""
        if self._pool is not None:
            return

        if not self._dsn:
            raise ConnectionError(
                "No PostgreSQL DSN configured; set connection_url or "
                + " / ".join(DSN_ENV_VARS)
            )

        try:
            self._pool = await asyncpg.create_pool(
                dsn=self._dsn,
                min_size=self._min_size,
                max_size=self._max_size,
                max_inactive_connection_lifetime=self._max_inactive_connection_lifetime,
                command_timeout=self._command_timeout,
            )
        except (OSError, asyncpg.PostgresError, asyncpg.InterfaceError) as e:
            logger.error("postgres_pool_connection_failed", error=str(e))
            raise ConnectionError(f"Failed to connect to PostgreSQL: {e}", cause=e) from e

        logger.info("postgres_pool_connected", min_size=self._min_size, max_size=self._max_size)

    async def close(self) -> None:
        if self._pool is not None:
            await self._pool.close()
            self._pool = None
            logger.info("postgres_pool_closed")

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[asyncpg.Connection]:
        """Acquire a connection, connecting lazily on first use."""
        if self._pool is None:
            await self.connect()

        try:
            async with self._pool.acquire() as connection:
                yield connection
        except asyncpg.PostgresError as e:
            logger.error("postgres_connection_error", error=str(e))
            raise ConnectionError(f"PostgreSQL error: {e}", cause=e) from e

    async def health_check(self) -> bool:
        """Run SELECT 1; False when the pool is closed or the query fails."""
        if self._pool is None:
            return False

        try:
            async with self._pool.acquire() as conn:
                await conn.fetchval("SELECT 1")
        except (OSError, asyncpg.PostgresError, asyncpg.InterfaceError) as e:
            logger.warning("postgres_health_check_failed", error=str(e))
            return False
        return True
