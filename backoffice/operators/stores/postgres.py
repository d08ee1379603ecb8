"""PostgreSQL implementation of OperatorDirectory.

Reads the ``users`` table owned by the user-management subsystem.
"""

from collections.abc import Iterable
from uuid import UUID

from backoffice.db.errors import ConnectionError
from backoffice.db.pool import PostgresPool
from backoffice.observability.logging import get_logger
from backoffice.operators.models import OperatorSummary
from backoffice.operators.store import OperatorDirectory

logger = get_logger(__name__)


class PostgresOperatorDirectory(OperatorDirectory):
    """Operator lookups against the users table."""

    def __init__(self, pool: PostgresPool) -> None:
        self._pool = pool

    async def get_summaries(self, operator_ids: Iterable[UUID]) -> dict[UUID, OperatorSummary]:
        ids = list(set(operator_ids))
        if not ids:
            return {}

        try:
            async with self._pool.acquire() as conn:
                rows = await conn.fetch(
                    """
                    SELECT id, name, user_id, admin_id
                    FROM users
                    WHERE id = ANY($1::uuid[])
                    """,
                    ids,
                )
        except ConnectionError:
            raise
        except Exception as e:
            logger.error("postgres_get_operators_error", count=len(ids), error=str(e))
            raise ConnectionError(f"Failed to load operators: {e}", cause=e) from e

        return {
            row["id"]: OperatorSummary(
                id=row["id"],
                name=row["name"],
                user_id=row["user_id"],
                admin_id=row["admin_id"],
            )
            for row in rows
        }

    async def health_check(self) -> bool:
        """Check the shared pool can serve queries."""
        return await self._pool.health_check()
