"""PostgreSQL implementation of AuditStore.

Uses asyncpg for async database access. Records live in the append-only
``audit_logs`` table; operator_info, target_info and changes are JSONB.
"""

import json
from typing import Any
from uuid import UUID

import asyncpg

from backoffice.audit.criteria import QUICK_SEARCH_FIELDS, USER_IDENTIFIER_KEYS
from backoffice.audit.models import (
    AuditChanges,
    AuditCriteria,
    AuditRecord,
    AuditSort,
    OperatorInfo,
    SortField,
)
from backoffice.audit.store import AuditStore
from backoffice.db.errors import ConflictError, ConnectionError, StoreError, ValidationError
from backoffice.db.pool import PostgresPool
from backoffice.observability.logging import get_logger

logger = get_logger(__name__)

_COLUMNS = """
    id, operator_id, action, target_id, target_model,
    operator_info, target_info, changes, created_at
"""

# Whitelisted ORDER BY expressions; never interpolate caller input
_SORT_EXPRESSIONS: dict[SortField, str] = {
    SortField.CREATED_AT: "created_at",
    SortField.ACTION: "action",
    SortField.TARGET_MODEL: "target_model",
    SortField.OPERATOR_NAME: "operator_info->>'name'",
    SortField.OPERATOR_IDENTIFIER: "operator_info->>'identifier'",
    SortField.TARGET_NAME: "target_info->>'name'",
}


def _like_pattern(text: str) -> str:
    """Substring ILIKE pattern with LIKE wildcards escaped."""
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def build_where_clause(criteria: AuditCriteria) -> tuple[str, list[Any]]:
    """Compile criteria into a parameterised WHERE clause.

    Returns:
        (clause, params) where clause is empty when nothing filters
    """
    conditions: list[str] = []
    params: list[Any] = []

    def bind(value: Any) -> str:
        params.append(value)
        return f"${len(params)}"

    if criteria.created_from is not None:
        conditions.append(f"created_at >= {bind(criteria.created_from)}")
    if criteria.created_to is not None:
        conditions.append(f"created_at <= {bind(criteria.created_to)}")
    if criteria.action is not None:
        conditions.append(f"action = {bind(criteria.action.value)}")
    if criteria.target_model is not None:
        conditions.append(f"target_model = {bind(criteria.target_model.value)}")
    if criteria.target_id is not None:
        conditions.append(f"target_id = {bind(criteria.target_id)}")
    if criteria.target_name_contains is not None:
        conditions.append(
            f"target_info->>'name' ILIKE {bind(_like_pattern(criteria.target_name_contains))}"
        )
    if criteria.form_number_contains is not None:
        conditions.append(
            f"target_info->>'formNumber' ILIKE {bind(_like_pattern(criteria.form_number_contains))}"
        )
    if criteria.target_identifier is not None:
        placeholder = bind(criteria.target_identifier)
        alternatives = " OR ".join(
            f"target_info->>'{key}' = {placeholder}" for key in USER_IDENTIFIER_KEYS
        )
        conditions.append(f"({alternatives})")
    if criteria.operator_id is not None:
        conditions.append(f"operator_id = {bind(criteria.operator_id)}")
    if criteria.quick_search is not None:
        placeholder = bind(_like_pattern(criteria.quick_search))
        alternatives = " OR ".join(
            f"{column}->>'{key}' ILIKE {placeholder}" for column, key in QUICK_SEARCH_FIELDS
        )
        conditions.append(f"({alternatives})")

    clause = f"WHERE {' AND '.join(conditions)}" if conditions else ""
    return clause, params


def build_order_clause(sort: AuditSort) -> str:
    """ORDER BY with nulls first ascending / last descending and id tie-break."""
    expression = _SORT_EXPRESSIONS[sort.field]
    if sort.descending:
        return f"ORDER BY {expression} DESC NULLS LAST, id DESC"
    return f"ORDER BY {expression} ASC NULLS FIRST, id ASC"


class PostgresAuditStore(AuditStore):
    """PostgreSQL implementation of AuditStore.

    Uses asyncpg connection pool for efficient database access.
    All records are immutable once written.
    """

    def __init__(self, pool: PostgresPool) -> None:
        """Initialize with connection pool.

        Args:
            pool: PostgreSQL connection pool
        """
        self._pool = pool

    async def save_record(self, record: AuditRecord) -> UUID:
        """Insert a new audit record."""
        try:
            async with self._pool.acquire() as conn:
                try:
                    await conn.execute(
                        f"""
                        INSERT INTO audit_logs ({_COLUMNS})
                        VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9)
                        """,
                        record.id,
                        record.operator_id,
                        record.action.value,
                        record.target_id,
                        record.target_model.value,
                        json.dumps(record.operator_info.model_dump(mode="json")),
                        json.dumps(record.target_info, default=str),
                        json.dumps(record.changes.model_dump(mode="json", by_alias=True)),
                        record.created_at,
                    )
                except asyncpg.UniqueViolationError as e:
                    raise ConflictError(
                        f"Audit record {record.id} already exists", cause=e
                    ) from e
                except (asyncpg.CheckViolationError, asyncpg.NotNullViolationError) as e:
                    raise ValidationError(f"Audit record rejected: {e}", cause=e) from e
            logger.debug("audit_record_saved", record_id=str(record.id))
            return record.id
        except StoreError:
            raise
        except Exception as e:
            logger.error(
                "postgres_save_audit_record_error", record_id=str(record.id), error=str(e)
            )
            raise ConnectionError(f"Failed to save audit record: {e}", cause=e) from e

    async def get_record(self, record_id: UUID) -> AuditRecord | None:
        """Get an audit record by ID."""
        try:
            async with self._pool.acquire() as conn:
                row = await conn.fetchrow(
                    f"SELECT {_COLUMNS} FROM audit_logs WHERE id = $1",
                    record_id,
                )
                if row:
                    return self._row_to_record(row)
                return None
        except StoreError:
            raise
        except Exception as e:
            logger.error(
                "postgres_get_audit_record_error", record_id=str(record_id), error=str(e)
            )
            raise ConnectionError(f"Failed to get audit record: {e}", cause=e) from e

    async def search_records(
        self,
        criteria: AuditCriteria,
        *,
        sort: AuditSort,
        offset: int = 0,
        limit: int = 10,
    ) -> tuple[list[AuditRecord], int]:
        """Return one page of matching records and the total match count.

        Count and page run in one read-only repeatable-read transaction so
        the total describes the same snapshot the page came from.
        """
        where, params = build_where_clause(criteria)
        order = build_order_clause(sort)
        limit_ref = f"${len(params) + 1}"
        offset_ref = f"${len(params) + 2}"

        try:
            async with self._pool.acquire() as conn:
                async with conn.transaction(isolation="repeatable_read", readonly=True):
                    total = await conn.fetchval(
                        f"SELECT count(*) FROM audit_logs {where}",
                        *params,
                    )
                    rows = await conn.fetch(
                        f"""
                        SELECT {_COLUMNS}
                        FROM audit_logs
                        {where}
                        {order}
                        LIMIT {limit_ref} OFFSET {offset_ref}
                        """,
                        *params,
                        limit,
                        offset,
                    )
            return [self._row_to_record(row) for row in rows], int(total or 0)
        except StoreError:
            raise
        except Exception as e:
            logger.error("postgres_search_audit_records_error", error=str(e))
            raise ConnectionError(f"Failed to search audit records: {e}", cause=e) from e

    async def health_check(self) -> bool:
        return await self._pool.health_check()

    @staticmethod
    def _load_json(value: Any) -> dict[str, Any]:
        if value is None:
            return {}
        if isinstance(value, str):
            return json.loads(value)
        return dict(value)

    def _row_to_record(self, row: asyncpg.Record) -> AuditRecord:
        """Convert database row to AuditRecord."""
        return AuditRecord(
            id=row["id"],
            operator_id=row["operator_id"],
            action=row["action"],
            target_id=row["target_id"],
            target_model=row["target_model"],
            operator_info=OperatorInfo.model_validate(self._load_json(row["operator_info"])),
            target_info=self._load_json(row["target_info"]),
            changes=AuditChanges.model_validate(self._load_json(row["changes"])),
            created_at=row["created_at"],
        )
