"""Audit log query service."""

import time
from uuid import UUID

from backoffice.audit.criteria import parse_entity_id, resolve_criteria, resolve_sort
from backoffice.audit.errors import InvalidFilterError
from backoffice.audit.models import (
    AuditRecord,
    AuditRecordView,
    AuditSearchPage,
    AuditSearchParams,
)
from backoffice.audit.store import AuditStore
from backoffice.observability.logging import get_logger
from backoffice.observability.metrics import AUDIT_SEARCH_LATENCY
from backoffice.operators.store import OperatorDirectory

logger = get_logger(__name__)


class AuditQueryService:
    """Paginated search and single-record lookup over the audit trail.

    Results carry the live operator joined in with one batched directory
    lookup per page.
    """

    def __init__(
        self,
        store: AuditStore,
        operators: OperatorDirectory,
        *,
        default_page_size: int = 10,
        max_page_size: int = 100,
    ) -> None:
        self._store = store
        self._operators = operators
        self._default_page_size = default_page_size
        self._max_page_size = max_page_size

    async def search(self, params: AuditSearchParams) -> AuditSearchPage:
        """Run a search.

        Args:
            params: Raw caller-supplied parameters

        Returns:
            The requested page and the total over the whole filtered set

        Raises:
            InvalidFilterError: On invalid paging, filter or sort parameters
        """
        page = params.page if params.page is not None else 1
        items_per_page = (
            params.items_per_page if params.items_per_page is not None else self._default_page_size
        )
        if page < 1:
            raise InvalidFilterError("page", "page must be 1 or greater")
        if not 1 <= items_per_page <= self._max_page_size:
            raise InvalidFilterError(
                "itemsPerPage", f"itemsPerPage must be between 1 and {self._max_page_size}"
            )

        criteria = resolve_criteria(params)
        sort = resolve_sort(params)

        started = time.perf_counter()
        records, total = await self._store.search_records(
            criteria,
            sort=sort,
            offset=(page - 1) * items_per_page,
            limit=items_per_page,
        )
        views = await self._join_operators(records)
        elapsed = time.perf_counter() - started
        AUDIT_SEARCH_LATENCY.observe(elapsed)

        logger.debug(
            "audit_search_completed",
            page=page,
            items_per_page=items_per_page,
            returned=len(views),
            total=total,
            sort_by=sort.field.value,
            descending=sort.descending,
            latency_ms=round(elapsed * 1000, 2),
        )

        return AuditSearchPage(
            data=views,
            total_items=total,
            items_per_page=items_per_page,
            current_page=page,
        )

    async def get_by_id(self, record_id: str | UUID) -> AuditRecordView | None:
        """Fetch one record with its operator joined in.

        Raises:
            InvalidFilterError: If record_id is not a valid identifier
        """
        parsed = parse_entity_id(record_id, "id")
        record = await self._store.get_record(parsed)
        if record is None:
            return None
        views = await self._join_operators([record])
        return views[0]

    async def _join_operators(self, records: list[AuditRecord]) -> list[AuditRecordView]:
        operator_ids = {r.operator_id for r in records if r.operator_id is not None}
        summaries = await self._operators.get_summaries(operator_ids) if operator_ids else {}
        return [
            AuditRecordView(
                **record.model_dump(),
                operator=summaries.get(record.operator_id) if record.operator_id else None,
            )
            for record in records
        ]
