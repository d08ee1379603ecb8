"""In-memory implementation of AuditStore."""

from datetime import datetime
from typing import Any
from uuid import UUID

from backoffice.audit.criteria import QUICK_SEARCH_FIELDS, USER_IDENTIFIER_KEYS
from backoffice.audit.models import AuditCriteria, AuditRecord, AuditSort, SortField
from backoffice.audit.store import AuditStore
from backoffice.db.errors import ConflictError


class InMemoryAuditStore(AuditStore):
    """In-memory implementation of AuditStore for testing and development.

    Uses simple dict storage with linear scan for queries.
    Not suitable for production use.
    """

    def __init__(self) -> None:
        """Initialize empty storage."""
        self._records: dict[UUID, AuditRecord] = {}

    async def save_record(self, record: AuditRecord) -> UUID:
        """Insert a new audit record."""
        if record.id in self._records:
            raise ConflictError(f"Audit record {record.id} already exists")
        self._records[record.id] = record
        return record.id

    async def get_record(self, record_id: UUID) -> AuditRecord | None:
        """Get an audit record by ID."""
        return self._records.get(record_id)

    async def search_records(
        self,
        criteria: AuditCriteria,
        *,
        sort: AuditSort,
        offset: int = 0,
        limit: int = 10,
    ) -> tuple[list[AuditRecord], int]:
        """Return one page of matching records and the total match count."""
        matched = [r for r in self._records.values() if _matches(r, criteria)]
        matched.sort(key=lambda r: _sort_key(r, sort.field), reverse=sort.descending)
        return matched[offset:offset + limit], len(matched)


def _contains(haystack: Any, needle: str) -> bool:
    return isinstance(haystack, str) and needle.casefold() in haystack.casefold()


def _document(record: AuditRecord, column: str) -> dict[str, Any]:
    if column == "operator_info":
        return record.operator_info.model_dump()
    return record.target_info


def _matches(record: AuditRecord, criteria: AuditCriteria) -> bool:
    """Evaluate every populated criterion against one record."""
    if criteria.created_from is not None and record.created_at < criteria.created_from:
        return False
    if criteria.created_to is not None and record.created_at > criteria.created_to:
        return False
    if criteria.action is not None and record.action != criteria.action:
        return False
    if criteria.target_model is not None and record.target_model != criteria.target_model:
        return False
    if criteria.target_id is not None and record.target_id != criteria.target_id:
        return False
    if criteria.target_name_contains is not None and not _contains(
        record.target_info.get("name"), criteria.target_name_contains
    ):
        return False
    if criteria.form_number_contains is not None and not _contains(
        record.target_info.get("formNumber"), criteria.form_number_contains
    ):
        return False
    if criteria.target_identifier is not None and not any(
        record.target_info.get(key) == criteria.target_identifier
        for key in USER_IDENTIFIER_KEYS
    ):
        return False
    if criteria.operator_id is not None and record.operator_id != criteria.operator_id:
        return False
    if criteria.quick_search is not None and not any(
        _contains(_document(record, column).get(key), criteria.quick_search)
        for column, key in QUICK_SEARCH_FIELDS
    ):
        return False
    return True


def _sort_key(record: AuditRecord, field: SortField) -> tuple[bool, Any, str]:
    """Sort key with nulls ordered first and record id as tie-break."""
    value: str | datetime | None
    if field is SortField.CREATED_AT:
        value = record.created_at
    elif field is SortField.ACTION:
        value = record.action.value
    elif field is SortField.TARGET_MODEL:
        value = record.target_model.value
    elif field is SortField.OPERATOR_NAME:
        value = record.operator_info.name
    elif field is SortField.OPERATOR_IDENTIFIER:
        value = record.operator_info.identifier
    else:
        value = record.target_info.get("name")
        if not isinstance(value, str):
            value = None
    return (value is not None, value, str(record.id))
