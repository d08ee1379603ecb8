"""Resolution of free-form search parameters into AuditCriteria.

All filters are optional and combine with AND. The target filter is
polymorphic: how targetId/targetName is interpreted depends on targetModel.
"""

from datetime import UTC, date, datetime, time
from uuid import UUID

from backoffice.audit.errors import InvalidFilterError
from backoffice.audit.models import (
    AuditAction,
    AuditCriteria,
    AuditSearchParams,
    AuditSort,
    SortField,
    TargetModel,
)
from backoffice.observability.logging import get_logger

logger = get_logger(__name__)

# (column, key) pairs scanned by quickSearch
QUICK_SEARCH_FIELDS: tuple[tuple[str, str], ...] = (
    ("operator_info", "name"),
    ("operator_info", "identifier"),
    ("target_info", "name"),
    ("target_info", "identifier"),
    ("target_info", "formNumber"),
)

# target_info keys holding a user's staff number, for ordinary users and admins
USER_IDENTIFIER_KEYS: tuple[str, ...] = ("identifier", "userId", "adminId")

_ASCENDING = {"asc", "ascending", "1"}
_DESCENDING = {"desc", "descending", "-1"}


def parse_entity_id(value: str | UUID, field: str) -> UUID:
    """Parse an entity-reference identifier.

    Raises:
        InvalidFilterError: If the value is not a valid identifier
    """
    if isinstance(value, UUID):
        return value
    try:
        return UUID(value.strip())
    except (ValueError, AttributeError):
        raise InvalidFilterError(field, f"Invalid {field}: {value!r} is not a valid identifier") from None


def _try_entity_id(value: str) -> UUID | None:
    try:
        return UUID(value.strip())
    except ValueError:
        return None


def _parse_bound(value: str, field: str, *, end_of_day: bool) -> datetime:
    """Parse an ISO date or datetime; naive values are taken as UTC.

    A bare date used as an upper bound covers the whole day.
    """
    text = value.strip()
    try:
        if len(text) == 10:
            day = date.fromisoformat(text)
            return datetime.combine(day, time.max if end_of_day else time.min, tzinfo=UTC)
        parsed = datetime.fromisoformat(text)
    except ValueError:
        raise InvalidFilterError(field, f"Invalid {field}: {value!r} is not an ISO date") from None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def resolve_criteria(params: AuditSearchParams) -> AuditCriteria:
    """Turn raw search parameters into an AuditCriteria.

    Raises:
        InvalidFilterError: On malformed dates, enums or operatorId, or a
            target filter supplied without targetModel
    """
    filters: dict[str, object] = {}

    if params.start_date:
        filters["created_from"] = _parse_bound(params.start_date, "startDate", end_of_day=False)
    if params.end_date:
        filters["created_to"] = _parse_bound(params.end_date, "endDate", end_of_day=True)
    if (
        "created_from" in filters
        and "created_to" in filters
        and filters["created_from"] > filters["created_to"]  # type: ignore[operator]
    ):
        raise InvalidFilterError("endDate", "endDate must not be earlier than startDate")

    if params.action:
        try:
            filters["action"] = AuditAction.parse(params.action)
        except ValueError as e:
            raise InvalidFilterError("action", str(e)) from None

    target_model: TargetModel | None = None
    if params.target_model:
        try:
            target_model = TargetModel.parse(params.target_model)
        except ValueError as e:
            raise InvalidFilterError("targetModel", str(e)) from None
        filters["target_model"] = target_model

    target_value = (params.target_id or params.target_name or "").strip()
    if target_value:
        if target_model is None:
            raise InvalidFilterError(
                "targetModel", "targetModel is required when filtering by target"
            )
        filters.update(_resolve_target(target_model, target_value))

    # The one filter that rejects bad input instead of degrading
    if params.operator_id:
        filters["operator_id"] = parse_entity_id(params.operator_id, "operatorId")

    if params.quick_search and params.quick_search.strip():
        filters["quick_search"] = params.quick_search.strip()

    return AuditCriteria(**filters)


def _resolve_target(target_model: TargetModel, value: str) -> dict[str, object]:
    """Interpret a target identity according to the target model."""
    if target_model is TargetModel.FORM_TEMPLATE:
        return {"target_name_contains": value}

    target_id = _try_entity_id(value)
    if target_id is not None:
        return {"target_id": target_id}

    if target_model is TargetModel.FORM:
        return {"form_number_contains": value}
    if target_model is TargetModel.USER:
        return {"target_identifier": value}

    logger.debug(
        "audit_target_filter_ignored",
        target_model=target_model.value,
        reason="not an identifier and no display-field fallback",
    )
    return {}


def resolve_sort(params: AuditSearchParams) -> AuditSort:
    """Ordering requested by the caller; most recent first by default.

    Raises:
        InvalidFilterError: On an unknown sortBy or sortOrder
    """
    field = SortField.CREATED_AT
    if params.sort_by:
        try:
            field = SortField(params.sort_by.strip())
        except ValueError:
            allowed = ", ".join(f.value for f in SortField)
            raise InvalidFilterError(
                "sortBy", f"Cannot sort by {params.sort_by!r}; use one of: {allowed}"
            ) from None

    descending = True
    if params.sort_order:
        order = params.sort_order.strip().lower()
        if order in _ASCENDING:
            descending = False
        elif order not in _DESCENDING:
            raise InvalidFilterError("sortOrder", "sortOrder must be asc/desc or 1/-1")

    return AuditSort(field=field, descending=descending)
