"""Audit log read endpoints."""

from typing import Annotated

from fastapi import APIRouter, Query

from backoffice.api.dependencies import AuditQueryServiceDep
from backoffice.api.exceptions import (
    AuditRecordNotFoundError,
    InvalidIdentifierError,
    InvalidRequestError,
)
from backoffice.api.middleware.auth import AdminOperatorDep
from backoffice.api.models.envelope import ApiResponse
from backoffice.audit.errors import InvalidFilterError
from backoffice.audit.models import AuditRecordView, AuditSearchPage, AuditSearchParams
from backoffice.observability.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/auditLog")

# Parameters naming an entity reference are identifier errors, the rest request errors
_IDENTIFIER_FIELDS = frozenset({"id", "operatorId"})


def _to_api_error(error: InvalidFilterError) -> InvalidRequestError | InvalidIdentifierError:
    if error.field in _IDENTIFIER_FIELDS:
        return InvalidIdentifierError(error.message, field=error.field)
    return InvalidRequestError(error.message, field=error.field)


@router.get("", response_model=ApiResponse[AuditSearchPage])
async def search_audit_log(
    service: AuditQueryServiceDep,
    operator: AdminOperatorDep,
    page: Annotated[int | None, Query()] = None,
    items_per_page: Annotated[int | None, Query(alias="itemsPerPage")] = None,
    start_date: Annotated[str | None, Query(alias="startDate")] = None,
    end_date: Annotated[str | None, Query(alias="endDate")] = None,
    action: Annotated[str | None, Query()] = None,
    target_model: Annotated[str | None, Query(alias="targetModel")] = None,
    target_id: Annotated[str | None, Query(alias="targetId")] = None,
    target_name: Annotated[str | None, Query(alias="targetName")] = None,
    operator_id: Annotated[str | None, Query(alias="operatorId")] = None,
    quick_search: Annotated[str | None, Query(alias="quickSearch")] = None,
    sort_by: Annotated[str | None, Query(alias="sortBy")] = None,
    sort_order: Annotated[str | None, Query(alias="sortOrder")] = None,
) -> ApiResponse[AuditSearchPage]:
    """Search the audit log.

    All filters are optional and combine with AND. Results are paginated;
    totalItems counts the full filtered set.
    """
    params = AuditSearchParams(
        page=page,
        items_per_page=items_per_page,
        start_date=start_date,
        end_date=end_date,
        action=action,
        target_model=target_model,
        target_id=target_id,
        target_name=target_name,
        operator_id=operator_id,
        quick_search=quick_search,
        sort_by=sort_by,
        sort_order=sort_order,
    )

    try:
        result = await service.search(params)
    except InvalidFilterError as e:
        raise _to_api_error(e) from e

    logger.info(
        "audit_search",
        requested_by=str(operator.id),
        page=result.current_page,
        total_items=result.total_items,
    )
    return ApiResponse[AuditSearchPage].ok("", result)


@router.get("/{record_id}", response_model=ApiResponse[AuditRecordView])
async def get_audit_record(
    record_id: str,
    service: AuditQueryServiceDep,
    operator: AdminOperatorDep,
) -> ApiResponse[AuditRecordView]:
    """Fetch a single audit record with its operator joined in."""
    try:
        record = await service.get_by_id(record_id)
    except InvalidFilterError as e:
        raise _to_api_error(e) from e

    if record is None:
        raise AuditRecordNotFoundError(f"Audit record {record_id} not found")

    logger.debug("audit_record_fetched", record_id=record_id, requested_by=str(operator.id))
    return ApiResponse[AuditRecordView].ok("", record)
