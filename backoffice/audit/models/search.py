"""Search models: raw parameters, resolved criteria, and result pages."""

from datetime import datetime
from math import ceil
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel

from backoffice.audit.models.enums import AuditAction, SortField, TargetModel
from backoffice.audit.models.record import AuditRecord
from backoffice.operators.models import OperatorSummary


class AuditSearchParams(BaseModel):
    """Free-form search parameters as supplied by the caller.

    Values stay unparsed strings here; criteria resolution decides how
    each one is interpreted and which ones are rejected.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    page: int | None = None
    items_per_page: int | None = None
    start_date: str | None = None
    end_date: str | None = None
    action: str | None = None
    target_model: str | None = None
    target_id: str | None = None
    target_name: str | None = None
    operator_id: str | None = None
    quick_search: str | None = None
    sort_by: str | None = None
    sort_order: str | None = None


class AuditCriteria(BaseModel):
    """Resolved, conjunctive filter set understood by every AuditStore.

    Each populated field narrows the result; unset fields do not filter.
    """

    model_config = ConfigDict(frozen=True)

    created_from: datetime | None = None
    created_to: datetime | None = None
    action: AuditAction | None = None
    target_model: TargetModel | None = None
    target_id: UUID | None = None
    target_name_contains: str | None = None
    form_number_contains: str | None = None
    target_identifier: str | None = None
    operator_id: UUID | None = None
    quick_search: str | None = None


class AuditSort(BaseModel):
    """Ordering of a search; ties always break on record id."""

    model_config = ConfigDict(frozen=True)

    field: SortField = SortField.CREATED_AT
    descending: bool = True


class AuditRecordView(AuditRecord):
    """Audit record with the live operator joined in.

    operator is None when the operator no longer exists or the action
    was system-initiated; operator_info stays the record of truth.
    """

    operator: OperatorSummary | None = None


class AuditSearchPage(BaseModel):
    """One page of search results plus the total over the full filtered set."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    data: list[AuditRecordView] = Field(default_factory=list)
    total_items: int = Field(..., ge=0)
    items_per_page: int = Field(..., gt=0)
    current_page: int = Field(..., gt=0)

    @computed_field(alias="totalPages")  # type: ignore[prop-decorator]
    @property
    def total_pages(self) -> int:
        """Number of pages needed for total_items."""
        return ceil(self.total_items / self.items_per_page)
