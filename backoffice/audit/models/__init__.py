"""Audit domain models."""

from backoffice.audit.models.enums import AuditAction, SortField, TargetModel
from backoffice.audit.models.record import (
    SYSTEM_OPERATOR,
    AuditChanges,
    AuditRecord,
    OperatorInfo,
    utc_now,
)
from backoffice.audit.models.search import (
    AuditCriteria,
    AuditRecordView,
    AuditSearchPage,
    AuditSearchParams,
    AuditSort,
)

__all__ = [
    "SYSTEM_OPERATOR",
    "AuditAction",
    "AuditChanges",
    "AuditCriteria",
    "AuditRecord",
    "AuditRecordView",
    "AuditSearchPage",
    "AuditSearchParams",
    "AuditSort",
    "OperatorInfo",
    "SortField",
    "TargetModel",
    "utc_now",
]
