"""AuditRecord model for the audit domain."""

from datetime import UTC, datetime
from typing import Any
from uuid import UUID, uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SerializerFunctionWrapHandler,
    model_serializer,
    model_validator,
)
from pydantic.alias_generators import to_camel

from backoffice.audit.models.enums import AuditAction, TargetModel


def utc_now() -> datetime:
    """Return current UTC time."""
    return datetime.now(UTC)


class OperatorInfo(BaseModel):
    """Operator snapshot captured at write time.

    Survives later renames or deletion of the operator.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Operator display name")
    identifier: str | None = Field(
        default=None, description="userId or adminId of the operator"
    )


SYSTEM_OPERATOR = OperatorInfo(name="System", identifier="SYSTEM")


class AuditChanges(BaseModel):
    """Redacted before/after snapshots of the target entity."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    before: dict[str, Any] = Field(default_factory=dict)
    after: dict[str, Any] = Field(default_factory=dict)
    changed_fields: list[str] | None = Field(
        default=None, description="Keys of `after` whose value differs; UPDATE only"
    )

    @model_serializer(mode="wrap")
    def _omit_absent_changed_fields(
        self, handler: SerializerFunctionWrapHandler
    ) -> dict[str, Any]:
        data = handler(self)
        if self.changed_fields is None:
            data.pop("changedFields", None)
            data.pop("changed_fields", None)
        return data


class AuditRecord(BaseModel):
    """One append-only entry of the audit trail.

    target_model names the collection target_id points into; target_info
    is the denormalized display summary whose shape depends on it.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: UUID = Field(default_factory=uuid4, description="Unique identifier")
    operator_id: UUID | None = Field(
        default=None, description="Acting principal; None for system actions"
    )
    action: AuditAction = Field(..., description="Mutation kind")
    target_id: UUID = Field(..., description="Affected entity")
    target_model: TargetModel = Field(..., description="Collection of the affected entity")
    operator_info: OperatorInfo = Field(..., description="Operator snapshot")
    target_info: dict[str, Any] = Field(
        default_factory=dict, description="Target display summary"
    )
    changes: AuditChanges = Field(default_factory=AuditChanges)
    created_at: datetime = Field(default_factory=utc_now, description="Write time")

    @model_validator(mode="after")
    def check_change_shape(self) -> "AuditRecord":
        """CREATE has no before, DELETE has no after, only UPDATE lists changed fields."""
        if self.action == AuditAction.CREATE and self.changes.before:
            raise ValueError("CREATE records must have an empty 'before' snapshot")
        if self.action == AuditAction.DELETE and self.changes.after:
            raise ValueError("DELETE records must have an empty 'after' snapshot")
        if self.action != AuditAction.UPDATE and self.changes.changed_fields is not None:
            raise ValueError("changedFields is only recorded for UPDATE")
        return self
