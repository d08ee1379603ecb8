"""Audit record construction and persistence.

Domain services call the recorder right after a successful create, update
or delete. Each call builds exactly one AuditRecord and writes it once; there
are no retries.

The domain write and the audit write are not atomic. A failed audit write
leaves the committed domain change in place and is surfaced as
AuditWriteError (or logged, under the "log" failure policy): the trail gets
a gap, the domain change is never rolled back.
"""

from collections.abc import Callable, Iterable
from typing import Any, Protocol

from pydantic import ValidationError

from backoffice.audit.diff import changed_fields
from backoffice.audit.errors import AuditWriteError
from backoffice.audit.models import (
    SYSTEM_OPERATOR,
    AuditAction,
    AuditChanges,
    AuditRecord,
    OperatorInfo,
    TargetModel,
)
from backoffice.audit.projection import entity_id, project, to_snapshot
from backoffice.audit.redaction import redact
from backoffice.audit.store import AuditStore
from backoffice.config.models.audit import FailurePolicy
from backoffice.db.errors import StoreError
from backoffice.observability.logging import get_logger
from backoffice.observability.metrics import AUDIT_RECORDS_WRITTEN, AUDIT_WRITE_FAILURES
from backoffice.operators.models import Operator

logger = get_logger(__name__)

UNKNOWN_MODEL_LABEL = "unknown"


class AuditSink(Protocol):
    """Port every domain-mutation service depends on for its audit trail."""

    async def record_create(
        self,
        operator: Operator | None,
        entity: Any,
        target_model: TargetModel | str,
    ) -> AuditRecord | None: ...

    async def record_update(
        self,
        operator: Operator | None,
        updated_entity: Any,
        target_model: TargetModel | str,
        original_snapshot: Any,
        new_snapshot: Any,
    ) -> AuditRecord | None: ...

    async def record_delete(
        self,
        operator: Operator | None,
        entity: Any,
        target_model: TargetModel | str,
    ) -> AuditRecord | None: ...


def _model_label(target_model: TargetModel | str) -> str:
    """Metric label for a target model; anything outside the enum is labelled unknown."""
    if isinstance(target_model, str):
        try:
            return TargetModel.parse(target_model).value
        except ValueError:
            pass
    return UNKNOWN_MODEL_LABEL


def operator_info(operator: Operator | None) -> OperatorInfo:
    """Operator snapshot; the System sentinel when nobody is authenticated."""
    if operator is None:
        return SYSTEM_OPERATOR
    return OperatorInfo(name=operator.name, identifier=operator.identifier)


class AuditRecorder:
    """Builds audit records and persists them through an AuditStore.

    Implements AuditSink. The failure policy is the single place where a
    failed write is either raised to the caller or logged and dropped.
    """

    def __init__(
        self,
        store: AuditStore,
        *,
        failure_policy: FailurePolicy = "raise",
        extra_redacted_fields: Iterable[str] = (),
    ) -> None:
        """Initialize the recorder.

        Args:
            store: Audit storage backend
            failure_policy: "raise" to propagate AuditWriteError, "log" to swallow it
            extra_redacted_fields: Snapshot keys stripped on top of the built-in set
        """
        self._store = store
        self._failure_policy = failure_policy
        self._extra_redacted = tuple(extra_redacted_fields)

    async def record_create(
        self,
        operator: Operator | None,
        entity: Any,
        target_model: TargetModel | str,
    ) -> AuditRecord | None:
        """Record the creation of entity."""

        def build() -> AuditRecord:
            return AuditRecord(
                operator_id=operator.id if operator else None,
                action=AuditAction.CREATE,
                target_id=entity_id(entity),
                target_model=TargetModel.parse(target_model),
                operator_info=operator_info(operator),
                target_info=project(target_model, entity),
                changes=AuditChanges(
                    before={},
                    after=redact(to_snapshot(entity), self._extra_redacted),
                ),
            )

        return await self._write(AuditAction.CREATE, target_model, build)

    async def record_update(
        self,
        operator: Operator | None,
        updated_entity: Any,
        target_model: TargetModel | str,
        original_snapshot: Any,
        new_snapshot: Any,
    ) -> AuditRecord | None:
        """Record an update.

        Args:
            operator: Acting principal, None for system actions
            updated_entity: Entity after the update; source of target info
            target_model: Collection of the entity
            original_snapshot: Entity fields before the update
            new_snapshot: Fields written by the update (may be partial)
        """

        def build() -> AuditRecord:
            before = redact(to_snapshot(original_snapshot), self._extra_redacted)
            after = redact(to_snapshot(new_snapshot), self._extra_redacted)
            return AuditRecord(
                operator_id=operator.id if operator else None,
                action=AuditAction.UPDATE,
                target_id=entity_id(updated_entity),
                target_model=TargetModel.parse(target_model),
                operator_info=operator_info(operator),
                target_info=project(target_model, updated_entity),
                changes=AuditChanges(
                    before=before,
                    after=after,
                    changed_fields=changed_fields(before, after),
                ),
            )

        return await self._write(AuditAction.UPDATE, target_model, build)

    async def record_delete(
        self,
        operator: Operator | None,
        entity: Any,
        target_model: TargetModel | str,
    ) -> AuditRecord | None:
        """Record the deletion of entity."""

        def build() -> AuditRecord:
            return AuditRecord(
                operator_id=operator.id if operator else None,
                action=AuditAction.DELETE,
                target_id=entity_id(entity),
                target_model=TargetModel.parse(target_model),
                operator_info=operator_info(operator),
                target_info=project(target_model, entity),
                changes=AuditChanges(
                    before=redact(to_snapshot(entity), self._extra_redacted),
                    after={},
                ),
            )

        return await self._write(AuditAction.DELETE, target_model, build)

    async def _write(
        self,
        action: AuditAction,
        target_model: TargetModel | str,
        build: Callable[[], AuditRecord],
    ) -> AuditRecord | None:
        model_label = _model_label(target_model)
        try:
            try:
                record = build()
            except (ValidationError, ValueError, TypeError) as e:
                raise AuditWriteError(f"Invalid audit record: {e}", cause=e) from e

            try:
                await self._store.save_record(record)
            except StoreError as e:
                raise AuditWriteError(f"Failed to persist audit record: {e}", cause=e) from e
        except AuditWriteError as e:
            AUDIT_WRITE_FAILURES.labels(action=action.value, target_model=model_label).inc()
            logger.error(
                "audit_write_failed",
                action=action.value,
                target_model=str(target_model),
                error=e.message,
                policy=self._failure_policy,
            )
            if self._failure_policy == "raise":
                raise
            return None

        AUDIT_RECORDS_WRITTEN.labels(action=action.value, target_model=model_label).inc()
        logger.info(
            "audit_record_created",
            record_id=str(record.id),
            action=action.value,
            target_model=record.target_model.value,
            target_id=str(record.target_id),
            operator_id=str(record.operator_id) if record.operator_id else None,
        )
        return record
