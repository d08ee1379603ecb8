"""AuditStore abstract interface."""

from abc import ABC, abstractmethod
from uuid import UUID

from backoffice.audit.models import AuditCriteria, AuditRecord, AuditSort


class AuditStore(ABC):
    """Abstract interface for audit storage.

    Append-only: records are inserted once and never updated or deleted.
    Reads are filtered by an AuditCriteria, ordered by an AuditSort and
    paginated by offset/limit.
    """

    @abstractmethod
    async def save_record(self, record: AuditRecord) -> UUID:
        """Insert a new audit record.

        Raises:
            ConflictError: If a record with the same id already exists
        """
        pass

    @abstractmethod
    async def get_record(self, record_id: UUID) -> AuditRecord | None:
        """Get an audit record by ID."""
        pass

    @abstractmethod
    async def search_records(
        self,
        criteria: AuditCriteria,
        *,
        sort: AuditSort,
        offset: int = 0,
        limit: int = 10,
    ) -> tuple[list[AuditRecord], int]:
        """Return one page of matching records and the total match count.

        The total counts the whole filtered set, independent of offset/limit.
        """
        pass

    async def health_check(self) -> bool:
        """Report whether the backend is reachable."""
        return True
