"""OperatorDirectory abstract interface."""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from uuid import UUID

from backoffice.operators.models import OperatorSummary


class OperatorDirectory(ABC):
    """Read-only lookup of live operator display data.

    Missing or deleted operators are simply absent from the result;
    callers treat that as a null join.
    """

    @abstractmethod
    async def get_summaries(self, operator_ids: Iterable[UUID]) -> dict[UUID, OperatorSummary]:
        """Resolve a batch of operator ids to their current summaries."""
        pass

    async def health_check(self) -> bool:
        """Report whether the backing store is reachable."""
        return True
