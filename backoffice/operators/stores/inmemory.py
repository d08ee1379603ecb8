"""In-memory implementation of OperatorDirectory."""

from collections.abc import Iterable
from uuid import UUID

from backoffice.operators.models import Operator, OperatorSummary
from backoffice.operators.store import OperatorDirectory


class InMemoryOperatorDirectory(OperatorDirectory):
    """Dict-backed operator directory for testing and development."""

    def __init__(self) -> None:
        self._operators: dict[UUID, OperatorSummary] = {}

    def add(self, operator: Operator | OperatorSummary) -> None:
        """Register or replace an operator."""
        self._operators[operator.id] = OperatorSummary(
            id=operator.id,
            name=operator.name,
            user_id=operator.user_id,
            admin_id=operator.admin_id,
        )

    def remove(self, operator_id: UUID) -> None:
        """Forget an operator (simulates deletion)."""
        self._operators.pop(operator_id, None)

    async def get_summaries(self, operator_ids: Iterable[UUID]) -> dict[UUID, OperatorSummary]:
        return {
            operator_id: self._operators[operator_id]
            for operator_id in set(operator_ids)
            if operator_id in self._operators
        }
