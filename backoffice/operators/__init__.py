"""Operators: the principals that act on back-office entities.

The audit subsystem only reads operators: it snapshots the acting principal
into each record and joins live operator display data into search results.
"""

from backoffice.operators.models import Operator, OperatorSummary
from backoffice.operators.store import OperatorDirectory

__all__ = [
    "Operator",
    "OperatorDirectory",
    "OperatorSummary",
]
