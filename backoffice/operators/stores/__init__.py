"""Operator directory implementations."""

from backoffice.operators.store import OperatorDirectory
from backoffice.operators.stores.inmemory import InMemoryOperatorDirectory
from backoffice.operators.stores.postgres import PostgresOperatorDirectory

__all__ = [
    "InMemoryOperatorDirectory",
    "OperatorDirectory",
    "PostgresOperatorDirectory",
]
