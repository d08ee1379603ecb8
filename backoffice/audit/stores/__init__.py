"""Audit store implementations."""

from backoffice.audit.store import AuditStore
from backoffice.audit.stores.inmemory import InMemoryAuditStore
from backoffice.audit.stores.postgres import PostgresAuditStore

__all__ = [
    "AuditStore",
    "InMemoryAuditStore",
    "PostgresAuditStore",
]
