"""Test factories for creating test data."""

from tests.factories.audit import AuditRecordFactory, OperatorFactory

__all__ = [
    "AuditRecordFactory",
    "OperatorFactory",
]
