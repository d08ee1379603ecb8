"""Fixtures for API tests."""

from collections.abc import AsyncIterator, Callable
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from jose import jwt

from backoffice.api.app import create_app
from backoffice.api.dependencies import (
    get_audit_query_service,
    get_audit_store,
    get_operator_directory,
    reset_dependencies,
)
from backoffice.audit.search import AuditQueryService
from backoffice.audit.stores import InMemoryAuditStore
from backoffice.operators.models import Operator
from backoffice.operators.stores import InMemoryOperatorDirectory
from tests.factories import OperatorFactory

JWT_SECRET = "test-secret"


@pytest.fixture(autouse=True)
def jwt_secret(monkeypatch: pytest.MonkeyPatch) -> str:
    monkeypatch.setenv("BACKOFFICE_JWT_SECRET", JWT_SECRET)
    return JWT_SECRET


@pytest.fixture
def make_token() -> Callable[..., str]:
    """Sign a bearer token for an operator."""

    def _make_token(operator: Operator, secret: str = JWT_SECRET, **claims: Any) -> str:
        payload = {
            "sub": str(operator.id),
            "name": operator.name,
            "userId": operator.user_id,
            "adminId": operator.admin_id,
            "roles": operator.roles,
            **claims,
        }
        return jwt.encode(payload, secret, algorithm="HS256")

    return _make_token


@pytest.fixture
def admin() -> Operator:
    return OperatorFactory.admin()


@pytest.fixture
def audit_store() -> InMemoryAuditStore:
    return InMemoryAuditStore()


@pytest.fixture
def operator_directory(admin: Operator) -> InMemoryOperatorDirectory:
    directory = InMemoryOperatorDirectory()
    directory.add(admin)
    return directory


@pytest.fixture
async def app(
    audit_store: InMemoryAuditStore,
    operator_directory: InMemoryOperatorDirectory,
) -> AsyncIterator[FastAPI]:
    """Create test FastAPI app backed by in-memory stores."""
    await reset_dependencies()

    app = create_app()
    service = AuditQueryService(audit_store, operator_directory)
    app.dependency_overrides[get_audit_store] = lambda: audit_store
    app.dependency_overrides[get_operator_directory] = lambda: operator_directory
    app.dependency_overrides[get_audit_query_service] = lambda: service

    yield app

    app.dependency_overrides.clear()
    await reset_dependencies()


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Test client."""
    return TestClient(app)


@pytest.fixture
def admin_headers(admin: Operator, make_token: Callable[..., str]) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(admin)}"}
