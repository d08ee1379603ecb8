"""Tests for the request context middleware."""

from fastapi.testclient import TestClient
from prometheus_client import REGISTRY

from backoffice.api.middleware.context import UNMATCHED_ROUTE

REQUEST_COUNT_SAMPLE = "backoffice_request_count_total"


def request_count(endpoint: str, status: str) -> float:
    labels = {"method": "GET", "endpoint": endpoint, "status": status}
    return REGISTRY.get_sample_value(REQUEST_COUNT_SAMPLE, labels) or 0.0


class TestRequestCounter:
    """Tests for the per-route request counter."""

    def test_matched_route_uses_route_template(
        self, client: TestClient, admin_headers: dict[str, str]
    ) -> None:
        """Should label by route template, not by the concrete path."""
        before = request_count("/auditLog/{record_id}", "400")

        client.get("/auditLog/not-a-uuid", headers=admin_headers)

        assert request_count("/auditLog/{record_id}", "400") == before + 1
        assert request_count("/auditLog/not-a-uuid", "400") == 0.0

    def test_unmatched_path_uses_fixed_label(self, client: TestClient) -> None:
        """Should collapse every unrouted path into one label value."""
        before = request_count(UNMATCHED_ROUTE, "404")

        client.get("/no-such-route/7f3a")
        client.get("/another/unknown/path")

        assert request_count(UNMATCHED_ROUTE, "404") == before + 2
        assert request_count("/no-such-route/7f3a", "404") == 0.0


class TestRequestId:
    """Tests for X-Request-ID handling."""

    def test_request_id_generated_when_absent(self, client: TestClient) -> None:
        """Should echo a generated request id."""
        response = client.get("/health")

        assert response.headers["X-Request-ID"]
