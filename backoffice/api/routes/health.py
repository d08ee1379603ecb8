"""Health check and metrics endpoints."""

import time
from datetime import UTC, datetime
from typing import Literal

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from backoffice import __version__
from backoffice.api.dependencies import AuditStoreDep, OperatorDirectoryDep
from backoffice.api.models.health import ComponentHealth, HealthResponse
from backoffice.audit.store import AuditStore
from backoffice.observability.logging import get_logger
from backoffice.operators.store import OperatorDirectory

logger = get_logger(__name__)

router = APIRouter()
metrics_router = APIRouter()


async def _check_component(
    component: AuditStore | OperatorDirectory, name: str
) -> ComponentHealth:
    """Run a store's health_check and time it."""
    start = time.perf_counter()
    try:
        healthy = await component.health_check()
    except Exception as e:
        logger.warning("health_check_failed", component=name, error=str(e))
        return ComponentHealth(
            name=name,
            status="unhealthy",
            latency_ms=(time.perf_counter() - start) * 1000,
            message=type(e).__name__,
        )
    return ComponentHealth(
        name=name,
        status="healthy" if healthy else "unhealthy",
        latency_ms=(time.perf_counter() - start) * 1000,
    )


@router.get("/health", response_model=HealthResponse)
async def health_check(
    audit_store: AuditStoreDep,
    operator_directory: OperatorDirectoryDep,
) -> HealthResponse:
    """Report service health with per-component status."""
    components = [
        await _check_component(audit_store, "audit_store"),
        await _check_component(operator_directory, "operator_directory"),
    ]

    overall_status: Literal["healthy", "degraded", "unhealthy"]
    if all(c.status == "healthy" for c in components):
        overall_status = "healthy"
    elif any(c.status == "healthy" for c in components):
        overall_status = "degraded"
    else:
        overall_status = "unhealthy"

    logger.debug("health_check_completed", status=overall_status)

    return HealthResponse(
        status=overall_status,
        version=__version__,
        components=components,
        timestamp=datetime.now(UTC),
    )


@metrics_router.get("/metrics")
async def get_metrics() -> Response:
    """Prometheus metrics in text format for scraping."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
