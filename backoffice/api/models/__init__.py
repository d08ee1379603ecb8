"""API request and response models."""

from backoffice.api.models.context import RequestContext
from backoffice.api.models.envelope import ApiResponse
from backoffice.api.models.errors import ErrorCode, ErrorDetail
from backoffice.api.models.health import ComponentHealth, HealthResponse

__all__ = [
    "ApiResponse",
    "ComponentHealth",
    "ErrorCode",
    "ErrorDetail",
    "HealthResponse",
    "RequestContext",
]
