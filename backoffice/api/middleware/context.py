"""Request context middleware for observability."""

import uuid
from collections.abc import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from backoffice.api.models.context import RequestContext
from backoffice.observability.logging import (
    bind_request_context,
    clear_request_context,
    get_logger,
)
from backoffice.observability.metrics import REQUEST_COUNT

logger = get_logger(__name__)

# Endpoint label for requests no route matched
UNMATCHED_ROUTE = "unmatched"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Binds request identifiers to the logging context.

    Honours an incoming X-Request-ID header and echoes the id back on the
    response.
    """

    async def dispatch(  # type: ignore[override]
        self, request: Request, call_next: Callable[[Request], Response]
    ) -> Response:
        """Process request and bind context."""
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        context = RequestContext(
            request_id=request_id,
            trace_id=request.headers.get("X-Trace-ID") or request_id,
        )
        clear_request_context()
        bind_request_context(request_id=context.request_id, trace_id=context.trace_id)

        logger.debug("request_started", method=request.method, path=request.url.path)

        response = await call_next(request)  # type: ignore[misc]

        route = request.scope.get("route")
        endpoint = getattr(route, "path", UNMATCHED_ROUTE)
        REQUEST_COUNT.labels(
            method=request.method, endpoint=endpoint, status=str(response.status_code)
        ).inc()

        logger.debug(
            "request_completed",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
        )

        response.headers["X-Request-ID"] = context.request_id
        return response  # type: ignore[no-any-return]
