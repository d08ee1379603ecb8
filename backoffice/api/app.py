"""FastAPI application factory.

Creates and configures the FastAPI application with middleware,
exception handlers, and route registration.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from backoffice import __version__
from backoffice.api.dependencies import get_settings
from backoffice.api.exceptions import BackofficeAPIError
from backoffice.api.middleware.context import RequestContextMiddleware
from backoffice.api.models.envelope import ApiResponse
from backoffice.api.models.errors import ErrorCode, ErrorDetail
from backoffice.api.routes import register_routes
from backoffice.db.errors import StoreError
from backoffice.observability.logging import get_logger, setup_logging

logger = get_logger(__name__)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application
    """
    settings = get_settings()
    log_config = settings.observability.logging
    setup_logging(
        level=log_config.level,
        format=log_config.format,
        redact_pii=log_config.redact_pii,
    )

    app = FastAPI(
        title="Back-office API",
        description="Audit trail of administrative changes",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api.cors_origins,
        allow_credentials=settings.api.cors_allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestContextMiddleware)

    _register_exception_handlers(app)
    register_routes(app, metrics_enabled=settings.observability.metrics.enabled)

    logger.info(
        "app_created",
        debug=settings.debug,
        cors_origins=settings.api.cors_origins,
    )

    return app


def _error_response(
    status_code: int,
    code: ErrorCode,
    message: str,
    details: list[ErrorDetail] | None = None,
) -> JSONResponse:
    body = ApiResponse[None].fail(code, message, details)
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


def _validation_details(errors: list[dict]) -> list[ErrorDetail]:
    details = []
    for error in errors:
        # Drop the "query"/"path" location prefix FastAPI adds
        loc = [str(part) for part in error["loc"] if part not in ("query", "path", "body")]
        details.append(ErrorDetail(field=".".join(loc) or None, message=error["msg"]))
    return details


def _register_exception_handlers(app: FastAPI) -> None:
    """Register global exception handlers.

    Every failure is rendered as the envelope with success false; internal
    exception text is logged, never returned.
    """

    @app.exception_handler(BackofficeAPIError)
    async def backoffice_api_error_handler(
        request: Request, exc: BackofficeAPIError
    ) -> JSONResponse:
        """Handle BackofficeAPIError and its subclasses."""
        logger.warning(
            "api_error",
            error_code=exc.error_code.value,
            message=exc.message,
            path=request.url.path,
        )
        details = [ErrorDetail(field=exc.field, message=exc.message)] if exc.field else None
        response = _error_response(exc.status_code, exc.error_code, exc.message, details)
        if exc.status_code == 401:
            response.headers["WWW-Authenticate"] = "Bearer"
        return response

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Handle FastAPI request validation errors."""
        logger.warning("validation_error", errors=exc.errors(), path=request.url.path)
        return _error_response(
            400,
            ErrorCode.INVALID_REQUEST,
            "Request validation failed",
            _validation_details(list(exc.errors())),
        )

    @app.exception_handler(ValidationError)
    async def pydantic_validation_error_handler(
        request: Request, exc: ValidationError
    ) -> JSONResponse:
        """Handle Pydantic validation errors."""
        logger.warning("pydantic_validation_error", errors=exc.errors(), path=request.url.path)
        return _error_response(
            400,
            ErrorCode.INVALID_REQUEST,
            "Data validation failed",
            _validation_details(list(exc.errors())),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        """Handle routing errors (unknown path, wrong method)."""
        code = ErrorCode.NOT_FOUND if exc.status_code == 404 else ErrorCode.INVALID_REQUEST
        return _error_response(exc.status_code, code, str(exc.detail))

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
        """Handle storage backend failures."""
        logger.error(
            "storage_error",
            error=str(exc),
            error_type=type(exc).__name__,
            cause=str(exc.cause) if exc.cause else None,
            path=request.url.path,
        )
        return _error_response(
            503, ErrorCode.STORAGE_UNAVAILABLE, "Storage is temporarily unavailable"
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception(
            "unexpected_error",
            error=str(exc),
            error_type=type(exc).__name__,
            path=request.url.path,
        )
        return _error_response(500, ErrorCode.INTERNAL_ERROR, "An unexpected error occurred")

    logger.debug("exception_handlers_registered")


# Create the app instance for uvicorn
app = create_app()
