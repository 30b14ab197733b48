"""FastAPI application factory.

Creates and configures the FastAPI application with middleware,
exception handlers, and route registration.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

from probebot import __version__
from probebot.api.dependencies import get_settings, reset_dependencies
from probebot.api.exceptions import ProbebotAPIError
from probebot.api.middleware.context import RequestContextMiddleware
from probebot.api.models.errors import ErrorBody, ErrorCode, ErrorDetail, ErrorResponse
from probebot.api.routes import register_routes
from probebot.observability.logging import get_logger, setup_logging
from probebot.observability.tracing import setup_tracing

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Configure observability on startup and release connections on shutdown."""
    settings = get_settings()
    observability = settings.observability

    setup_logging(
        level=observability.logging.level,
        format=observability.logging.format,
        redact_pii=observability.logging.redact_pii,
    )
    if observability.tracing.enabled:
        setup_tracing(
            service_name=observability.tracing.service_name,
            otlp_endpoint=observability.tracing.otlp_endpoint,
            console_export=observability.tracing.console_export,
        )

    logger.info("app_started", app_name=settings.app_name, version=__version__)
    yield

    await reset_dependencies()
    logger.info("app_stopped")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application
    """
    settings = get_settings()

    app = FastAPI(
        title="Probebot API",
        description="Diagnostic chat bot for exercising hosting infrastructure",
        version=__version__,
        lifespan=lifespan,
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
    register_routes(app)

    if settings.observability.tracing.enabled:
        FastAPIInstrumentor.instrument_app(app)
        logger.info("opentelemetry_instrumentation_enabled")

    logger.info("app_created", debug=settings.debug, cors_origins=settings.api.cors_origins)
    return app


def _register_exception_handlers(app: FastAPI) -> None:
    """Register global exception handlers.

    Args:
        app: FastAPI application
    """

    @app.exception_handler(ProbebotAPIError)
    async def probebot_api_error_handler(
        request: Request, exc: ProbebotAPIError
    ) -> JSONResponse:
        """Handle ProbebotAPIError and its subclasses."""
        logger.warning(
            "api_error",
            error_code=exc.error_code.value,
            message=exc.message,
            path=request.url.path,
        )
        response = ErrorResponse(error=ErrorBody(code=exc.error_code, message=exc.message))
        return JSONResponse(status_code=exc.status_code, content=response.model_dump())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Handle malformed turn requests."""
        logger.warning("validation_error", errors=exc.errors(), path=request.url.path)

        details = [
            ErrorDetail(
                field=".".join(str(loc) for loc in error["loc"]),
                message=error["msg"],
            )
            for error in exc.errors()
        ]
        response = ErrorResponse(
            error=ErrorBody(
                code=ErrorCode.INVALID_INPUT,
                message="Request validation failed",
                details=details,
            )
        )
        return JSONResponse(status_code=400, content=response.model_dump())

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception(
            "unexpected_error",
            error=str(exc),
            error_type=type(exc).__name__,
            path=request.url.path,
        )
        response = ErrorResponse(
            error=ErrorBody(
                code=ErrorCode.INTERNAL_ERROR,
                message="An unexpected error occurred",
            )
        )
        return JSONResponse(status_code=500, content=response.model_dump())

    logger.debug("exception_handlers_registered")


# Create the app instance for uvicorn
app = create_app()
