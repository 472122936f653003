"""Chargeback API service.

Standalone HTTP server for recording chargebacks. Chargebacks are stored in
DynamoDB; the same service layer also backs the Lambda handler.
"""

import time
from collections.abc import AsyncGenerator, Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from starlette.exceptions import HTTPException as StarletteHTTPException

from chargeback_api.api.routes.chargebacks import router as chargebacks_router
from chargeback_api.api.routes.health import router as health_router
from chargeback_api.core.config import AppEnvironment, Settings, get_settings
from chargeback_api.core.dependencies import ServiceContainer, build_container
from chargeback_api.core.errors import ChargebackError, get_status_code
from chargeback_api.core.logging import get_logger, setup_logging

logger = get_logger(__name__)

# API version prefix
API_V1_PREFIX = "/api/v1"

HTTP_ERROR_MESSAGES = {
    404: "Not found",
    405: "Method not allowed",
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan context manager."""
    settings: Settings = app.state.settings

    setup_logging(settings)

    if getattr(app.state, "container", None) is None:
        app.state.container = build_container(settings)

    logger.info(
        "Starting Chargeback API",
        app=settings.app.name,
        env=settings.app.env.value,
        version=settings.app.version,
        table_name=settings.dynamodb.table_name,
    )

    yield

    logger.info("Chargeback API stopped")


def create_app(
    settings: Settings | None = None,
    container: ServiceContainer | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Settings override; defaults to environment settings.
        container: Prebuilt dependencies. When omitted they are built from
            settings during application startup.
    """
    settings = settings or (container.settings if container else get_settings())

    app = FastAPI(
        title="Chargeback API",
        description="API for recording card-payment chargebacks.",
        version=settings.app.version,
        lifespan=lifespan,
        docs_url="/docs" if settings.app.env != AppEnvironment.PROD else None,
        redoc_url="/redoc" if settings.app.env != AppEnvironment.PROD else None,
        openapi_url="/openapi.json" if settings.app.env != AppEnvironment.PROD else None,
    )
    app.state.settings = settings
    app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.security.cors_allowed_origins,
        allow_methods=settings.security.cors_allow_methods,
        allow_headers=settings.security.cors_allow_headers,
    )

    app.include_router(health_router)
    app.include_router(chargebacks_router)
    app.include_router(chargebacks_router, prefix=API_V1_PREFIX)

    setup_telemetry(app, settings)

    @app.middleware("http")
    async def log_requests(  # type: ignore[reportUnusedFunction]
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        """Emit one structured log line per request."""
        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000

        logger.info(
            "HTTP request processed",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=round(duration_ms, 3),
            user_agent=request.headers.get("user-agent", ""),
            remote_addr=request.client.host if request.client else "",
        )
        return response

    @app.exception_handler(ChargebackError)
    async def domain_error_handler(  # type: ignore[reportUnusedFunction]
        request: Request, exc: ChargebackError
    ) -> JSONResponse:
        """Handle domain-specific errors and return appropriate HTTP responses."""
        status_code = get_status_code(exc)
        if status_code >= 500:
            logger.error(
                "Chargeback request failed",
                path=request.url.path,
                method=request.method,
                error=exc.message,
            )
            return JSONResponse(status_code=status_code, content={"error": "Internal server error"})

        logger.warning(
            "Chargeback request rejected",
            path=request.url.path,
            status_code=status_code,
            error=exc.message,
        )
        return JSONResponse(
            status_code=status_code,
            content={"error": exc.message, **({"details": exc.details} if exc.details else {})},
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(  # type: ignore[reportUnusedFunction]
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Malformed JSON or wrongly typed fields are a client error."""
        errors = [
            {"loc": [str(part) for part in error.get("loc", ())], "msg": error.get("msg", "")}
            for error in exc.errors()
        ]
        return JSONResponse(
            status_code=400,
            content={"error": "invalid request body", "details": {"errors": errors}},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(  # type: ignore[reportUnusedFunction]
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        """Render routing errors (404, 405) in the service's error shape."""
        message = HTTP_ERROR_MESSAGES.get(exc.status_code, str(exc.detail))
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": message},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(  # type: ignore[reportUnusedFunction]
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Handle unexpected exceptions and return 500 error responses."""
        logger.exception(
            "Unhandled exception",
            path=request.url.path,
            method=request.method,
            error=str(exc),
        )
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error"},
        )

    return app


def setup_telemetry(app: FastAPI, settings: Settings) -> None:
    """Setup OpenTelemetry instrumentation."""
    if not settings.observability.otlp_endpoint:
        return

    resource = Resource(
        attributes={
            SERVICE_NAME: settings.observability.service_name,
        }
    )

    provider = TracerProvider(resource=resource)
    exporter = OTLPSpanExporter(
        endpoint=settings.observability.otlp_endpoint,
        insecure=settings.observability.otlp_insecure,
    )
    provider.add_span_processor(BatchSpanProcessor(exporter))
    trace.set_tracer_provider(provider)

    FastAPIInstrumentor.instrument_app(app)


def run() -> None:
    """Run the application using uvicorn."""
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "chargeback_api.main:create_app",
        factory=True,
        host=settings.server.host,
        port=settings.server.port,
        reload=settings.app.env == AppEnvironment.LOCAL,
        workers=1 if settings.app.env == AppEnvironment.LOCAL else settings.server.workers,
        log_level=settings.app.log_level.lower(),
    )


if __name__ == "__main__":
    run()
