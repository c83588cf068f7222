"""
wikisearch - HTTP Application Entry Point

- FastAPI app with lifespan handler
- uvicorn wikisearch.main:app starts the service

Patterns Applied:
- Lifespan context manager
- One-time configure_logging() at startup
- Namespaced exceptions mapped to HTTP status codes in one place

Anti-Patterns Avoided:
- Deprecated @app.on_event - using modern lifespan pattern
- structlog.configure() per request - one-time at startup
- A new index connection per request - one gateway per process
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from wikisearch.api import health_router, query_router
from wikisearch.clients import build_gateway
from wikisearch.core.config import get_settings
from wikisearch.core.exceptions import LookupFailure, UsageError
from wikisearch.core.logging import configure_logging, get_logger
from wikisearch.core.tracing import configure_tracing

settings = get_settings()

configure_logging(
    log_level=settings.log_level,
    json_output=settings.log_json,
)

logger = get_logger(__name__)


# =============================================================================
# Lifespan Context Manager
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: build the index gateway, close it at shutdown."""
    # =========================================================================
    # STARTUP
    # =========================================================================
    logger.info(
        "startup",
        service=settings.service_name,
        version=settings.version,
        environment=settings.environment,
        index_backend=settings.index_backend,
    )

    if settings.tracing_enabled:
        configure_tracing(
            service_name=settings.service_name,
            console_export=settings.tracing_console_export,
            version=settings.version,
        )
        logger.info("tracing_configured")

    app.state.gateway = build_gateway(settings)

    yield

    # =========================================================================
    # SHUTDOWN
    # =========================================================================
    logger.info("shutdown", service=settings.service_name)

    app.state.gateway.close()
    app.state.gateway = None


# =============================================================================
# FastAPI Application
# =============================================================================


app = FastAPI(
    title="wikisearch",
    description="Boolean AND/OR/MINUS queries over a term -> url relevance index",
    version=settings.version,
    docs_url="/docs" if settings.environment != "production" else None,
    redoc_url="/redoc" if settings.environment != "production" else None,
    lifespan=lifespan,
)


# =============================================================================
# Exception Handlers
# =============================================================================


@app.exception_handler(UsageError)
async def usage_error_handler(request: Request, exc: UsageError) -> JSONResponse:  # noqa: ARG001
    """Malformed queries are the caller's to fix: 422."""
    return JSONResponse(
        status_code=422,
        content={"detail": str(exc)},
    )


@app.exception_handler(LookupFailure)
async def lookup_failure_handler(request: Request, exc: LookupFailure) -> JSONResponse:  # noqa: ARG001
    """The index could not answer: 503."""
    logger.warning("lookup_failure", term=exc.term, error=str(exc))
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": str(exc), "term": exc.term},
    )


app.include_router(health_router)
app.include_router(query_router)


@app.get("/", include_in_schema=False)
async def root() -> dict[str, str]:
    """Root endpoint pointing at the docs."""
    return {
        "service": settings.service_name,
        "version": settings.version,
        "docs": "/docs",
    }
