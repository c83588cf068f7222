"""
wikisearch - Health API Routes

/health: liveness, always 200 while the process serves requests
/ready: readiness, 503 until the index gateway answers

Patterns Applied:
- Health Check Pattern
- HealthService class separated from the routes
- Pydantic response models

Anti-Patterns Avoided:
- Bare except clauses
- Missing response models
"""

from typing import Any

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from wikisearch import __version__
from wikisearch.api.dependencies import get_optional_gateway
from wikisearch.clients import IndexGatewayProtocol
from wikisearch.core.logging import get_logger

router = APIRouter(tags=["health"])

logger = get_logger(__name__)


# =============================================================================
# Response Models
# =============================================================================


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    version: str
    service: str


class ReadinessResponse(BaseModel):
    """Readiness check response model."""

    status: str
    checks: dict[str, bool]


# =============================================================================
# Health Service
# =============================================================================


class HealthService:
    """Service class for health check operations.

    Returns structured {"status": "healthy", ...} responses.
    """

    def __init__(self, version: str = __version__, service: str = "wikisearch"):
        self._version = version
        self._service = service

    def check_health(self) -> dict[str, Any]:
        """Check basic service health.

        Returns:
            Health status dictionary with status, version, service
        """
        return {
            "status": "healthy",
            "version": self._version,
            "service": self._service,
        }

    def check_readiness(
        self, gateway: IndexGatewayProtocol | None
    ) -> tuple[dict[str, Any], bool]:
        """Check whether queries can be answered.

        Args:
            gateway: The index gateway, None if startup has not created it

        Returns:
            Tuple of (readiness dict, is_ready bool)
        """
        checks = {
            "gateway_initialized": gateway is not None,
            "index_reachable": gateway is not None and gateway.ping(),
        }

        is_ready = all(checks.values())

        result: dict[str, Any] = {
            "status": "ready" if is_ready else "not_ready",
            "checks": checks,
        }
        return result, is_ready


_health_service = HealthService()


def get_health_service() -> HealthService:
    """Get health service instance."""
    return _health_service


# =============================================================================
# Endpoints
# =============================================================================


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health Check",
    description="Basic health check endpoint for liveness probe",
)
async def health_check() -> HealthResponse:
    """Health check endpoint."""
    data = get_health_service().check_health()
    logger.debug("health_check", status=data["status"])
    return HealthResponse(**data)


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    responses={
        200: {"description": "Service is ready"},
        503: {"description": "Index is not reachable"},
    },
    summary="Readiness Check",
    description="Readiness check endpoint; pings the index gateway",
)
def readiness_check(
    gateway: IndexGatewayProtocol | None = Depends(get_optional_gateway),
) -> JSONResponse:
    """Readiness check endpoint.

    Declared sync so the blocking gateway ping runs in the threadpool.

    Returns:
        200 if ready, 503 if not ready
    """
    data, is_ready = get_health_service().check_readiness(gateway)

    status_code = status.HTTP_200_OK if is_ready else status.HTTP_503_SERVICE_UNAVAILABLE

    logger.debug("readiness_check", status=data["status"], is_ready=is_ready)
    return JSONResponse(content=data, status_code=status_code)
