"""
FastAPI dependencies shared by the routers.

The gateway is created once in the application lifespan and stored on
``app.state``; tests replace ``get_gateway`` through
``app.dependency_overrides``.
"""

from fastapi import HTTPException, Request, status

from wikisearch.clients import IndexGatewayProtocol


def get_gateway(request: Request) -> IndexGatewayProtocol:
    """Return the index gateway created at startup.

    Raises:
        HTTPException: 503 if the application has not started a gateway
    """
    gateway = getattr(request.app.state, "gateway", None)
    if gateway is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Index gateway not initialized",
        )
    return gateway


def get_optional_gateway(request: Request) -> IndexGatewayProtocol | None:
    """Return the index gateway, or None before startup completed."""
    return getattr(request.app.state, "gateway", None)
