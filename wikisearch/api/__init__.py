"""HTTP API routers."""

from wikisearch.api.health import router as health_router
from wikisearch.api.query import query_router

__all__ = ["health_router", "query_router"]
