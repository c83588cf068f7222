"""
Boolean Query Endpoints

POST /v1/query                 - single-term or chained AND/OR/MINUS query
GET  /v1/terms/{term}/count    - number of pages containing a term

Results are listed in ascending relevance order, the same order the CLI
prints; ``limit`` keeps a prefix of that order.

Patterns Applied:
- FastAPI router pattern
- Pydantic request/response models
- Dependency injection for the index gateway
- Blocking gateway I/O moved off the event loop with run_in_threadpool
"""

import time

from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel, Field

from wikisearch.api.dependencies import get_gateway
from wikisearch.clients import IndexGatewayProtocol
from wikisearch.core.config import Settings, get_settings
from wikisearch.core.exceptions import UsageError
from wikisearch.core.logging import get_logger, query_context
from wikisearch.search import QueryChain, QueryResult, search

logger = get_logger(__name__)

# =============================================================================
# Request/Response Models
# =============================================================================


class QueryRequest(BaseModel):
    """Request body for the query endpoint."""

    terms: list[str] = Field(..., min_length=1, description="Terms in fold order")
    operator: str | None = Field(
        default=None,
        description="or | and | minus (aliases: without, not); required for 2+ terms",
    )
    limit: int | None = Field(default=None, ge=1, description="Keep the first N ranked results")


class RankedDocument(BaseModel):
    """One ranked result."""

    doc_id: str
    relevance: int


class QueryResponse(BaseModel):
    """Response from the query endpoint."""

    query: str
    terms: list[str]
    operator: str | None = None
    count: int
    results: list[RankedDocument]
    processing_time_ms: float


class TermCountResponse(BaseModel):
    """Number of pages containing a term."""

    term: str
    count: int


# =============================================================================
# Evaluation
# =============================================================================


def evaluate(
    request: QueryRequest,
    gateway: IndexGatewayProtocol,
    max_workers: int = 1,
) -> tuple[str, str | None, QueryResult]:
    """Evaluate a query request against the gateway.

    Returns:
        Tuple of (query label, operator value or None, result)

    Raises:
        UsageError: Multiple terms without an operator, fewer than two terms
            with one, or an unknown operator
        LookupFailure: Propagated from the gateway
    """
    if request.operator is None:
        if len(request.terms) > 1:
            raise UsageError("An operator is required to combine multiple terms")
        term = request.terms[0]
        with query_context(term):
            return term, None, search(term, gateway)

    chained = QueryChain(max_workers=max_workers).fold(
        request.terms, request.operator, gateway.lookup
    )
    return chained.label, chained.operator.value, chained.result


# =============================================================================
# Router
# =============================================================================

query_router = APIRouter(prefix="/v1", tags=["query"])


@query_router.post("/query", response_model=QueryResponse)
async def run_query(
    request: QueryRequest,
    gateway: IndexGatewayProtocol = Depends(get_gateway),
    settings: Settings = Depends(get_settings),
) -> QueryResponse:
    """Evaluate a boolean query and return ranked results.

    Args:
        request: Terms, operator and optional limit

    Returns:
        QueryResponse with results in ascending relevance order
    """
    start_time = time.perf_counter()

    label, operator, result = await run_in_threadpool(
        evaluate, request, gateway, settings.lookup_workers
    )
    limit = request.limit or settings.default_limit
    entries = result.top_n(limit) if limit is not None else result.rank()

    elapsed_ms = (time.perf_counter() - start_time) * 1000
    logger.info("query", query=label, count=result.count(), processing_time_ms=elapsed_ms)

    return QueryResponse(
        query=label,
        terms=list(request.terms),
        operator=operator,
        count=result.count(),
        results=[RankedDocument(doc_id=url, relevance=score) for url, score in entries],
        processing_time_ms=elapsed_ms,
    )


@query_router.get("/terms/{term}/count", response_model=TermCountResponse)
async def term_count(
    term: str,
    gateway: IndexGatewayProtocol = Depends(get_gateway),
) -> TermCountResponse:
    """Count the pages containing ``term``."""
    result = await run_in_threadpool(search, term, gateway)
    return TermCountResponse(term=term, count=result.count())
