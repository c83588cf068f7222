"""
HTTP index gateway.

Client for an index service exposing
``GET /v1/terms/{term}/counts`` -> ``{"counts": {"<url>": <int>, ...}}``.

Patterns Applied:
- Connection pooling (reuse one httpx.Client)
- Retry with exponential backoff on transport errors and 5xx
- Custom namespaced exceptions (LookupFailure)
"""

import time
from typing import Any
from urllib.parse import quote

import httpx

from wikisearch.core.exceptions import ConfigurationError, LookupFailure
from wikisearch.core.logging import get_logger
from wikisearch.search.relevance import RelevanceMap

logger = get_logger(__name__)


class _RetryableError(Exception):
    """Internal marker for failures worth another attempt."""


class HttpIndexGateway:
    """HTTP client for a remote index service.

    Implements IndexGatewayProtocol.

    Attributes:
        base_url: Base URL of the index service (e.g., http://localhost:8091)
        timeout: Request timeout in seconds (default: 10)
        max_retries: Maximum attempts per lookup (default: 3)
        retry_delay: Initial delay between retries in seconds (default: 0.5)
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        max_retries: int = 3,
        retry_delay: float = 0.5,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the gateway.

        Args:
            base_url: Base URL of the index service
            timeout: Request timeout in seconds
            max_retries: Maximum attempts per lookup
            retry_delay: Initial delay between retries
            transport: Optional httpx transport (tests pass httpx.MockTransport)

        Raises:
            ConfigurationError: If max_retries is below 1
        """
        if max_retries < 1:
            raise ConfigurationError(
                f"Index lookups need at least one attempt, got max_retries={max_retries}"
            )
        self.base_url = base_url
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_delay = retry_delay

        self._client = httpx.Client(
            base_url=base_url,
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    def lookup(self, term: str) -> RelevanceMap:
        """Return url -> count for every url containing ``term``.

        A 404 means the term is not indexed and yields an empty map.

        Raises:
            LookupFailure: On 4xx other than 404, malformed payloads, or
                when retries are exhausted
        """
        response = self._execute_request(term)
        if response is None:
            logger.debug("term_lookup", term=term, hits=0)
            return RelevanceMap()

        counts = self._parse_counts(term, response)
        logger.debug("term_lookup", term=term, hits=len(counts))
        return counts

    def _execute_request(self, term: str) -> dict[str, Any] | None:
        """GET the counts for ``term`` with retry.

        Returns:
            Response JSON, or None when the service answered 404
        """
        path = f"/v1/terms/{quote(term, safe='')}/counts"
        last_error: Exception | None = None

        for attempt in range(self.max_retries):
            try:
                response = self._client.get(path)
                if response.status_code == 404:
                    return None
                if 400 <= response.status_code < 500:
                    raise LookupFailure(
                        f"Index rejected term {term!r}: HTTP {response.status_code}",
                        term=term,
                    )
                if response.status_code >= 500:
                    raise _RetryableError(f"HTTP {response.status_code}")

                result: dict[str, Any] = response.json()
                return result

            except httpx.TimeoutException:
                last_error = TimeoutError("Connection timed out")
            except httpx.TransportError as e:
                last_error = e
            except _RetryableError as e:
                last_error = e
            except ValueError as e:
                raise LookupFailure(
                    f"Malformed index response for term {term!r}: {e}", term=term
                ) from e

            logger.warning("term_lookup_retry", term=term, attempt=attempt + 1, error=str(last_error))
            if attempt < self.max_retries - 1:
                time.sleep(self.retry_delay * (2**attempt))

        raise LookupFailure(
            f"Index lookup for term {term!r} failed after {self.max_retries} attempts: {last_error}",
            term=term,
        )

    def _parse_counts(self, term: str, response: Any) -> RelevanceMap:
        """Parse ``{"counts": {...}}`` into a RelevanceMap."""
        counts = response.get("counts") if isinstance(response, dict) else None
        if not isinstance(counts, dict):
            raise LookupFailure(f"Malformed index response for term {term!r}", term=term)
        try:
            return RelevanceMap(counts)
        except ValueError as e:
            raise LookupFailure(f"Malformed counts for term {term!r}: {e}", term=term) from e

    def ping(self) -> bool:
        """Return True when the index service answers its health check."""
        try:
            response = self._client.get("/health")
        except httpx.HTTPError as e:
            logger.warning("index_ping_failed", error=str(e))
            return False
        return response.status_code == 200

    def close(self) -> None:
        """Close the HTTP client connection pool."""
        self._client.close()
