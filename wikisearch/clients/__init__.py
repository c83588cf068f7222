"""
Index gateways: term -> (url -> occurrence count) lookups.

The gateway is the only I/O boundary of a query. Each lookup either returns
a RelevanceMap (empty when the term is not indexed, never None) or raises
LookupFailure.

Patterns Applied:
- Repository Pattern: Protocol for duck typing
- FakeClient pattern: InMemoryIndexGateway for tests without Redis/HTTP
- Custom namespaced exceptions (LookupFailure)
"""

from collections.abc import Iterable, Mapping
from typing import Protocol

from wikisearch.core.exceptions import LookupFailure
from wikisearch.search.relevance import RelevanceMap

# =============================================================================
# Protocol for Duck Typing (Repository Pattern)
# =============================================================================


class IndexGatewayProtocol(Protocol):
    """Protocol for index gateway duck typing.

    Enables InMemoryIndexGateway for testing without a real index store.
    """

    def lookup(self, term: str) -> RelevanceMap:
        """Return url -> count for every url containing ``term``."""
        ...

    def ping(self) -> bool:
        """Return True when the backing store answers."""
        ...

    def close(self) -> None:
        """Release connections held by the gateway."""
        ...


# =============================================================================
# InMemoryIndexGateway for Testing
# =============================================================================


class InMemoryIndexGateway:
    """Dict-backed gateway for unit tests and demos.

    Implements IndexGatewayProtocol for duck typing.

    Attributes:
        lookups: Terms looked up so far, in call order
    """

    def __init__(
        self,
        index: Mapping[str, Mapping[str, int]] | None = None,
        fail_on: Iterable[str] = (),
    ) -> None:
        """Initialize the fake with optional preset counts.

        Args:
            index: term -> (url -> count) data to serve
            fail_on: Terms whose lookup raises LookupFailure, simulating an
                unreachable store
        """
        self._index: dict[str, RelevanceMap] = {
            term: RelevanceMap(counts) for term, counts in (index or {}).items()
        }
        self._fail_on = set(fail_on)
        self.lookups: list[str] = []

    def lookup(self, term: str) -> RelevanceMap:
        """Return preset counts for ``term`` (empty if unknown).

        Raises:
            LookupFailure: If ``term`` was listed in ``fail_on``
        """
        self.lookups.append(term)
        if term in self._fail_on:
            raise LookupFailure(f"Index unavailable for term {term!r}", term=term)
        return self._index.get(term, RelevanceMap())

    def set_counts(self, term: str, counts: Mapping[str, int]) -> None:
        """Set the counts served for ``term``."""
        self._index[term] = RelevanceMap(counts)

    def ping(self) -> bool:
        return True

    def close(self) -> None:
        return None


# factory imports the names above, so these imports stay last
from wikisearch.clients.http_index import HttpIndexGateway  # noqa: E402
from wikisearch.clients.redis_index import RedisIndexGateway  # noqa: E402
from wikisearch.clients.factory import build_gateway  # noqa: E402

__all__ = [
    "HttpIndexGateway",
    "InMemoryIndexGateway",
    "IndexGatewayProtocol",
    "LookupFailure",
    "RedisIndexGateway",
    "build_gateway",
]
