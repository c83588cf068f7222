"""QueryResult - the result of a search query and its algebra.

A QueryResult wraps exactly one RelevanceMap (url -> relevance) and is never
mutated: ``union``/``intersect``/``difference`` return new results.

Ranking is ascending by relevance. This is an observable contract, callers
that want best-first output read the ranked list from the tail.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING

from wikisearch.core.exceptions import UsageError
from wikisearch.search.relevance import (
    EMPTY,
    RelevanceMap,
    difference,
    intersect,
    union,
)

if TYPE_CHECKING:
    from wikisearch.clients import IndexGatewayProtocol

RankedEntry = tuple[str, int]


class QueryResult:
    """Results of a search query: urls with their relevance scores.

    Attributes:
        relevance_map: The immutable url -> relevance mapping
    """

    __slots__ = ("_map",)

    def __init__(self, relevance_map: Mapping[str, int] | None = None) -> None:
        if relevance_map is None:
            self._map = EMPTY
        elif isinstance(relevance_map, RelevanceMap):
            self._map = relevance_map
        else:
            self._map = RelevanceMap(relevance_map)

    @property
    def relevance_map(self) -> RelevanceMap:
        return self._map

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, QueryResult):
            return NotImplemented
        return self._map == other._map

    __hash__ = None  # type: ignore[assignment]

    def __len__(self) -> int:
        return len(self._map)

    def __repr__(self) -> str:
        return f"QueryResult({self._map.to_dict()!r})"

    def get_relevance(self, url: str) -> int:
        """Look up the relevance of a url, 0 if it did not match."""
        return self._map.relevance(url)

    # ------------------------------------------------------------------ algebra

    def union(self, other: QueryResult) -> QueryResult:
        """OR: urls matching either query, relevance summed."""
        return QueryResult(union(self._map, other._map))

    def intersect(self, other: QueryResult) -> QueryResult:
        """AND: urls matching both queries, relevance summed."""
        return QueryResult(intersect(self._map, other._map))

    def difference(self, other: QueryResult) -> QueryResult:
        """MINUS: urls matching this query but not ``other``; relevance kept."""
        return QueryResult(difference(self._map, other._map))

    or_ = union
    and_ = intersect
    minus = difference

    # ------------------------------------------------------------------ ranking

    def rank(self) -> list[RankedEntry]:
        """All (url, relevance) entries sorted by ascending relevance.

        Ties keep the map's insertion order.
        """
        return sorted(self._map.items(), key=lambda entry: entry[1])

    sort = rank

    def top_n(self, n: int) -> list[RankedEntry]:
        """First ``n`` entries of ``rank()``, or all of them if fewer exist.

        Raises:
            UsageError: If ``n`` is not an integer or is below 1
        """
        if isinstance(n, bool) or not isinstance(n, int):
            raise UsageError(f"Result limit must be an integer, got {n!r}")
        if n < 1:
            raise UsageError(f"Result limit must be at least 1, got {n}")
        return self.rank()[:n]

    def count(self) -> int:
        """Number of distinct urls in the result."""
        return len(self._map)


def search(term: str, index: IndexGatewayProtocol) -> QueryResult:
    """Look up a single term and wrap its counts in a QueryResult.

    Raises:
        LookupFailure: If the index cannot answer
    """
    return QueryResult(index.lookup(term))
