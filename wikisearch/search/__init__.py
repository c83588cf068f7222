"""Boolean query algebra: relevance maps, query results and chained queries."""

from wikisearch.search.chain import (
    ChainedQuery,
    Operator,
    QueryChain,
    parse_terms,
)
from wikisearch.search.query_result import QueryResult, RankedEntry, search
from wikisearch.search.relevance import (
    RelevanceMap,
    as_relevance_map,
    difference,
    intersect,
    total_relevance,
    union,
)

__all__ = [
    "ChainedQuery",
    "Operator",
    "QueryChain",
    "QueryResult",
    "RankedEntry",
    "RelevanceMap",
    "as_relevance_map",
    "difference",
    "intersect",
    "parse_terms",
    "search",
    "total_relevance",
    "union",
]
