"""QueryChain - N-ary boolean queries over comma-delimited term lists.

A chained query applies one binary operator left to right across the
results of its terms: ``((A op B) op C) op D``.

Patterns Applied:
- Enum binding operator labels to the algebra functions
- Frozen dataclass for the evaluated query
- Optional thread pool for independent term lookups; the fold itself always
  runs in term order

Anti-Patterns Avoided:
- Silently evaluating a "chain" of one term
- Deduplicating or filtering user terms behind the caller's back
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from typing import Final

from wikisearch.core.exceptions import UsageError
from wikisearch.core.logging import get_logger, query_context
from wikisearch.core.tracing import get_tracer, query_span
from wikisearch.search.query_result import QueryResult
from wikisearch.search.relevance import (
    RelevanceMap,
    as_relevance_map,
    difference,
    intersect,
    union,
)

logger = get_logger(__name__)
tracer = get_tracer(__name__)

# =============================================================================
# Module Constants
# =============================================================================

MIN_CHAIN_TERMS: Final[int] = 2
TERM_DELIMITER: Final[str] = ","

Resolver = Callable[[str], Mapping[str, int]]


# =============================================================================
# Operators
# =============================================================================


class Operator(Enum):
    """Binary operators a chained query can fold with."""

    OR = "or"
    AND = "and"
    MINUS = "minus"

    @property
    def combine(self) -> Callable[[Mapping[str, int], Mapping[str, int]], RelevanceMap]:
        return _COMBINERS[self]

    @property
    def symbol(self) -> str:
        return self.name

    @classmethod
    def parse(cls, label: str | Operator) -> Operator:
        """Map a user-supplied label to an operator.

        Accepts ``or``, ``and``, ``minus`` and the aliases ``without``/``not``
        for MINUS, case-insensitively.

        Raises:
            UsageError: If the label is unknown
        """
        if isinstance(label, Operator):
            return label
        key = label.strip().lower()
        try:
            return _ALIASES[key]
        except KeyError:
            raise UsageError(
                f"Unknown operator {label!r}; expected one of: {', '.join(sorted(_ALIASES))}"
            ) from None


_COMBINERS = {
    Operator.OR: union,
    Operator.AND: intersect,
    Operator.MINUS: difference,
}

_ALIASES = {
    "or": Operator.OR,
    "and": Operator.AND,
    "minus": Operator.MINUS,
    "without": Operator.MINUS,
    "not": Operator.MINUS,
}


# =============================================================================
# Term parsing
# =============================================================================


def parse_terms(term_list: str) -> list[str]:
    """Split a comma-delimited term list.

    Whitespace around each term is stripped. Empty and duplicate terms are
    kept in place.

    >>> parse_terms("java, programming,java")
    ['java', 'programming', 'java']
    """
    return [term.strip() for term in term_list.split(TERM_DELIMITER)]


# =============================================================================
# Evaluated query
# =============================================================================


@dataclass(frozen=True)
class ChainedQuery:
    """A folded query: its result plus the ordered term labels.

    Attributes:
        result: The accumulated QueryResult
        operator: Operator the terms were folded with
        terms: Term labels in fold order
    """

    result: QueryResult
    operator: Operator
    terms: tuple[str, ...]

    @property
    def label(self) -> str:
        """Human-readable query, e.g. ``java AND programming``."""
        return f" {self.operator.symbol} ".join(self.terms)


# =============================================================================
# QueryChain
# =============================================================================


class QueryChain:
    """Folds a binary operator across the results of an ordered term list.

    Attributes:
        max_workers: Thread count for term lookups (1 = sequential)
    """

    def __init__(self, max_workers: int = 1) -> None:
        """Initialize the chain.

        Args:
            max_workers: Number of threads resolving terms. Lookups run
                concurrently when greater than 1; results are still folded
                in term order.
        """
        if max_workers < 1:
            raise UsageError(f"max_workers must be at least 1, got {max_workers}")
        self.max_workers = max_workers

    def fold(
        self,
        terms: Sequence[str],
        operator: Operator | str,
        resolver: Resolver,
    ) -> ChainedQuery:
        """Evaluate ``((t1 op t2) op t3) ...`` over ``terms``.

        Args:
            terms: Ordered term labels; at least two
            operator: Operator or operator label
            resolver: Function mapping a term to its url -> count mapping

        Returns:
            ChainedQuery with the accumulated result and the term labels

        Raises:
            UsageError: If fewer than two terms are given or the operator
                is unknown
            LookupFailure: Propagated from the resolver
        """
        op = Operator.parse(operator)
        labels = tuple(terms)
        if len(labels) < MIN_CHAIN_TERMS:
            raise UsageError(
                f"A chained {op.symbol} query needs at least {MIN_CHAIN_TERMS} terms, "
                f"got {len(labels)}"
            )

        label = f" {op.symbol} ".join(labels)
        with query_context(label, op.value), query_span(
            tracer, "query_chain.fold", operator=op.value, term_count=len(labels)
        ) as span:
            logger.debug("fold_started", terms=list(labels))
            maps = self._resolve(labels, resolver)

            accumulated = maps[0]
            for current in maps[1:]:
                accumulated = op.combine(accumulated, current)

            result = QueryResult(accumulated)
            span.set_attribute("query.result_count", result.count())
            logger.debug(
                "fold_finished", terms=list(labels), result_count=result.count()
            )

        return ChainedQuery(result=result, operator=op, terms=labels)

    def fold_or(self, terms: Sequence[str], resolver: Resolver) -> ChainedQuery:
        """Chained OR (union) over ``terms``."""
        return self.fold(terms, Operator.OR, resolver)

    def fold_and(self, terms: Sequence[str], resolver: Resolver) -> ChainedQuery:
        """Chained AND (intersection) over ``terms``."""
        return self.fold(terms, Operator.AND, resolver)

    def fold_difference(self, terms: Sequence[str], resolver: Resolver) -> ChainedQuery:
        """Chained MINUS: first term's urls without those of every later term."""
        return self.fold(terms, Operator.MINUS, resolver)

    def _resolve(self, terms: tuple[str, ...], resolver: Resolver) -> list[RelevanceMap]:
        """Resolve every term to a RelevanceMap, preserving term order."""
        if self.max_workers == 1:
            return [as_relevance_map(resolver(term)) for term in terms]

        # executor.map yields in input order regardless of completion order
        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(terms))) as pool:
            return [as_relevance_map(counts) for counts in pool.map(resolver, terms)]
