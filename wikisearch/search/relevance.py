"""RelevanceMap and the result-set algebra.

A RelevanceMap maps a document id (a URL) to a non-negative integer
relevance score. Absent documents have relevance 0. Maps are immutable:
union, intersect and difference always build a new map.

Key order of a result: keys of the left operand in its order, then (union
only) keys found only in the right operand, in its order. Ranking ties
therefore come out in a deterministic order.

Patterns Applied:
- Pure functions for the algebra; plain-mapping operands are validated
  first, RelevanceMap operands never make an operator raise
- Module constants for the default relevance
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Final

DEFAULT_RELEVANCE: Final[int] = 0


def total_relevance(left: int, right: int) -> int:
    """Combine the relevance of one document matched by two terms.

    Relevance is the sum of the term frequencies.
    """
    return left + right


class RelevanceMap(Mapping[str, int]):
    """Immutable mapping from document id to relevance score.

    Behaves as a read-only ``Mapping``: ``map[url]`` raises ``KeyError`` for
    unknown urls while ``relevance(url)`` falls back to 0. Equality follows
    ``Mapping`` semantics, so a RelevanceMap compares equal to a plain dict
    with the same items.
    """

    __slots__ = ("_scores",)

    def __init__(self, scores: Mapping[str, int] | None = None) -> None:
        """Copy and validate the given scores.

        Raises:
            ValueError: If a score is negative or not an integer
        """
        copied: dict[str, int] = {}
        for doc_id, score in (scores or {}).items():
            if isinstance(score, bool) or not isinstance(score, int):
                raise ValueError(
                    f"Relevance for {doc_id!r} must be an integer, got {score!r}"
                )
            if score < 0:
                raise ValueError(f"Relevance for {doc_id!r} cannot be negative: {score}")
            copied[doc_id] = score
        self._scores = copied

    @classmethod
    def _trusted(cls, scores: dict[str, int]) -> RelevanceMap:
        # Scores built by the algebra from already-validated maps
        instance = cls.__new__(cls)
        instance._scores = scores
        return instance

    def __getitem__(self, doc_id: str) -> int:
        return self._scores[doc_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._scores)

    def __len__(self) -> int:
        return len(self._scores)

    def __contains__(self, doc_id: object) -> bool:
        return doc_id in self._scores

    def __repr__(self) -> str:
        return f"RelevanceMap({self._scores!r})"

    def relevance(self, doc_id: str) -> int:
        """Return the relevance of a document, 0 when it is absent."""
        return self._scores.get(doc_id, DEFAULT_RELEVANCE)

    def to_dict(self) -> dict[str, int]:
        """Return a mutable copy of the scores."""
        return dict(self._scores)


EMPTY: Final[RelevanceMap] = RelevanceMap()


def as_relevance_map(scores: Mapping[str, int]) -> RelevanceMap:
    """Return ``scores`` as a RelevanceMap, validating plain mappings.

    Raises:
        ValueError: If a score is negative or not an integer
    """
    if isinstance(scores, RelevanceMap):
        return scores
    return RelevanceMap(scores)


def union(left: Mapping[str, int], right: Mapping[str, int]) -> RelevanceMap:
    """Documents in either map; relevance summed where both match."""
    left, right = as_relevance_map(left), as_relevance_map(right)
    combined = dict(left)
    for doc_id, score in right.items():
        if doc_id in combined:
            combined[doc_id] = total_relevance(combined[doc_id], score)
        else:
            combined[doc_id] = score
    return RelevanceMap._trusted(combined)


def intersect(left: Mapping[str, int], right: Mapping[str, int]) -> RelevanceMap:
    """Documents in both maps; relevance summed.

    Documents missing from either side are dropped, not defaulted to zero.
    """
    left, right = as_relevance_map(left), as_relevance_map(right)
    return RelevanceMap._trusted(
        {
            doc_id: total_relevance(score, right[doc_id])
            for doc_id, score in left.items()
            if doc_id in right
        }
    )


def difference(left: Mapping[str, int], right: Mapping[str, int]) -> RelevanceMap:
    """Documents in ``left`` but not in ``right``.

    Pure exclusion filter: surviving documents keep their ``left`` relevance
    and ``right``'s scores are ignored.
    """
    left, right = as_relevance_map(left), as_relevance_map(right)
    return RelevanceMap._trusted(
        {doc_id: score for doc_id, score in left.items() if doc_id not in right}
    )
