"""Tests for RelevanceMap and the union / intersect / difference algebra."""

from __future__ import annotations

from typing import Final

import pytest

from wikisearch.search.relevance import (
    RelevanceMap,
    as_relevance_map,
    difference,
    intersect,
    total_relevance,
    union,
)

# =============================================================================
# Module Constants
# =============================================================================

A: Final[dict[str, int]] = {"u1": 2, "u2": 5}
B: Final[dict[str, int]] = {"u2": 3, "u3": 1}

SAMPLE_PAIRS: Final[list[tuple[dict[str, int], dict[str, int]]]] = [
    (A, B),
    ({}, {}),
    ({"x": 1}, {}),
    ({}, {"y": 4}),
    ({"a": 0, "b": 7}, {"b": 0, "c": 2}),
    ({"same": 3}, {"same": 3}),
    ({"p": 1, "q": 2, "r": 3}, {"s": 4, "t": 5}),
]


def _pairs() -> list[tuple[RelevanceMap, RelevanceMap]]:
    return [(RelevanceMap(left), RelevanceMap(right)) for left, right in SAMPLE_PAIRS]


# =============================================================================
# RelevanceMap container
# =============================================================================


class TestRelevanceMap:
    """RelevanceMap behaves as an immutable url -> relevance mapping."""

    def test_absent_url_has_zero_relevance(self) -> None:
        """relevance() defaults to 0 for urls that did not match."""
        scores = RelevanceMap({"u1": 2})

        assert scores.relevance("u1") == 2
        assert scores.relevance("missing") == 0

    def test_getitem_is_strict(self) -> None:
        """Mapping access raises KeyError like any Mapping."""
        scores = RelevanceMap({"u1": 2})

        with pytest.raises(KeyError):
            scores["missing"]

    def test_equals_plain_dict(self) -> None:
        """Equality follows Mapping semantics."""
        assert RelevanceMap(A) == A
        assert RelevanceMap() == {}

    def test_constructor_copies_input(self) -> None:
        """Mutating the source dict does not change the map."""
        source = {"u1": 1}
        scores = RelevanceMap(source)

        source["u1"] = 99
        source["u2"] = 3

        assert scores == {"u1": 1}

    def test_has_no_item_assignment(self) -> None:
        """The map cannot be modified in place."""
        scores = RelevanceMap({"u1": 1})

        with pytest.raises(TypeError):
            scores["u1"] = 2  # type: ignore[index]

    def test_to_dict_returns_copy(self) -> None:
        """to_dict() hands out an independent dict."""
        scores = RelevanceMap({"u1": 1})
        copy = scores.to_dict()
        copy["u1"] = 5

        assert scores.relevance("u1") == 1

    @pytest.mark.parametrize("bad", [-1, 1.5, "3", None, True])
    def test_rejects_invalid_scores(self, bad: object) -> None:
        """Scores must be non-negative integers."""
        with pytest.raises(ValueError):
            RelevanceMap({"u1": bad})  # type: ignore[dict-item]

    def test_zero_score_is_kept(self) -> None:
        """A url with relevance 0 is still a member of the map."""
        scores = RelevanceMap({"u1": 0})

        assert "u1" in scores
        assert len(scores) == 1


# =============================================================================
# Worked example
# =============================================================================


class TestWorkedExample:
    """A = {u1:2, u2:5}, B = {u2:3, u3:1}."""

    def test_union(self) -> None:
        """Union sums shared urls and keeps the others."""
        assert union(RelevanceMap(A), RelevanceMap(B)) == {"u1": 2, "u2": 8, "u3": 1}

    def test_intersect(self) -> None:
        """Intersection keeps only shared urls, summed."""
        assert intersect(RelevanceMap(A), RelevanceMap(B)) == {"u2": 8}

    def test_difference(self) -> None:
        """Difference drops urls found in B and keeps A's scores."""
        assert difference(RelevanceMap(A), RelevanceMap(B)) == {"u1": 2}

    def test_inputs_are_untouched(self) -> None:
        """Operators build new maps and leave their inputs alone."""
        left, right = RelevanceMap(A), RelevanceMap(B)

        union(left, right)
        intersect(left, right)
        difference(left, right)

        assert left == A
        assert right == B

    def test_results_are_relevance_maps(self) -> None:
        """Every operator returns a RelevanceMap."""
        left, right = RelevanceMap(A), RelevanceMap(B)

        for op in (union, intersect, difference):
            assert isinstance(op(left, right), RelevanceMap)


# =============================================================================
# Algebraic properties
# =============================================================================


class TestAlgebraProperties:
    """Laws that hold for any pair of maps."""

    @pytest.mark.parametrize(("left", "right"), _pairs())
    def test_union_is_commutative(self, left: RelevanceMap, right: RelevanceMap) -> None:
        assert union(left, right) == union(right, left)

    @pytest.mark.parametrize(("left", "right"), _pairs())
    def test_intersect_is_commutative(self, left: RelevanceMap, right: RelevanceMap) -> None:
        assert intersect(left, right) == intersect(right, left)

    @pytest.mark.parametrize(("left", "right"), _pairs())
    def test_empty_map_identities(self, left: RelevanceMap, right: RelevanceMap) -> None:
        """∅ is the union identity and absorbs intersection."""
        empty = RelevanceMap()

        for scores in (left, right):
            assert union(scores, empty) == scores
            assert intersect(scores, empty) == {}
            assert difference(scores, empty) == scores
            assert difference(scores, scores) == {}

    @pytest.mark.parametrize(("left", "right"), _pairs())
    def test_intersect_key_set_is_exact(self, left: RelevanceMap, right: RelevanceMap) -> None:
        """No extra and no missing keys."""
        assert set(intersect(left, right)) == set(left) & set(right)

    @pytest.mark.parametrize(("left", "right"), _pairs())
    def test_union_key_set_is_exact(self, left: RelevanceMap, right: RelevanceMap) -> None:
        assert set(union(left, right)) == set(left) | set(right)

    @pytest.mark.parametrize(("left", "right"), _pairs())
    def test_difference_keeps_left_scores(self, left: RelevanceMap, right: RelevanceMap) -> None:
        """Surviving urls keep exactly their left-hand relevance."""
        result = difference(left, right)

        assert set(result) == set(left) - set(right)
        for url, score in result.items():
            assert score == left[url]

    @pytest.mark.parametrize(("left", "right"), _pairs())
    def test_scores_are_additive(self, left: RelevanceMap, right: RelevanceMap) -> None:
        """result[k] == A.get(k, 0) + B.get(k, 0) for union and intersect."""
        for op in (union, intersect):
            for url, score in op(left, right).items():
                assert score == left.relevance(url) + right.relevance(url)


class TestKeyOrder:
    """Result key order makes ranking ties deterministic."""

    def test_union_order_left_then_right_only(self) -> None:
        """Left keys first in their order, then right-only keys."""
        left = RelevanceMap({"b": 1, "a": 1})
        right = RelevanceMap({"c": 1, "a": 1, "d": 1})

        assert list(union(left, right)) == ["b", "a", "c", "d"]

    def test_intersect_and_difference_follow_left_order(self) -> None:
        left = RelevanceMap({"z": 1, "y": 1, "x": 1})
        right = RelevanceMap({"x": 1, "z": 1})

        assert list(intersect(left, right)) == ["z", "x"]
        assert list(difference(left, right)) == ["y"]


class TestPlainMappingOperands:
    """Operators accept plain dicts but hold them to the same score rules."""

    @pytest.mark.parametrize(
        ("left", "right"),
        [
            ({"u1": -5}, {}),
            ({"u1": "2"}, {"u1": "3"}),
            ({"u1": 1.5}, {}),
            ({}, {"u1": True}),
            ({"u1": 1}, {"u1": None}),
        ],
    )
    @pytest.mark.parametrize("op", [union, intersect, difference])
    def test_invalid_scores_raise(self, op, left: dict, right: dict) -> None:
        with pytest.raises(ValueError):
            op(left, right)

    def test_valid_plain_dicts_combine(self) -> None:
        result = union({"u1": 2}, {"u1": 3})

        assert isinstance(result, RelevanceMap)
        assert result == {"u1": 5}

    def test_as_relevance_map_reuses_instance(self) -> None:
        scores = RelevanceMap({"u1": 1})

        assert as_relevance_map(scores) is scores
        assert as_relevance_map({"u1": 1}) == scores


def test_total_relevance_is_sum() -> None:
    """Combined relevance is the sum of term frequencies."""
    assert total_relevance(2, 3) == 5
    assert total_relevance(0, 0) == 0
