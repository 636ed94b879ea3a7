"""Tests for query translation."""

import pytest

from productsearch.catalog.queries import category_query, match_all_query, price_range_query
from productsearch.domain.exceptions import InvalidQueryError


def test_match_all_query() -> None:
    """Unfiltered listing matches everything."""
    assert match_all_query() == {"match_all": {}}


def test_category_query_passes_category_through() -> None:
    """Category text is not altered before it reaches the engine."""
    assert category_query("Power Tools") == {
        "match": {"category": {"query": "Power Tools"}}
    }


def test_price_range_query_is_inclusive() -> None:
    """Both bounds use inclusive operators."""
    assert price_range_query(5.0, 10.0) == {
        "range": {"price": {"gte": 5.0, "lte": 10.0}}
    }


def test_price_range_query_allows_equal_bounds() -> None:
    """A single price point is a valid range."""
    assert price_range_query(9.99, 9.99) == {
        "range": {"price": {"gte": 9.99, "lte": 9.99}}
    }


def test_inverted_price_range_fails_fast() -> None:
    """min > max is rejected instead of silently matching nothing."""
    with pytest.raises(InvalidQueryError) as exc_info:
        price_range_query(20.0, 10.0)

    assert exc_info.value.error_code == "INVALID_QUERY"
    assert exc_info.value.details["min_price"] == "20.0"
    assert exc_info.value.details["max_price"] == "10.0"


def test_nan_bound_fails_fast() -> None:
    """NaN bounds cannot be compared."""
    with pytest.raises(InvalidQueryError):
        price_range_query(float("nan"), 10.0)


@pytest.mark.parametrize(
    "min_price,max_price",
    [
        (float("inf"), 1.0),
        (0.0, float("inf")),
        (float("-inf"), 10.0),
    ],
)
def test_infinite_bound_fails_fast(min_price: float, max_price: float) -> None:
    """Infinite bounds never reach the engine."""
    with pytest.raises(InvalidQueryError) as exc_info:
        price_range_query(min_price, max_price)

    assert exc_info.value.details == {
        "min_price": str(min_price),
        "max_price": str(max_price),
    }
