"""Query translation.

Builds Elasticsearch query DSL clauses from typed catalog inputs.
"""

import math
from typing import Any

from productsearch.domain.exceptions import InvalidQueryError

CATEGORY_FIELD = "category"
PRICE_FIELD = "price"


def match_all_query() -> dict[str, Any]:
    """Build a query matching every document."""
    return {"match_all": {}}


def category_query(category: str) -> dict[str, Any]:
    """Build a match clause on the category field.

    The category is passed through unchanged; analysis and case
    folding are up to the index mapping.

    Args:
        category: Category to match.

    Returns:
        Match query clause.
    """
    return {"match": {CATEGORY_FIELD: {"query": category}}}


def price_range_query(min_price: float, max_price: float) -> dict[str, Any]:
    """Build an inclusive range clause on the price field.

    Args:
        min_price: Inclusive lower bound.
        max_price: Inclusive upper bound.

    Returns:
        Range query clause.

    Raises:
        InvalidQueryError: If a bound is not finite or min_price > max_price.
    """
    if not (math.isfinite(min_price) and math.isfinite(max_price)):
        raise InvalidQueryError(
            "price bounds must be finite numbers",
            min_price=str(min_price),
            max_price=str(max_price),
        )
    if min_price > max_price:
        raise InvalidQueryError(
            "min_price must not be greater than max_price",
            min_price=str(min_price),
            max_price=str(max_price),
        )
    return {"range": {PRICE_FIELD: {"gte": min_price, "lte": max_price}}}
