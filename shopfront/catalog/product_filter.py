"""
Local product filtering for the search and catalog screens.

The catalog holds a few dozen products at most, so matching is a linear
case-insensitive substring scan rather than an index lookup.
"""

from typing import List, Optional, Sequence

from ..domain.entities import Category, Product


def normalize_query(query: Optional[str]) -> str:
    """Trim and lowercase a search query; ``None`` becomes an empty string."""
    if not query:
        return ""
    return query.strip().lower()


def matches_query(product: Product, normalized_query: str) -> bool:
    """
    Check whether a product's title or description contains the query.

    Args:
        product: Product to test
        normalized_query: Query already passed through ``normalize_query``

    Returns:
        True if either field contains the query, ignoring case
    """
    return (
        normalized_query in product.title.lower()
        or normalized_query in product.description.lower()
    )


def filter_products(
    products: Optional[Sequence[Product]],
    query: Optional[str],
) -> List[Product]:
    """
    Filter products by a free-text query.

    An empty or whitespace-only query means no search was performed and
    yields no results, not the whole catalog. Input order is preserved.

    Args:
        products: Loaded catalog; ``None`` is treated as empty
        query: Raw text typed by the user

    Returns:
        Products whose title or description contains the query
    """
    normalized = normalize_query(query)
    if not normalized or not products:
        return []

    return [product for product in products if matches_query(product, normalized)]


def filter_by_category(
    products: Optional[Sequence[Product]],
    category: Optional[Category],
) -> List[Product]:
    """
    Restrict products to one category, or return all of them when none is selected.

    Input order is preserved and the result is always a new list.
    """
    if not products:
        return []
    if category is None:
        return list(products)
    return [product for product in products if product.category == category]
