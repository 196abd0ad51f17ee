"""
Catalog utilities.

Pure filtering functions over an already-loaded product list.
"""

from .product_filter import filter_by_category, filter_products, normalize_query

__all__ = ["filter_by_category", "filter_products", "normalize_query"]
