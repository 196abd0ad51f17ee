"""Cart utilities."""

from .summary import format_price, line_subtotal, round_price, summarize_cart

__all__ = ["format_price", "line_subtotal", "round_price", "summarize_cart"]
