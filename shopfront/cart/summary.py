"""
Cart totals.

Totals accumulate in full Decimal precision; rounding to cents happens
only when a value is formatted for display.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Sequence, Union

from ..domain.entities import CartLineItem, CartSummary

CENTS = Decimal("0.01")


def line_subtotal(item: CartLineItem) -> Decimal:
    """Return quantity times unit price for one line item."""
    return item.unit_price * item.quantity


def summarize_cart(items: Optional[Sequence[CartLineItem]]) -> CartSummary:
    """
    Compute the total item count and total value of a cart.

    Args:
        items: Cart line items; ``None`` is treated as empty. Not modified.

    Returns:
        CartSummary with the summed quantities and unrounded value
    """
    total_items = 0
    total_value = Decimal("0")

    for item in items or ():
        total_items += item.quantity
        total_value += line_subtotal(item)

    return CartSummary(total_items=total_items, total_value=total_value)


def round_price(value: Union[Decimal, float, int]) -> Decimal:
    """Round a monetary value to cents, half up."""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def format_price(value: Union[Decimal, float, int], currency_symbol: str = "$") -> str:
    """
    Format a monetary value for display.

    Example:
        >>> format_price(Decimal("25.5"))
        '$25.50'
    """
    return f"{currency_symbol}{round_price(value)}"
