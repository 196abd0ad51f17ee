"""Domain layer for the shopfront service."""

from .entities import AuthToken, Cart, CartLineItem, CartSummary, Category, Product

__all__ = [
    "AuthToken",
    "Cart",
    "CartLineItem",
    "CartSummary",
    "Category",
    "Product",
]
