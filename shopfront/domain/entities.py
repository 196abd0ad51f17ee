"""
Domain entities for the store catalog and shopping cart.

Products, carts and line items are owned by the store API; these value
objects are the read-only shape the shopfront works with once a payload
has been loaded. They are framework-agnostic.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple


def _to_decimal(value: Any) -> Decimal:
    # str() first so floats from JSON keep their printed value (10.1, not 10.0999...)
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


class Category(str, Enum):
    """Product categories, valued by the store API's wire strings."""

    ELECTRONICS = "electronics"
    JEWELERY = "jewelery"
    MENS_CLOTHING = "men's clothing"
    WOMENS_CLOTHING = "women's clothing"

    @property
    def display_name(self) -> str:
        return _CATEGORY_DISPLAY_NAMES[self]

    @classmethod
    def from_wire(cls, value: str) -> "Category":
        """
        Parse a category string from a store API payload.

        Matching ignores case and surrounding whitespace, and also accepts
        the corrected spelling "jewelry".

        Raises:
            ValueError: If the value is not a known category
        """
        normalized = value.strip().lower()
        if normalized == "jewelry":
            return cls.JEWELERY
        return cls(normalized)


_CATEGORY_DISPLAY_NAMES = {
    Category.ELECTRONICS: "Electronics",
    Category.JEWELERY: "Jewelry",
    Category.MENS_CLOTHING: "Men's Clothing",
    Category.WOMENS_CLOTHING: "Women's Clothing",
}


@dataclass(frozen=True)
class Product:
    """
    A purchasable catalog item.

    Immutable once loaded.
    """

    id: int
    title: str
    description: str
    price: Decimal
    category: Category
    image: str = ""

    def __post_init__(self):
        """Validate price on creation."""
        if self.price < 0:
            raise ValueError(f"Product price cannot be negative: {self.price}")

    @classmethod
    def from_api(cls, payload: Mapping[str, Any]) -> "Product":
        """Build a product from a store API product payload."""
        return cls(
            id=int(payload["id"]),
            title=payload.get("title") or "",
            description=payload.get("description") or "",
            price=_to_decimal(payload.get("price", 0)),
            category=Category.from_wire(payload["category"]),
            image=payload.get("image") or "",
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "price": float(self.price),
            "category": self.category.value,
            "category_name": self.category.display_name,
            "image": self.image,
        }


@dataclass(frozen=True)
class CartLineItem:
    """
    One product/quantity pairing within a cart.

    The unit price is a snapshot taken when the cart was loaded and may
    differ from the product's current price.
    """

    product_id: int
    quantity: int
    unit_price: Decimal
    product: Optional[Product] = field(default=None, compare=False)

    def __post_init__(self):
        if self.quantity < 1:
            raise ValueError(
                f"Line item quantity must be at least 1, got {self.quantity}"
            )
        if self.unit_price < 0:
            raise ValueError(f"Unit price cannot be negative: {self.unit_price}")

    @classmethod
    def for_product(cls, product: Product, quantity: int) -> "CartLineItem":
        return cls(
            product_id=product.id,
            quantity=quantity,
            unit_price=product.price,
            product=product,
        )


@dataclass(frozen=True)
class Cart:
    """
    A user's cart as held by the store API.

    Mutating operations return a new cart; the instance itself never changes.
    """

    id: int
    user_id: int
    items: Tuple[CartLineItem, ...] = ()
    date: Optional[datetime] = None

    def get_item(self, product_id: int) -> Optional[CartLineItem]:
        for item in self.items:
            if item.product_id == product_id:
                return item
        return None

    def with_quantity(self, product_id: int, quantity: int) -> "Cart":
        """
        Return a copy with the given product's quantity replaced.

        A quantity of zero removes the line item.

        Raises:
            KeyError: If the product is not in the cart
            ValueError: If quantity is negative
        """
        if quantity < 0:
            raise ValueError(f"Quantity cannot be negative: {quantity}")
        if self.get_item(product_id) is None:
            raise KeyError(product_id)
        if quantity == 0:
            return self.without(product_id)

        items = tuple(
            replace(item, quantity=quantity) if item.product_id == product_id else item
            for item in self.items
        )
        return replace(self, items=items)

    def without(self, product_id: int) -> "Cart":
        """
        Return a copy with the given product removed.

        Raises:
            KeyError: If the product is not in the cart
        """
        if self.get_item(product_id) is None:
            raise KeyError(product_id)
        items = tuple(item for item in self.items if item.product_id != product_id)
        return replace(self, items=items)

    def to_api_payload(self) -> Dict[str, Any]:
        """Serialize to the body the store API expects for cart updates."""
        payload: Dict[str, Any] = {
            "userId": self.user_id,
            "products": [
                {"productId": item.product_id, "quantity": item.quantity}
                for item in self.items
            ],
        }
        if self.date is not None:
            payload["date"] = self.date.isoformat()
        return payload


@dataclass(frozen=True)
class CartSummary:
    """Aggregate item count and value of a cart."""

    total_items: int
    total_value: Decimal


@dataclass(frozen=True)
class AuthToken:
    """Session token issued by the store API on login."""

    token: str
