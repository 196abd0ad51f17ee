"""
Shopfront Tests - Test Configuration.

Provides pytest fixtures with sample store API payloads and domain objects.
"""

from decimal import Decimal
from typing import Any, Dict, List

import pytest

from shopfront.domain.entities import Cart, CartLineItem, Category, Product


@pytest.fixture
def product_payloads() -> List[Dict[str, Any]]:
    """
    Sample products as returned by the store API.

    Returns:
        List of product dictionaries
    """
    return [
        {
            "id": 1,
            "title": "Blue Shirt",
            "price": 10.0,
            "description": "Cotton shirt for everyday wear",
            "category": "men's clothing",
            "image": "https://img.example/1.jpg",
        },
        {
            "id": 2,
            "title": "Red Hat",
            "price": 5.5,
            "description": "A bright hat",
            "category": "women's clothing",
            "image": "https://img.example/2.jpg",
        },
        {
            "id": 3,
            "title": "Blue Hat",
            "price": 7.25,
            "description": "Wool hat",
            "category": "women's clothing",
            "image": "https://img.example/3.jpg",
        },
        {
            "id": 4,
            "title": "Silver Ring",
            "price": 109.95,
            "description": "Sterling silver ring with a BLUE stone",
            "category": "jewelery",
            "image": "https://img.example/4.jpg",
        },
        {
            "id": 5,
            "title": "SSD 1TB",
            "price": 64.0,
            "description": "Solid state drive",
            "category": "electronics",
            "image": "https://img.example/5.jpg",
        },
    ]


@pytest.fixture
def products(product_payloads: List[Dict[str, Any]]) -> List[Product]:
    """Sample products as domain entities."""
    return [Product.from_api(payload) for payload in product_payloads]


@pytest.fixture
def cart_payload() -> Dict[str, Any]:
    """Sample cart as returned by the store API."""
    return {
        "id": 1,
        "userId": 7,
        "date": "2020-03-02T00:00:00.000Z",
        "products": [
            {"productId": 1, "quantity": 2},
            {"productId": 2, "quantity": 1},
        ],
        "__v": 0,
    }


@pytest.fixture
def cart(products: List[Product]) -> Cart:
    """Cart with 2 x Blue Shirt (10.00) and 1 x Red Hat (5.50)."""
    return Cart(
        id=1,
        user_id=7,
        items=(
            CartLineItem.for_product(products[0], 2),
            CartLineItem.for_product(products[1], 1),
        ),
    )


@pytest.fixture
def sample_product() -> Product:
    return Product(
        id=9,
        title="Portable Drive",
        description="USB 3.0",
        price=Decimal("64.00"),
        category=Category.ELECTRONICS,
    )
