"""
Shopfront Tests - Store API Client Tests.

Exercises StoreApiClient against an in-process httpx.MockTransport, covering
catalog and cart loading, cart updates, login, health checks and error mapping.
"""

import json
from decimal import Decimal
from typing import Any, Callable, Dict, List

import httpx
import pytest

from shopfront.api_client import StoreApiClient
from shopfront.domain.entities import Category
from shopfront.exceptions import (
    AuthenticationException,
    ResourceNotFoundException,
    ServiceUnavailableException,
    StoreApiError,
)


def _make_client(handler: Callable[[httpx.Request], httpx.Response]) -> StoreApiClient:
    return StoreApiClient(
        base_url="http://store.test",
        timeout=1.0,
        transport=httpx.MockTransport(handler),
    )


def _store_handler(
    product_payloads: List[Dict[str, Any]],
    cart_payload: Dict[str, Any],
    seen: List[httpx.Request],
) -> Callable[[httpx.Request], httpx.Response]:
    by_id = {payload["id"]: payload for payload in product_payloads}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        path = request.url.path

        if path == "/products":
            return httpx.Response(200, json=product_payloads)
        if path.startswith("/products/"):
            product = by_id.get(int(path.rsplit("/", 1)[1]))
            # The store answers unknown ids with 200 and an empty body
            return httpx.Response(200, json=product) if product else httpx.Response(200)
        if path == "/carts/1" and request.method == "GET":
            return httpx.Response(200, json=cart_payload)
        if path == "/carts/1" and request.method == "PUT":
            body = json.loads(request.content)
            return httpx.Response(200, json={"id": 1, **body})
        if path.startswith("/carts/"):
            return httpx.Response(200)
        if path == "/auth/login":
            body = json.loads(request.content)
            if body == {"username": "johnd", "password": "m38rmF$"}:
                return httpx.Response(200, json={"token": "abc.def.ghi"})
            return httpx.Response(401, text="username or password is incorrect")
        return httpx.Response(404)

    return handler


@pytest.fixture
def seen() -> List[httpx.Request]:
    return []


@pytest.fixture
def client(product_payloads, cart_payload, seen) -> StoreApiClient:
    return _make_client(_store_handler(product_payloads, cart_payload, seen))


@pytest.mark.asyncio
async def test_list_products(client: StoreApiClient) -> None:
    products = await client.list_products()

    assert [product.id for product in products] == [1, 2, 3, 4, 5]
    assert products[3].category == Category.JEWELERY
    assert products[0].price == Decimal("10.0")


@pytest.mark.asyncio
async def test_get_product(client: StoreApiClient) -> None:
    product = await client.get_product(2)

    assert product.title == "Red Hat"


@pytest.mark.asyncio
async def test_get_product_empty_body_is_not_found(client: StoreApiClient) -> None:
    with pytest.raises(ResourceNotFoundException):
        await client.get_product(999)


@pytest.mark.asyncio
async def test_get_products_keeps_order_and_dedupes(
    client: StoreApiClient, seen: List[httpx.Request]
) -> None:
    products = await client.get_products([3, 1, 3])

    assert [product.id for product in products] == [3, 1]
    assert len(seen) == 2


@pytest.mark.asyncio
async def test_get_cart_hydrates_product_details(client: StoreApiClient) -> None:
    cart = await client.get_cart(1)

    assert cart.id == 1
    assert cart.user_id == 7
    assert cart.date is not None and cart.date.year == 2020
    assert [(item.product_id, item.quantity) for item in cart.items] == [(1, 2), (2, 1)]
    assert cart.items[0].unit_price == Decimal("10.0")
    assert cart.items[1].product.title == "Red Hat"


@pytest.mark.asyncio
async def test_get_cart_not_found(client: StoreApiClient) -> None:
    with pytest.raises(ResourceNotFoundException):
        await client.get_cart(42)


@pytest.mark.asyncio
async def test_update_cart_sends_payload_and_reuses_known_products(
    client: StoreApiClient, seen: List[httpx.Request]
) -> None:
    cart = await client.get_cart(1)
    seen.clear()

    updated = await client.update_cart(cart.with_quantity(1, 4))

    assert len(seen) == 1
    assert seen[0].method == "PUT"
    assert json.loads(seen[0].content)["products"] == [
        {"productId": 1, "quantity": 4},
        {"productId": 2, "quantity": 1},
    ]
    assert updated.get_item(1).quantity == 4


@pytest.mark.asyncio
async def test_login_success(client: StoreApiClient) -> None:
    auth = await client.login("johnd", "m38rmF$")

    assert auth.token == "abc.def.ghi"


@pytest.mark.asyncio
async def test_login_rejected(client: StoreApiClient) -> None:
    with pytest.raises(AuthenticationException):
        await client.login("johnd", "wrong-password")


@pytest.mark.asyncio
async def test_server_error_raises_store_api_error() -> None:
    client = _make_client(lambda request: httpx.Response(500, text="boom"))

    with pytest.raises(StoreApiError) as exc_info:
        await client.list_products()

    assert exc_info.value.upstream_status == 500
    assert exc_info.value.status_code == 502


@pytest.mark.asyncio
async def test_connection_error_raises_service_unavailable() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Connection refused", request=request)

    client = _make_client(handler)

    with pytest.raises(ServiceUnavailableException) as exc_info:
        await client.list_products()

    assert exc_info.value.service_name == "store-api"


@pytest.mark.asyncio
async def test_timeout_raises_service_unavailable() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    client = _make_client(handler)

    with pytest.raises(ServiceUnavailableException, match="timed out"):
        await client.get_product(1)


@pytest.mark.asyncio
async def test_health_check_healthy(client: StoreApiClient) -> None:
    assert await client.health_check() is True


@pytest.mark.asyncio
async def test_health_check_unhealthy_status() -> None:
    client = _make_client(lambda request: httpx.Response(503))

    assert await client.health_check() is False


@pytest.mark.asyncio
async def test_health_check_connection_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Connection refused", request=request)

    assert await _make_client(handler).health_check() is False


@pytest.mark.asyncio
async def test_request_id_header_forwarded(
    client: StoreApiClient, seen: List[httpx.Request]
) -> None:
    from shopfront.logging_config import clear_request_id, set_request_id

    set_request_id("req-123")
    try:
        await client.list_products()
    finally:
        clear_request_id()

    assert seen[0].headers["X-Request-ID"] == "req-123"


@pytest.mark.asyncio
async def test_close_releases_client(client: StoreApiClient) -> None:
    await client.list_products()
    await client.close()

    assert client._client is None


@pytest.mark.asyncio
async def test_get_cart_keeps_line_for_unknown_product(
    product_payloads, cart_payload, seen
) -> None:
    cart_payload = {
        **cart_payload,
        "products": cart_payload["products"] + [{"productId": 99, "quantity": 3}],
    }
    client = _make_client(_store_handler(product_payloads, cart_payload, seen))

    cart = await client.get_cart(1)

    assert [(item.product_id, item.quantity) for item in cart.items] == [
        (1, 2),
        (2, 1),
        (99, 3),
    ]
    assert cart.items[2].product is None
    assert cart.items[2].unit_price == Decimal("0")


@pytest.mark.asyncio
async def test_get_cart_with_only_unknown_products(product_payloads, seen) -> None:
    cart_payload = {"id": 1, "userId": 7, "products": [{"productId": 99, "quantity": 1}]}
    client = _make_client(_store_handler(product_payloads, cart_payload, seen))

    cart = await client.get_cart(1)

    assert len(cart.items) == 1
    assert cart.items[0].product is None


@pytest.mark.asyncio
async def test_get_cart_malformed_raises_store_api_error(product_payloads, seen) -> None:
    cart_payload = {"id": 1, "userId": 7, "products": [{"quantity": 1}]}
    client = _make_client(_store_handler(product_payloads, cart_payload, seen))

    with pytest.raises(StoreApiError, match="malformed cart") as exc_info:
        await client.get_cart(1)

    assert exc_info.value.status_code == 502


@pytest.mark.asyncio
async def test_list_products_unknown_category_raises_store_api_error(
    product_payloads,
) -> None:
    payloads = [*product_payloads, {**product_payloads[0], "id": 6, "category": "toys"}]
    client = _make_client(lambda request: httpx.Response(200, json=payloads))

    with pytest.raises(StoreApiError, match="malformed product") as exc_info:
        await client.list_products()

    assert exc_info.value.upstream_status is None
    assert exc_info.value.status_code == 502


@pytest.mark.asyncio
async def test_get_product_missing_fields_raises_store_api_error() -> None:
    client = _make_client(lambda request: httpx.Response(200, json={"title": "No id"}))

    with pytest.raises(StoreApiError, match="malformed product"):
        await client.get_product(1)
