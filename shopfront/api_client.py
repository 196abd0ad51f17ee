"""
HTTP client module for the store API.

The store API owns products, carts and authentication. This client loads
those resources, converts them into domain entities and maps transport
failures onto the shopfront exception hierarchy. Every call is logged with
timing and tagged with the current request ID.
"""

import asyncio
import time
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Mapping, Optional

import httpx

from .config import settings
from .domain.entities import AuthToken, Cart, CartLineItem, Product
from .exceptions import (
    AuthenticationException,
    ResourceNotFoundException,
    ServiceUnavailableException,
    StoreApiError,
)
from .logging_config import get_logger, get_request_id
from .metrics import track_store_api_call, track_store_api_error

logger = get_logger(__name__)

STORE_SERVICE_NAME = "store-api"


class StoreApiClient:
    """
    Client for the store API.

    Uses a persistent HTTP client with connection pooling, created lazily
    and released by ``close()`` on application shutdown.

    Attributes:
        base_url: Base URL of the store API
        timeout: Request timeout in seconds
        _client: Persistent httpx.AsyncClient with connection pooling
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize store API client.

        Args:
            base_url: Base URL of the store API (defaults to settings)
            timeout: Request timeout in seconds (defaults to settings)
            transport: Optional httpx transport, replaces the network transport
        """
        self.base_url = (base_url or settings.STORE_API_URL).rstrip("/")
        self.timeout = timeout or settings.REQUEST_TIMEOUT
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

        logger.info(
            f"Initialized StoreApiClient: base_url={self.base_url}, "
            f"timeout={self.timeout}s"
        )

    async def _get_client(self) -> httpx.AsyncClient:
        """
        Get or create the persistent HTTP client with connection pooling.

        Returns:
            Configured httpx.AsyncClient instance
        """
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                limits=httpx.Limits(
                    max_keepalive_connections=20,
                    max_connections=100,
                    keepalive_expiry=30.0,
                ),
                transport=self._transport,
            )
            logger.debug("Created new HTTP client with connection pooling")
        return self._client

    async def close(self) -> None:
        """Close the HTTP client and release connections."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None
            logger.debug("Closed HTTP client")

    def _get_request_headers(self) -> Dict[str, str]:
        headers = {
            "User-Agent": "Shopfront/1.0",
            "Accept": "application/json",
        }

        request_id = get_request_id()
        if request_id and settings.ENABLE_REQUEST_TRACING:
            headers["X-Request-ID"] = request_id

        return headers

    async def _request(
        self,
        method: str,
        path: str,
        operation: str,
        **kwargs: Any,
    ) -> Any:
        """
        Send a request to the store API and decode the JSON body.

        Args:
            method: HTTP method
            path: Path relative to the base URL
            operation: Short name used in logs and metrics
            **kwargs: Passed through to ``httpx.AsyncClient.request``

        Returns:
            Decoded JSON body, or None when the body is empty

        Raises:
            ServiceUnavailableException: Store API unreachable or timed out
            StoreApiError: Store API answered with an error status
        """
        start_time = time.perf_counter()

        try:
            client = await self._get_client()
            response = await client.request(
                method,
                path,
                headers=self._get_request_headers(),
                **kwargs,
            )
        except httpx.TimeoutException as error:
            duration_ms = (time.perf_counter() - start_time) * 1000
            track_store_api_error(operation, "timeout")
            logger.error(
                "Store API request timed out",
                extra={
                    "extra_fields": {
                        "operation": operation,
                        "path": path,
                        "timeout": self.timeout,
                        "duration_ms": duration_ms,
                        "error_type": type(error).__name__,
                    }
                },
            )
            raise ServiceUnavailableException(
                STORE_SERVICE_NAME,
                message=f"Store API request timed out after {self.timeout}s",
                details={"operation": operation},
            ) from error
        except httpx.RequestError as error:
            duration_ms = (time.perf_counter() - start_time) * 1000
            track_store_api_error(operation, "connection_error")
            logger.error(
                "Cannot reach store API",
                extra={
                    "extra_fields": {
                        "operation": operation,
                        "backend_url": self.base_url,
                        "duration_ms": duration_ms,
                        "error_type": type(error).__name__,
                        "error_message": str(error),
                    }
                },
            )
            raise ServiceUnavailableException(
                STORE_SERVICE_NAME,
                details={"operation": operation, "backend_url": self.base_url},
            ) from error

        duration = time.perf_counter() - start_time
        track_store_api_call(operation, response.status_code, duration)

        logger.info(
            "Received response from store API",
            extra={
                "extra_fields": {
                    "operation": operation,
                    "status_code": response.status_code,
                    "duration_ms": duration * 1000,
                    "response_size": len(response.content),
                }
            },
        )

        if response.is_error:
            track_store_api_error(operation, "http_error")
            logger.warning(
                "Store API returned error status",
                extra={
                    "extra_fields": {
                        "operation": operation,
                        "status_code": response.status_code,
                        "response_body": response.text[:500],
                    }
                },
            )
            raise StoreApiError(
                f"Store API returned error: {response.status_code}",
                upstream_status=response.status_code,
                details={"operation": operation, "body": response.text[:200]},
            )

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as error:
            raise StoreApiError(
                "Store API returned a malformed JSON body",
                upstream_status=response.status_code,
                details={"operation": operation},
            ) from error

    async def list_products(self) -> List[Product]:
        """Load the full catalog."""
        payload = await self._request("GET", "/products", "list_products")
        products = [_parse_product(item, "list_products") for item in payload or []]

        logger.info(
            "Catalog loaded",
            extra={"extra_fields": {"product_count": len(products)}},
        )
        return products

    async def get_product(self, product_id: int) -> Product:
        """
        Load a single product.

        The store API answers unknown ids with an empty body rather than 404.

        Raises:
            ResourceNotFoundException: If the product does not exist
        """
        try:
            payload = await self._request(
                "GET", f"/products/{product_id}", "get_product"
            )
        except StoreApiError as error:
            if error.upstream_status == 404:
                raise ResourceNotFoundException("product", product_id) from error
            raise

        if not payload:
            raise ResourceNotFoundException("product", product_id)
        return _parse_product(payload, "get_product")

    async def _find_product(self, product_id: int) -> Optional[Product]:
        try:
            return await self.get_product(product_id)
        except ResourceNotFoundException:
            logger.warning(
                "Cart references a product the store API does not know",
                extra={"extra_fields": {"product_id": product_id}},
            )
            return None

    async def get_products(self, product_ids: Iterable[int]) -> List[Product]:
        """
        Load several products concurrently, keeping the order of ``product_ids``.

        Duplicate ids are loaded once.
        """
        unique_ids = list(dict.fromkeys(product_ids))
        products = await asyncio.gather(
            *(self.get_product(product_id) for product_id in unique_ids)
        )
        return list(products)

    async def get_cart(self, cart_id: int) -> Cart:
        """
        Load a cart together with the details of every product in it.

        Unit prices are snapshotted from the product details loaded here.

        Raises:
            ResourceNotFoundException: If the cart does not exist
        """
        try:
            payload = await self._request("GET", f"/carts/{cart_id}", "get_cart")
        except StoreApiError as error:
            if error.upstream_status == 404:
                raise ResourceNotFoundException("cart", cart_id) from error
            raise

        if not payload:
            raise ResourceNotFoundException("cart", cart_id)
        return await self._hydrate_cart(payload)

    async def update_cart(self, cart: Cart) -> Cart:
        """
        Replace a cart's contents in the store API.

        Args:
            cart: Cart holding the desired line items

        Returns:
            The cart as acknowledged by the store API, with product details
        """
        payload = await self._request(
            "PUT",
            f"/carts/{cart.id}",
            "update_cart",
            json=cart.to_api_payload(),
        )
        if not payload:
            raise ResourceNotFoundException("cart", cart.id)

        known = {item.product_id: item.product for item in cart.items if item.product}
        payload.setdefault("id", cart.id)
        return await self._hydrate_cart(payload, known_products=known, operation="update_cart")

    async def _hydrate_cart(
        self,
        payload: Mapping[str, Any],
        known_products: Optional[Mapping[int, Product]] = None,
        operation: str = "get_cart",
    ) -> Cart:
        known: Dict[int, Optional[Product]] = dict(known_products or {})

        try:
            entries = [
                (int(entry["productId"]), int(entry["quantity"]))
                for entry in payload.get("products") or []
            ]
            cart_id = int(payload["id"])
            user_id = int(payload.get("userId", 0))
        except (KeyError, TypeError, ValueError) as error:
            track_store_api_error(operation, "malformed_payload")
            raise StoreApiError(
                "Store API returned a malformed cart",
                details={"operation": operation, "error": str(error)},
            ) from error

        entries = [(product_id, quantity) for product_id, quantity in entries if quantity > 0]

        missing = list(
            dict.fromkeys(product_id for product_id, _ in entries if product_id not in known)
        )
        if missing:
            found = await asyncio.gather(*(self._find_product(pid) for pid in missing))
            known.update(zip(missing, found))

        items = []
        for product_id, quantity in entries:
            product = known.get(product_id)
            if product is None:
                # Line stays visible without details and contributes nothing to the total
                items.append(
                    CartLineItem(product_id=product_id, quantity=quantity, unit_price=Decimal("0"))
                )
            else:
                items.append(CartLineItem.for_product(product, quantity))

        return Cart(
            id=cart_id,
            user_id=user_id,
            items=tuple(items),
            date=_parse_date(payload.get("date")),
        )

    async def login(self, username: str, password: str) -> AuthToken:
        """
        Authenticate against the store API.

        Raises:
            AuthenticationException: If the credentials are rejected
        """
        try:
            payload = await self._request(
                "POST",
                "/auth/login",
                "login",
                json={"username": username, "password": password},
            )
        except StoreApiError as error:
            if error.upstream_status in (400, 401, 403):
                logger.warning(
                    "Login rejected by store API",
                    extra={"extra_fields": {"username": username}},
                )
                raise AuthenticationException() from error
            raise

        token = (payload or {}).get("token")
        if not token:
            raise AuthenticationException("Store API did not return a token")

        logger.info("Login successful", extra={"extra_fields": {"username": username}})
        return AuthToken(token=token)

    async def health_check(self) -> bool:
        """
        Check if the store API is reachable and serving products.

        Returns:
            True if the store API answered with 200, False otherwise
        """
        try:
            client = await self._get_client()
            response = await client.get(
                "/products/1",
                headers=self._get_request_headers(),
                timeout=2.0,
            )
            is_healthy = response.status_code == 200

            if not is_healthy:
                logger.warning(
                    "Store API health check failed",
                    extra={
                        "extra_fields": {
                            "backend_url": self.base_url,
                            "status_code": response.status_code,
                        }
                    },
                )
            return is_healthy

        except httpx.HTTPError as error:
            logger.warning(
                "Store API health check failed with exception",
                extra={
                    "extra_fields": {
                        "backend_url": self.base_url,
                        "error_type": type(error).__name__,
                        "error_message": str(error),
                    }
                },
            )
            return False


def _parse_product(payload: Mapping[str, Any], operation: str) -> Product:
    """
    Build a product from a store API payload.

    Raises:
        StoreApiError: If the payload is missing fields or has an unknown category
    """
    try:
        return Product.from_api(payload)
    except (KeyError, TypeError, ValueError, ArithmeticError) as error:
        track_store_api_error(operation, "malformed_payload")
        logger.error(
            "Store API returned a malformed product",
            extra={
                "extra_fields": {
                    "operation": operation,
                    "product_id": payload.get("id") if isinstance(payload, Mapping) else None,
                    "error_type": type(error).__name__,
                    "error_message": str(error),
                }
            },
        )
        raise StoreApiError(
            "Store API returned a malformed product",
            details={"operation": operation, "error": str(error)},
        ) from error


def _parse_date(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        logger.debug(f"Ignoring unparseable cart date: {value!r}")
        return None


# Singleton instance for application-wide use
store_client = StoreApiClient()
