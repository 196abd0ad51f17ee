"""
Shopfront Service - Main FastAPI Application.

Backend-for-frontend for the demo store app. Each screen (home, catalog,
search, product detail, cart, login, support) gets a JSON view model
composed from store API data. Product search and cart totals are computed
locally; everything else is delegated to the store API.
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, List, Optional

from fastapi import FastAPI, Path, Query, Request
from fastapi.responses import JSONResponse

from .api_client import store_client
from .cart import format_price, line_subtotal, round_price, summarize_cart
from .catalog import filter_by_category, filter_products, normalize_query
from .config import settings
from .domain.entities import Cart, CartLineItem, Category, Product
from .exceptions import ResourceNotFoundException, ShopfrontException, ValidationException
from .logging_config import get_logger, setup_logging
from .metrics import (
    metrics_endpoint,
    track_cart_operation,
    track_login_attempt,
    track_request_metrics,
    track_search_query,
    track_support_request,
)
from .metrics_middleware import PrometheusMiddleware
from .middleware import PerformanceMonitoringMiddleware, RequestLoggingMiddleware
from .tracing import configure_opentelemetry, instrument_fastapi
from .validators import MAX_QUERY_LENGTH, CartItemUpdate, LoginRequest, SupportRequest

setup_logging(
    log_level=settings.LOG_LEVEL,
    service_name="shopfront",
    use_json=not settings.DEBUG,
)
logger = get_logger(__name__)

tracing_enabled = configure_opentelemetry(
    service_name="shopfront",
    service_version="1.0.0",
    enable_tracing=settings.ENABLE_OTEL_TRACING,
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan context manager.

    Verifies store API connectivity on startup and closes the pooled
    HTTP client on shutdown.
    """
    logger.info("Starting Shopfront Service")
    logger.info(
        "Configuration loaded",
        extra={
            "extra_fields": {
                "service_name": settings.APP_NAME,
                "debug_mode": settings.DEBUG,
                "log_level": settings.LOG_LEVEL,
                "store_api_url": settings.STORE_API_URL,
                "request_timeout": settings.REQUEST_TIMEOUT,
            }
        },
    )

    if await store_client.health_check():
        logger.info("Store API connectivity verified")
    else:
        logger.error(
            "Store API is not responding",
            extra={
                "extra_fields": {
                    "store_api_url": settings.STORE_API_URL,
                    "impact": "Catalog, cart and login will be unavailable",
                }
            },
        )

    yield

    logger.info("Shutting down Shopfront Service")
    await store_client.close()
    logger.info("HTTP clients closed")


app = FastAPI(
    title="Shopfront Service",
    description="Screen view models for the demo store app",
    version="1.0.0",
    docs_url="/api/docs" if settings.DEBUG else None,
    redoc_url="/api/redoc" if settings.DEBUG else None,
    lifespan=lifespan,
)

# Middleware order matters: first added is last executed
app.add_middleware(
    PerformanceMonitoringMiddleware,
    slow_request_threshold_ms=settings.SLOW_REQUEST_THRESHOLD_MS,
)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(PrometheusMiddleware, track_func=track_request_metrics)

if tracing_enabled:
    instrument_fastapi(app, excluded_urls="/health,/metrics")


@app.exception_handler(ShopfrontException)
async def shopfront_exception_handler(
    request: Request, exc: ShopfrontException
) -> JSONResponse:
    """Render service errors as JSON with the status mapped by the exception."""
    logger.warning(
        "Request failed with service error",
        extra={
            "extra_fields": {
                "path": request.url.path,
                "error_type": type(exc).__name__,
                "error_message": exc.message,
                "status_code": exc.status_code,
            }
        },
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": exc.error_code,
            "message": exc.message,
        },
    )


def _product_view(product: Product) -> Dict[str, Any]:
    view = product.to_dict()
    view["formatted_price"] = format_price(product.price)
    return view


def _line_item_view(item: CartLineItem) -> Dict[str, Any]:
    subtotal = line_subtotal(item)
    return {
        "product_id": item.product_id,
        "title": item.product.title if item.product else None,
        "image": item.product.image if item.product else None,
        "quantity": item.quantity,
        "unit_price": float(item.unit_price),
        "formatted_unit_price": format_price(item.unit_price),
        "subtotal": float(round_price(subtotal)),
        "formatted_subtotal": format_price(subtotal),
    }


def _cart_view(cart: Cart) -> Dict[str, Any]:
    summary = summarize_cart(cart.items)
    return {
        "id": cart.id,
        "user_id": cart.user_id,
        "date": cart.date.isoformat() if cart.date else None,
        "items": [_line_item_view(item) for item in cart.items],
        "is_empty": not cart.items,
        "summary": {
            "total_items": summary.total_items,
            "total_value": float(round_price(summary.total_value)),
            "formatted_total": format_price(summary.total_value),
        },
    }


def _categories_view() -> List[Dict[str, str]]:
    return [
        {"value": category.value, "name": category.display_name}
        for category in Category
    ]


def _parse_category(value: Optional[str]) -> Optional[Category]:
    if value is None or not value.strip():
        return None
    try:
        return Category.from_wire(value)
    except ValueError:
        raise ValidationException(
            field_name="category",
            value=value,
            reason=f"Unknown category '{value}'",
        ) from None


@app.get(
    "/",
    tags=["Pages"],
    summary="Home screen",
    description="Featured products and quick actions",
)
async def home() -> Dict[str, Any]:
    """
    Compose the home screen.

    Featured products are loaded concurrently from the store API.
    """
    featured = await store_client.get_products(settings.FEATURED_PRODUCT_IDS)

    return {
        "app_name": settings.APP_NAME,
        "featured_products": [_product_view(product) for product in featured],
        "quick_actions": [
            {"id": "catalog", "title": "All Products", "path": "/api/products"},
            {"id": "search", "title": "Search", "path": "/api/search"},
            {"id": "cart", "title": "My Cart", "path": "/api/cart/1"},
            {"id": "support", "title": "Support", "path": "/api/support"},
        ],
    }


@app.get(
    "/health",
    tags=["Health"],
    summary="Health check",
    description="Check service health and dependencies",
)
async def health_check() -> Dict[str, Any]:
    """
    Report service health together with the store API status.

    Returns:
        ``status`` is "healthy" when the store API answers, "degraded" otherwise
    """
    store_healthy = await store_client.health_check()

    return {
        "status": "healthy" if store_healthy else "degraded",
        "service": "shopfront",
        "dependencies": {
            "store_api": "healthy" if store_healthy else "unhealthy",
        },
    }


@app.get("/metrics", include_in_schema=False)
async def metrics():
    """Prometheus metrics endpoint."""
    return await metrics_endpoint()


@app.get(
    "/api/products",
    tags=["Catalog"],
    summary="Product catalog",
    description="All products, optionally restricted to one category",
)
async def list_products(
    category: Optional[str] = Query(
        default=None,
        description="Category wire value, e.g. 'electronics' or \"men's clothing\"",
    ),
) -> Dict[str, Any]:
    selected = _parse_category(category)
    products = await store_client.list_products()
    visible = filter_by_category(products, selected)

    return {
        "products": [_product_view(product) for product in visible],
        "count": len(visible),
        "total": len(products),
        "categories": _categories_view(),
        "selected_category": selected.value if selected else None,
    }


@app.get(
    "/api/products/{product_id}",
    tags=["Catalog"],
    summary="Product detail",
)
async def product_detail(product_id: int = Path(..., ge=1)) -> Dict[str, Any]:
    product = await store_client.get_product(product_id)
    return {"product": _product_view(product)}


@app.get(
    "/api/search",
    tags=["Search"],
    summary="Search products",
    description="Case-insensitive search over product titles and descriptions",
)
async def search_products(
    request: Request,
    query: str = Query(
        default="",
        max_length=MAX_QUERY_LENGTH,
        description="Text to look for in product titles and descriptions",
    ),
) -> Dict[str, Any]:
    """
    Search the catalog.

    A blank query returns no results without loading the catalog.
    """
    normalized = normalize_query(query)
    if not normalized:
        return {"query": "", "results": [], "count": 0}

    logger.info(
        "Product search invoked",
        extra={
            "extra_fields": {
                "query": normalized,
                "client_host": request.client.host if request.client else None,
            }
        },
    )

    products = await store_client.list_products()
    results = filter_products(products, query)
    track_search_query(len(results))

    return {
        "query": normalized,
        "results": [_product_view(product) for product in results],
        "count": len(results),
    }


@app.get(
    "/api/cart/{cart_id}",
    tags=["Cart"],
    summary="Cart screen",
    description="Cart lines with product details, subtotals and totals",
)
async def get_cart(cart_id: int = Path(..., ge=1)) -> Dict[str, Any]:
    cart = await store_client.get_cart(cart_id)
    return _cart_view(cart)


@app.put(
    "/api/cart/{cart_id}/items/{product_id}",
    tags=["Cart"],
    summary="Change line item quantity",
    description="Set a line item's quantity through the store API; 0 removes it",
)
async def update_cart_item(
    update: CartItemUpdate,
    cart_id: int = Path(..., ge=1),
    product_id: int = Path(..., ge=1),
) -> Dict[str, Any]:
    cart = await store_client.get_cart(cart_id)
    try:
        changed = cart.with_quantity(product_id, update.quantity)
    except KeyError:
        track_cart_operation("update", success=False)
        raise ResourceNotFoundException("cart item", product_id) from None

    updated = await store_client.update_cart(changed)
    track_cart_operation("update", success=True)

    logger.info(
        "Cart item quantity changed",
        extra={
            "extra_fields": {
                "cart_id": cart_id,
                "product_id": product_id,
                "quantity": update.quantity,
            }
        },
    )
    return _cart_view(updated)


@app.delete(
    "/api/cart/{cart_id}/items/{product_id}",
    tags=["Cart"],
    summary="Remove line item",
)
async def remove_cart_item(
    cart_id: int = Path(..., ge=1),
    product_id: int = Path(..., ge=1),
) -> Dict[str, Any]:
    cart = await store_client.get_cart(cart_id)
    try:
        changed = cart.without(product_id)
    except KeyError:
        track_cart_operation("remove", success=False)
        raise ResourceNotFoundException("cart item", product_id) from None

    updated = await store_client.update_cart(changed)
    track_cart_operation("remove", success=True)
    return _cart_view(updated)


@app.post("/auth/login", tags=["Auth"], summary="Log in")
async def login(credentials: LoginRequest) -> Dict[str, Any]:
    """Exchange store credentials for a session token."""
    try:
        auth = await store_client.login(credentials.username, credentials.password)
    except ShopfrontException:
        track_login_attempt(success=False)
        raise

    track_login_attempt(success=True)
    return {
        "success": True,
        "token": auth.token,
        "message": "Welcome! You have been successfully logged in.",
    }


@app.get("/api/support", tags=["Support"], summary="Support screen")
async def support_page() -> Dict[str, Any]:
    return {
        "contact": {
            "phone": settings.SUPPORT_PHONE,
            "email": settings.SUPPORT_EMAIL,
            "address": settings.SUPPORT_ADDRESS,
        },
        "help_text": (
            "If you have any questions about your orders, products, or payments, "
            "our support team is ready to help you. Please fill the form below "
            "and we will contact you shortly."
        ),
    }


@app.post("/api/support", tags=["Support"], summary="Send support message")
async def submit_support(form: SupportRequest) -> Dict[str, Any]:
    track_support_request()
    logger.info(
        "Support request received",
        extra={
            "extra_fields": {
                "email": form.email,
                "message_length": len(form.message),
            }
        },
    )
    return {
        "success": True,
        "title": "Thank You",
        "message": (
            "Thank you for contacting us. "
            "Our support team will reach out to you soon."
        ),
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )
