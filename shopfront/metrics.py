"""
Prometheus metrics for the shopfront service.

Tracks HTTP requests, store API calls, searches and cart operations.
"""

from fastapi import Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

# Request metrics
http_requests_total = Counter(
    "shopfront_http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
)

http_request_duration_seconds = Histogram(
    "shopfront_http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=(0.01, 0.025, 0.05, 0.075, 0.1, 0.25, 0.5, 0.75, 1.0, 2.5, 5.0),
)

# Store API metrics
store_api_requests_total = Counter(
    "shopfront_store_api_requests_total",
    "Total requests to the store API",
    ["operation", "status"],
)

store_api_request_duration_seconds = Histogram(
    "shopfront_store_api_request_duration_seconds",
    "Store API request duration in seconds",
    ["operation"],
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
)

store_api_errors_total = Counter(
    "shopfront_store_api_errors_total",
    "Total store API errors",
    ["operation", "error_type"],
)

# User interaction metrics
search_queries_total = Counter(
    "shopfront_search_queries_total",
    "Total product searches",
    ["has_results"],
)

cart_operations_total = Counter(
    "shopfront_cart_operations_total",
    "Total cart operations",
    ["operation", "status"],
)

login_attempts_total = Counter(
    "shopfront_login_attempts_total",
    "Total login attempts",
    ["status"],
)

support_requests_total = Counter(
    "shopfront_support_requests_total",
    "Total support form submissions",
)


def track_request_metrics(
    method: str, endpoint: str, status_code: int, duration: float
):
    """Track HTTP request metrics."""
    http_requests_total.labels(
        method=method, endpoint=endpoint, status=status_code
    ).inc()
    http_request_duration_seconds.labels(method=method, endpoint=endpoint).observe(
        duration
    )


def track_store_api_call(operation: str, status_code: int, duration: float):
    """Track store API request metrics."""
    store_api_requests_total.labels(operation=operation, status=status_code).inc()
    store_api_request_duration_seconds.labels(operation=operation).observe(duration)


def track_store_api_error(operation: str, error_type: str):
    """Track store API errors."""
    store_api_errors_total.labels(operation=operation, error_type=error_type).inc()


def track_search_query(result_count: int):
    """Track search queries."""
    has_results = "true" if result_count > 0 else "false"
    search_queries_total.labels(has_results=has_results).inc()


def track_cart_operation(operation: str, success: bool):
    """Track cart operations."""
    status = "success" if success else "failure"
    cart_operations_total.labels(operation=operation, status=status).inc()


def track_login_attempt(success: bool):
    login_attempts_total.labels(status="success" if success else "failure").inc()


def track_support_request():
    support_requests_total.inc()


async def metrics_endpoint():
    """
    Prometheus metrics endpoint.

    Returns:
        Response with Prometheus metrics in text format
    """
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
