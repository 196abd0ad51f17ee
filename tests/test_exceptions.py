"""
Tests for custom exception classes.

Verifies message formatting and the HTTP status each exception maps to.
"""

from shopfront.exceptions import (
    AuthenticationException,
    ResourceNotFoundException,
    ServiceUnavailableException,
    ShopfrontException,
    StoreApiError,
    ValidationException,
)


def test_shopfront_exception_basic() -> None:
    exc = ShopfrontException("Test error")

    assert exc.message == "Test error"
    assert exc.details == {}
    assert str(exc) == "Test error"
    assert exc.status_code == 500


def test_shopfront_exception_with_details() -> None:
    details = {"code": "ERR001"}
    exc = ShopfrontException("Test error", details=details)

    assert exc.details == details


def test_service_unavailable_default_message() -> None:
    exc = ServiceUnavailableException("store-api")

    assert exc.service_name == "store-api"
    assert exc.message == "Service 'store-api' is currently unavailable"
    assert exc.status_code == 503


def test_service_unavailable_custom_message() -> None:
    exc = ServiceUnavailableException("store-api", message="Down for maintenance")

    assert exc.message == "Down for maintenance"


def test_store_api_error_maps_404() -> None:
    exc = StoreApiError("missing", upstream_status=404)

    assert exc.status_code == 404


def test_store_api_error_maps_server_errors_to_bad_gateway() -> None:
    assert StoreApiError("boom", upstream_status=500).status_code == 502
    assert StoreApiError("boom").status_code == 502


def test_resource_not_found() -> None:
    exc = ResourceNotFoundException("product", 42)

    assert exc.message == "Product '42' was not found"
    assert exc.resource == "product"
    assert exc.identifier == 42
    assert exc.status_code == 404


def test_authentication_exception() -> None:
    exc = AuthenticationException()

    assert exc.status_code == 401
    assert "username or password" in exc.message


def test_validation_exception() -> None:
    exc = ValidationException("category", "toys", "Unknown category")

    assert exc.field_name == "category"
    assert exc.value == "toys"
    assert exc.message == "Validation failed for 'category': Unknown category"
    assert exc.status_code == 422


def test_inheritance() -> None:
    for exc in (
        ServiceUnavailableException("s"),
        StoreApiError("e"),
        ResourceNotFoundException("cart", 1),
        AuthenticationException(),
        ValidationException("f", 1, "r"),
    ):
        assert isinstance(exc, ShopfrontException)
