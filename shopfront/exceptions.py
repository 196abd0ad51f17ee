"""
Custom exception classes for the shopfront service.

Each exception carries the HTTP status the application maps it to, so the
route handlers can raise and let a single handler render the JSON error.
"""

from typing import Any, Dict, Optional


class ShopfrontException(Exception):
    """
    Base exception for all shopfront service errors.

    All custom exceptions should inherit from this class
    for consistent error handling.
    """

    status_code = 500
    error_code = "internal_error"

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Initialize shopfront exception.

        Args:
            message: Human-readable error message
            details: Additional context about the error
        """
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ServiceUnavailableException(ShopfrontException):
    """
    Raised when the store API cannot be reached or does not answer in time.
    """

    status_code = 503
    error_code = "service_unavailable"

    def __init__(
        self,
        service_name: str,
        message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.service_name = service_name
        default_message = f"Service '{service_name}' is currently unavailable"
        super().__init__(message or default_message, details)


class StoreApiError(ShopfrontException):
    """
    Raised when the store API answers with an error status.

    Attributes:
        upstream_status: HTTP status returned by the store API
    """

    error_code = "store_api_error"

    def __init__(
        self,
        message: str,
        upstream_status: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.upstream_status = upstream_status
        super().__init__(message, details)

    @property
    def status_code(self) -> int:  # type: ignore[override]
        if self.upstream_status == 404:
            return 404
        return 502


class ResourceNotFoundException(ShopfrontException):
    """Raised when a product or cart does not exist in the store."""

    status_code = 404
    error_code = "not_found"

    def __init__(
        self,
        resource: str,
        identifier: Any,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.resource = resource
        self.identifier = identifier
        message = f"{resource.capitalize()} '{identifier}' was not found"
        super().__init__(message, details)


class AuthenticationException(ShopfrontException):
    """Raised when the store API rejects login credentials."""

    status_code = 401
    error_code = "authentication_failed"

    def __init__(
        self,
        message: str = "Invalid username or password",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, details)


class ValidationException(ShopfrontException):
    """
    Exception raised when input validation fails.

    Used for values that pass request parsing but are rejected by domain rules.
    """

    status_code = 422
    error_code = "validation_error"

    def __init__(
        self,
        field_name: str,
        value: Any,
        reason: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Initialize validation exception.

        Args:
            field_name: Name of the field that failed validation
            value: The invalid value
            reason: Explanation of why validation failed
            details: Additional context about the error
        """
        self.field_name = field_name
        self.value = value
        self.reason = reason
        message = f"Validation failed for '{field_name}': {reason}"
        super().__init__(message, details)
