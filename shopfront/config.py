"""
Configuration module for the shopfront service.

This module provides centralized configuration management using Pydantic settings.
All configuration values can be overridden via environment variables or .env file.
"""

from typing import List, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings for the shopfront service.

    All settings can be configured via environment variables.
    Settings are validated on instantiation to ensure correct configuration.

    Attributes:
        STORE_API_URL: Base URL of the store API that owns products, carts and auth
        APP_NAME: Display name for the application
        DEBUG: Enable debug mode (shows API docs)
        HOST: Server bind address
        PORT: Server port number
        LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        REQUEST_TIMEOUT: Default timeout for store API requests in seconds
        FEATURED_PRODUCT_IDS: Product ids shown on the home screen
    """

    # Service URLs
    STORE_API_URL: str = Field(
        default="https://fakestoreapi.com",
        description="Base URL for the store API",
    )

    # Application configuration
    APP_NAME: str = Field(
        default="Shopfront",
        description="Display name for the application",
    )
    DEBUG: bool = Field(
        default=True,
        description="Enable debug mode",
    )

    # Server configuration
    HOST: str = Field(
        default="0.0.0.0",
        description="Server bind address",
    )
    PORT: int = Field(
        default=8080,
        ge=1,
        le=65535,
        description="Server port number",
    )

    # Logging configuration
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )

    ENABLE_REQUEST_TRACING: bool = Field(
        default=True,
        description="Propagate request IDs through logs and upstream calls",
    )
    ENABLE_OTEL_TRACING: bool = Field(
        default=False,
        description="Export OpenTelemetry spans to the OTLP collector",
    )

    SLOW_REQUEST_THRESHOLD_MS: float = Field(
        default=1000.0,
        gt=0,
        description="Requests slower than this are logged as warnings",
    )

    # HTTP client configuration
    REQUEST_TIMEOUT: float = Field(
        default=10.0,
        gt=0,
        le=30.0,
        description="Default timeout for store API requests in seconds",
    )

    # Screen content
    FEATURED_PRODUCT_IDS: List[int] = Field(
        default=[1, 2, 3, 4, 5, 6],
        description="Product ids shown on the home screen",
    )
    SUPPORT_PHONE: str = Field(default="+57 300 123 4567")
    SUPPORT_EMAIL: str = Field(default="support@pragma.com")
    SUPPORT_ADDRESS: str = Field(default="Bogotá, Colombia")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @field_validator("STORE_API_URL")
    @classmethod
    def validate_url(cls, value: str) -> str:
        """
        Validate that the store API URL is properly formatted.

        Args:
            value: The URL to validate

        Returns:
            The validated URL without trailing slash

        Raises:
            ValueError: If URL is invalid
        """
        if not value:
            raise ValueError("Service URL cannot be empty")

        value = value.rstrip("/")

        if not (value.startswith("http://") or value.startswith("https://")):
            raise ValueError(
                f"Service URL must start with http:// or https://, got: {value}"
            )

        return value


# Global settings instance
settings = Settings()
