"""
Request models and input validation for the shopfront screens.

Login, support and cart update bodies are validated here so route
handlers only ever see clean, trimmed values.
"""

from pydantic import BaseModel, Field, field_validator

# Login constraints
MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 6

# Search constraints
MAX_QUERY_LENGTH = 100


class LoginRequest(BaseModel):
    """
    Credentials submitted from the login screen.

    Attributes:
        username: Store account username
        password: Store account password
    """

    username: str = Field(..., max_length=100)
    password: str = Field(..., max_length=200)

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Please enter your username")
        if len(v) < MIN_USERNAME_LENGTH:
            raise ValueError(
                f"Username must be at least {MIN_USERNAME_LENGTH} characters"
            )
        return v

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Please enter your password")
        if len(v) < MIN_PASSWORD_LENGTH:
            raise ValueError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
            )
        return v


class SupportRequest(BaseModel):
    """Contact form submitted from the support screen."""

    name: str = Field(..., max_length=200)
    email: str = Field(..., max_length=320)
    message: str = Field(..., max_length=5000)

    @field_validator("name", "email", "message")
    @classmethod
    def validate_required(cls, v: str, info) -> str:
        """
        Reject blank fields.

        Raises:
            ValueError: If the field is empty after trimming whitespace
        """
        v = v.strip()
        if not v:
            raise ValueError(f"{info.field_name.capitalize()} is required")
        return v


class CartItemUpdate(BaseModel):
    """New quantity for a cart line item; zero removes the item."""

    quantity: int = Field(..., ge=0, le=999)
