"""Authentication Pydantic schemas for API validation."""

from .user import (
    MAX_PASSWORD_BYTES,
    AuthResponse,
    LoginRequest,
    NeighborhoodResponse,
    RegisterRequest,
    TokenPayload,
    UserResponse,
    check_password_length,
    normalize_email,
)

__all__ = [
    "MAX_PASSWORD_BYTES",
    "AuthResponse",
    "LoginRequest",
    "NeighborhoodResponse",
    "RegisterRequest",
    "TokenPayload",
    "UserResponse",
    "check_password_length",
    "normalize_email",
]
