"""User and token schemas for the auth endpoints."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

# bcrypt only reads the first 72 bytes of its input
MAX_PASSWORD_BYTES = 72


def normalize_email(email: str) -> str:
    """Trim and lowercase an email so lookups are case-insensitive."""
    return email.strip().lower()


def check_password_length(password: str) -> str:
    """Reject passwords bcrypt would silently truncate."""
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return password


# ============================================================================
# Requests
# ============================================================================


class RegisterRequest(BaseModel):
    """Body of POST /api/auth/register."""

    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("email", mode="before")
    @classmethod
    def normalize(cls, v):
        return normalize_email(v) if isinstance(v, str) else v

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, v: str) -> str:
        return check_password_length(v)


class LoginRequest(BaseModel):
    """Body of POST /api/auth/login."""

    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

    @field_validator("email", mode="before")
    @classmethod
    def normalize(cls, v):
        return normalize_email(v) if isinstance(v, str) else v


# ============================================================================
# Responses
# ============================================================================


class NeighborhoodResponse(BaseModel):
    """A saved neighborhood, resolved from its reference."""

    id: str
    name: str
    data: dict = Field(default_factory=dict)


class UserResponse(BaseModel):
    """Public view of a user. Never carries the password hash."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    email: str
    preferences: dict = Field(default_factory=dict)
    saved_neighborhoods: list[NeighborhoodResponse] = Field(
        default_factory=list,
        alias="savedNeighborhoods"
    )


class TokenPayload(BaseModel):
    """Decoded session token claims."""

    sub: str
    iat: int
    exp: int


class AuthResponse(BaseModel):
    """Body returned by register and login."""

    token: str
    user: UserResponse
