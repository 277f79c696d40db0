"""Authentication service: registration, login, and current-user lookup.

Every operation is single-shot. Errors from the store, the hasher, or the
signer are caught here and re-raised as NeighborFit exceptions, so callers
only ever see the taxonomy in ``neighborfit.exceptions``.
"""

import json
import logging
import sqlite3
from datetime import timedelta
from typing import Callable

import jwt
from pydantic import ValidationError as PydanticValidationError

from ..config import Settings
from ..db import Core, get_core
from ..exceptions import (
    AuthenticationError,
    DatabaseError,
    DuplicateUserError,
    InvalidCredentialsError,
    ResourceNotFound,
    ValidationError,
)
from .hashing import BcryptHasher, PasswordHasher
from .schemas import (
    NeighborhoodResponse,
    TokenPayload,
    UserResponse,
    check_password_length,
    normalize_email,
)
from .token import JWTSigner, Signer

logger = logging.getLogger(__name__)


def _require(**fields: str | None) -> None:
    """Raise ValidationError naming every missing or blank field.

    Passwords are only checked for emptiness; whitespace is significant there.
    """
    missing = [
        name for name, value in fields.items()
        if not value or (name != "password" and not value.strip())
    ]
    if missing:
        raise ValidationError(
            "Please provide all required fields",
            {"missing": missing}
        )


def _row_to_user_response(row: sqlite3.Row, neighborhoods: list[sqlite3.Row]) -> UserResponse:
    """Build the public view of a user row. The hash column is dropped here."""
    return UserResponse(
        id=row["id"],
        name=row["name"],
        email=row["email"],
        preferences=json.loads(row["preferences"]),
        saved_neighborhoods=[
            NeighborhoodResponse(id=n["id"], name=n["name"], data=json.loads(n["data"]))
            for n in neighborhoods
        ],
    )


class AuthService:
    """Registration, login, and token-to-user resolution.

    Args:
        hasher: Password hashing capability
        signer: Token issuing/verifying capability
        token_ttl: Lifetime of issued tokens
        core_factory: Returns a database Core; ``get_core`` by default
    """

    def __init__(
        self,
        hasher: PasswordHasher,
        signer: Signer,
        token_ttl: timedelta = timedelta(days=7),
        core_factory: Callable[..., Core] = get_core,
    ):
        self._hasher = hasher
        self._signer = signer
        self._token_ttl = token_ttl
        self._core_factory = core_factory
        self._dummy_hash = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "AuthService":
        """Build the service from application settings at startup."""
        return cls(
            hasher=BcryptHasher(rounds=settings.bcrypt_work_factor),
            signer=JWTSigner(settings.jwt_secret_key),
            token_ttl=timedelta(days=settings.jwt_expiry_days),
        )

    def _issue_token(self, user_id: str) -> str:
        return self._signer.issue({"sub": user_id}, self._token_ttl)

    def _hash_password(self, password: str) -> str:
        try:
            return self._hasher.hash(password)
        except Exception as e:
            logger.error(f"Password hashing failed: {e}")
            raise DatabaseError("Server error during registration", {"reason": str(e)})

    def _check_password(self, password: str, password_hash: str | None) -> bool:
        """Verify a password, spending the same hashing work when there is no user.

        With no stored hash the password is checked against a digest of a
        throwaway value made by the same hasher, so unknown emails take as
        long as wrong passwords. The result is always False in that case.
        """
        try:
            if password_hash is None:
                if self._dummy_hash is None:
                    self._dummy_hash = self._hasher.hash("neighborfit-no-such-user")
                self._hasher.verify(password, self._dummy_hash)
                return False
            return self._hasher.verify(password, password_hash)
        except Exception as e:
            logger.error(f"Password verification failed: {e}")
            raise DatabaseError("Server error during login", {"reason": str(e)})

    # ========================================================================
    # Operations
    # ========================================================================

    def register(self, name: str, email: str, password: str) -> tuple[UserResponse, str]:
        """
        Create a user and issue a session token.

        Returns:
            (user, token)

        Raises:
            ValidationError: Missing field or over-long password
            DuplicateUserError: Email already registered, including when a
                concurrent registration wins the race at insert time
            DatabaseError: Any other storage failure, or the hasher failed
        """
        _require(name=name, email=email, password=password)
        try:
            check_password_length(password)
        except ValueError as e:
            raise ValidationError(str(e), {"field": "password"})

        name = name.strip()
        email = normalize_email(email)

        try:
            core = self._core_factory()
            try:
                existing = core.user.get_by_email(email)
            finally:
                core.close()
        except sqlite3.Error as e:
            logger.error(f"User lookup failed during registration: {e}")
            raise DatabaseError("Server error during registration", {"reason": str(e)})

        if existing is not None:
            logger.info(f"Registration rejected, email already in use: {email}")
            raise DuplicateUserError("User already exists with this email", {"email": email})

        password_hash = self._hash_password(password)

        try:
            with self._core_factory(atomic=True) as core:
                user_id = core.user.create(name, email, password_hash)
        except sqlite3.IntegrityError:
            # Lost a race with a concurrent registration for the same email
            logger.info(f"Registration rejected at insert, email already in use: {email}")
            raise DuplicateUserError("User already exists with this email", {"email": email})
        except sqlite3.Error as e:
            logger.error(f"Saving user failed: {e}")
            raise DatabaseError("Server error during registration", {"reason": str(e)})

        user = UserResponse(id=user_id, name=name, email=email)
        token = self._issue_token(user_id)

        logger.info(f"Registration successful: {email} ({user_id})")
        return user, token

    def login(self, email: str, password: str) -> tuple[UserResponse, str]:
        """
        Verify credentials and issue a session token.

        Unknown email and wrong password raise the same error.

        Returns:
            (user, token)

        Raises:
            ValidationError: Missing field
            InvalidCredentialsError: Unknown email or wrong password
            DatabaseError: Storage failure, or the hasher failed
        """
        _require(email=email, password=password)
        email = normalize_email(email)

        try:
            core = self._core_factory()
            try:
                row = core.user.get_by_email(email)
                neighborhoods = core.user.get_saved_neighborhoods(row["id"]) if row else []
            finally:
                core.close()
        except sqlite3.Error as e:
            logger.error(f"User lookup failed during login: {e}")
            raise DatabaseError("Server error during login", {"reason": str(e)})

        stored_hash = row["password_hash"] if row is not None else None
        if not self._check_password(password, stored_hash):
            logger.warning(f"Failed login attempt for email: {email}")
            raise InvalidCredentialsError("Invalid credentials")

        user = _row_to_user_response(row, neighborhoods)
        token = self._issue_token(user.id)

        logger.info(f"Successful login: {email}")
        return user, token

    def get_current_user(self, token: str) -> UserResponse:
        """
        Resolve a session token to its user.

        Raises:
            AuthenticationError: Token missing, forged, malformed, or expired
            ResourceNotFound: Token is valid but the user no longer exists
            DatabaseError: Storage failure
        """
        if not token:
            raise AuthenticationError("Authentication required", {"code": "missing_auth"})

        try:
            claims = TokenPayload(**self._signer.verify(token))
        except jwt.ExpiredSignatureError:
            logger.warning("Expired token presented")
            raise AuthenticationError("Token has expired", {"code": "token_expired"})
        except (jwt.InvalidTokenError, PydanticValidationError) as e:
            logger.warning(f"Invalid token presented: {e}")
            raise AuthenticationError("Invalid token", {"code": "invalid_token"})

        user_id = claims.sub

        try:
            core = self._core_factory()
            try:
                row = core.user.get_by_id(user_id)
                neighborhoods = core.user.get_saved_neighborhoods(user_id) if row else []
            finally:
                core.close()
        except sqlite3.Error as e:
            logger.error(f"User lookup failed for token subject {user_id}: {e}")
            raise DatabaseError("Server error", {"reason": str(e)})

        if row is None:
            raise ResourceNotFound("User not found", {"user_id": user_id})

        return _row_to_user_response(row, neighborhoods)
