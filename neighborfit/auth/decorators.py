"""Authentication decorators for protected endpoints.

@auth_required resolves the bearer token to a user before the endpoint
runs and stores it in flask.g:
- g.user: UserResponse for the authenticated user
- g.user_id: The user's ID
"""

import logging
from functools import wraps

from flask import current_app, g, request

from ..exceptions import AuthenticationError

logger = logging.getLogger(__name__)


def get_auth_service():
    """AuthService attached to the running app (see main.py)."""
    return current_app.extensions["auth_service"]


def bearer_token() -> str:
    """
    Extract the token from ``Authorization: Bearer <token>``.

    Raises:
        AuthenticationError: If the header is missing or malformed
    """
    auth_header = request.headers.get("Authorization")
    if auth_header is None:
        raise AuthenticationError(
            "Missing authorization header",
            {"code": "missing_auth", "expected": "Authorization: Bearer <token>"}
        )

    parts = auth_header.split(" ")
    if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1]:
        raise AuthenticationError(
            "Invalid authorization header format",
            {"code": "invalid_header", "expected": "Authorization: Bearer <token>"}
        )

    return parts[1]


def auth_required(f):
    """
    Decorator to require a valid session token.

    Raises:
        AuthenticationError: Missing, malformed, forged, or expired token
        ResourceNotFound: Token subject no longer exists

    Example:
    ```python
    @auth_required
    def protected_endpoint():
        user = g.user
        ...
    ```
    """
    @wraps(f)
    def wrapper(*args, **kwargs):
        user = get_auth_service().get_current_user(bearer_token())
        g.user = user
        g.user_id = user.id
        logger.debug(f"Authenticated request for user {user.id}")
        return f(*args, **kwargs)

    return wrapper
