"""Authentication API endpoints for NeighborFit.

- POST /api/auth/register - Create account, return token and user
- POST /api/auth/login    - Authenticate, return token and user
- GET  /api/auth/me       - Current user from bearer token

All endpoints return JSON. User objects never include the password hash.
"""

from flask import Blueprint, g, jsonify

from ..api.validation import validate_request
from .decorators import auth_required, get_auth_service
from .schemas import AuthResponse, LoginRequest, RegisterRequest


auth_bp = Blueprint("auth", __name__)


@auth_bp.post("/register")
@validate_request
def register(data: RegisterRequest):
    """
    Register a new user.

    Example request:
    ```json
    {"name": "Ana", "email": "ana@example.com", "password": "pw123456"}
    ```

    Example response (201):
    ```json
    {
        "token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
        "user": {
            "id": "550e8400-e29b-41d4-a716-446655440000",
            "name": "Ana",
            "email": "ana@example.com",
            "preferences": {},
            "savedNeighborhoods": []
        }
    }
    ```

    Error Responses:
        400: ValidationError or DuplicateUserError
        500: DatabaseError
    """
    user, token = get_auth_service().register(data.name, data.email, data.password)
    return jsonify(AuthResponse(token=token, user=user).model_dump(by_alias=True)), 201


@auth_bp.post("/login")
@validate_request
def login(data: LoginRequest):
    """
    Authenticate and return a fresh token.

    Error Responses:
        400: ValidationError or InvalidCredentialsError
        500: DatabaseError
    """
    user, token = get_auth_service().login(data.email, data.password)
    return jsonify(AuthResponse(token=token, user=user).model_dump(by_alias=True)), 200


@auth_bp.get("/me")
@auth_required
def me():
    """
    Current user for ``Authorization: Bearer <token>``.

    Error Responses:
        401: AuthenticationError
        404: ResourceNotFound
    """
    return jsonify(g.user.model_dump(by_alias=True)), 200
