"""Authentication module for NeighborFit.

- Schema validation for auth requests and responses
- Password hashing (bcrypt) behind the PasswordHasher protocol
- JWT session tokens behind the Signer protocol
- AuthService: register, login, current user
- @auth_required for protected endpoints

Endpoints are mounted under /api/auth by main.py.
"""

from . import hashing, schemas, service, token

__all__ = ["hashing", "schemas", "service", "token"]
