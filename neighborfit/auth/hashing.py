"""Password hashing and verification.

AuthService only talks to the PasswordHasher protocol, so the work factor
(or the algorithm) can change without touching the service.
"""

from typing import Protocol

import bcrypt


class PasswordHasher(Protocol):
    """Salted one-way password hash."""

    def hash(self, password: str) -> str:
        ...

    def verify(self, password: str, password_hash: str) -> bool:
        ...


class BcryptHasher:
    """bcrypt with a configurable work factor.

    Args:
        rounds: log2 of the key-expansion iterations (4-31)
    """

    def __init__(self, rounds: int = 12):
        self.rounds = rounds

    def hash(self, password: str) -> str:
        """Hash a password with a fresh salt. Returns a 60-char $2b$ digest."""
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        """Constant-time comparison against a bcrypt hash.

        A malformed digest counts as a mismatch.
        """
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
        except (ValueError, TypeError):
            return False
