"""Exception hierarchy for NeighborFit.

Every error raised at an operation boundary is one of these classes.
main.py maps each class to an HTTP status and a JSON error body.
"""


class NeighborFitError(Exception):
    """Base class for all NeighborFit errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(NeighborFitError):
    """Request data is missing or malformed (400)."""


class DuplicateUserError(NeighborFitError):
    """A user with this email already exists (400)."""


class InvalidCredentialsError(NeighborFitError):
    """Login failed. Does not say whether the email or the password was wrong (400)."""


class AuthenticationError(NeighborFitError):
    """Missing, malformed, or expired session token (401)."""


class ResourceNotFound(NeighborFitError):
    """Requested record does not exist (404)."""


class DatabaseError(NeighborFitError):
    """Storage failure (500). Details are only shown in development."""
