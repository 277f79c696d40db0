"""JWT session tokens.

Tokens are HS256 JWTs carrying the user ID as ``sub`` plus ``iat``/``exp``.
They are stateless: nothing is stored server side, and validity is decided
by signature and expiry alone.

AuthService depends on the Signer protocol, so the signing algorithm stays
an implementation detail of JWTSigner.
"""

from datetime import timedelta
from typing import Any, Protocol

import jwt

from ..utils import isodatetime


class Signer(Protocol):
    """Issues and verifies signed, expiring claims."""

    def issue(self, claims: dict[str, Any], ttl: timedelta) -> str:
        ...

    def verify(self, token: str) -> dict[str, Any]:
        ...


class JWTSigner:
    """PyJWT-backed Signer.

    The secret is fixed at construction and never changes afterwards.

    Raises (from verify):
        jwt.ExpiredSignatureError: Token is past its exp claim
        jwt.InvalidTokenError: Bad signature, malformed token, missing claims
    """

    def __init__(self, secret: str, algorithm: str = "HS256"):
        self._secret = secret
        self._algorithm = algorithm

    def issue(self, claims: dict[str, Any], ttl: timedelta) -> str:
        issued_at = isodatetime.now_unix()
        payload = {
            **claims,
            "iat": issued_at,
            "exp": issued_at + int(ttl.total_seconds()),
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> dict[str, Any]:
        return jwt.decode(
            token,
            self._secret,
            algorithms=[self._algorithm],
            options={"require": ["sub", "iat", "exp"]},
        )
