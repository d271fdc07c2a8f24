"""Signed, self-expiring bearer tokens for the email-code flow.

Two token kinds share one HS256 secret:
- proof token (kind=email_code): binds email, intent and code digest
  between request-code and verify-code
- session token (kind=session): asserts a verified email

Nothing is stored server-side. Verification fails closed: a bad signature,
a malformed token, a wrong issuer/audience and an expired token all raise the
same TokenVerificationError so callers cannot build an expiry-vs-tamper
oracle.
"""

import logging
from datetime import UTC, datetime, timedelta
from enum import StrEnum
from typing import Any

import jwt

from codepass.core.errors import ConfigurationError

logger = logging.getLogger(__name__)

_ALGORITHM = "HS256"

# Claims the codec owns; callers may not override them
_RESERVED_CLAIMS = frozenset({"iat", "exp", "iss", "aud"})


class TokenKind(StrEnum):
    """Value of the ``kind`` claim."""

    EMAIL_CODE = "email_code"
    SESSION = "session"


class TokenVerificationError(Exception):
    """Token is invalid, tampered, expired, or otherwise unusable.

    Deliberately carries no reason. The underlying PyJWT error is chained
    for server-side logging only.
    """

    def __init__(self) -> None:
        super().__init__("Token verification failed")


class TokenCodec:
    """Sign and verify claim sets with a single process-wide secret.

    The secret is fixed at construction and never mutated. Build one per
    request from settings, or once at startup; both are cheap.

    Attributes:
        issuer: Value written to and required in the ``iss`` claim.
        audience: Value written to and required in the ``aud`` claim.
    """

    __slots__ = ("_secret", "issuer", "audience")

    def __init__(self, secret: str, *, issuer: str, audience: str) -> None:
        """Initialize the codec.

        Args:
            secret: HMAC signing secret.
            issuer: Issuer claim value.
            audience: Audience claim value.

        Raises:
            ConfigurationError: If the secret is empty.
        """
        if not secret:
            raise ConfigurationError("AUTH_SECRET is not set")
        self._secret = secret
        self.issuer = issuer
        self.audience = audience

    def sign(
        self,
        claims: dict[str, Any],
        ttl_seconds: int,
        *,
        now: datetime | None = None,
    ) -> str:
        """Sign claims with an issued-at and expiry.

        Args:
            claims: Token-specific claims; must include ``kind``.
            ttl_seconds: Lifetime from ``now``.
            now: Issuance time. Defaults to the current UTC time.

        Returns:
            Encoded JWT string.

        Raises:
            ValueError: If claims lack ``kind`` or set a reserved claim.
        """
        if "kind" not in claims:
            raise ValueError("Token claims must include 'kind'")
        overlap = _RESERVED_CLAIMS & claims.keys()
        if overlap:
            raise ValueError(f"Reserved claims cannot be set: {sorted(overlap)}")

        issued_at = now or datetime.now(UTC)
        payload = {
            **claims,
            "iss": self.issuer,
            "aud": self.audience,
            "iat": issued_at,
            "exp": issued_at + timedelta(seconds=ttl_seconds),
        }
        return jwt.encode(payload, self._secret, algorithm=_ALGORITHM)

    def verify(self, token: str) -> dict[str, Any]:
        """Verify signature, expiry, issuer and audience; return the claims.

        A token is valid while ``now < exp``.

        Args:
            token: Encoded JWT string.

        Returns:
            Decoded claims.

        Raises:
            TokenVerificationError: For any failure, without distinction.
        """
        try:
            return jwt.decode(
                token,
                self._secret,
                algorithms=[_ALGORITHM],
                audience=self.audience,
                issuer=self.issuer,
                options={"require": ["exp", "iat", "iss", "aud", "kind"]},
            )
        except jwt.InvalidTokenError as exc:
            logger.debug("Token rejected: %s", type(exc).__name__)
            raise TokenVerificationError() from exc
