"""Stateless email-code authentication protocol.

Three operations, no server-side state between them:
1. request_code: validate, generate code, email it, return a proof token
   binding (email, intent, code digest)
2. verify_code: check the proof token and the submitted code, return a
   session token
3. validate_session: check a session token, return its email

Everything the second request needs from the first travels inside the
signed proof token. Any instance holding the signing secret can serve any
step. A proof token stays valid until it expires; requesting a new code mints
an unrelated token, it does not revoke the old one. Session tokens cannot be
revoked before their natural expiry.
"""

import asyncio
from dataclasses import dataclass
from datetime import datetime

import structlog

from codepass.core.config import Settings, settings
from codepass.core.email_address import mask_email, require_email
from codepass.core.errors import (
    ConfigurationError,
    MailDispatchFailedError,
    UnauthorizedError,
    ValidationError,
)
from codepass.core.one_time_code import (
    CODE_LENGTH,
    code_matches,
    generate_code,
    hash_code,
    is_well_formed_code,
)
from codepass.core.tokens import TokenCodec, TokenKind, TokenVerificationError
from codepass.providers.errors import MailDispatchError
from codepass.providers.mail.base import MailDispatcher

logger = structlog.get_logger()

VALID_INTENTS = ("login", "signup")

# One message for every proof-token and code failure: expired, tampered,
# wrong kind, email/intent mismatch and wrong code must look identical.
INVALID_CODE_MSG = "Invalid or expired code"
INVALID_SESSION_MSG = "Invalid or expired session"

_INVALID_INTENT_MSG = "Intent must be one of: login, signup"
_MALFORMED_CODE_MSG = f"Code must be {CODE_LENGTH} digits"
_MISSING_FIELDS_MSG = "email, intent, code and proof_token are required"
_MISSING_SESSION_MSG = "Session token is required"


# =============================================================================
# Result dataclasses
# =============================================================================


@dataclass(frozen=True)
class CodeIssued:
    """Outcome of a successful request_code.

    cooldown_seconds is a hint for the client UI; nothing enforces it.
    """

    proof_token: str
    expires_in_seconds: int
    cooldown_seconds: int


@dataclass(frozen=True)
class SessionIssued:
    """Outcome of a successful verify_code."""

    session_token: str
    expires_in_seconds: int


# =============================================================================
# Service
# =============================================================================


class EmailCodeAuthService:
    """Orchestrates the request-code / verify-code / validate-session flow.

    Holds only immutable collaborators: the token codec (signing secret) and
    the mail dispatcher. Safe to share across concurrent requests. The
    mailer may be omitted when only verify_code and validate_session are
    needed.
    """

    def __init__(
        self,
        *,
        codec: TokenCodec,
        mailer: MailDispatcher | None = None,
        code_ttl_seconds: int,
        session_ttl_seconds: int,
        cooldown_seconds: int,
        mail_timeout_seconds: float,
    ) -> None:
        self.codec = codec
        self.mailer = mailer
        self.code_ttl_seconds = code_ttl_seconds
        self.session_ttl_seconds = session_ttl_seconds
        self.cooldown_seconds = cooldown_seconds
        self.mail_timeout_seconds = mail_timeout_seconds

    @classmethod
    def from_settings(
        cls,
        *,
        codec: TokenCodec,
        mailer: MailDispatcher | None = None,
        config: Settings | None = None,
    ) -> "EmailCodeAuthService":
        """Build a service using lifetimes from application settings."""
        config = config or settings
        return cls(
            codec=codec,
            mailer=mailer,
            code_ttl_seconds=config.code_ttl_seconds,
            session_ttl_seconds=config.session_ttl_seconds,
            cooldown_seconds=config.code_cooldown_seconds,
            mail_timeout_seconds=config.mail_timeout_seconds,
        )

    # -------------------------------------------------------------------------
    # Token minting
    # -------------------------------------------------------------------------

    def issue_proof_token(
        self,
        *,
        email: str,
        intent: str,
        code: str,
        now: datetime | None = None,
    ) -> str:
        """Mint a proof token carrying the code digest, never the code."""
        return self.codec.sign(
            {
                "kind": TokenKind.EMAIL_CODE,
                "email": email,
                "intent": intent,
                "code_digest": hash_code(email, code),
            },
            self.code_ttl_seconds,
            now=now,
        )

    def issue_session_token(self, *, email: str, now: datetime | None = None) -> str:
        """Mint a session token for a verified email."""
        return self.codec.sign(
            {"kind": TokenKind.SESSION, "email": email},
            self.session_ttl_seconds,
            now=now,
        )

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    async def request_code(self, email: str, intent: str) -> CodeIssued:
        """Send a one-time code and return a proof token for it.

        The proof token is only minted after the dispatcher accepted the
        message, so a caller is never left pending on an undelivered code.

        Args:
            email: Address as submitted.
            intent: ``login`` or ``signup``.

        Returns:
            CodeIssued with the proof token and advisory timings.

        Raises:
            ValidationError: Invalid intent or email.
            MailDispatchFailedError: Dispatch failed or timed out.
            ConfigurationError: No mail dispatcher was provided.
        """
        _require_intent(intent)
        clean_email = require_email(email)
        if self.mailer is None:
            raise ConfigurationError("request_code requires a mail dispatcher")

        code = generate_code()
        try:
            await asyncio.wait_for(
                self.mailer.send_code(
                    to_email=clean_email,
                    code=code,
                    ttl_minutes=max(1, self.code_ttl_seconds // 60),
                ),
                timeout=self.mail_timeout_seconds,
            )
        except (MailDispatchError, TimeoutError) as exc:
            logger.warning(
                "code_dispatch_failed",
                email=mask_email(clean_email),
                provider=self.mailer.provider_name,
                error=type(exc).__name__,
            )
            raise MailDispatchFailedError() from exc

        proof_token = self.issue_proof_token(
            email=clean_email, intent=intent, code=code
        )
        logger.info("code_issued", email=mask_email(clean_email), intent=intent)

        return CodeIssued(
            proof_token=proof_token,
            expires_in_seconds=self.code_ttl_seconds,
            cooldown_seconds=self.cooldown_seconds,
        )

    def verify_code(
        self,
        email: str,
        intent: str,
        code: str,
        proof_token: str,
    ) -> SessionIssued:
        """Exchange a correct code and its proof token for a session token.

        Input shape is checked before any cryptographic work. Every failure
        past that point raises the same UnauthorizedError.

        Raises:
            ValidationError: Missing fields, invalid email or intent, or a
                code that is not exactly six digits.
            UnauthorizedError: Token invalid/expired, wrong kind, email or
                intent mismatch, or wrong code.
        """
        if not (email and intent and code and proof_token):
            raise ValidationError(_MISSING_FIELDS_MSG)
        _require_intent(intent)
        clean_email = require_email(email)
        if not is_well_formed_code(code):
            raise ValidationError(
                _MALFORMED_CODE_MSG,
                details=[{"field": "code", "error": "MALFORMED_CODE"}],
            )

        try:
            claims = self.codec.verify(proof_token)
        except TokenVerificationError as exc:
            _reject_code(clean_email, "token_invalid")
            raise UnauthorizedError(INVALID_CODE_MSG) from exc

        if claims.get("kind") != TokenKind.EMAIL_CODE:
            _reject_code(clean_email, "wrong_kind")
            raise UnauthorizedError(INVALID_CODE_MSG)

        # Binding: a code issued for one address or intent never serves another
        if claims.get("email") != clean_email or claims.get("intent") != intent:
            _reject_code(clean_email, "binding_mismatch")
            raise UnauthorizedError(INVALID_CODE_MSG)

        if not code_matches(clean_email, code, claims.get("code_digest")):
            _reject_code(clean_email, "wrong_code")
            raise UnauthorizedError(INVALID_CODE_MSG)

        session_token = self.issue_session_token(email=clean_email)
        logger.info("session_issued", email=mask_email(clean_email), intent=intent)

        return SessionIssued(
            session_token=session_token,
            expires_in_seconds=self.session_ttl_seconds,
        )

    def validate_session(self, session_token: str) -> str:
        """Return the email asserted by a valid session token.

        Raises:
            ValidationError: Token missing.
            UnauthorizedError: Token invalid, expired, or not a session token.
        """
        if not session_token:
            raise ValidationError(_MISSING_SESSION_MSG)

        try:
            claims = self.codec.verify(session_token)
        except TokenVerificationError as exc:
            raise UnauthorizedError(INVALID_SESSION_MSG) from exc

        email = claims.get("email")
        if claims.get("kind") != TokenKind.SESSION:
            raise UnauthorizedError(INVALID_SESSION_MSG)
        if not isinstance(email, str) or not email:
            raise UnauthorizedError(INVALID_SESSION_MSG)

        return email


def _require_intent(intent: str) -> None:
    if intent not in VALID_INTENTS:
        raise ValidationError(
            _INVALID_INTENT_MSG,
            details=[{"field": "intent", "error": "INVALID_INTENT"}],
        )


def _reject_code(email: str, reason: str) -> None:
    # Reason stays in the server log; the caller sees INVALID_CODE_MSG
    logger.info("code_rejected", email=mask_email(email), reason=reason)
