"""Email-code authentication request/response schemas.

Three-step flow:
1. POST /auth/request-code: email + intent, returns a proof token
2. POST /auth/verify-code: email + intent + code + proof token, returns
   a session token
3. POST /auth/validate-session: session token, returns the email

Request bodies are strict: unknown fields are rejected and no type coercion
happens before business logic runs.
"""

from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

Intent = Literal["login", "signup"]

# Upper bounds keep oversized bodies away from the crypto layer
_MAX_EMAIL_INPUT_LENGTH = 320
_MAX_CODE_INPUT_LENGTH = 32
_MAX_TOKEN_LENGTH = 4096

# =============================================================================
# Request Schemas
# =============================================================================


class RequestCodeRequest(BaseModel):
    """Request body for POST /auth/request-code.

    Attributes:
        email: Address to send the code to (normalized server-side).
        intent: Declared purpose, ``login`` or ``signup``.
    """

    model_config = ConfigDict(extra="forbid", strict=True)

    email: str = Field(..., min_length=1, max_length=_MAX_EMAIL_INPUT_LENGTH)
    intent: Intent


class VerifyCodeRequest(BaseModel):
    """Request body for POST /auth/verify-code.

    ``proofToken`` is accepted as an alias for browser clients.
    """

    model_config = ConfigDict(extra="forbid", strict=True)

    email: str = Field(..., min_length=1, max_length=_MAX_EMAIL_INPUT_LENGTH)
    intent: Intent
    code: str = Field(..., min_length=1, max_length=_MAX_CODE_INPUT_LENGTH)
    proof_token: str = Field(
        ...,
        min_length=1,
        max_length=_MAX_TOKEN_LENGTH,
        validation_alias=AliasChoices("proof_token", "proofToken"),
    )


class ValidateSessionRequest(BaseModel):
    """Request body for POST /auth/validate-session."""

    model_config = ConfigDict(extra="forbid", strict=True)

    session_token: str = Field(
        ...,
        min_length=1,
        max_length=_MAX_TOKEN_LENGTH,
        validation_alias=AliasChoices("session_token", "sessionToken"),
    )


# =============================================================================
# Response Schemas
# =============================================================================


class CodeIssuedResponse(BaseModel):
    """Result of request-code.

    Attributes:
        proof_token: Signed token to hand back on verify-code.
        expires_in_seconds: Proof token lifetime.
        cooldown_seconds: Advisory wait before requesting another code.
            Not enforced server-side.
    """

    proof_token: str
    expires_in_seconds: int
    cooldown_seconds: int


class SessionIssuedResponse(BaseModel):
    """Result of verify-code."""

    session_token: str
    expires_in_seconds: int


class SessionInfo(BaseModel):
    """Result of validate-session."""

    email: str
