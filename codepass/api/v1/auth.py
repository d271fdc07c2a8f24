"""Email-code authentication endpoints.

Stateless sign-in: the server emails a six-digit code and hands back a
signed proof token; the client returns both to obtain a session token.

Endpoints:
- POST /auth/request-code - email a code, return a proof token
- POST /auth/verify-code - exchange code + proof token for a session token
- POST /auth/validate-session - return the email behind a session token

Only POST is routed; other verbs get 405 from the app's error handler.
"""

from fastapi import APIRouter, Request

from codepass.api.deps import AuthService, TokenService
from codepass.core.config import settings
from codepass.core.rate_limiting import limiter
from codepass.core.responses import DataResponse
from codepass.schemas.auth import (
    CodeIssuedResponse,
    RequestCodeRequest,
    SessionInfo,
    SessionIssuedResponse,
    ValidateSessionRequest,
    VerifyCodeRequest,
)

router = APIRouter()


# ===================================================================
# POST /auth/request-code
# ===================================================================


@router.post("/request-code")
@limiter.limit(lambda: settings.rate_limit_request_code)
async def request_code(
    request: Request,  # noqa: ARG001
    body: RequestCodeRequest,
    service: AuthService,
) -> DataResponse[CodeIssuedResponse]:
    """Email a one-time code and return the matching proof token.

    The email is sent before the response returns; if dispatch fails the
    request fails with 502 and no proof token is issued.

    cooldown_seconds is advisory; a repeated request is not rejected.
    """
    issued = await service.request_code(body.email, body.intent)
    return DataResponse(
        data=CodeIssuedResponse(
            proof_token=issued.proof_token,
            expires_in_seconds=issued.expires_in_seconds,
            cooldown_seconds=issued.cooldown_seconds,
        )
    )


# ===================================================================
# POST /auth/verify-code
# ===================================================================


@router.post("/verify-code")
@limiter.limit(lambda: settings.rate_limit_verify_code)
async def verify_code(
    request: Request,  # noqa: ARG001
    body: VerifyCodeRequest,
    service: TokenService,
) -> DataResponse[SessionIssuedResponse]:
    """Verify a code against its proof token and issue a session token.

    Security: every token, binding and code failure returns the same 401
    message so the endpoint cannot be used as a verification oracle.
    """
    issued = service.verify_code(
        body.email,
        body.intent,
        body.code,
        body.proof_token,
    )
    return DataResponse(
        data=SessionIssuedResponse(
            session_token=issued.session_token,
            expires_in_seconds=issued.expires_in_seconds,
        )
    )


# ===================================================================
# POST /auth/validate-session
# ===================================================================


@router.post("/validate-session")
@limiter.limit(lambda: settings.rate_limit_validate_session)
async def validate_session(
    request: Request,  # noqa: ARG001
    body: ValidateSessionRequest,
    service: TokenService,
) -> DataResponse[SessionInfo]:
    """Return the email asserted by a session token.

    Pure signature and expiry check; there is no session table, so a token
    stays valid until it expires.
    """
    email = service.validate_session(body.session_token)
    return DataResponse(data=SessionInfo(email=email))
