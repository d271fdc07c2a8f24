"""Pydantic request/response schemas for API endpoints."""

from codepass.schemas.auth import (
    CodeIssuedResponse,
    Intent,
    RequestCodeRequest,
    SessionInfo,
    SessionIssuedResponse,
    ValidateSessionRequest,
    VerifyCodeRequest,
)

__all__ = [
    # Requests
    "Intent",
    "RequestCodeRequest",
    "ValidateSessionRequest",
    "VerifyCodeRequest",
    # Responses
    "CodeIssuedResponse",
    "SessionInfo",
    "SessionIssuedResponse",
]
