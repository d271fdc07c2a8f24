"""Tests for the email-code auth endpoints.

Exercises the HTTP layer end to end with the mock mail dispatcher:
request-code, verify-code, validate-session, envelopes and status codes.
"""

from datetime import UTC, datetime, timedelta

import pytest
from pydantic import SecretStr

from codepass.core.config import settings
from codepass.providers import factory
from codepass.services.email_code_auth import INVALID_CODE_MSG, INVALID_SESSION_MSG
from tests.conftest import CODE_TTL_SECONDS, COOLDOWN_SECONDS, SESSION_TTL_SECONDS

_PREFIX = "/api/v1/auth"
_REQUEST_URL = f"{_PREFIX}/request-code"
_VERIFY_URL = f"{_PREFIX}/verify-code"
_VALIDATE_URL = f"{_PREFIX}/validate-session"


async def _request_code(client, email="a@b.com", intent="login"):
    response = await client.post(_REQUEST_URL, json={"email": email, "intent": intent})
    assert response.status_code == 200, response.text
    return response.json()["data"]["proof_token"]


async def _sign_in(client, mock_mail, email="a@b.com", intent="login"):
    proof_token = await _request_code(client, email, intent)
    response = await client.post(
        _VERIFY_URL,
        json={
            "email": email,
            "intent": intent,
            "code": mock_mail.last_code,
            "proof_token": proof_token,
        },
    )
    assert response.status_code == 200, response.text
    return response.json()["data"]["session_token"]


# =============================================================================
# POST /auth/request-code
# =============================================================================


class TestRequestCode:
    """Tests for POST /auth/request-code."""

    async def test_returns_proof_token_and_timings(self, client, mock_mail):
        """Success returns the data envelope with the proof token."""
        response = await client.post(
            _REQUEST_URL, json={"email": "a@b.com", "intent": "login"}
        )

        assert response.status_code == 200
        body = response.json()
        assert "error" not in body
        data = body["data"]
        assert data["proof_token"]
        assert data["expires_in_seconds"] == CODE_TTL_SECONDS
        assert data["cooldown_seconds"] == COOLDOWN_SECONDS
        assert len(mock_mail.sent) == 1
        assert mock_mail.sent[0].to_email == "a@b.com"

    async def test_code_is_never_in_response(self, client, mock_mail):
        """The emailed code does not appear in the response body."""
        response = await client.post(
            _REQUEST_URL, json={"email": "a@b.com", "intent": "signup"}
        )
        assert mock_mail.last_code not in response.text

    async def test_email_is_normalized_before_sending(self, client, mock_mail):
        """Surrounding whitespace and case are removed."""
        await _request_code(client, email="  Alice@Example.COM ")
        assert mock_mail.sent[0].to_email == "alice@example.com"

    @pytest.mark.parametrize(
        "body",
        [
            {"email": "not-an-email", "intent": "login"},
            {"email": "a@b.com", "intent": "register"},
            {"email": "a@b.com"},
            {"intent": "login"},
            {"email": 42, "intent": "login"},
            {"email": "a@b.com", "intent": "login", "extra": "x"},
        ],
    )
    async def test_invalid_input_returns_400(self, client, mock_mail, body):
        """Bad bodies are rejected before any mail is sent."""
        response = await client.post(_REQUEST_URL, json=body)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"
        assert mock_mail.sent == []

    async def test_dispatch_failure_returns_502_without_token(self, client, mock_mail):
        """No proof token is issued when the email could not be sent."""
        mock_mail.fail_next("provider down")

        response = await client.post(
            _REQUEST_URL, json={"email": "a@b.com", "intent": "login"}
        )

        assert response.status_code == 502
        body = response.json()
        assert body["error"]["code"] == "MAIL_DISPATCH_FAILED"
        assert "data" not in body
        assert "provider down" not in response.text

    async def test_missing_mail_config_returns_503(self, client, monkeypatch):
        """Without mail credentials request-code is unavailable."""
        factory.reset_providers()
        monkeypatch.setattr(settings, "resend_api_key", SecretStr(""))

        response = await client.post(
            _REQUEST_URL, json={"email": "a@b.com", "intent": "login"}
        )

        assert response.status_code == 503
        assert response.json()["error"]["code"] == "SERVICE_MISCONFIGURED"

    async def test_missing_secret_returns_503(self, client, mock_mail, monkeypatch):
        """Without a signing secret nothing is sent."""
        monkeypatch.setattr(settings, "auth_secret", SecretStr(""))

        response = await client.post(
            _REQUEST_URL, json={"email": "a@b.com", "intent": "login"}
        )

        assert response.status_code == 503
        assert response.json()["error"]["code"] == "SERVICE_MISCONFIGURED"
        assert mock_mail.sent == []


# =============================================================================
# POST /auth/verify-code
# =============================================================================


class TestVerifyCode:
    """Tests for POST /auth/verify-code."""

    async def test_correct_code_returns_session(self, client, mock_mail):
        """The emailed code plus proof token yields a session token."""
        proof_token = await _request_code(client)

        response = await client.post(
            _VERIFY_URL,
            json={
                "email": "a@b.com",
                "intent": "login",
                "code": mock_mail.last_code,
                "proof_token": proof_token,
            },
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["session_token"]
        assert data["expires_in_seconds"] == SESSION_TTL_SECONDS

    async def test_accepts_camel_case_proof_token(self, client, mock_mail):
        """proofToken is accepted for browser clients."""
        proof_token = await _request_code(client)

        response = await client.post(
            _VERIFY_URL,
            json={
                "email": "a@b.com",
                "intent": "login",
                "code": mock_mail.last_code,
                "proofToken": proof_token,
            },
        )

        assert response.status_code == 200

    async def test_wrong_code_returns_generic_401(self, client, mock_mail):
        """A wrong code is rejected with the generic message."""
        proof_token = await _request_code(client)
        wrong = "000000" if mock_mail.last_code != "000000" else "111111"

        response = await client.post(
            _VERIFY_URL,
            json={
                "email": "a@b.com",
                "intent": "login",
                "code": wrong,
                "proof_token": proof_token,
            },
        )

        assert response.status_code == 401
        error = response.json()["error"]
        assert error["code"] == "UNAUTHORIZED"
        assert error["message"] == INVALID_CODE_MSG

    async def test_intent_mismatch_returns_generic_401(self, client, mock_mail):
        """A signup code cannot be used to log in."""
        proof_token = await _request_code(client, intent="signup")

        response = await client.post(
            _VERIFY_URL,
            json={
                "email": "a@b.com",
                "intent": "login",
                "code": mock_mail.last_code,
                "proof_token": proof_token,
            },
        )

        assert response.status_code == 401
        assert response.json()["error"]["message"] == INVALID_CODE_MSG

    async def test_email_mismatch_returns_generic_401(self, client, mock_mail):
        """A code issued for one address does not sign in another."""
        proof_token = await _request_code(client, email="a@b.com")

        response = await client.post(
            _VERIFY_URL,
            json={
                "email": "c@d.com",
                "intent": "login",
                "code": mock_mail.last_code,
                "proof_token": proof_token,
            },
        )

        assert response.status_code == 401
        assert response.json()["error"]["message"] == INVALID_CODE_MSG

    async def test_garbage_proof_token_returns_generic_401(self, client, mock_mail):
        """A forged proof token looks the same as a wrong code."""
        response = await client.post(
            _VERIFY_URL,
            json={
                "email": "a@b.com",
                "intent": "login",
                "code": "123456",
                "proof_token": "not.a.token",
            },
        )

        assert response.status_code == 401
        assert response.json()["error"]["message"] == INVALID_CODE_MSG

    async def test_session_token_is_not_a_proof_token(self, client, mock_mail):
        """Token kinds are not interchangeable."""
        session_token = await _sign_in(client, mock_mail)

        response = await client.post(
            _VERIFY_URL,
            json={
                "email": "a@b.com",
                "intent": "login",
                "code": mock_mail.last_code,
                "proof_token": session_token,
            },
        )

        assert response.status_code == 401

    @pytest.mark.parametrize("code", ["12a45", "12345", "1234567", " 12345"])
    async def test_malformed_code_returns_400(self, client, mock_mail, code):
        """Codes that are not six digits fail validation, not auth."""
        proof_token = await _request_code(client)

        response = await client.post(
            _VERIFY_URL,
            json={
                "email": "a@b.com",
                "intent": "login",
                "code": code,
                "proof_token": proof_token,
            },
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    async def test_numeric_code_is_not_coerced(self, client, mock_mail):
        """A JSON number is rejected; codes are strings."""
        proof_token = await _request_code(client)

        response = await client.post(
            _VERIFY_URL,
            json={
                "email": "a@b.com",
                "intent": "login",
                "code": 123456,
                "proof_token": proof_token,
            },
        )

        assert response.status_code == 400

    async def test_missing_proof_token_returns_400(self, client, mock_mail):
        """All four fields are required."""
        response = await client.post(
            _VERIFY_URL,
            json={"email": "a@b.com", "intent": "login", "code": "123456"},
        )
        assert response.status_code == 400

    async def test_works_without_mail_config(self, client, mock_mail, monkeypatch):
        """verify-code needs only the signing secret."""
        proof_token = await _request_code(client)
        code = mock_mail.last_code
        factory.reset_providers()
        monkeypatch.setattr(settings, "resend_api_key", SecretStr(""))

        response = await client.post(
            _VERIFY_URL,
            json={
                "email": "a@b.com",
                "intent": "login",
                "code": code,
                "proof_token": proof_token,
            },
        )

        assert response.status_code == 200


# =============================================================================
# POST /auth/validate-session
# =============================================================================


class TestValidateSession:
    """Tests for POST /auth/validate-session."""

    async def test_valid_session_returns_email(self, client, mock_mail):
        """A fresh session token resolves to its email."""
        session_token = await _sign_in(client, mock_mail, email="Alice@Example.com")

        response = await client.post(
            _VALIDATE_URL, json={"session_token": session_token}
        )

        assert response.status_code == 200
        assert response.json() == {"data": {"email": "alice@example.com"}}

    async def test_accepts_camel_case_session_token(self, client, mock_mail):
        """sessionToken is accepted for browser clients."""
        session_token = await _sign_in(client, mock_mail)

        response = await client.post(_VALIDATE_URL, json={"sessionToken": session_token})

        assert response.status_code == 200

    async def test_missing_token_returns_400(self, client):
        """An empty body fails validation."""
        response = await client.post(_VALIDATE_URL, json={})
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    async def test_garbage_token_returns_401(self, client):
        """Unverifiable tokens are unauthorized."""
        response = await client.post(_VALIDATE_URL, json={"session_token": "garbage"})

        assert response.status_code == 401
        assert response.json()["error"]["message"] == INVALID_SESSION_MSG

    async def test_expired_token_returns_401(self, client, codec):
        """A session token past its expiry is rejected."""
        issued_at = datetime.now(UTC) - timedelta(seconds=SESSION_TTL_SECONDS + 60)
        token = codec.sign(
            {"kind": "session", "email": "a@b.com"}, SESSION_TTL_SECONDS, now=issued_at
        )

        response = await client.post(_VALIDATE_URL, json={"session_token": token})

        assert response.status_code == 401

    async def test_proof_token_is_not_a_session(self, client, mock_mail):
        """A proof token cannot be presented as a session."""
        proof_token = await _request_code(client)

        response = await client.post(_VALIDATE_URL, json={"session_token": proof_token})

        assert response.status_code == 401
        assert response.json()["error"]["message"] == INVALID_SESSION_MSG
