"""Shared test fixtures.

Provides a token codec with a test-only secret, a mock mail dispatcher
injected into the provider factory, and an HTTP client for the app.
"""

from collections.abc import AsyncGenerator, Iterator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from pydantic import SecretStr

from codepass.core.config import settings
from codepass.core.rate_limiting import limiter
from codepass.core.tokens import TokenCodec
from codepass.providers import factory
from codepass.providers.mail.mock_adapter import MockMailDispatcher
from codepass.services.email_code_auth import EmailCodeAuthService

# Security: This is a test-only secret. Production uses a real secret from env.
TEST_AUTH_SECRET = "test-secret-key-that-is-at-least-32-characters-long"  # nosec B105  # gitleaks:allow

TEST_EMAIL = "a@b.com"

# Lifetimes used across tests (match the defaults in Settings)
CODE_TTL_SECONDS = 10 * 60
SESSION_TTL_SECONDS = 7 * 24 * 60 * 60
COOLDOWN_SECONDS = 60


def make_codec(
    secret: str = TEST_AUTH_SECRET,
    *,
    issuer: str = "codepass",
    audience: str = "codepass",
) -> TokenCodec:
    """Create a token codec for tests.

    Args:
        secret: Signing secret.
        issuer: Issuer claim.
        audience: Audience claim.

    Returns:
        TokenCodec instance.
    """
    return TokenCodec(secret, issuer=issuer, audience=audience)


def make_service(
    mailer: MockMailDispatcher | None = None,
    *,
    codec: TokenCodec | None = None,
    mail_timeout_seconds: float = 5.0,
) -> EmailCodeAuthService:
    """Create a protocol service with default lifetimes for tests."""
    return EmailCodeAuthService(
        codec=codec or make_codec(),
        mailer=mailer,
        code_ttl_seconds=CODE_TTL_SECONDS,
        session_ttl_seconds=SESSION_TTL_SECONDS,
        cooldown_seconds=COOLDOWN_SECONDS,
        mail_timeout_seconds=mail_timeout_seconds,
    )


@pytest.fixture
def codec() -> TokenCodec:
    """Token codec signed with TEST_AUTH_SECRET."""
    return make_codec()


@pytest.fixture
def mock_mail() -> Iterator[MockMailDispatcher]:
    """Fixture that provides a mock mail dispatcher and resets after test.

    Injects the mock into the factory singleton so the HTTP layer uses it.

    Yields:
        MockMailDispatcher instance.
    """
    mock = MockMailDispatcher()

    # Inject mock into factory singleton
    factory._mail_dispatcher = mock

    yield mock

    # Reset after test
    factory.reset_providers()


@pytest.fixture
def auth_service(codec: TokenCodec, mock_mail: MockMailDispatcher) -> EmailCodeAuthService:
    """Protocol service wired to the test codec and mock mail dispatcher."""
    return make_service(mock_mail, codec=codec)


@pytest_asyncio.fixture
async def client(mock_mail: MockMailDispatcher) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client for the auth endpoints.

    Sets up:
    - Signing secret set to TEST_AUTH_SECRET
    - Rate limiter disabled (tests send many requests from one IP)
    - Mock mail dispatcher (via the mock_mail fixture)

    Yields:
        Configured AsyncClient.
    """
    from codepass.main import app

    original_auth_secret = settings.auth_secret
    original_limiter_enabled = limiter.enabled
    settings.auth_secret = SecretStr(TEST_AUTH_SECRET)
    limiter.enabled = False

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    settings.auth_secret = original_auth_secret
    limiter.enabled = original_limiter_enabled
