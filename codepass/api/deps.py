"""Shared dependencies for API endpoints.

Builds the token codec and protocol service from process settings.

Missing configuration surfaces here as ServiceMisconfiguredError (503).
The application lifespan refuses to start without a signing secret, so in a
normally started server only missing mail credentials reach this path.
"""

import logging
from typing import Annotated

from fastapi import Depends

from codepass.core.config import settings
from codepass.core.errors import ConfigurationError, ServiceMisconfiguredError
from codepass.core.tokens import TokenCodec
from codepass.providers.factory import get_mail_dispatcher
from codepass.providers.mail.base import MailDispatcher
from codepass.services.email_code_auth import EmailCodeAuthService

logger = logging.getLogger(__name__)


def get_token_codec() -> TokenCodec:
    """Build the token codec from the configured signing secret.

    Raises:
        ServiceMisconfiguredError: If AUTH_SECRET is not set.
    """
    try:
        return TokenCodec(
            settings.auth_secret.get_secret_value(),
            issuer=settings.auth_issuer,
            audience=settings.auth_audience,
        )
    except ConfigurationError as exc:
        logger.error("Token codec unavailable: %s", exc)
        raise ServiceMisconfiguredError() from exc


def get_mailer() -> MailDispatcher:
    """Return the process mail dispatcher.

    Raises:
        ServiceMisconfiguredError: If mail credentials are not set.
    """
    try:
        return get_mail_dispatcher()
    except ConfigurationError as exc:
        logger.error("Mail dispatcher unavailable: %s", exc)
        raise ServiceMisconfiguredError() from exc


Codec = Annotated[TokenCodec, Depends(get_token_codec)]
Mailer = Annotated[MailDispatcher, Depends(get_mailer)]


def get_auth_service(codec: Codec, mailer: Mailer) -> EmailCodeAuthService:
    """Protocol service for request-code (needs the mail dispatcher)."""
    return EmailCodeAuthService.from_settings(codec=codec, mailer=mailer)


def get_token_service(codec: Codec) -> EmailCodeAuthService:
    """Protocol service for verify-code and validate-session.

    These steps only need the signing secret, so they keep working when
    the mail transport is unconfigured.
    """
    return EmailCodeAuthService.from_settings(codec=codec)


AuthService = Annotated[EmailCodeAuthService, Depends(get_auth_service)]
TokenService = Annotated[EmailCodeAuthService, Depends(get_token_service)]
