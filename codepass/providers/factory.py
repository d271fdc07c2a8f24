"""Provider factory functions.

Singleton pattern for the mail dispatcher instance.
"""

from codepass.core.config import Settings, settings
from codepass.core.errors import ConfigurationError
from codepass.providers.mail.base import MailDispatcher
from codepass.providers.mail.resend_adapter import ResendMailDispatcher

_mail_dispatcher: MailDispatcher | None = None


def get_mail_dispatcher(config: Settings | None = None) -> MailDispatcher:
    """Get or create the mail dispatcher singleton.

    Args:
        config: Optional settings. Defaults to the process settings.

    Returns:
        MailDispatcher instance.

    Raises:
        ConfigurationError: If RESEND_API_KEY or EMAIL_FROM is missing.
    """
    global _mail_dispatcher

    if _mail_dispatcher is None:
        config = config or settings
        if not config.mail_configured:
            raise ConfigurationError("RESEND_API_KEY and EMAIL_FROM must be set")
        _mail_dispatcher = ResendMailDispatcher(
            api_key=config.resend_api_key.get_secret_value(),
            email_from=config.email_from,
            timeout=config.mail_timeout_seconds,
        )

    return _mail_dispatcher


def reset_providers() -> None:
    """Reset provider singletons.

    Used in tests to ensure isolation between test cases.
    """
    global _mail_dispatcher
    _mail_dispatcher = None
