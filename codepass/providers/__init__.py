"""Provider abstraction layer.

Exports:
    Error classes for provider error handling
    Factory functions for provider instances
"""

from codepass.providers.errors import MailDispatchError, ProviderError
from codepass.providers.factory import get_mail_dispatcher, reset_providers

__all__ = [
    # Errors
    "ProviderError",
    "MailDispatchError",
    # Factory
    "get_mail_dispatcher",
    "reset_providers",
]
