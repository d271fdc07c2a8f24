"""Mail dispatcher module.

Interface and adapters for delivering one-time codes.
"""

from codepass.providers.mail.base import CodeEmail, MailDispatcher, render_code_email
from codepass.providers.mail.mock_adapter import MockMailDispatcher, SentCode
from codepass.providers.mail.resend_adapter import ResendMailDispatcher

__all__ = [
    # Base types
    "CodeEmail",
    "MailDispatcher",
    "render_code_email",
    # Adapters
    "MockMailDispatcher",
    "ResendMailDispatcher",
    "SentCode",
]
