"""Mail dispatcher backed by the Resend HTTP API.

Simple HTTP POST to Resend for verification code emails.
"""

import logging

import httpx

from codepass.core.email_address import mask_email
from codepass.providers.errors import MailDispatchError
from codepass.providers.mail.base import MailDispatcher, render_code_email

logger = logging.getLogger(__name__)

RESEND_API_URL = "https://api.resend.com/emails"


class ResendMailDispatcher(MailDispatcher):
    """Send verification codes through Resend.

    Attributes:
        api_key: Resend API key.
        email_from: Sender address.
        timeout: Per-request timeout in seconds.
    """

    def __init__(self, *, api_key: str, email_from: str, timeout: float) -> None:
        self.api_key = api_key
        self.email_from = email_from
        self.timeout = timeout

    @property
    def provider_name(self) -> str:
        """Return 'resend'."""
        return "resend"

    async def send_code(self, *, to_email: str, code: str, ttl_minutes: int) -> None:
        """POST the rendered email to Resend.

        Raises:
            MailDispatchError: On transport errors or non-2xx responses.
        """
        message = render_code_email(
            to_email=to_email, code=code, ttl_minutes=ttl_minutes
        )
        try:
            async with httpx.AsyncClient() as client:
                resp = await client.post(
                    RESEND_API_URL,
                    headers={"Authorization": f"Bearer {self.api_key}"},
                    json={
                        "from": self.email_from,
                        "to": message.to_email,
                        "subject": message.subject,
                        "text": message.text,
                        "html": message.html,
                    },
                    timeout=self.timeout,
                )
                resp.raise_for_status()
        except httpx.HTTPError as exc:
            # Subject and body carry the code; log the exception type only
            logger.warning(
                "Failed to send verification email to %s: %s",
                mask_email(to_email),
                type(exc).__name__,
            )
            raise MailDispatchError(
                "Resend rejected or did not receive the message",
                provider=self.provider_name,
            ) from exc
