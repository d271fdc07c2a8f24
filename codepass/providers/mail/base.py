"""Abstract base class and message type for mail dispatchers.

The protocol only needs one capability from the mail transport: deliver a
one-time code to an address, or fail loudly.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class CodeEmail:
    """Rendered verification email.

    Attributes:
        to_email: Recipient address (normalized).
        subject: Subject line.
        text: Plain-text body.
        html: HTML body.
    """

    to_email: str
    subject: str
    text: str
    html: str


def render_code_email(*, to_email: str, code: str, ttl_minutes: int) -> CodeEmail:
    """Build the verification email for a one-time code.

    Args:
        to_email: Recipient address.
        code: The one-time code.
        ttl_minutes: Code lifetime shown to the recipient.

    Returns:
        CodeEmail with subject, text and HTML bodies.
    """
    ignore_notice = "If you didn't request this, you can safely ignore this email."
    return CodeEmail(
        to_email=to_email,
        subject=f"Your sign-in code: {code}",
        text=(
            f"Your verification code is {code}.\n\n"
            f"It expires in {ttl_minutes} minutes. {ignore_notice}"
        ),
        html=(
            '<div style="font-family:Arial,sans-serif;line-height:1.4">'
            "<h2>Verification code</h2>"
            "<p>Your code: "
            f'<b style="font-size:24px;letter-spacing:3px">{code}</b></p>'
            f"<p>It expires in {ttl_minutes} minutes.</p>"
            f"<p>{ignore_notice}</p>"
            "</div>"
        ),
    )


class MailDispatcher(ABC):
    """Abstract base class for mail dispatchers.

    Implementations own delivery and any retries. They must raise
    MailDispatchError on failure rather than return silently.
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Short identifier used in logs (e.g., "resend")."""
        ...

    @abstractmethod
    async def send_code(self, *, to_email: str, code: str, ttl_minutes: int) -> None:
        """Deliver a one-time code to an address.

        Args:
            to_email: Recipient address (normalized).
            code: The one-time code.
            ttl_minutes: Code lifetime, stated in the email.

        Raises:
            MailDispatchError: If the message could not be handed off.
        """
        ...
