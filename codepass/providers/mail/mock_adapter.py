"""Mock mail dispatcher for testing.

MockMailDispatcher captures codes in memory so tests can complete the flow
without a mail transport.
"""

from dataclasses import dataclass

from codepass.providers.errors import MailDispatchError
from codepass.providers.mail.base import MailDispatcher


@dataclass(frozen=True)
class SentCode:
    """A captured send_code call."""

    to_email: str
    code: str
    ttl_minutes: int


class MockMailDispatcher(MailDispatcher):
    """Mock dispatcher for testing.

    Attributes:
        sent: Every successful send, in order.
        fail_with: When set, send_code raises this error instead of recording.
    """

    def __init__(self) -> None:
        self.sent: list[SentCode] = []
        self.fail_with: MailDispatchError | None = None

    @property
    def provider_name(self) -> str:
        """Return 'mock' for testing."""
        return "mock"

    async def send_code(self, *, to_email: str, code: str, ttl_minutes: int) -> None:
        """Record the code, or raise the configured failure."""
        if self.fail_with is not None:
            raise self.fail_with
        self.sent.append(SentCode(to_email=to_email, code=code, ttl_minutes=ttl_minutes))

    @property
    def last_code(self) -> str:
        """Code from the most recent send.

        Raises:
            AssertionError: If nothing has been sent.
        """
        assert self.sent, "No code has been sent"
        return self.sent[-1].code

    def fail_next(self, message: str = "mock transport down") -> None:
        """Make every following send fail until reset()."""
        self.fail_with = MailDispatchError(message, provider=self.provider_name)

    def reset(self) -> None:
        """Clear recorded sends and any configured failure."""
        self.sent.clear()
        self.fail_with = None
