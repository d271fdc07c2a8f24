"""Provider error taxonomy.

Error classes for the outbound mail provider layer.

Adapters map transport-specific failures (HTTP status, timeouts, connection
errors) onto these so the protocol service handles one error type.
"""


__all__ = [
    "ProviderError",
    "MailDispatchError",
]


class ProviderError(Exception):
    """Base class for all provider errors.

    All provider-specific exceptions should inherit from this class,
    allowing callers to catch all provider errors with a single handler.
    """

    pass


class MailDispatchError(ProviderError):
    """An email could not be handed to the mail transport.

    Dispatchers must raise this instead of silently dropping a message, so
    request-code never issues a proof token for an undelivered code.
    """

    def __init__(self, message: str, provider: str | None = None):
        """Initialize MailDispatchError.

        Args:
            message: Error description (never includes the code).
            provider: Name of the dispatcher that failed.
        """
        super().__init__(message)
        self.provider = provider
