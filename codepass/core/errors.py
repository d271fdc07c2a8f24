"""API error classes.

HTTP status codes and error codes for the email-code authentication flow.

Mapping to the protocol's failure classes:
- ValidationError: malformed or missing input, described precisely
- UnauthorizedError: any token or code failure, described generically
- MailDispatchFailedError / ServiceMisconfiguredError: dependency failures
- ConfigurationError: fatal startup condition, not an HTTP error
"""


class ConfigurationError(RuntimeError):
    """Required process-wide configuration is missing or unusable.

    Raised at startup when the signing secret is absent, which must keep the
    service from serving traffic. Endpoint dependencies translate it into
    ServiceMisconfiguredError when it surfaces during a request.
    """


class APIError(Exception):
    """Base class for API errors.

    All API errors have a code, message, and HTTP status.
    Subclasses set default status_code.

    Attributes:
        code: Machine-readable error code (e.g., "UNAUTHORIZED").
        message: Human-readable error message.
        status_code: HTTP status code to return.
        details: Optional list of additional error details.
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: list[dict] | None = None,
    ) -> None:
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(message)


class ValidationError(APIError):
    """Field validation failed (400).

    Use for request body validation errors: bad email, bad intent,
    malformed code, missing fields.
    """

    def __init__(
        self,
        message: str,
        details: list[dict] | None = None,
    ) -> None:
        super().__init__(
            code="VALIDATION_ERROR",
            message=message,
            status_code=400,
            details=details,
        )


class UnauthorizedError(APIError):
    """Authentication failed (401).

    The message is always generic: expired, tampered, mismatched and
    wrong-code failures must be indistinguishable to the caller.
    """

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(
            code="UNAUTHORIZED",
            message=message,
            status_code=401,
        )


class MethodNotAllowedError(APIError):
    """HTTP method not supported on this route (405)."""

    def __init__(self, message: str = "Method not allowed") -> None:
        super().__init__(
            code="METHOD_NOT_ALLOWED",
            message=message,
            status_code=405,
        )


class MailDispatchFailedError(APIError):
    """The verification email could not be sent (502).

    Retryable: the caller restarts the flow with another request-code.
    """

    def __init__(
        self, message: str = "Could not send the verification email"
    ) -> None:
        super().__init__(
            code="MAIL_DISPATCH_FAILED",
            message=message,
            status_code=502,
        )


class ServiceMisconfiguredError(APIError):
    """Required server configuration is missing (503).

    Security: never names the missing setting to the caller; the
    server log carries the detail.
    """

    def __init__(self, message: str = "Service is not configured") -> None:
        super().__init__(
            code="SERVICE_MISCONFIGURED",
            message=message,
            status_code=503,
        )


class InternalError(APIError):
    """Unexpected server error (500).

    Use for unhandled exceptions. Never expose stack traces to clients.
    """

    def __init__(self, message: str = "An unexpected error occurred") -> None:
        super().__init__(
            code="INTERNAL_ERROR",
            message=message,
            status_code=500,
        )
