"""Application configuration loaded from environment variables.

Settings for the API, token signing, one-time code lifetimes, the mail
transport, and the per-IP abuse guard. Uses pydantic-settings for validation
and .env file support.
"""

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Minimum length for AUTH_SECRET in production (256 bits = 32 bytes)
_MIN_AUTH_SECRET_LENGTH = 32


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # API
    # 0.0.0.0 binds to all network interfaces (required for Docker containers)
    api_host: str = "0.0.0.0"  # nosec B104
    api_port: int = 8000

    # CORS (Security)
    # Never set to ["*"]; the browser client is always a known origin
    allowed_origins: list[str] = ["http://localhost:5173"]

    # Application
    environment: str = "development"
    log_level: str = "INFO"

    # Token signing
    # One process-wide HMAC secret signs both proof and session tokens
    auth_secret: SecretStr = SecretStr("")
    auth_issuer: str = "codepass"
    auth_audience: str = "codepass"

    # One-time code and session lifetimes (seconds)
    code_ttl_seconds: int = 10 * 60
    code_cooldown_seconds: int = 60
    session_ttl_seconds: int = 7 * 24 * 60 * 60

    # Email (Resend HTTP API)
    email_from: str = ""
    resend_api_key: SecretStr = SecretStr("")
    mail_timeout_seconds: float = 10.0

    # Rate Limiting (per client IP, in-memory per instance)
    # Format: "count/period" (e.g., "10/minute", "100/hour")
    rate_limit_request_code: str = "5/minute"
    rate_limit_verify_code: str = "10/minute"
    rate_limit_validate_session: str = "60/minute"
    rate_limit_enabled: bool = True  # Disable for testing

    @property
    def mail_configured(self) -> bool:
        """Whether the mail transport credentials are present."""
        return bool(self.resend_api_key.get_secret_value() and self.email_from)

    @model_validator(mode="after")
    def check_production_security(self) -> "Settings":
        """Validate security and lifetime requirements.

        Checks:
        - Code, cooldown, session and mail timeout values must be positive
        - CORS must not use wildcard origin
        - AUTH_SECRET must be set and >= 32 chars in production
        """
        for name in (
            "code_ttl_seconds",
            "session_ttl_seconds",
            "mail_timeout_seconds",
        ):
            if getattr(self, name) <= 0:
                msg = f"{name.upper()} must be positive. Got: {getattr(self, name)}"
                raise ValueError(msg)
        if self.code_cooldown_seconds < 0:
            msg = (
                "CODE_COOLDOWN_SECONDS cannot be negative. "
                f"Got: {self.code_cooldown_seconds}"
            )
            raise ValueError(msg)

        if "*" in self.allowed_origins:
            msg = (
                "ALLOWED_ORIGINS must not contain '*' (wildcard). "
                "List the browser client origins explicitly."
            )
            raise ValueError(msg)

        if self.environment == "production":
            secret_value = self.auth_secret.get_secret_value()
            if not secret_value:
                msg = (
                    "AUTH_SECRET must be set in production. "
                    'Generate with: python -c "import secrets; '
                    'print(secrets.token_hex(32))"'
                )
                raise ValueError(msg)
            if len(secret_value) < _MIN_AUTH_SECRET_LENGTH:
                msg = (
                    f"AUTH_SECRET must be at least {_MIN_AUTH_SECRET_LENGTH} "
                    "characters for adequate security."
                )
                raise ValueError(msg)

        return self


settings = Settings()
