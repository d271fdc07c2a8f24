"""Email address normalization and validation.

Canonical form is trimmed and lower-cased. The structural check is
deliberately minimal: a local part without whitespace or "@", an "@", and a
domain part containing a ".". Deliverability is proven by the emailed code,
not by the pattern.
"""

import re

from codepass.core.errors import ValidationError

# RFC 5321 limits a forward path to 254 characters
MAX_EMAIL_LENGTH = 254

_EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

INVALID_EMAIL_MSG = "Invalid email address"


def normalize_email(raw: object) -> str | None:
    """Return the canonical form of an email address, or None if invalid.

    Never returns a partially normalized value: the result is either a
    trimmed, lower-cased address that passed the shape check, or None.

    Args:
        raw: Address as submitted by the caller.

    Returns:
        Normalized address, or None when the input is not a valid address.
    """
    if not isinstance(raw, str):
        return None
    value = raw.strip().lower()
    if len(value) > MAX_EMAIL_LENGTH:
        return None
    if not _EMAIL_PATTERN.fullmatch(value):
        return None
    return value


def require_email(raw: object) -> str:
    """Normalize an email address, raising on rejection.

    Raises:
        ValidationError: If the address is not valid.
    """
    email = normalize_email(raw)
    if email is None:
        raise ValidationError(
            INVALID_EMAIL_MSG,
            details=[{"field": "email", "error": "INVALID_EMAIL"}],
        )
    return email


def mask_email(email: str) -> str:
    """Mask an address for log output (``alice@x.com`` -> ``a***@x.com``)."""
    local, _, domain = email.partition("@")
    if not domain:
        return "***"
    return f"{local[:1]}***@{domain}"
