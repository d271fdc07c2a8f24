"""One-time code generation, hashing, and constant-time verification.

Pipeline:
- generate_code: 6-digit numeric code from the OS CSPRNG
- hash_code: SHA-256 binding of (email, code); this digest, never the code,
  travels inside the proof token
- code_matches: recompute the digest and compare in constant time

The digest is a binding, not secret protection: it carries no salt, so anyone
holding it can test candidate codes. Its only consumer is the server's own
verification step, which is gated by the proof token signature.
"""

import hashlib
import hmac
import re
import secrets

CODE_LENGTH = 6

_CODE_SPACE = 10**CODE_LENGTH
_CODE_PATTERN = re.compile(rf"[0-9]{{{CODE_LENGTH}}}")


def generate_code() -> str:
    """Generate a uniformly distributed, zero-padded numeric code.

    Security: uses ``secrets`` (OS CSPRNG). A guessable code is a direct
    authentication bypass.
    """
    return str(secrets.randbelow(_CODE_SPACE)).zfill(CODE_LENGTH)


def is_well_formed_code(code: object) -> bool:
    """Check that a submitted code is exactly CODE_LENGTH ASCII digits."""
    return isinstance(code, str) and _CODE_PATTERN.fullmatch(code) is not None


def hash_code(email: str, code: str) -> str:
    """Return the hex SHA-256 digest of ``email:code``.

    Args:
        email: Normalized email address the code was issued for.
        code: The one-time code.

    Returns:
        64-character lowercase hex digest.
    """
    return hashlib.sha256(f"{email}:{code}".encode()).hexdigest()


def code_matches(email: str, submitted_code: str, expected_digest: object) -> bool:
    """Check a submitted code against the digest from a verified proof token.

    Length is compared first (it is not secret: every digest is 64 hex
    chars), then the bytes are compared with ``hmac.compare_digest`` so the
    running time does not depend on where the first difference occurs.

    Args:
        email: Normalized email from the request.
        submitted_code: Code typed by the caller.
        expected_digest: ``code_digest`` claim from the proof token.

    Returns:
        True if the digest of (email, submitted_code) equals expected_digest.
    """
    if not isinstance(expected_digest, str):
        return False
    actual = hash_code(email, submitted_code).encode()
    expected = expected_digest.encode()
    if len(actual) != len(expected):
        return False
    return hmac.compare_digest(actual, expected)
