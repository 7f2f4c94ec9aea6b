"""Time-windowed OTP code generation and secret management.

The code derivation follows the HOTP/TOTP truncation (RFC 4226 / 6238)
with one difference: the HMAC message is the DECIMAL TEXT of
the window counter (e.g. ``b"5806440"``), not its 8-byte big-endian
encoding. Codes produced here therefore do not match authenticator apps;
they are delivered out of band (email, SMS) and verified against the cache.
"""

from __future__ import annotations

import hashlib
import hmac
import secrets
import time

from .exceptions import InvalidSecretError

SECRET_BYTES = 32
MAX_DIGITS = 9


def window_counter(window_seconds: int, *, at: float | None = None) -> int:
    """Return the index of the time window containing ``at`` (default: now)."""
    if window_seconds <= 0:
        raise ValueError("window_seconds must be positive")
    now = time.time() if at is None else at
    return int(now // window_seconds)


def generate_totp(
    secret: bytes,
    window_seconds: int,
    digits: int,
    *,
    at: float | None = None,
) -> str:
    """Derive a numeric code from a secret and the current time window.

    Args:
        secret: HMAC key.
        window_seconds: Length of a time window; the code changes once per window.
        digits: Number of digits in the code (1-9).
        at: Unix timestamp to evaluate at (defaults to now).

    Returns:
        Zero-padded code of exactly ``digits`` characters.

    Raises:
        ValueError: If digits or window_seconds are out of range.
    """
    if not 1 <= digits <= MAX_DIGITS:
        raise ValueError(f"digits must be between 1 and {MAX_DIGITS}")

    counter = window_counter(window_seconds, at=at)
    mac = hmac.new(secret, str(counter).encode("utf-8"), hashlib.sha1).digest()

    offset = mac[-1] & 0x0F
    binary = (
        (mac[offset] & 0x7F) << 24
        | mac[offset + 1] << 16
        | mac[offset + 2] << 8
        | mac[offset + 3]
    )
    return str(binary % 10**digits).zfill(digits)


def generate_otp_secret() -> str:
    """Generate a new per-identity secret.

    Returns:
        32 random bytes, hex encoded (64 characters).
    """
    return secrets.token_hex(SECRET_BYTES)


def decode_otp_secret(value: str | None) -> bytes:
    """Decode a stored hex secret into HMAC key bytes.

    Raises:
        InvalidSecretError: If the value is missing or not valid hex.
    """
    if not value:
        raise InvalidSecretError("OTP secret is missing")
    try:
        return bytes.fromhex(value)
    except (TypeError, ValueError) as e:
        raise InvalidSecretError("OTP secret is not valid hex") from e


__all__: list[str] = [
    "window_counter",
    "generate_totp",
    "generate_otp_secret",
    "decode_otp_secret",
]
