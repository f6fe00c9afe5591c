"""
Shared-secret value object.
"""

import secrets
from dataclasses import dataclass

from core.common import DEFAULT_SECRET_SIZE
from core.utils import encode_secret, pad_secret


@dataclass(frozen=True)
class OTPSecret:
    """A base32 shared secret."""

    value: str
    size: int     # bytes drawn for random secrets, padded length otherwise

    def __str__(self) -> str:
        return self.value


def new_secret(secret: str) -> OTPSecret:
    """Wrap a caller-supplied base32 secret, normalising its padding and case."""
    value = pad_secret(secret)
    return OTPSecret(value=value, size=len(value))


def new_random_secret(size: int = DEFAULT_SECRET_SIZE) -> OTPSecret:
    """
    Generate a cryptographically random secret.

    Args:
        size: Number of random bytes. Values <= 0 fall back to 10.

    Returns:
        :class:`OTPSecret` whose value is the unpadded base32 encoding,
        ``ceil(size * 8 / 5)`` characters long.
    """
    if size <= 0:
        size = DEFAULT_SECRET_SIZE
    raw = secrets.token_bytes(size)
    return OTPSecret(value=encode_secret(raw), size=size)
