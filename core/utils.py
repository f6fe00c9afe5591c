"""
Utility helpers: base32 secret handling, URI query encoding and timing-safe
comparison.
"""

import base64
import binascii
import hmac
import urllib.parse
from typing import Mapping, Optional, Sequence, Union

from core.common import MODULUS_SIZE
from core.errors import InvalidSecretError

# Characters left unescaped in a single URI path segment (RFC 3986 pchar
# minus ",", ";" and "/").
_SEGMENT_SAFE = "$&+:=@"


# ── Base32 ────────────────────────────────────────────────────────────────────

def pad_secret(secret: str) -> str:
    """
    Normalise a base32 secret: strip whitespace, add padding, uppercase.

    Example::

        >>> pad_secret("te")
        'TE======'

    Args:
        secret: Raw secret string.

    Returns:
        Uppercase secret padded with ``=`` to a multiple of 8 characters, or
        ``""`` for empty input.
    """
    secret = secret.strip()
    if not secret:
        return ""
    pad = (MODULUS_SIZE - len(secret) % MODULUS_SIZE) % MODULUS_SIZE
    return (secret + "=" * pad).upper()


def decode_secret(secret: str) -> bytes:
    """
    Decode a base32-encoded secret string to raw bytes.

    Args:
        secret: Base32 secret, padded or not, any case.

    Returns:
        Raw bytes.

    Raises:
        InvalidSecretError: On characters outside the base32 alphabet or
            invalid padding.
    """
    try:
        return base64.b32decode(pad_secret(secret))
    except (binascii.Error, ValueError) as exc:
        raise InvalidSecretError() from exc


def encode_secret(raw: bytes) -> str:
    """Encode raw bytes as a base32 string (no padding)."""
    return base64.b32encode(raw).decode("ascii").rstrip("=")


# ── URI helpers ───────────────────────────────────────────────────────────────

def escape_segment(text: str) -> str:
    """Percent-encode *text* as one URI path segment (space becomes ``%20``)."""
    return urllib.parse.quote(text, safe=_SEGMENT_SAFE)


def encode_query(
    values: Optional[Mapping[str, Union[str, Sequence[str]]]],
) -> str:
    """
    Encode *values* as a query string with keys in sorted order.

    Unlike :func:`urllib.parse.urlencode`, keys and values are escaped the way
    a path segment is, so spaces become ``%20`` rather than ``+``.

    Example::

        >>> encode_query({"foo": "true", "abc def": "true"})
        'abc%20def=true&foo=true'

    Args:
        values: Mapping of key to a single value or a sequence of values.

    Returns:
        Encoded query string without the leading ``?``.
    """
    if not values:
        return ""
    pairs = []
    for key in sorted(values):
        vs = values[key]
        if isinstance(vs, str):
            vs = [vs]
        escaped_key = escape_segment(key)
        for v in vs:
            pairs.append(f"{escaped_key}={escape_segment(v)}")
    return "&".join(pairs)


# ── Comparison ────────────────────────────────────────────────────────────────

def constant_time_compare(a: str, b: str) -> bool:
    """Return True if *a* == *b* in constant time (timing-safe)."""
    return hmac.compare_digest(a.encode(), b.encode())
