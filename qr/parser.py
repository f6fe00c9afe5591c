"""
Read access to otpauth:// provisioning URIs as defined by the Google
Authenticator Key URI Format.

Reference: https://github.com/google/google-authenticator/wiki/Key-Uri-Format
"""

import urllib.parse
from typing import TYPE_CHECKING

from core.common import DEFAULT_IMAGE_SIZE

if TYPE_CHECKING:
    from PIL import Image


class OTPKey:
    """
    Provisioning key backed by a single URI string.

    The URI is the only state. Every field is parsed from it again on each
    access so the string form and the accessors can never disagree.
    """

    def __init__(self, raw: str = "") -> None:
        self._raw = raw

    def __str__(self) -> str:
        return self._raw

    def __repr__(self) -> str:
        return f"OTPKey({self._raw!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, OTPKey):
            return NotImplemented
        return self._raw == other._raw

    def __hash__(self) -> int:
        return hash(self._raw)

    # ── Parsed parts ─────────────────────────────────────────────────────

    @property
    def url(self) -> urllib.parse.SplitResult:
        return urllib.parse.urlsplit(self._raw)

    def _query(self, name: str) -> str:
        params = urllib.parse.parse_qs(self.url.query)
        return params.get(name, [""])[0]

    def _label(self) -> tuple[str, str]:
        """Return (issuer, user) from the ``issuer:user`` path label."""
        path = urllib.parse.unquote(self.url.path)
        if path.startswith("/"):
            path = path[1:]
        issuer, sep, user = path.partition(":")
        if not sep:
            return "", ""
        return issuer, user

    # ── Public API ───────────────────────────────────────────────────────

    @property
    def type(self) -> str:
        """``hotp`` or ``totp``."""
        return self.url.netloc

    @property
    def issuer(self) -> str:
        """Issuer from the query, falling back to the label prefix."""
        return self._query("issuer") or self._label()[0]

    @property
    def user_id(self) -> str:
        return self._label()[1]

    @property
    def secret(self) -> str:
        return self._query("secret")

    @property
    def algorithm(self) -> str:
        return self._query("algorithm")

    @property
    def digits(self) -> int:
        """Digit count from the query, or 0 if missing or not a number."""
        raw = self._query("digits")
        return int(raw) if raw.isascii() and raw.isdigit() else 0

    def png(self, size: int = DEFAULT_IMAGE_SIZE) -> bytes:
        """
        Render the key as a QR code PNG.

        Raises:
            qr.image.QRImageError: If the key has no URI or cannot be encoded.
        """
        from qr.image import render_png

        return render_png(self._raw, size)

    def image(self, size: int = DEFAULT_IMAGE_SIZE) -> "Image.Image":
        """Render the key as a decoded QR code image (see :meth:`png`)."""
        from qr.image import render_image

        return render_image(self._raw, size)


def new_key_from_uri(uri: str) -> OTPKey:
    """Wrap an existing otpauth:// URI (e.g. scanned from a QR code)."""
    return OTPKey(uri.strip())
