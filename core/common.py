"""
Shared enums and defaults for HOTP / TOTP generation.
"""

from enum import Enum, IntEnum

# ── Constants ────────────────────────────────────────────────────────────────

MODULUS_SIZE = 8             # base32 block size and counter width in bytes
DEFAULT_IMAGE_SIZE = 512     # QR image edge in pixels
DEFAULT_PERIOD = 30          # TOTP time step in seconds
DEFAULT_SKEW = 1             # TOTP steps tolerated on either side
DEFAULT_SECRET_SIZE = 10     # random secret length in bytes
UINT64_MASK = 0xFFFFFFFFFFFFFFFF


# ── Code size ────────────────────────────────────────────────────────────────

class CodeSize(IntEnum):
    """Number of decimal digits in a passcode."""

    SIX = 6
    SEVEN = 7
    EIGHT = 8

    def length(self) -> int:
        return int(self)

    def format(self, value: int) -> str:
        """Render *value* as a zero-padded string of exactly this many digits."""
        return str(value).zfill(int(self))

    def __str__(self) -> str:
        return str(int(self))


# ── Algorithm ────────────────────────────────────────────────────────────────

class Algorithm(str, Enum):
    """Supported HMAC algorithms."""

    SHA1 = "SHA1"
    SHA256 = "SHA256"
    SHA512 = "SHA512"

    @property
    def hash_name(self) -> str:
        """``hashlib`` name of the underlying digest."""
        return _ALG_MAP[self]

    def __str__(self) -> str:
        return self.value


_ALG_MAP: dict[str, str] = {
    Algorithm.SHA1: "sha1",
    Algorithm.SHA256: "sha256",
    Algorithm.SHA512: "sha512",
}
