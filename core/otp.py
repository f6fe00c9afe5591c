"""
Shared HOTP computation (RFC 4226 §5) used by both HOTP and TOTP.
"""

import hmac
import logging
import struct
from dataclasses import dataclass
from typing import Optional

from core.common import UINT64_MASK, Algorithm, CodeSize
from core.errors import WrongCodeSizeError
from core.utils import constant_time_compare, decode_secret

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OTPOptions:
    """Digit count and HMAC algorithm for counter-based codes."""

    code_size: CodeSize = CodeSize.SIX
    algorithm: Algorithm = Algorithm.SHA1


def _code_size(options: OTPOptions) -> CodeSize:
    # a zero code size means "unset"
    return CodeSize(options.code_size or CodeSize.SIX)


def generate_code(
    secret: str,
    counter: int,
    options: Optional[OTPOptions] = None,
    debug: bool = False,
) -> str:
    """
    Compute the passcode for *secret* at *counter*.

    Args:
        secret:  Base32 secret (padding and case are normalised).
        counter: Unsigned 64-bit moving factor.
        options: Digit count and algorithm (defaults to 6 digits, SHA1).
        debug:   Log the intermediate truncation values at DEBUG level.

    Returns:
        Zero-padded OTP string.

    Raises:
        InvalidSecretError: If *secret* is not valid base32.
        ValueError: If *counter* does not fit in an unsigned 64-bit integer.
    """
    if options is None:
        options = OTPOptions()
    code_size = _code_size(options)

    secret_bytes = decode_secret(secret)

    if not 0 <= counter <= UINT64_MASK:
        raise ValueError(f"Counter out of range for uint64: {counter}")
    msg = struct.pack(">Q", counter)
    digest = hmac.new(secret_bytes, msg, options.algorithm.hash_name).digest()

    # Dynamic truncation
    offset = digest[-1] & 0x0F
    value = (
        (digest[offset] & 0x7F) << 24
        | (digest[offset + 1] & 0xFF) << 16
        | (digest[offset + 2] & 0xFF) << 8
        | (digest[offset + 3] & 0xFF)
    )
    otp = value % (10 ** code_size.length())

    if debug:
        logger.debug(
            "counter=%d buf=%s offset=%d value=%d mod'ed=%d",
            counter, msg.hex(), offset, value, otp,
        )

    return code_size.format(otp)


def validate_code(
    code: str,
    counter: int,
    secret: str,
    options: Optional[OTPOptions] = None,
) -> bool:
    """
    Check *code* against the passcode for a single *counter*.

    Returns:
        True on an exact match, False for a well-formed but wrong code.

    Raises:
        WrongCodeSizeError: If *code* does not have the configured length.
        InvalidSecretError: If *secret* is not valid base32.
    """
    code = code.strip()
    if options is None:
        options = OTPOptions()

    if len(code) != _code_size(options).length():
        raise WrongCodeSizeError()

    expected = generate_code(secret, counter, options)
    return constant_time_compare(code, expected)
