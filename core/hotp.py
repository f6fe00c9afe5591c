"""
HOTP (HMAC-based One-Time Password) implementation following RFC 4226.

RFC 4226 only defines HMAC-SHA1, so SHA256/SHA512 requests are served with
SHA1.
"""

from dataclasses import replace
from typing import Optional

from core.common import Algorithm
from core import otp
from core.otp import OTPOptions
from qr.builder import OTPKeyOptions, generate_key as _generate_key, new_default_key_options
from qr.parser import OTPKey


def _sha1_only(options: Optional[OTPOptions]) -> OTPOptions:
    if options is None:
        return OTPOptions()
    if options.algorithm in (Algorithm.SHA256, Algorithm.SHA512):
        return replace(options, algorithm=Algorithm.SHA1)
    return options


def generate_code(
    secret: str,
    counter: int,
    options: Optional[OTPOptions] = None,
    debug: bool = False,
) -> str:
    """
    Generate an HOTP code.

    Args:
        secret:  Base32 secret.
        counter: Synchronisation counter value.
        options: Digit count and algorithm; the algorithm is forced to SHA1.
        debug:   Log the truncation steps at DEBUG level.

    Returns:
        Zero-padded OTP string.
    """
    return otp.generate_code(secret, counter, _sha1_only(options), debug=debug)


def generate_code_default(secret: str, counter: int) -> str:
    return generate_code(secret, counter, OTPOptions())


def validate(
    code: str,
    counter: int,
    secret: str,
    options: Optional[OTPOptions] = None,
) -> bool:
    """
    Validate an HOTP code for exactly one counter value.

    Replay protection is up to the caller: advance and persist the counter
    after a successful validation.

    Returns:
        True if *code* matches, False otherwise.

    Raises:
        WrongCodeSizeError: If *code* has the wrong number of digits.
        InvalidSecretError: If *secret* is not valid base32.
    """
    return otp.validate_code(code, counter, secret, _sha1_only(options))


def validate_default(code: str, counter: int, secret: str) -> bool:
    return validate(code, counter, secret, OTPOptions())


def generate_key(opts: Optional[OTPKeyOptions]) -> OTPKey:
    """Build an ``otpauth://hotp/`` provisioning key."""
    return _generate_key("hotp", opts)


def generate_default_key(issuer: str, user_id: str) -> OTPKey:
    return _generate_key("hotp", new_default_key_options(issuer, user_id))
