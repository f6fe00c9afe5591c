"""
TOTP (Time-based One-Time Password) implementation following RFC 6238.

Produces codes identical to Google Authenticator.
"""

import math
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Union

from core import otp
from core.common import (
    DEFAULT_PERIOD,
    DEFAULT_SKEW,
    UINT64_MASK,
    Algorithm,
    CodeSize,
)
from core.otp import OTPOptions
from qr.builder import OTPKeyOptions, generate_key as _generate_key, new_default_key_options
from qr.parser import OTPKey

Timestamp = Union[float, datetime]


@dataclass(frozen=True)
class TOTPOptions:
    """Time step, skew window, digit count and algorithm for TOTP."""

    period: int = DEFAULT_PERIOD
    skew: int = DEFAULT_SKEW
    code_size: CodeSize = CodeSize.SIX
    algorithm: Algorithm = Algorithm.SHA1

    def otp_options(self) -> OTPOptions:
        return OTPOptions(code_size=self.code_size, algorithm=self.algorithm)


def _unix_seconds(timestamp: Optional[Timestamp]) -> float:
    if timestamp is None:
        return time.time()
    if isinstance(timestamp, datetime):
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=timezone.utc)
        return timestamp.timestamp()
    return float(timestamp)


def _period(options: TOTPOptions) -> int:
    return options.period or DEFAULT_PERIOD


def time_counter(period: int, timestamp: Optional[Timestamp] = None) -> int:
    """Return the RFC 6238 time step counter ``floor(t / period)`` as uint64."""
    return (math.floor(_unix_seconds(timestamp)) // period) & UINT64_MASK


def generate_code(
    secret: str,
    timestamp: Optional[Timestamp] = None,
    options: Optional[TOTPOptions] = None,
    debug: bool = False,
) -> str:
    """
    Generate a TOTP code.

    Args:
        secret:    Base32 secret.
        timestamp: Unix timestamp or datetime (uses time.time() if None).
        options:   Period, digits and algorithm. A zero period means 30.
        debug:     Log the truncation steps at DEBUG level.

    Returns:
        OTP string, zero-padded to the configured number of digits.
    """
    if options is None:
        options = TOTPOptions()
    counter = time_counter(_period(options), timestamp)
    return otp.generate_code(secret, counter, options.otp_options(), debug=debug)


def generate_default(secret: str) -> str:
    return generate_code(secret, None, TOTPOptions())


def remaining_seconds(period: int = DEFAULT_PERIOD, timestamp: Optional[Timestamp] = None) -> int:
    """Return seconds until the current TOTP window expires."""
    t = math.floor(_unix_seconds(timestamp))
    return period - (t % period)


def _candidate_counters(counter: int, skew: int) -> list[int]:
    """Current counter first, then +1, -1, +2, -2 ... up to *skew*."""
    counters = [counter]
    for i in range(1, skew + 1):
        counters.append((counter + i) & UINT64_MASK)
        counters.append((counter - i) & UINT64_MASK)
    return counters


def validate(
    code: str,
    secret: str,
    timestamp: Optional[Timestamp] = None,
    options: Optional[TOTPOptions] = None,
) -> bool:
    """
    Validate a TOTP code within ±``skew`` time steps.

    Args:
        code:      Code to validate.
        secret:    Base32 secret.
        timestamp: Unix timestamp or datetime (uses time.time() if None).
        options:   Period, skew, digits and algorithm.

    Returns:
        True if *code* matches any step in the window.

    Raises:
        WrongCodeSizeError: If *code* has the wrong number of digits.
        InvalidSecretError: If *secret* is not valid base32.
    """
    if options is None:
        options = TOTPOptions()
    counter = time_counter(_period(options), timestamp)
    otp_options = options.otp_options()

    for candidate in _candidate_counters(counter, options.skew):
        if otp.validate_code(code, candidate, secret, otp_options):
            return True
    return False


def validate_default(code: str, secret: str) -> bool:
    return validate(code, secret, None, TOTPOptions())


def generate_key(opts: Optional[OTPKeyOptions]) -> OTPKey:
    """Build an ``otpauth://totp/`` provisioning key."""
    return _generate_key("totp", opts)


def generate_default_key(issuer: str, user_id: str) -> OTPKey:
    return _generate_key("totp", new_default_key_options(issuer, user_id))
