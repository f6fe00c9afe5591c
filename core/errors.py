"""
Errors raised by the OTP core.

Every error is a :class:`ValueError` subclass carrying a fixed message, so
callers can branch on the class instead of parsing text.
"""


class OTPError(ValueError):
    """Base class for all OTP input errors."""

    message = "OTP error"

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.message)


class WrongCodeSizeError(OTPError):
    message = "Code length is not of expected length"


class EmptyIssuerError(OTPError):
    message = "Issuer cannot be empty"


class EmptyUserIDError(OTPError):
    message = "UserID cannot be empty"


class NilOptionsError(OTPError):
    message = "OTP key options cannot be None"


class InvalidSecretError(OTPError):
    message = "invalid base32 encoding of the secret"
