"""
Build otpauth:// provisioning keys.
"""

import logging
import urllib.parse
from dataclasses import dataclass
from typing import Optional

from core.common import CodeSize
from core.errors import EmptyIssuerError, EmptyUserIDError, NilOptionsError
from core.otp import OTPOptions
from core.secret import OTPSecret, new_random_secret
from core.utils import encode_query
from qr.parser import OTPKey

logger = logging.getLogger(__name__)

# Characters left unescaped in a URI path (RFC 3986 pchar plus "/").
_PATH_SAFE = "/$&+,:;=@"


@dataclass(frozen=True)
class OTPKeyOptions:
    """Inputs for :func:`generate_key`."""

    issuer: str
    user_id: str
    secret: Optional[OTPSecret] = None
    options: Optional[OTPOptions] = None


def new_default_key_options(issuer: str, user_id: str) -> OTPKeyOptions:
    """Key options with a fresh 10-byte random secret and default options."""
    return OTPKeyOptions(
        issuer=issuer,
        user_id=user_id,
        secret=new_random_secret(),
        options=OTPOptions(),
    )


def generate_key(otp_type: str, opts: Optional[OTPKeyOptions]) -> OTPKey:
    """
    Build a provisioning key.

    The resulting URI has the form::

        otpauth://<type>/<issuer>:<user>?algorithm=..&digits=..&issuer=..&secret=..

    Args:
        otp_type: ``"hotp"`` or ``"totp"`` (lower-cased into the URI host).
        opts:     Issuer, user and optional secret / options.

    Returns:
        :class:`~qr.parser.OTPKey` wrapping the URI.

    Raises:
        NilOptionsError:  If *opts* is None.
        EmptyIssuerError: If the issuer is empty or whitespace.
        EmptyUserIDError: If the user id is empty or whitespace.
    """
    if opts is None:
        raise NilOptionsError()
    if not opts.issuer or not opts.issuer.strip():
        raise EmptyIssuerError()
    if not opts.user_id or not opts.user_id.strip():
        raise EmptyUserIDError()

    secret = opts.secret if opts.secret is not None else new_random_secret()
    options = opts.options if opts.options is not None else OTPOptions()

    query = encode_query({
        "secret": secret.value,
        "issuer": opts.issuer,
        "algorithm": options.algorithm.value,
        "digits": str(CodeSize(options.code_size or CodeSize.SIX)),
    })
    path = urllib.parse.quote(f"/{opts.issuer}:{opts.user_id}", safe=_PATH_SAFE)
    uri = f"otpauth://{otp_type.lower()}{path}?{query}"

    logger.debug("Generated %s key for issuer %r", otp_type.lower(), opts.issuer)
    return OTPKey(uri)
