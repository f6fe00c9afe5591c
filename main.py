"""
Command-line front end for the OTP library.

Usage
-----
    python main.py secret --size 20
    python main.py totp --secret JBSWY3DPEHPK3PXP
    python main.py verify-hotp 755224 --counter 0 --secret GEZDGNBVGY3TQOJQ...
    python main.py key --type totp --issuer Example --user alice@example.com --png key.png

The secret defaults to the ``OTP_SECRET`` environment variable.
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Optional, Sequence

from core import hotp, totp
from core.common import (
    DEFAULT_IMAGE_SIZE,
    DEFAULT_PERIOD,
    DEFAULT_SECRET_SIZE,
    DEFAULT_SKEW,
    Algorithm,
    CodeSize,
)
from core.otp import OTPOptions
from core.secret import new_random_secret, new_secret
from core.totp import TOTPOptions
from qr.builder import OTPKeyOptions, generate_key
from qr.image import QRImageError

logger = logging.getLogger("otpforge")

# Commands that compute or check a code and so need a non-empty secret
_SECRET_COMMANDS = ("hotp", "totp", "verify-hotp", "verify-totp")


# ── Logging setup ─────────────────────────────────────────────────────────────

def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


# ── Argument parsing ──────────────────────────────────────────────────────────

def _add_code_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--secret", default=os.environ.get("OTP_SECRET", ""),
                        help="base32 secret (default: $OTP_SECRET)")
    parser.add_argument("--digits", type=int, default=int(CodeSize.SIX),
                        choices=[int(c) for c in CodeSize])
    parser.add_argument("--algorithm", type=Algorithm, default=Algorithm.SHA1,
                        choices=list(Algorithm), metavar="{SHA1,SHA256,SHA512}")


def _add_time_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--timestamp", type=float, default=None,
                        help="Unix time to use instead of the current time")
    parser.add_argument("--period", type=int, default=DEFAULT_PERIOD)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="otpforge", description=__doc__.splitlines()[1])
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("secret", help="print a random base32 secret")
    p.add_argument("--size", type=int, default=DEFAULT_SECRET_SIZE, help="secret length in bytes")

    p = sub.add_parser("hotp", help="print the HOTP code for a counter")
    _add_code_args(p)
    p.add_argument("--counter", type=int, required=True)

    p = sub.add_parser("totp", help="print the current TOTP code")
    _add_code_args(p)
    _add_time_args(p)

    p = sub.add_parser("verify-hotp", help="check an HOTP code")
    p.add_argument("code")
    _add_code_args(p)
    p.add_argument("--counter", type=int, required=True)

    p = sub.add_parser("verify-totp", help="check a TOTP code")
    p.add_argument("code")
    _add_code_args(p)
    _add_time_args(p)
    p.add_argument("--skew", type=int, default=DEFAULT_SKEW)

    p = sub.add_parser("key", help="print a provisioning URI")
    p.add_argument("--type", choices=["hotp", "totp"], default="totp")
    p.add_argument("--issuer", required=True)
    p.add_argument("--user", required=True)
    p.add_argument("--secret", default=os.environ.get("OTP_SECRET", ""))
    p.add_argument("--digits", type=int, default=int(CodeSize.SIX),
                   choices=[int(c) for c in CodeSize])
    p.add_argument("--algorithm", type=Algorithm, default=Algorithm.SHA1,
                   choices=list(Algorithm), metavar="{SHA1,SHA256,SHA512}")
    p.add_argument("--png", type=Path, default=None, help="write the QR code to this file")
    p.add_argument("--size", type=int, default=DEFAULT_IMAGE_SIZE, help="QR image size in pixels")

    return parser


# ── Commands ──────────────────────────────────────────────────────────────────

def _otp_options(args: argparse.Namespace) -> OTPOptions:
    return OTPOptions(code_size=CodeSize(args.digits), algorithm=args.algorithm)


def _totp_options(args: argparse.Namespace, skew: int = DEFAULT_SKEW) -> TOTPOptions:
    return TOTPOptions(
        period=args.period,
        skew=skew,
        code_size=CodeSize(args.digits),
        algorithm=args.algorithm,
    )


def _run(args: argparse.Namespace) -> int:
    if args.command == "secret":
        print(new_random_secret(args.size).value)
        return 0

    if args.command == "hotp":
        if args.algorithm is not Algorithm.SHA1:
            logger.warning("HOTP is defined for SHA1 only; ignoring %s", args.algorithm.value)
        print(hotp.generate_code(args.secret, args.counter, _otp_options(args),
                                 debug=args.verbose))
        return 0

    if args.command == "totp":
        print(totp.generate_code(args.secret, args.timestamp, _totp_options(args),
                                 debug=args.verbose))
        return 0

    if args.command == "verify-hotp":
        valid = hotp.validate(args.code, args.counter, args.secret, _otp_options(args))
    elif args.command == "verify-totp":
        valid = totp.validate(args.code, args.secret, args.timestamp,
                              _totp_options(args, skew=args.skew))
    else:
        return _run_key(args)

    print("valid" if valid else "invalid")
    return 0 if valid else 1


def _run_key(args: argparse.Namespace) -> int:
    key = generate_key(args.type, OTPKeyOptions(
        issuer=args.issuer,
        user_id=args.user,
        secret=new_secret(args.secret) if args.secret else None,
        options=_otp_options(args),
    ))
    print(key)
    if args.png is not None:
        args.png.write_bytes(key.png(args.size))
        logger.info("QR code written to %s", args.png)
    return 0


# ── Main ──────────────────────────────────────────────────────────────────────

def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command in _SECRET_COMMANDS and not args.secret.strip():
        parser.error("a secret is required (--secret or $OTP_SECRET)")
    _configure_logging(args.verbose)

    try:
        return _run(args)
    except (ValueError, QRImageError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
