import secrets
import time
from typing import Any, Callable, Dict, Optional, Union
from urllib.parse import parse_qsl, unquote, urlparse

from .exceptions import ClockUnavailable as ClockUnavailable
from .exceptions import InvalidSecret as InvalidSecret
from .exceptions import InvalidTiming as InvalidTiming
from .exceptions import OTPError as OTPError
from .exceptions import QrEncodingError as QrEncodingError
from .hotp import HOTP as HOTP
from .otp import OTP as OTP
from .otp import encode_secret
from .qr import QrConfig as QrConfig
from .qr import render_enrollment_qr as render_enrollment_qr
from .totp import TOTP as TOTP
from .totp import current_time
from .utils import DEFAULT_ALGORITHM, DEFAULT_INTERVAL

DEFAULT_SECRET_BYTES = 20


def generate_secret(length: int = DEFAULT_SECRET_BYTES, rand_bytes: Callable[[int], bytes] = secrets.token_bytes) -> str:
    """
    Draws ``length`` random bytes and returns them as unpadded base32.

    ``length`` 0 gives an empty string; callers needing a usable secret should
    ask for at least 16 bytes (RFC 4226 recommends 20).

    :param length: number of random bytes
    :param rand_bytes: source of random bytes, ``secrets.token_bytes`` by default
    """
    if length < 0:
        raise ValueError("length must not be negative")
    return encode_secret(rand_bytes(length))


random_base32 = generate_secret


def compute_code(secret: str, step: int, epoch_start: int, at_time: int) -> int:
    """
    Computes the 6 digit TOTP code of ``secret`` at unix time ``at_time``.

    The result is an integer; pad it to six digits for display.

    :raises InvalidSecret: if the secret is not unpadded base32
    :raises InvalidTiming: if step is not positive or at_time precedes epoch_start
    """
    totp = TOTP(secret, interval=step, epoch_start=epoch_start)
    return totp.generate_code(totp.timecode(at_time))


def compute_code_now(secret: str, step: int, epoch_start: int, clock: Callable[[], float] = time.time) -> int:
    """
    Same as compute_code, at the current time.

    :raises ClockUnavailable: if the clock cannot be read
    """
    return compute_code(secret, step, epoch_start, current_time(clock))


def parse_uri(uri: str) -> Union[TOTP, HOTP]:
    """
    Builds a TOTP or HOTP from an otpauth enrollment URI; the inverse of
    ``utils.build_uri``.

    See also:
        https://github.com/google/google-authenticator/wiki/Key-Uri-Format

    :param uri: otpauth://totp/... or otpauth://hotp/...
    :returns: OTP object
    :raises ValueError: on another scheme or type, a missing secret, digits
        other than 6, 7 or 8, an algorithm other than SHA1, or an issuer that
        differs between label and query
    """
    parsed = urlparse(uri)
    if parsed.scheme != "otpauth":
        raise ValueError("Not an otpauth URI")
    if parsed.netloc not in ("totp", "hotp"):
        raise ValueError("Not a supported OTP type: {}".format(parsed.netloc))

    # label is "issuer:account" or just "account"
    issuer: Optional[str]
    issuer, sep, name = unquote(parsed.path[1:]).partition(":")
    if not sep:
        issuer, name = None, issuer

    query = dict(parse_qsl(parsed.query))
    secret = query.get("secret")
    if not secret:
        raise ValueError("No secret found in URI")

    if "issuer" in query:
        if issuer is not None and issuer != query["issuer"]:
            raise ValueError("If issuer is specified in both label and parameters, it should be equal.")
        issuer = query["issuer"]

    if query.get("algorithm", DEFAULT_ALGORITHM).upper() != DEFAULT_ALGORITHM:
        raise ValueError("Invalid value for algorithm, only SHA1 is supported")

    options: Dict[str, Any] = {"name": name, "issuer": issuer}
    if "digits" in query:
        options["digits"] = int(query["digits"])
        if options["digits"] not in (6, 7, 8):
            raise ValueError("Digits may only be 6, 7, or 8")

    if parsed.netloc == "hotp":
        return HOTP(secret, initial_count=int(query.get("counter", 0)), **options)
    return TOTP(secret, interval=int(query.get("period", DEFAULT_INTERVAL)), **options)
