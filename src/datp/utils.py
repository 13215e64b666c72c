import unicodedata
from hmac import compare_digest
from typing import Dict, Optional, Union
from urllib.parse import quote, urlencode

from .otp import DEFAULT_DIGITS

DEFAULT_INTERVAL = 30
DEFAULT_ALGORITHM = "SHA1"


def build_uri(
    secret: str,
    name: str,
    issuer: Optional[str] = None,
    initial_count: Optional[int] = None,
    digits: int = DEFAULT_DIGITS,
    period: int = DEFAULT_INTERVAL,
) -> str:
    """
    Returns the enrollment URI for the OTP; works for either TOTP or HOTP.

    This can then be encoded in a QR Code and scanned by any authenticator app::

        otpauth://totp/FooCorp:alice?secret=JBSWY3DPEHPK3PXP&issuer=FooCorp&algorithm=SHA1&digits=6&period=30

    Unlike the minimal form, algorithm, digits and period are always written
    out; some apps guess wrong when they are missing.

    See also:
        https://github.com/google/google-authenticator/wiki/Key-Uri-Format

    :param secret: the unpadded base32 secret
    :param name: name of the account
    :param issuer: the name of the OTP issuer; this will be the
        organization title of the OTP entry in Authenticator
    :param initial_count: starting counter value, defaults to None.
        If none, the OTP type will be assumed as TOTP.
    :param digits: the length of the OTP generated code.
    :param period: the number of seconds the OTP generator is set to
        expire every code. Only written for TOTP.
    :returns: provisioning uri
    """
    # initial_count may be 0 as a valid param
    is_initial_count_present = initial_count is not None

    otp_type = "hotp" if is_initial_count_present else "totp"
    base_uri = "otpauth://{0}/{1}?{2}"

    url_args: Dict[str, Union[int, str]] = {"secret": secret}

    label = quote(name)
    if issuer:
        label = quote(issuer) + ":" + label
        url_args["issuer"] = issuer

    url_args["algorithm"] = DEFAULT_ALGORITHM
    url_args["digits"] = digits
    if is_initial_count_present:
        url_args["counter"] = initial_count  # type: ignore
    else:
        url_args["period"] = period

    return base_uri.format(otp_type, label, urlencode(url_args).replace("+", "%20"))


def strings_equal(s1: str, s2: str) -> bool:
    """
    Timing-attack resistant string comparison.

    Normal comparison using == will short-circuit on the first mismatching
    character. This avoids that by scanning the whole string, though we
    still reveal to a timing attack whether the strings are the same
    length.
    """
    s1 = unicodedata.normalize("NFKC", s1)
    s2 = unicodedata.normalize("NFKC", s2)
    return compare_digest(s1.encode("utf-8"), s2.encode("utf-8"))
