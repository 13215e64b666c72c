"""Exception-free entry points for embedding hosts.

Bridges such as ctypes callbacks or scripting plugins cannot carry Python
exceptions, so every failure here collapses to a neutral value: ``0`` for
codes and ``None`` for strings. ``None`` arguments are treated the same way.

Version and error-correction levels use 0-based codes: version 0..4 selects
QR version 1..5 and error correction 0..3 selects L, M, Q, H. Unknown codes
fall back to version 1 and level M.
"""

from typing import Optional

from . import compute_code, compute_code_now, generate_secret
from .exceptions import OTPError
from .log import logger
from .qr import QrConfig, render_enrollment_qr

EC_LEVELS = ("L", "M", "Q", "H")
ACCOUNT_NAME = "totp"
ISSUER = "totp"


def generate_totp_secret(length: Optional[int]) -> Optional[str]:
    if length is None or length < 0:
        return None
    return generate_secret(length)


def totp_raw(secret: Optional[str], step: int, t0: int, unix_time: int) -> int:
    if secret is None:
        return 0
    try:
        return compute_code(secret, step, t0, unix_time)
    except OTPError as exc:
        logger.debug("totp_raw failed: %s", exc)
        return 0


def totp_raw_now(secret: Optional[str], step: int, t0: int) -> int:
    if secret is None:
        return 0
    try:
        return compute_code_now(secret, step, t0)
    except OTPError as exc:
        logger.debug("totp_raw_now failed: %s", exc)
        return 0


def qr_config(dark_color: str, light_color: str, min_dimension: int, version: int, ec_level: int) -> QrConfig:
    """
    Builds a QrConfig from 0-based version and error-correction codes.
    """
    return QrConfig(
        account_name=ACCOUNT_NAME,
        issuer=ISSUER,
        dark_color=dark_color,
        light_color=light_color,
        min_dimension=min_dimension,
        version=version + 1 if 0 <= version <= 4 else 1,
        ec_level=EC_LEVELS[ec_level] if 0 <= ec_level < len(EC_LEVELS) else "M",
    )


def totp_qr_svg(
    secret: Optional[str],
    dark_color: Optional[str],
    light_color: Optional[str],
    min_dimension: int,
    version: int,
    ec_level: int,
) -> Optional[str]:
    if secret is None or dark_color is None or light_color is None:
        return None
    try:
        return render_enrollment_qr(secret, qr_config(dark_color, light_color, min_dimension, version, ec_level))
    except OTPError as exc:
        logger.debug("totp_qr_svg failed: %s", exc)
        return None
