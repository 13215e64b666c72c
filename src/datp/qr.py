"""Enrollment QR codes.

The otpauth URI is encoded with the ``qrcode`` package and written out as a
standalone SVG document sized in pixels.
"""

import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Union

import qrcode
import qrcode.constants
import qrcode.exceptions
import qrcode.image.svg

from .exceptions import QrEncodingError
from .log import logger
from .utils import build_uri

MAX_VERSION = 5
DEFAULT_VERSION = 1
DEFAULT_EC_LEVEL = "M"

ERROR_CORRECTION = {
    "L": qrcode.constants.ERROR_CORRECT_L,
    "M": qrcode.constants.ERROR_CORRECT_M,
    "Q": qrcode.constants.ERROR_CORRECT_Q,
    "H": qrcode.constants.ERROR_CORRECT_H,
}


@dataclass(frozen=True)
class QrConfig:
    """
    Styling and symbol options for an enrollment QR code.

    Invalid ``version`` (outside 1..5) and ``ec_level`` (not one of L, M, Q, H)
    values are replaced by 1 and M instead of raising.

    :param min_dimension: smallest acceptable width and height in pixels
    :param version: starting QR version; with ``fit`` the symbol may grow past it
    :param fit: grow the symbol when the URI does not fit ``version``
    """

    account_name: str = "totp"
    issuer: str = "totp"
    dark_color: str = "#000000"
    light_color: str = "#ffffff"
    min_dimension: int = 200
    version: int = DEFAULT_VERSION
    ec_level: str = DEFAULT_EC_LEVEL
    fit: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.version, int) or not 1 <= self.version <= MAX_VERSION:
            object.__setattr__(self, "version", DEFAULT_VERSION)
        ec_level = self.ec_level.upper() if isinstance(self.ec_level, str) else ""
        if ec_level not in ERROR_CORRECTION:
            ec_level = DEFAULT_EC_LEVEL
        object.__setattr__(self, "ec_level", ec_level)


class PixelSvgImage(qrcode.image.svg.SvgPathImage):
    """
    SvgPathImage measured in pixels instead of millimetres, with the module
    and background colors chosen per image.
    """

    def __init__(self, *args, dark_color: str = "#000000", light_color: str = "#ffffff", **kwargs) -> None:
        # both are read while the parent constructor builds the document
        self.background = light_color
        self.QR_PATH_STYLE = dict(qrcode.image.svg.SvgPathImage.QR_PATH_STYLE, fill=dark_color)
        super().__init__(*args, **kwargs)

    def units(self, pixels: Union[int, Decimal], text: bool = True):  # type: ignore[override]
        if not text:
            return Decimal(pixels)
        return str(pixels)


def render_svg(url: str, config: QrConfig) -> str:
    """
    Encodes ``url`` as a QR code and returns it as SVG text.

    :raises QrEncodingError: if the URL exceeds the capacity of the symbol
    """
    qr = qrcode.QRCode(
        version=config.version,
        error_correction=ERROR_CORRECTION[config.ec_level],
        image_factory=PixelSvgImage,
    )
    qr.add_data(url)
    # qrcode 8 reports an overflow past version 40 as a plain ValueError
    try:
        qr.make(fit=config.fit)
    except (qrcode.exceptions.DataOverflowError, ValueError) as exc:
        raise QrEncodingError(
            "{} byte URL does not fit a version {}-{} QR code".format(
                len(url.encode("utf-8")), "40" if config.fit else config.version, config.ec_level
            )
        ) from exc

    # the quiet zone counts towards the requested dimension
    qr.box_size = max(1, math.ceil(config.min_dimension / (qr.modules_count + 2 * qr.border)))
    logger.debug("rendering QR version %d with %d px modules", qr.version, qr.box_size)

    img = qr.make_image(dark_color=config.dark_color, light_color=config.light_color)
    return img.to_string(encoding="unicode")


def render_enrollment_qr(secret: str, config: QrConfig) -> str:
    """
    Renders the TOTP enrollment URI for ``secret`` as an SVG QR code.

    :param secret: the unpadded base32 secret
    :param config: account, issuer and styling
    :returns: SVG document
    """
    url = build_uri(secret, config.account_name, issuer=config.issuer)
    return render_svg(url, config)
