import base64
import hashlib
import hmac
from typing import Any, Optional

from .exceptions import InvalidSecret, InvalidTiming
from .log import logger

DEFAULT_DIGITS = 6
MAX_COUNTER = 2**64 - 1


def encode_secret(raw: bytes) -> str:
    """
    Encodes raw key bytes as unpadded base32, the form used in otpauth URIs.
    """
    return base64.b32encode(raw).decode("ascii").rstrip("=")


def decode_secret(secret: str) -> bytes:
    """
    Decodes an unpadded base32 secret into raw key bytes.

    Lower case input is accepted. Padding characters are not: otpauth secrets
    are never padded, so an '=' means the text was not meant for us.

    :param secret: the base32 secret
    :returns: the key bytes
    :raises InvalidSecret: on symbols outside the alphabet or an impossible length
    """
    if "=" in secret:
        raise InvalidSecret("secret must not contain base32 padding")
    missing_padding = len(secret) % 8
    if missing_padding != 0:
        secret += "=" * (8 - missing_padding)
    try:
        return base64.b32decode(secret, casefold=True)
    except ValueError as exc:  # binascii.Error, or non-ASCII text
        logger.debug("base32 decoding failed: %s", exc)
        raise InvalidSecret("secret is not valid base32") from exc


def timecode(unix_time: int, step: int, epoch_start: int = 0) -> int:
    """
    Derives the moving factor of RFC 6238: floor((unix_time - epoch_start) / step).

    :raises InvalidTiming: if step is not positive, or unix_time lies before epoch_start
    """
    if step <= 0:
        raise InvalidTiming("step must be a positive number of seconds")
    if epoch_start < 0 or unix_time < 0:
        raise InvalidTiming("times must be non-negative unix timestamps")
    if unix_time < epoch_start:
        raise InvalidTiming("time {} is before the epoch start {}".format(unix_time, epoch_start))
    return (unix_time - epoch_start) // step


def counter_bytes(counter: int) -> bytes:
    """
    Turns a counter into the OATH specified 8 byte big-endian string,
    which is fed to the HMAC along with the secret.
    """
    if counter < 0 or counter > MAX_COUNTER:
        raise InvalidTiming("counter must fit in an unsigned 64-bit integer")
    return counter.to_bytes(8, "big")


def dynamic_truncate(hmac_hash: bytes) -> int:
    """
    RFC 4226 section 5.3: pick four bytes at the offset named by the low nibble
    of the last byte and read them as a 31-bit big-endian integer.
    """
    offset = hmac_hash[-1] & 0xF
    return (
        (hmac_hash[offset] & 0x7F) << 24
        | (hmac_hash[offset + 1] & 0xFF) << 16
        | (hmac_hash[offset + 2] & 0xFF) << 8
        | (hmac_hash[offset + 3] & 0xFF)
    )


class OTP(object):
    """
    Base class for OTP handlers.
    """

    def __init__(
        self,
        s: str,
        digits: int = DEFAULT_DIGITS,
        digest: Any = hashlib.sha1,
        name: Optional[str] = None,
        issuer: Optional[str] = None,
    ) -> None:
        if not 1 <= digits <= 10:
            raise ValueError("digits must be between 1 and 10")
        self.digits = digits
        if digest in [hashlib.md5, hashlib.shake_128]:
            raise ValueError("selected digest function must generate digest size greater than or equals to 18 bytes")
        self.digest = digest
        self.secret = s
        self.name = name or "Secret"
        self.issuer = issuer

    def generate_code(self, input: int) -> int:
        """
        :param input: the HMAC counter value to use as the OTP input.
            Usually either the counter, or the computed integer based on the Unix timestamp
        :returns: the code as an integer below 10 ** digits
        """
        # Implements RFC 4226
        key = self.byte_secret()
        message = counter_bytes(input)
        try:
            hasher = hmac.new(key, message, self.digest)
        except (TypeError, ValueError) as exc:
            raise InvalidSecret("key rejected by the HMAC: {}".format(exc)) from exc
        if hasher.digest_size < 18:
            raise ValueError("digest size is lower than 18 bytes, which will trigger error on otp generation")
        return dynamic_truncate(hasher.digest()) % 10**self.digits

    def generate_otp(self, input: int) -> str:
        """
        Same as generate_code, zero-padded to the configured number of digits.
        """
        # the leading 1 keeps zeros that str() would drop
        str_code = str(10_000_000_000 + self.generate_code(input))
        return str_code[-self.digits :]

    def byte_secret(self) -> bytes:
        return decode_secret(self.secret)
