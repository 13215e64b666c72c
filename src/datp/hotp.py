import hashlib
from typing import Any, Optional

from . import utils
from .otp import DEFAULT_DIGITS, OTP


class HOTP(OTP):
    """
    Event-based codes of RFC 4226. The moving factor is an explicit counter
    offset by ``initial_count``.
    """

    def __init__(
        self,
        s: str,
        digits: int = DEFAULT_DIGITS,
        digest: Any = None,
        name: Optional[str] = None,
        issuer: Optional[str] = None,
        initial_count: int = 0,
    ) -> None:
        """
        :param s: unpadded base32 secret
        :param initial_count: counter value that ``at(0)`` maps to
        :param digits: code length
        :param digest: hashlib constructor for the HMAC, SHA-1 when omitted
        :param name: account name
        :param issuer: issuer
        """
        self.initial_count = initial_count
        super().__init__(s=s, digits=digits, digest=digest or hashlib.sha1, name=name, issuer=issuer)

    def at(self, count: int) -> str:
        """
        :param count: counter, relative to ``initial_count``
        :returns: zero-padded code
        """
        return self.generate_otp(self.initial_count + count)

    def verify(self, otp: str, counter: int) -> bool:
        """
        True when ``otp`` is the code for ``counter``; no look-ahead.
        """
        return utils.strings_equal(str(otp), self.at(counter))

    def provisioning_uri(
        self,
        name: Optional[str] = None,
        initial_count: Optional[int] = None,
        issuer_name: Optional[str] = None,
    ) -> str:
        """
        otpauth://hotp enrollment URI. Arguments left as None fall back to the
        values this instance was built with; ``initial_count=0`` is honoured.
        """
        if initial_count is None:
            initial_count = self.initial_count
        return utils.build_uri(
            self.secret,
            name=name or self.name,
            issuer=issuer_name or self.issuer,
            initial_count=initial_count,
            digits=self.digits,
        )
