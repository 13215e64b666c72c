import datetime
import hashlib
import time
from typing import Any, Callable, Optional, Union

from . import utils
from .exceptions import ClockUnavailable
from .log import logger
from .otp import DEFAULT_DIGITS, OTP
from .otp import timecode as time_counter

DEFAULT_EPOCH = 0


def current_time(clock: Callable[[], float] = time.time) -> int:
    """
    Reads the clock as whole seconds since the Unix epoch.

    :raises ClockUnavailable: if the clock fails or reports a time before 1970
    """
    try:
        now = clock()
        seconds = int(now)
    except (OSError, OverflowError, ValueError) as exc:
        logger.debug("clock read failed: %s", exc)
        raise ClockUnavailable("system clock could not be read") from exc
    if now < 0:
        raise ClockUnavailable("system clock reports a time before the unix epoch")
    return seconds


class TOTP(OTP):
    """
    Handler for time-based OTP counters.
    """

    def __init__(
        self,
        s: str,
        digits: int = DEFAULT_DIGITS,
        digest: Any = None,
        name: Optional[str] = None,
        issuer: Optional[str] = None,
        interval: int = utils.DEFAULT_INTERVAL,
        epoch_start: int = DEFAULT_EPOCH,
    ) -> None:
        """
        :param s: secret in base32 format
        :param interval: the time interval in seconds for OTP. This defaults to 30.
        :param epoch_start: unix time the first interval starts at (T0 of RFC 6238)
        :param digits: number of integers in the OTP. Some apps expect this to be 6 digits, others support more.
        :param digest: digest function to use in the HMAC (expected to be SHA1)
        :param name: account name
        :param issuer: issuer
        """
        if digest is None:
            digest = hashlib.sha1

        self.interval = interval
        self.epoch_start = epoch_start
        super().__init__(s=s, digits=digits, digest=digest, name=name, issuer=issuer)

    def at(self, for_time: Union[int, datetime.datetime]) -> str:
        """
        Accepts either a Unix timestamp integer or a datetime object.

        :param for_time: the time to generate an OTP for
        :returns: OTP value
        """
        return self.generate_otp(self.timecode(for_time))

    def now(self, clock: Callable[[], float] = time.time) -> str:
        """
        Generate the current time OTP

        :returns: OTP value
        """
        return self.at(current_time(clock))

    def verify(self, otp: str, for_time: Optional[Union[int, datetime.datetime]] = None) -> bool:
        """
        Verifies the OTP passed in against the current time OTP.

        Only the step containing for_time is accepted.

        :param otp: the OTP to check against
        :param for_time: Time to check OTP at (defaults to now)
        :returns: True if verification succeeded, False otherwise
        """
        if for_time is None:
            for_time = current_time()
        return utils.strings_equal(str(otp), str(self.at(for_time)))

    def provisioning_uri(self, name: Optional[str] = None, issuer_name: Optional[str] = None) -> str:
        """
        Returns the provisioning URI for the OTP.  This can then be
        encoded in a QR Code and used to provision an OTP app like
        Google Authenticator.

        :param name: name of the user account
        :param issuer_name: the name of the OTP issuer; this will be the
            organization title of the OTP entry in Authenticator
        :returns: provisioning URI
        """
        return utils.build_uri(
            self.secret,
            name=name if name else self.name,
            issuer=issuer_name if issuer_name else self.issuer,
            digits=self.digits,
            period=self.interval,
        )

    def timecode(self, for_time: Union[int, float, datetime.datetime]) -> int:
        """
        Accepts either a timezone naive (`for_time.tzinfo is None`) or
        a timezone aware datetime as argument and returns the
        corresponding counter value (timecode).
        """
        if isinstance(for_time, datetime.datetime):
            # naive datetimes are read as local time
            for_time = for_time.timestamp()
        return time_counter(int(for_time), self.interval, self.epoch_start)
