class OTPError(ValueError):
    """
    Base class for every failure raised by datp.
    """


class InvalidSecret(OTPError):
    """
    The secret is not valid unpadded base32, or the HMAC rejected it as a key.
    """


class InvalidTiming(OTPError):
    """
    The time step is not positive, or the time lies before the epoch start.
    """


class ClockUnavailable(OTPError):
    """
    The system clock could not be read.
    """


class QrEncodingError(OTPError):
    """
    The enrollment URL does not fit into the requested QR symbol.
    """
