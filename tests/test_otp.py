import hashlib

import pytest

import datp
from datp.otp import OTP, counter_bytes, decode_secret, dynamic_truncate, encode_secret, timecode

# RFC 4226 Appendix D: ASCII "12345678901234567890"
RFC_SECRET = "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"
RFC4226_CODES = [
    "755224",
    "287082",
    "359152",
    "969429",
    "338314",
    "254676",
    "287922",
    "162583",
    "399871",
    "520489",
]


def test_rfc4226_vectors() -> None:
    hotp = datp.HOTP(RFC_SECRET)
    for count, expected in enumerate(RFC4226_CODES):
        assert hotp.at(count) == expected


def test_dynamic_truncation_reproduces_rfc_intermediate_values() -> None:
    # section 5.4 example digest
    assert dynamic_truncate(bytes.fromhex("1f8698690e02ca16618550ef7f19da8e945b555a")) == 0x50EF7F19
    # Appendix D, counters 0 and 1
    assert dynamic_truncate(bytes.fromhex("cc93cf18508d94934c64b65d8ba7667fb7cde4b0")) == 1284755224
    assert dynamic_truncate(bytes.fromhex("75a48a19d4cbe100644e8ac1397eea747a2d33ab")) == 1094287082


def test_dynamic_truncation_masks_sign_bit() -> None:
    digest = bytes([0xFF] * 19 + [0x00])
    assert dynamic_truncate(digest) == 0x7FFFFFFF


def test_counter_bytes_are_big_endian() -> None:
    assert counter_bytes(0) == b"\x00" * 8
    assert counter_bytes(1) == b"\x00\x00\x00\x00\x00\x00\x00\x01"
    assert counter_bytes(0x0102030405060708) == bytes([1, 2, 3, 4, 5, 6, 7, 8])
    assert counter_bytes(2**64 - 1) == b"\xff" * 8


@pytest.mark.parametrize("counter", [-1, 2**64])
def test_counter_bytes_rejects_out_of_range(counter: int) -> None:
    with pytest.raises(datp.InvalidTiming):
        counter_bytes(counter)


def test_timecode() -> None:
    assert timecode(59, 30) == 1
    assert timecode(60, 30) == 2
    assert timecode(1388865600, 30, 0) == 46295520
    assert timecode(100, 30, 100) == 0
    assert timecode(129, 30, 100) == 0
    assert timecode(130, 30, 100) == 1


@pytest.mark.parametrize(
    "unix_time,step,epoch_start",
    [
        (100, 0, 0),
        (100, -30, 0),
        (99, 30, 100),
        (-1, 30, 0),
    ],
)
def test_timecode_rejects_bad_timing(unix_time: int, step: int, epoch_start: int) -> None:
    with pytest.raises(datp.InvalidTiming):
        timecode(unix_time, step, epoch_start)


def test_decode_secret() -> None:
    assert decode_secret("JBSWY3DPEHPK3PXP") == b"Hello!\xde\xad\xbe\xef"
    assert decode_secret("jbswy3dpehpk3pxp") == b"Hello!\xde\xad\xbe\xef"
    assert decode_secret(RFC_SECRET) == b"12345678901234567890"
    assert decode_secret("") == b""


@pytest.mark.parametrize(
    "secret",
    [
        "invalid!!secret",
        "JBSWY3DPEHPK3PX1",
        "JBSWY3DPEHPK3PXP====",
        "ABC",
        "JBSWY3DPÉHPK3PXP",
    ],
)
def test_decode_secret_rejects_malformed_text(secret: str) -> None:
    with pytest.raises(datp.InvalidSecret):
        decode_secret(secret)


def test_encode_secret_has_no_padding() -> None:
    assert encode_secret(b"Hello!\xde\xad\xbe\xef") == "JBSWY3DPEHPK3PXP"
    assert encode_secret(b"a") == "ME"
    assert encode_secret(b"") == ""


def test_generate_secret_decodes_to_requested_length() -> None:
    for length in range(1, 41):
        secret = datp.generate_secret(length)
        assert "=" not in secret
        assert len(decode_secret(secret)) == length


def test_generate_secret_uses_injected_source() -> None:
    secret = datp.generate_secret(10, rand_bytes=lambda n: bytes(range(n)))
    assert decode_secret(secret) == bytes(range(10))


def test_generate_secret_empty() -> None:
    assert datp.generate_secret(0) == ""


def test_generate_secret_rejects_negative_length() -> None:
    with pytest.raises(ValueError):
        datp.generate_secret(-1)


def test_generate_otp_keeps_leading_zeros() -> None:
    otp = OTP(RFC_SECRET, digits=8)
    # RFC 6238 vector for T = 1111111109
    assert otp.generate_otp(37037036) == "07081804"
    assert otp.generate_code(37037036) == 7081804


def test_otp_rejects_bad_configuration() -> None:
    with pytest.raises(ValueError):
        OTP(RFC_SECRET, digits=11)
    with pytest.raises(ValueError):
        OTP(RFC_SECRET, digits=0)
    with pytest.raises(ValueError):
        OTP(RFC_SECRET, digest=hashlib.md5)


def test_invalid_secret_surfaces_on_generation() -> None:
    otp = OTP("invalid!!secret")
    with pytest.raises(datp.InvalidSecret):
        otp.generate_code(0)


def test_errors_are_value_errors() -> None:
    for error in (datp.InvalidSecret, datp.InvalidTiming, datp.ClockUnavailable, datp.QrEncodingError):
        assert issubclass(error, datp.OTPError)
        assert issubclass(error, ValueError)
