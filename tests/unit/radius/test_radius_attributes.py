"""RFC-aligned checks for single attribute encoding and parsing."""

import socket
import struct

import pytest

from radius_codec.exceptions import (
    AttributeTooLargeError,
    InvalidAttributeTypeError,
    MalformedAttributeError,
    ProtocolError,
    TruncatedAttributeError,
)
from radius_codec.radius.attribute import RADIUSAttribute, parse_one
from radius_codec.radius.cipher import obfuscate
from radius_codec.radius.constants import (
    ATTR_ACCT_SESSION_ID,
    ATTR_ACCT_STATUS_TYPE,
    ATTR_NAS_IP_ADDRESS,
    ATTR_NAS_PORT,
    ATTR_REPLY_MESSAGE,
    ATTR_STATE,
    ATTR_USER_NAME,
    ATTR_USER_PASSWORD,
)

AUTH = b"\xaa" * 16


def test_attribute_encoding_integer_string_ip():
    """Verify integer, string, and IP attribute packing."""
    int_attr = RADIUSAttribute(ATTR_NAS_PORT, struct.pack("!I", 1234)).pack()
    str_attr = RADIUSAttribute(ATTR_USER_NAME, b"bob").pack()
    ip_attr = RADIUSAttribute(ATTR_NAS_IP_ADDRESS, socket.inet_aton("192.0.2.1")).pack()
    assert int_attr[0] == ATTR_NAS_PORT and int_attr[1] == 6
    assert struct.unpack("!I", int_attr[2:6])[0] == 1234
    assert str_attr == bytes([ATTR_USER_NAME, 5]) + b"bob"
    assert ip_attr[2:] == socket.inet_aton("192.0.2.1")


def test_length_is_derived_from_value():
    attr = RADIUSAttribute(ATTR_REPLY_MESSAGE, b"hi")
    assert attr.length == 4
    attr.value = b"hello there"
    assert attr.length == 13
    assert attr.pack()[1] == 13


def test_empty_value_packs_to_two_bytes():
    assert RADIUSAttribute(ATTR_STATE, b"").pack() == bytes([ATTR_STATE, 2])


def test_max_value_size_is_253():
    packed = RADIUSAttribute(ATTR_REPLY_MESSAGE, b"x" * 253).pack()
    assert packed[1] == 255
    assert len(packed) == 255


def test_oversized_value_raises():
    with pytest.raises(AttributeTooLargeError, match="Attribute too long"):
        RADIUSAttribute(ATTR_REPLY_MESSAGE, b"x" * 254).pack()


def test_type_out_of_range_raises():
    with pytest.raises(ProtocolError):
        RADIUSAttribute(256, b"x").pack()


def test_pack_with_password_obfuscates_copy_only():
    attr = RADIUSAttribute(ATTR_USER_PASSWORD, b"letmein")
    packed = attr.pack_with_password(b"secret", AUTH)
    assert packed[0] == ATTR_USER_PASSWORD
    assert packed[1] == 18
    assert packed[2:] == obfuscate(b"secret", AUTH, b"letmein")
    assert attr.value == b"letmein"


def test_pack_with_password_leaves_other_types_alone():
    attr = RADIUSAttribute(ATTR_USER_NAME, b"alice")
    assert attr.pack_with_password(b"secret", AUTH) == attr.pack()


def test_unpack_reports_consumed_length():
    data = RADIUSAttribute(ATTR_USER_NAME, b"alice").pack() + b"\xff\xff"
    attr, consumed = RADIUSAttribute.unpack(data)
    assert attr == RADIUSAttribute(ATTR_USER_NAME, b"alice")
    assert consumed == 7


def test_unpack_rejects_length_below_two():
    with pytest.raises(MalformedAttributeError, match="Invalid attribute length"):
        RADIUSAttribute.unpack(b"\x01\x01abc")


def test_parse_one_end_of_stream_on_empty_region():
    attr, offset = parse_one(b"", 0, b"s", AUTH)
    assert attr is None
    assert offset == 0


def test_parse_one_end_of_stream_on_dangling_type_byte():
    data = RADIUSAttribute(ATTR_USER_NAME, b"a").pack() + b"\x01"
    attr, offset = parse_one(data, 0, b"s", AUTH)
    assert attr is not None
    attr, offset = parse_one(data, offset, b"s", AUTH)
    assert attr is None
    assert offset == 3


def test_parse_one_truncated_value():
    with pytest.raises(TruncatedAttributeError) as excinfo:
        parse_one(b"\x01\x0aabc", 0, b"s", AUTH, end=3)
    assert excinfo.value.offset == 0


def test_parse_one_respects_region_end():
    data = RADIUSAttribute(ATTR_USER_NAME, b"abc").pack()
    with pytest.raises(TruncatedAttributeError):
        parse_one(data, 0, b"s", AUTH, end=4)


def test_parse_one_deobfuscates_password():
    data = RADIUSAttribute(ATTR_USER_PASSWORD, obfuscate(b"s", AUTH, b"pw")).pack()
    attr, offset = parse_one(data, 0, b"s", AUTH)
    assert attr == RADIUSAttribute(ATTR_USER_PASSWORD, b"pw")
    assert offset == 18


def test_parse_one_keeps_type_zero(caplog):
    data = b"\x00\x04ab"
    with caplog.at_level("WARNING", logger="radius_codec.radius.attribute"):
        attr, offset = parse_one(data, 0, b"s", AUTH)
    assert attr == RADIUSAttribute(0, b"ab")
    assert offset == 4
    assert any(
        getattr(r, "event", None) == "radius.attribute.type_zero" for r in caplog.records
    )


def test_parse_one_rejects_type_zero_when_asked():
    with pytest.raises(InvalidAttributeTypeError):
        parse_one(b"\x00\x02", 0, b"s", AUTH, reject_zero_type=True)


def test_as_helpers():
    assert RADIUSAttribute(ATTR_NAS_PORT, struct.pack("!I", 49)).as_int() == 49
    assert RADIUSAttribute(ATTR_NAS_IP_ADDRESS, b"\xc0\x00\x02\x01").as_ipaddr() == (
        "192.0.2.1"
    )
    assert RADIUSAttribute(ATTR_USER_NAME, "zoë".encode()).as_string() == "zoë"
    with pytest.raises(ValueError):
        RADIUSAttribute(ATTR_USER_NAME, b"abc").as_int()


def test_accounting_fields_pack():
    attrs = [
        RADIUSAttribute(ATTR_ACCT_STATUS_TYPE, struct.pack("!I", 2)),  # Stop
        RADIUSAttribute(ATTR_ACCT_SESSION_ID, b"sess-stop"),
    ]
    packed = b"".join(a.pack() for a in attrs)
    assert packed[:2] == bytes([ATTR_ACCT_STATUS_TYPE, 6])
    assert packed[6:8] == bytes([ATTR_ACCT_SESSION_ID, 11])


def test_copy_does_not_share_identity():
    attr = RADIUSAttribute(ATTR_USER_NAME, b"alice")
    clone = attr.copy()
    assert clone == attr
    assert clone is not attr


@pytest.mark.parametrize("value", [7, "alice", None])
def test_non_bytes_value_rejected(value):
    with pytest.raises(TypeError, match="Attribute value must be bytes"):
        RADIUSAttribute(ATTR_NAS_PORT, value)


def test_bytearray_value_is_frozen_to_bytes():
    raw = bytearray(b"alice")
    attr = RADIUSAttribute(ATTR_USER_NAME, raw)
    raw[0] = ord("x")
    assert attr.value == b"alice"
    assert isinstance(attr.value, bytes)
