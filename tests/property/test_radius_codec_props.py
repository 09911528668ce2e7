import struct

import pytest
from hypothesis import given
from hypothesis import strategies as st

from radius_codec.exceptions import ProtocolError
from radius_codec.radius.attribute import RADIUSAttribute
from radius_codec.radius.cipher import deobfuscate, obfuscate
from radius_codec.radius.codec import RadiusCodec
from radius_codec.radius.constants import ATTR_USER_PASSWORD
from radius_codec.radius.packet import RADIUSPacket

SECRET = b"property-secret"

attribute_st = st.builds(
    RADIUSAttribute,
    attr_type=st.integers(min_value=1, max_value=255).filter(
        lambda t: t != ATTR_USER_PASSWORD
    ),
    value=st.binary(max_size=253),
)


@given(
    code=st.integers(min_value=0, max_value=255),
    identifier=st.integers(min_value=0, max_value=255),
    authenticator=st.binary(min_size=16, max_size=16),
    attributes=st.lists(attribute_st, max_size=12),
)
def test_encode_decode_roundtrip(code, identifier, authenticator, attributes):
    codec = RadiusCodec(max_packet_length=65535)
    pkt = RADIUSPacket(code, identifier, authenticator, attributes)
    raw = codec.encode(pkt, SECRET)

    assert len(raw) == struct.unpack("!H", raw[2:4])[0] == pkt.length
    assert len(raw) == 20 + sum(len(a.value) + 2 for a in attributes)

    decoded = codec.decode(raw, SECRET)
    assert decoded.code == code
    assert decoded.identifier == identifier
    assert decoded.authenticator == authenticator
    assert decoded.attributes == attributes


@given(
    password=st.binary(max_size=16).filter(lambda p: b"\x00" not in p[1:]),
    authenticator=st.binary(min_size=16, max_size=16),
)
def test_password_roundtrip_single_block(password, authenticator):
    encrypted = obfuscate(SECRET, authenticator, password)
    assert len(encrypted) == 16
    plain = deobfuscate(SECRET, encrypted, authenticator)
    if password[:1] == b"\x00" or not password:
        # a zero at index 0 is not a terminator: the padded block comes back
        assert plain.rstrip(b"\x00") == password.rstrip(b"\x00")
    else:
        assert plain == password


@given(password=st.binary(min_size=1, max_size=128).filter(lambda p: b"\x00" not in p))
def test_password_roundtrip_chained(password):
    auth = b"\x5c" * 16
    encrypted = obfuscate(SECRET, auth, password, chained=True)
    assert len(encrypted) % 16 == 0
    assert deobfuscate(SECRET, encrypted, auth, chained=True) == password


@given(data=st.binary(max_size=64))
def test_decode_never_raises_unexpected_errors(data):
    codec = RadiusCodec()
    try:
        codec.decode(data, SECRET)
    except ProtocolError:
        pass


@given(value=st.binary(min_size=254, max_size=300))
def test_oversized_attribute_always_rejected(value):
    with pytest.raises(ProtocolError):
        RADIUSAttribute(1, value).pack()
