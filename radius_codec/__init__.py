"""RADIUS (RFC 2865) wire protocol codec."""

from .exceptions import (
    AttributeTooLargeError,
    LengthMismatchError,
    RadiusCodecError,
    RandomSourceUnavailableError,
    ShortHeaderError,
    TruncatedAttributeError,
    UnknownAttributeError,
)
from .radius import (
    AttributeDictionary,
    RADIUSAttribute,
    RADIUSPacket,
    RadiusCodec,
    VendorSpecificAttribute,
    decode_packet,
    encode_packet,
    generate_authenticator,
)

__version__ = "0.1.0"

__all__ = [
    "AttributeDictionary",
    "AttributeTooLargeError",
    "LengthMismatchError",
    "RADIUSAttribute",
    "RADIUSPacket",
    "RadiusCodec",
    "RadiusCodecError",
    "RandomSourceUnavailableError",
    "ShortHeaderError",
    "TruncatedAttributeError",
    "UnknownAttributeError",
    "VendorSpecificAttribute",
    "decode_packet",
    "encode_packet",
    "generate_authenticator",
]
