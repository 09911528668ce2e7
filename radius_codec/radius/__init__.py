"""
RADIUS Codec Module

Packet model, attribute codec, User-Password cipher and packet codec
for RFC 2865/2866 messages.
"""

from .attribute import RADIUSAttribute, VendorSpecificAttribute, parse_one
from .cipher import deobfuscate, generate_authenticator, obfuscate
from .codec import RadiusCodec, decode_packet, encode_packet
from .dictionary import AttributeDictionary, default_dictionary
from .packet import RADIUSHeader, RADIUSPacket

__all__ = [
    "AttributeDictionary",
    "RADIUSAttribute",
    "RADIUSHeader",
    "RADIUSPacket",
    "RadiusCodec",
    "VendorSpecificAttribute",
    "decode_packet",
    "default_dictionary",
    "deobfuscate",
    "encode_packet",
    "generate_authenticator",
    "obfuscate",
    "parse_one",
]
