"""RADIUS packet encoder/decoder.

Wire layout (RFC 2865 §3)::

    Code(1) Identifier(1) Length(2, big-endian) Authenticator(16) Attributes...

The codec is stateless between calls: all policy lives in the constructor
arguments, all per-message state in the :class:`RADIUSPacket` being encoded
or the bytes being decoded.
"""

from __future__ import annotations

import struct
from typing import TYPE_CHECKING

from radius_codec.exceptions import (
    LengthMismatchError,
    ProtocolError,
    ShortHeaderError,
)
from radius_codec.utils.logger import get_logger, logging_context

from . import cipher
from .attribute import parse_one
from .cipher import check_authenticator
from .constants import (
    HEADER_FORMAT,
    HEADER_SIZE,
    MAX_HEADER_LENGTH_FIELD,
    MAX_RADIUS_PACKET_LENGTH,
)
from .dictionary import AttributeDictionary, default_dictionary
from .packet import RADIUSPacket

if TYPE_CHECKING:
    from radius_codec.config.config import CodecConfig

logger = get_logger("radius_codec.radius.codec", component="radius")


class RadiusCodec:
    """Encode :class:`RADIUSPacket` objects to bytes and back.

    Args:
        dictionary: attribute name table handed to decoded packets.
        strict_length: validate the header Length field against the data
            on decode. When off, every byte after the header is parsed as
            attributes and the declared length is kept as-is.
        reject_zero_type: raise on attribute type 0 instead of logging it.
        password_chaining: use RFC 2865 multi-block User-Password chaining
            instead of the single 16-byte block.
        max_packet_length: upper bound for the declared Length on decode.
    """

    def __init__(
        self,
        dictionary: AttributeDictionary | None = None,
        *,
        strict_length: bool = True,
        reject_zero_type: bool = False,
        password_chaining: bool = False,
        max_packet_length: int = MAX_RADIUS_PACKET_LENGTH,
    ):
        self.dictionary = dictionary or default_dictionary()
        self.strict_length = strict_length
        self.reject_zero_type = reject_zero_type
        self.password_chaining = password_chaining
        self.max_packet_length = max_packet_length

    @classmethod
    def from_config(cls, config: CodecConfig) -> RadiusCodec:
        """Build a codec from loaded configuration."""
        settings = config.get_codec_config()
        dictionary_path = config.get_dictionary_path()
        dictionary = (
            AttributeDictionary.from_file(dictionary_path)
            if dictionary_path
            else default_dictionary()
        )
        return cls(
            dictionary,
            strict_length=settings["strict_length"],
            reject_zero_type=settings["reject_zero_type"],
            password_chaining=settings["password_chaining"] == "rfc2865",
            max_packet_length=settings["max_packet_length"],
        )

    def encode(
        self,
        packet: RADIUSPacket,
        secret: str | bytes,
        request_authenticator: bytes | None = None,
    ) -> bytes:
        """Serialize ``packet``, updating ``packet.header.length``.

        User-Password is obfuscated with ``request_authenticator`` when
        given, otherwise with the packet's own authenticator. Attribute
        values held by the packet are not modified.

        Raises:
            AttributeTooLargeError: an attribute value exceeds 253 bytes.
            ProtocolError: an authenticator is not 16 bytes or a header
                field is out of range.
            LengthMismatchError: the packet exceeds the 16-bit Length field.
        """
        authenticator = check_authenticator(packet.authenticator)
        auth_seed = (
            check_authenticator(request_authenticator)
            if request_authenticator is not None
            else authenticator
        )
        attrs_data = b"".join(
            attr.pack_with_password(
                secret, auth_seed, chained=self.password_chaining
            )
            for attr in packet.attributes
        )

        length = HEADER_SIZE + len(attrs_data)
        if length > MAX_HEADER_LENGTH_FIELD:
            raise LengthMismatchError(
                f"Packet too large: {length} bytes",
                {"length": length, "max": MAX_HEADER_LENGTH_FIELD},
            )

        try:
            header = struct.pack(
                HEADER_FORMAT, packet.code, packet.identifier, length
            )
        except struct.error as exc:
            raise ProtocolError(
                f"Invalid header field: {exc}",
                {"code": packet.code, "identifier": packet.identifier},
            ) from exc

        logger.debug(
            "Encoded RADIUS packet",
            event="radius.packet.encoded",
            code=packet.code,
            identifier=packet.identifier,
            length=length,
            attributes=len(packet.attributes),
        )
        packet.header.length = length
        return header + authenticator + attrs_data

    def decode(
        self, data: bytes, secret: str | bytes, *, addr: object = None
    ) -> RADIUSPacket:
        """Parse ``data`` into a complete :class:`RADIUSPacket`.

        Log records emitted while decoding carry ``addr`` as ``peer`` in
        their context.

        Raises:
            ShortHeaderError: fewer than 20 bytes.
            LengthMismatchError: (strict mode) declared length is below 20,
                above ``max_packet_length`` or above the received size.
            TruncatedAttributeError: an attribute runs past the region.
            MalformedAttributeError: an attribute declares length < 2.
        """
        with logging_context(peer=addr):
            return self._decode(data, secret, addr)

    def _decode(self, data: bytes, secret: str | bytes, addr: object) -> RADIUSPacket:
        if len(data) < HEADER_SIZE:
            raise ShortHeaderError(
                f"Packet too short: {len(data)} bytes", {"length": len(data)}
            )

        code, identifier, length = struct.unpack(HEADER_FORMAT, data[:4])
        authenticator = bytes(data[4:HEADER_SIZE])
        end = self._attribute_region_end(data, length)

        attributes = []
        offset = HEADER_SIZE
        while True:
            attr, offset = parse_one(
                data,
                offset,
                secret,
                authenticator,
                end=end,
                chained=self.password_chaining,
                reject_zero_type=self.reject_zero_type,
            )
            if attr is None:
                break
            logger.debug(
                "Parsed attribute",
                event="radius.attribute.parsed",
                attribute=self.dictionary.display_name(attr.attr_type),
                attr_type=attr.attr_type,
                length=attr.length,
            )
            attributes.append(attr)

        packet = RADIUSPacket(
            code,
            identifier,
            authenticator,
            attributes,
            addr=addr,
            dictionary=self.dictionary,
        )
        packet.header.length = length
        logger.debug(
            "Decoded RADIUS packet",
            event="radius.packet.decoded",
            code=code,
            identifier=identifier,
            length=length,
            attributes=len(attributes),
        )
        return packet

    def _attribute_region_end(self, data: bytes, length: int) -> int:
        if not self.strict_length:
            return len(data)

        if length < HEADER_SIZE or length > self.max_packet_length:
            raise LengthMismatchError(
                f"Invalid packet length field: {length}",
                {"declared": length, "max": self.max_packet_length},
            )
        if length > len(data):
            raise LengthMismatchError(
                f"Incomplete packet: got {len(data)}, expected {length}",
                {"declared": length, "received": len(data)},
            )
        if length < len(data):
            logger.warning(
                "Ignoring bytes beyond declared packet length",
                event="radius.packet.trailing_padding",
                declared=length,
                received=len(data),
            )
        return length

    @staticmethod
    def generate_authenticator() -> bytes:
        return cipher.generate_authenticator()


def encode_packet(
    packet: RADIUSPacket,
    secret: str | bytes,
    request_authenticator: bytes | None = None,
) -> bytes:
    """Encode with the default codec settings."""
    return RadiusCodec().encode(packet, secret, request_authenticator)


def decode_packet(data: bytes, secret: str | bytes) -> RADIUSPacket:
    """Decode with the default codec settings."""
    return RadiusCodec().decode(data, secret)


generate_authenticator = cipher.generate_authenticator


__all__ = [
    "RadiusCodec",
    "encode_packet",
    "decode_packet",
    "generate_authenticator",
]
