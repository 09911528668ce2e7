import ipaddress
import struct
from dataclasses import dataclass

from radius_codec.exceptions import (
    AttributeTooLargeError,
    InvalidAttributeTypeError,
    MalformedAttributeError,
    ProtocolError,
    TruncatedAttributeError,
)
from radius_codec.utils.logger import get_logger

from .cipher import deobfuscate, obfuscate
from .constants import (
    ATTR_USER_PASSWORD,
    ATTRIBUTE_HEADER_SIZE,
    MAX_ATTRIBUTE_LENGTH,
    VENDOR_CISCO,
    VENDOR_JUNIPER,
    VENDOR_MICROSOFT,
    VSA_HEADER_FORMAT,
    VSA_HEADER_SIZE,
)

logger = get_logger("radius_codec.radius.attribute", component="radius")


@dataclass
class RADIUSAttribute:
    """RADIUS attribute (Type, Length, Value).

    ``length`` is always derived from ``value``; it is never stored, so an
    attribute edited in place packs with the correct length.
    """

    attr_type: int
    value: bytes = b""

    def __post_init__(self) -> None:
        if not isinstance(self.value, (bytes, bytearray, memoryview)):
            raise TypeError(
                f"Attribute value must be bytes, not {type(self.value).__name__}"
            )
        self.value = bytes(self.value)

    @property
    def length(self) -> int:
        return len(self.value) + ATTRIBUTE_HEADER_SIZE

    @property
    def wire_size(self) -> int:
        return self.length

    def pack(self) -> bytes:
        """Pack attribute into bytes"""
        if not 0 <= self.attr_type <= 255:
            raise ProtocolError(
                f"Invalid attribute type: {self.attr_type}",
                {"attr_type": self.attr_type},
            )
        length = self.length
        if length > MAX_ATTRIBUTE_LENGTH:
            raise AttributeTooLargeError(
                f"Attribute too long: {length} bytes",
                {"attr_type": self.attr_type, "length": length},
            )
        return struct.pack("BB", self.attr_type, length) + self.value

    def pack_with_password(
        self,
        secret: str | bytes,
        request_authenticator: bytes,
        *,
        chained: bool = False,
    ) -> bytes:
        """Pack attribute, obfuscating the value first if it is a User-Password.

        The obfuscated value goes into a temporary attribute; ``self`` is
        left untouched.
        """
        if self.attr_type != ATTR_USER_PASSWORD:
            return self.pack()
        encrypted = obfuscate(secret, request_authenticator, self.value, chained=chained)
        return RADIUSAttribute(ATTR_USER_PASSWORD, encrypted).pack()

    @classmethod
    def unpack(cls, data: bytes) -> tuple["RADIUSAttribute", int]:
        """Unpack one attribute from the start of ``data``.

        Returns:
            Tuple of (RADIUSAttribute, bytes_consumed)

        Raises:
            MalformedAttributeError: header incomplete or length below 2
            TruncatedAttributeError: fewer value bytes than declared
        """
        if len(data) < ATTRIBUTE_HEADER_SIZE:
            raise MalformedAttributeError("Incomplete attribute header")

        attr_type, length = struct.unpack("BB", data[:ATTRIBUTE_HEADER_SIZE])
        if length < ATTRIBUTE_HEADER_SIZE:
            raise MalformedAttributeError(
                f"Invalid attribute length: {length}", attr_type=attr_type
            )
        if length > len(data):
            raise TruncatedAttributeError(
                f"Truncated attribute: declared {length} bytes, "
                f"{len(data)} available",
                attr_type=attr_type,
                declared=length,
                available=len(data),
            )

        value = bytes(data[ATTRIBUTE_HEADER_SIZE:length])
        return cls(attr_type, value), length

    def copy(self) -> "RADIUSAttribute":
        return RADIUSAttribute(self.attr_type, bytes(self.value))

    def as_string(self) -> str:
        """Get value as string"""
        return self.value.decode("utf-8", errors="replace")

    def as_int(self) -> int:
        """Get value as integer"""
        if len(self.value) == 4:
            return int(struct.unpack("!I", self.value)[0])
        raise ValueError("Attribute is not an integer")

    def as_ipaddr(self) -> str:
        """Get value as IP address"""
        if len(self.value) == 4:
            return str(ipaddress.IPv4Address(self.value))
        raise ValueError("Attribute is not an IP address")

    def __str__(self) -> str:
        return f"Attr-{self.attr_type}: {self.value.hex()}"


def parse_one(
    data: bytes,
    offset: int,
    secret: str | bytes,
    request_authenticator: bytes,
    *,
    end: int | None = None,
    chained: bool = False,
    reject_zero_type: bool = False,
) -> tuple[RADIUSAttribute | None, int]:
    """Parse the attribute starting at ``offset`` within ``data[:end]``.

    Returns ``(None, offset)`` when the attribute region is exhausted before
    a complete Type/Length pair could be read; that is the normal end of the
    stream, not an error. Otherwise returns the attribute and the offset of
    the next one. User-Password values come back de-obfuscated.
    """
    limit = len(data) if end is None else min(end, len(data))
    if offset + ATTRIBUTE_HEADER_SIZE > limit:
        if offset < limit:
            logger.debug(
                "Dangling byte at end of attribute region",
                event="radius.attribute.dangling_byte",
                offset=offset,
            )
        return None, offset

    attr_type = data[offset]
    if attr_type == 0:
        if reject_zero_type:
            raise InvalidAttributeTypeError(
                f"Attribute type 0 at offset {offset}", offset=offset
            )
        logger.warning(
            "Attribute type 0 in packet",
            event="radius.attribute.type_zero",
            offset=offset,
        )

    try:
        attr, consumed = RADIUSAttribute.unpack(data[offset:limit])
    except MalformedAttributeError as exc:
        exc.offset = offset
        exc.details["offset"] = offset
        raise

    if attr.attr_type == ATTR_USER_PASSWORD:
        attr.value = deobfuscate(
            secret, attr.value, request_authenticator, chained=chained
        )
    return attr, offset + consumed


@dataclass
class VendorSpecificAttribute:
    """RADIUS Vendor-Specific Attribute (Type 26, RFC 2865 §5.26)

    Format: Type(1) Length(1) Vendor-Id(4) Vendor-Type(1) Vendor-Length(1) Vendor-Data(...)
    """

    vendor_id: int
    vendor_type: int
    vendor_data: bytes

    @property
    def vendor_length(self) -> int:
        return len(self.vendor_data) + 2

    def pack(self) -> bytes:
        """Pack VSA into its value representation (no outer Type/Length).

        Returns:
            Vendor-Id(4) + Vendor-Type(1) + Vendor-Length(1) + Vendor-Data(...)
        """
        total_length = 4 + self.vendor_length
        if ATTRIBUTE_HEADER_SIZE + total_length > MAX_ATTRIBUTE_LENGTH:
            raise AttributeTooLargeError(
                f"VSA attribute too long: {2 + total_length} bytes (max 255)",
                {"vendor_id": self.vendor_id, "vendor_type": self.vendor_type},
            )

        return (
            struct.pack(
                VSA_HEADER_FORMAT, self.vendor_id, self.vendor_type, self.vendor_length
            )
            + self.vendor_data
        )

    @classmethod
    def unpack(cls, data: bytes) -> tuple["VendorSpecificAttribute", int]:
        """Unpack VSA from wire format.

        Args:
            data: Raw attribute data starting after Type(26) and Length bytes

        Returns:
            Tuple of (VendorSpecificAttribute, bytes_consumed)

        Raises:
            MalformedAttributeError: If data is malformed or incomplete
        """
        if len(data) < VSA_HEADER_SIZE:
            raise MalformedAttributeError(
                f"VSA data too short: {len(data)} bytes, need at least 6"
            )

        vendor_id, vendor_type, vendor_length = struct.unpack(
            VSA_HEADER_FORMAT, data[:VSA_HEADER_SIZE]
        )
        if vendor_length < 2:
            raise MalformedAttributeError(
                f"Invalid vendor-length: {vendor_length} (min 2)"
            )

        total_consumed = VSA_HEADER_SIZE + vendor_length - 2
        if len(data) < total_consumed:
            raise TruncatedAttributeError(
                f"Incomplete VSA: need {total_consumed} bytes, got {len(data)}"
            )

        vendor_data = bytes(data[VSA_HEADER_SIZE:total_consumed])
        return cls(vendor_id, vendor_type, vendor_data), total_consumed

    @staticmethod
    def payload_of(value: bytes) -> bytes | None:
        """Vendor payload of a raw Vendor-Specific value, or None if unusable.

        Short payloads are clipped to the bytes actually present rather
        than rejected.
        """
        if len(value) < VSA_HEADER_SIZE:
            return None
        vendor_length = value[VSA_HEADER_SIZE - 1]
        payload_len = max(vendor_length - 2, 0)
        return bytes(value[VSA_HEADER_SIZE : VSA_HEADER_SIZE + payload_len])

    def as_string(self) -> str:
        """Get vendor data as UTF-8 string."""
        return self.vendor_data.decode("utf-8", errors="replace")

    def __str__(self) -> str:
        vendor_names = {
            VENDOR_CISCO: "Cisco",
            VENDOR_JUNIPER: "Juniper",
            VENDOR_MICROSOFT: "Microsoft",
        }
        vendor_name = vendor_names.get(self.vendor_id, f"Vendor-{self.vendor_id}")
        return (
            f"VSA({vendor_name}, type={self.vendor_type}, len={len(self.vendor_data)})"
        )


__all__ = ["RADIUSAttribute", "VendorSpecificAttribute", "parse_one"]
