import ipaddress
import struct
from dataclasses import dataclass, field
from typing import Any

from radius_codec.exceptions import UnknownAttributeError
from radius_codec.utils.logger import get_logger

from .attribute import RADIUSAttribute, VendorSpecificAttribute
from .cipher import check_authenticator
from .constants import (
    ATTR_VENDOR_SPECIFIC,
    AUTHENTICATOR_LENGTH,
    CISCO_AVPAIR,
    VENDOR_CISCO,
)
from .dictionary import AttributeDictionary, default_dictionary

logger = get_logger("radius_codec.radius.packet", component="radius")


@dataclass
class RADIUSHeader:
    """Fixed 20-byte RADIUS header.

    ``length`` is written by the codec: on encode it is recomputed from the
    attributes, on decode it holds the value declared on the wire.
    ``authenticator`` must be exactly 16 bytes.
    """

    code: int = 0
    identifier: int = 0
    length: int = 0
    authenticator: bytes = field(default=bytes(AUTHENTICATOR_LENGTH))

    def __post_init__(self) -> None:
        self.authenticator = check_authenticator(self.authenticator)

    def describe(self, dictionary: AttributeDictionary | None = None) -> str:
        names = dictionary or default_dictionary()
        return (
            f"Type: '{names.packet_code_name(self.code)}' "
            f"Identifier: {self.identifier} Length: {self.length} "
            f"Authenticator: {self.authenticator.hex()}"
        )

    def __str__(self) -> str:
        return self.describe()


class RADIUSPacket:
    """RADIUS packet structure: header, ordered attributes, peer address.

    Attribute order is wire order. Several attributes of the same type are
    kept as separate entries. ``addr`` is opaque transport metadata and is
    never interpreted by the codec.
    """

    def __init__(
        self,
        code: int = 0,
        identifier: int = 0,
        authenticator: bytes | None = None,
        attributes: list[RADIUSAttribute] | None = None,
        *,
        addr: Any = None,
        dictionary: AttributeDictionary | None = None,
    ):
        self.header = RADIUSHeader(
            code=code,
            identifier=identifier,
            authenticator=(
                authenticator
                if authenticator is not None
                else bytes(AUTHENTICATOR_LENGTH)
            ),
        )
        self.attributes: list[RADIUSAttribute] = list(attributes or [])
        self.addr = addr
        self.dictionary = dictionary or default_dictionary()

    # Header accessors
    @property
    def code(self) -> int:
        return self.header.code

    @code.setter
    def code(self, value: int) -> None:
        self.header.code = value

    @property
    def identifier(self) -> int:
        return self.header.identifier

    @identifier.setter
    def identifier(self, value: int) -> None:
        self.header.identifier = value

    @property
    def authenticator(self) -> bytes:
        return self.header.authenticator

    @authenticator.setter
    def authenticator(self, value: bytes) -> None:
        self.header.authenticator = check_authenticator(value)

    @property
    def length(self) -> int:
        return self.header.length

    # Mutators
    def add_attribute(self, name: str, value: bytes) -> None:
        """Append an attribute by dictionary name.

        Raises:
            UnknownAttributeError: ``name`` is not in the dictionary; the
                packet is left unchanged.
        """
        code = self.dictionary.code_for(name)
        if code is None:
            raise UnknownAttributeError(name)
        self.attributes.append(RADIUSAttribute(code, value))

    def add_attribute_by_code(self, code: int, value: bytes) -> None:
        """Append an attribute by numeric type; any code is accepted."""
        self.attributes.append(RADIUSAttribute(code, value))

    def add_string(self, name: str, value: str) -> None:
        """Add string attribute"""
        self.add_attribute(name, value.encode("utf-8"))

    def add_integer(self, name: str, value: int) -> None:
        """Add integer attribute"""
        self.add_attribute(name, struct.pack("!I", value))

    def add_ipaddr(self, name: str, ip: str) -> None:
        """Add IP address attribute"""
        self.add_attribute(name, ipaddress.IPv4Address(ip).packed)

    def add_vsa(self, vendor_id: int, vendor_type: int, vendor_data: bytes) -> None:
        """Add Vendor-Specific Attribute to packet."""
        vsa = VendorSpecificAttribute(vendor_id, vendor_type, vendor_data)
        self.attributes.append(RADIUSAttribute(ATTR_VENDOR_SPECIFIC, vsa.pack()))

    def add_cisco_avpair(self, avpair: str) -> None:
        """Add Cisco-AVPair VSA (e.g., 'shell:priv-lvl=15')."""
        self.add_vsa(VENDOR_CISCO, CISCO_AVPAIR, avpair.encode("utf-8"))

    # Accessors
    def get_attributes(self, name: str) -> list[bytes]:
        """Values of every attribute called ``name``, in packet order.

        Vendor-Specific values are unwrapped to the vendor payload. Unknown
        names give an empty list.
        """
        code = self.dictionary.code_for(name)
        if code is None:
            return []

        values: list[bytes] = []
        for attr in self.attributes:
            if attr.attr_type != code:
                continue
            if code != ATTR_VENDOR_SPECIFIC:
                values.append(attr.value)
                continue
            payload = VendorSpecificAttribute.payload_of(attr.value)
            if payload is None:
                logger.warning(
                    "Skipping malformed Vendor-Specific attribute",
                    event="radius.vsa.decode_failed",
                    length=len(attr.value),
                )
                continue
            values.append(payload)
        return values

    def get_first_attribute(self, name: str) -> bytes | None:
        values = self.get_attributes(name)
        return values[0] if values else None

    def get_first_attribute_as_text(self, name: str) -> str | None:
        value = self.get_first_attribute(name)
        if value is None:
            return None
        return value.decode("utf-8", errors="replace")

    def get_attribute_by_code(self, code: int) -> RADIUSAttribute | None:
        """Get first attribute of given type"""
        for attr in self.attributes:
            if attr.attr_type == code:
                return attr
        return None

    def get_vsas(self, vendor_id: int | None = None) -> list[VendorSpecificAttribute]:
        """Get all well-formed VSAs, optionally filtered by vendor_id."""
        vsas: list[VendorSpecificAttribute] = []
        for attr in self.attributes:
            if attr.attr_type != ATTR_VENDOR_SPECIFIC:
                continue
            try:
                vsa, _ = VendorSpecificAttribute.unpack(attr.value)
            except ValueError as exc:
                logger.debug(
                    "Failed to decode VSA attribute",
                    event="radius.vsa.decode_failed",
                    error=str(exc),
                )
                continue
            if vendor_id is None or vsa.vendor_id == vendor_id:
                vsas.append(vsa)
        return vsas

    def get_cisco_avpairs(self) -> list[str]:
        """Get all Cisco-AVPair strings from packet."""
        return [
            vsa.as_string()
            for vsa in self.get_vsas(VENDOR_CISCO)
            if vsa.vendor_type == CISCO_AVPAIR
        ]

    def duplicate(self) -> "RADIUSPacket":
        """Deep copy of header and attributes; values are not shared."""
        dest = RADIUSPacket(
            code=self.code,
            identifier=self.identifier,
            authenticator=bytes(self.authenticator),
            attributes=[attr.copy() for attr in self.attributes],
            addr=self.addr,
            dictionary=self.dictionary,
        )
        dest.header.length = self.header.length
        return dest

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly view of the packet."""
        return {
            "code": self.code,
            "type": self.dictionary.packet_code_name(self.code),
            "identifier": self.identifier,
            "length": self.length,
            "authenticator": self.authenticator.hex(),
            "attributes": [
                {
                    "type": attr.attr_type,
                    "name": self.dictionary.display_name(attr.attr_type),
                    "length": attr.length,
                    "value": attr.value.hex(),
                }
                for attr in self.attributes
            ],
        }

    def __str__(self) -> str:
        """String representation for debugging"""
        attrs = " ".join(
            f"{self.dictionary.display_name(a.attr_type)}: {a.value.hex()}"
            for a in self.attributes
        )
        return f"RADIUSPacket{{{self.header.describe(self.dictionary)} [{attrs}]}}"

    def __repr__(self) -> str:
        return (
            f"RADIUSPacket(code={self.code}, id={self.identifier}, "
            f"attrs={len(self.attributes)})"
        )


__all__ = ["RADIUSHeader", "RADIUSPacket"]
