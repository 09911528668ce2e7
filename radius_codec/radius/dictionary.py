"""Attribute name <-> code dictionary.

The codec never owns a global table. Packets and codecs receive an
:class:`AttributeDictionary` and only ask it three questions: which code a
name maps to, which name a code maps to, and how a packet code is called.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType

from pyrad.dictionary import Dictionary, ParseError

from radius_codec.exceptions import DictionaryError
from radius_codec.utils.logger import get_logger

logger = get_logger("radius_codec.radius.dictionary", component="radius")

# RFC 2865 / 2866 / 2869 attributes
DEFAULT_ATTRIBUTES: tuple[tuple[str, int], ...] = (
    ("User-Name", 1),
    ("User-Password", 2),
    ("CHAP-Password", 3),
    ("NAS-IP-Address", 4),
    ("NAS-Port", 5),
    ("Service-Type", 6),
    ("Framed-Protocol", 7),
    ("Framed-IP-Address", 8),
    ("Framed-IP-Netmask", 9),
    ("Framed-Routing", 10),
    ("Filter-Id", 11),
    ("Framed-MTU", 12),
    ("Framed-Compression", 13),
    ("Login-IP-Host", 14),
    ("Login-Service", 15),
    ("Login-TCP-Port", 16),
    ("Reply-Message", 18),
    ("Callback-Number", 19),
    ("Callback-Id", 20),
    ("Framed-Route", 22),
    ("Framed-IPX-Network", 23),
    ("State", 24),
    ("Class", 25),
    ("Vendor-Specific", 26),
    ("Session-Timeout", 27),
    ("Idle-Timeout", 28),
    ("Termination-Action", 29),
    ("Called-Station-Id", 30),
    ("Calling-Station-Id", 31),
    ("NAS-Identifier", 32),
    ("Proxy-State", 33),
    ("Login-LAT-Service", 34),
    ("Login-LAT-Node", 35),
    ("Login-LAT-Group", 36),
    ("Framed-AppleTalk-Link", 37),
    ("Framed-AppleTalk-Network", 38),
    ("Framed-AppleTalk-Zone", 39),
    ("Acct-Status-Type", 40),
    ("Acct-Delay-Time", 41),
    ("Acct-Input-Octets", 42),
    ("Acct-Output-Octets", 43),
    ("Acct-Session-Id", 44),
    ("Acct-Authentic", 45),
    ("Acct-Session-Time", 46),
    ("Acct-Input-Packets", 47),
    ("Acct-Output-Packets", 48),
    ("Acct-Terminate-Cause", 49),
    ("Acct-Multi-Session-Id", 50),
    ("Acct-Link-Count", 51),
    ("Acct-Input-Gigawords", 52),
    ("Acct-Output-Gigawords", 53),
    ("Event-Timestamp", 55),
    ("CHAP-Challenge", 60),
    ("NAS-Port-Type", 61),
    ("Port-Limit", 62),
    ("Login-LAT-Port", 63),
    ("Acct-Tunnel-Connection", 68),
    ("ARAP-Password", 70),
    ("ARAP-Features", 71),
    ("ARAP-Zone-Access", 72),
    ("ARAP-Security", 73),
    ("ARAP-Security-Data", 74),
    ("Password-Retry", 75),
    ("Prompt", 76),
    ("Connect-Info", 77),
    ("Configuration-Token", 78),
    ("EAP-Message", 79),
    ("Message-Authenticator", 80),
    ("ARAP-Challenge-Response", 84),
    ("Acct-Interim-Interval", 85),
    ("NAS-Port-Id", 87),
    ("Framed-Pool", 88),
)

DEFAULT_PACKET_CODES: Mapping[int, str] = MappingProxyType(
    {
        1: "Access-Request",
        2: "Access-Accept",
        3: "Access-Reject",
        4: "Accounting-Request",
        5: "Accounting-Response",
        11: "Access-Challenge",
        12: "Status-Server",
        13: "Status-Client",
    }
)


class AttributeDictionary:
    """Immutable bidirectional attribute name/code mapping.

    When several names share a code (aliases in dictionary files), lookups
    by name accept all of them and the first one registered is used for
    display.
    """

    def __init__(
        self,
        attributes: Mapping[str, int] | Iterable[tuple[str, int]],
        packet_codes: Mapping[int, str] | None = None,
    ):
        items = attributes.items() if isinstance(attributes, Mapping) else attributes
        name_to_code: dict[str, int] = {}
        code_to_name: dict[int, str] = {}
        for name, code in items:
            code = int(code)
            if not 0 <= code <= 255:
                raise DictionaryError(
                    f"Attribute code out of range for {name}: {code}",
                    {"name": name, "code": code},
                )
            name_to_code[name] = code
            code_to_name.setdefault(code, name)
        self._name_to_code = MappingProxyType(name_to_code)
        self._code_to_name = MappingProxyType(code_to_name)
        self._packet_codes = MappingProxyType(
            dict(DEFAULT_PACKET_CODES if packet_codes is None else packet_codes)
        )

    def code_for(self, name: str) -> int | None:
        return self._name_to_code.get(name)

    def name_for(self, code: int) -> str | None:
        return self._code_to_name.get(code)

    def display_name(self, code: int) -> str:
        """Name for ``code``, or ``Attr-<code>`` for codes without one."""
        return self._code_to_name.get(code) or f"Attr-{code}"

    def packet_code_name(self, code: int) -> str:
        return self._packet_codes.get(code) or f"Code-{code}"

    def names(self) -> list[str]:
        return list(self._name_to_code)

    def __contains__(self, name: object) -> bool:
        return name in self._name_to_code

    def __len__(self) -> int:
        return len(self._name_to_code)

    def __repr__(self) -> str:
        return f"AttributeDictionary(attributes={len(self)})"

    @classmethod
    def from_file(
        cls, path: str | Path, packet_codes: Mapping[int, str] | None = None
    ) -> AttributeDictionary:
        """Load top-level attributes from a FreeRADIUS-format dictionary file.

        The file is read with :class:`pyrad.dictionary.Dictionary`, so
        ``$INCLUDE``, ``VENDOR`` and ``BEGIN-VENDOR`` blocks behave as in
        FreeRADIUS. Vendor attributes, TLV sub-attributes and codes outside
        0..255 are not wire attribute types and are left out.
        """
        file_path = Path(path)
        try:
            parsed = Dictionary(str(file_path))
        except OSError as exc:
            raise DictionaryError(
                f"Cannot read dictionary file: {file_path}", {"error": str(exc)}
            ) from exc
        except (ParseError, ValueError) as exc:
            raise DictionaryError(
                f"Cannot parse dictionary file: {file_path}", {"error": str(exc)}
            ) from exc
        return cls(_top_level_attributes(parsed, str(file_path)), packet_codes)


def _top_level_attributes(parsed: Dictionary, source: str) -> list[tuple[str, int]]:
    entries: list[tuple[str, int]] = []
    for name, attr in parsed.attributes.items():
        if attr.vendor or getattr(attr, "is_sub_attribute", False):
            continue
        if not isinstance(attr.code, int) or not 0 <= attr.code <= 255:
            logger.debug(
                "Skipping non-wire attribute code",
                event="radius.dictionary.code_skipped",
                attribute=name,
                code=attr.code,
            )
            continue
        entries.append((name, attr.code))

    logger.debug(
        "Loaded dictionary file",
        event="radius.dictionary.loaded",
        source=source,
        attributes=len(entries),
    )
    return entries


@lru_cache(maxsize=1)
def default_dictionary() -> AttributeDictionary:
    """The built-in RFC 2865/2866 attribute table."""
    return AttributeDictionary(DEFAULT_ATTRIBUTES)


__all__ = [
    "AttributeDictionary",
    "DEFAULT_ATTRIBUTES",
    "DEFAULT_PACKET_CODES",
    "default_dictionary",
]
