# radius_codec/exceptions.py
"""
Custom exceptions for the RADIUS codec.

Protocol errors also subclass ValueError so callers that already guard
low-level parsers with ``except ValueError`` keep working.
"""

from typing import Any


class RadiusCodecError(Exception):
    """Base exception for all codec errors."""

    error_code = "codec_error"

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


class UnknownAttributeError(RadiusCodecError, KeyError):
    """Raised when an attribute name is not present in the dictionary."""

    error_code = "unknown_attribute"

    def __init__(self, name: str):
        super().__init__(f"Unknown attribute: {name!r}", {"name": name})
        self.name = name


# Wire format errors
class ProtocolError(RadiusCodecError, ValueError):
    """RADIUS wire format encoding/decoding error."""

    error_code = "protocol_error"


class AttributeTooLargeError(ProtocolError):
    """Raised when a value does not fit the 1-byte attribute length field."""

    error_code = "attribute_too_large"


class PasswordTooLongError(AttributeTooLargeError):
    """Raised when a password does not fit the configured cipher block mode."""

    error_code = "password_too_long"


class ShortHeaderError(ProtocolError):
    """Raised when fewer than 20 bytes are available for the packet header."""

    error_code = "short_header"


class LengthMismatchError(ProtocolError):
    """Raised when the header length field disagrees with the data."""

    error_code = "length_mismatch"


class MalformedAttributeError(ProtocolError):
    """Raised when an attribute record is structurally invalid."""

    error_code = "malformed_attribute"

    def __init__(self, message: str, offset: int | None = None, **kwargs: Any):
        super().__init__(message, {"offset": offset, **kwargs})
        self.offset = offset


class TruncatedAttributeError(MalformedAttributeError):
    """Raised when an attribute declares more bytes than remain."""

    error_code = "truncated_attribute"


class InvalidAttributeTypeError(MalformedAttributeError):
    """Raised for attribute type codes rejected by the codec policy."""

    error_code = "invalid_attribute_type"


class RandomSourceUnavailableError(RadiusCodecError):
    """Raised when no secure random source can produce an authenticator."""

    error_code = "random_source_unavailable"


class DictionaryError(RadiusCodecError):
    """Raised when a dictionary file cannot be parsed."""

    error_code = "dictionary_error"


# Config exceptions
class ConfigError(RadiusCodecError):
    """Base exception for configuration-related errors."""

    error_code = "config_error"


class ConfigValidationError(ConfigError):
    """Raised when configuration validation fails."""

    error_code = "config_validation_error"

    def __init__(
        self, message: str, field: str | None = None, value: Any = None, **kwargs: Any
    ):
        details = {"field": field, "value": value, **kwargs}
        super().__init__(message, details)
        self.field = field
        self.value = value
