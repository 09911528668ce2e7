"""
Shared fixtures for codec tests.

Everything here is pure in-memory data: no sockets, no files unless a test
asks for ``tmp_path`` itself.
"""

from __future__ import annotations

import pytest

from radius_codec.config.constants import DEFAULTS, ENV_CODEC_CONFIG, ENV_PREFIX, ENV_SECRET
from radius_codec.radius.codec import RadiusCodec
from radius_codec.radius.dictionary import AttributeDictionary, default_dictionary

ZERO_AUTH = b"\x00" * 16


@pytest.fixture(autouse=True)
def _clean_codec_env(monkeypatch: pytest.MonkeyPatch):
    """Keep developer RADIUS_CODEC_* variables out of the tests."""
    for section, values in DEFAULTS.items():
        for key in values:
            monkeypatch.delenv(f"{ENV_PREFIX}{section.upper()}_{key.upper()}", raising=False)
    monkeypatch.delenv(ENV_SECRET, raising=False)
    monkeypatch.delenv(ENV_CODEC_CONFIG, raising=False)
    yield


@pytest.fixture
def secret() -> bytes:
    return b"testing123"


@pytest.fixture
def dictionary() -> AttributeDictionary:
    return default_dictionary()


@pytest.fixture
def synthetic_dictionary() -> AttributeDictionary:
    """Small made-up table, independent from the RFC names."""
    return AttributeDictionary(
        {
            "Login": 1,
            "Secret-Word": 2,
            "Note": 18,
            "Vendor-Blob": 26,
            "Custom-Tag": 200,
        },
        packet_codes={1: "Hello", 2: "Welcome"},
    )


@pytest.fixture
def codec(dictionary: AttributeDictionary) -> RadiusCodec:
    return RadiusCodec(dictionary)


@pytest.fixture
def lenient_codec(dictionary: AttributeDictionary) -> RadiusCodec:
    return RadiusCodec(dictionary, strict_length=False)
