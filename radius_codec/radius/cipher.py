import hashlib
import secrets
import warnings

from radius_codec.exceptions import (
    PasswordTooLongError,
    ProtocolError,
    RandomSourceUnavailableError,
)
from radius_codec.utils.logger import get_logger

from .constants import AUTHENTICATOR_LENGTH, MAX_PASSWORD_LENGTH, PASSWORD_BLOCK_SIZE

logger = get_logger("radius_codec.radius.cipher", component="radius")


def _as_bytes(secret: str | bytes) -> bytes:
    if isinstance(secret, str):
        return secret.encode("utf-8")
    return bytes(secret)


def check_authenticator(authenticator: bytes) -> bytes:
    """Return ``authenticator`` as bytes, rejecting anything but 16 bytes."""
    if not isinstance(authenticator, (bytes, bytearray, memoryview)):
        raise TypeError(
            f"Authenticator must be bytes, not {type(authenticator).__name__}"
        )
    auth = bytes(authenticator)
    if len(auth) != AUTHENTICATOR_LENGTH:
        raise ProtocolError(
            f"Authenticator must be {AUTHENTICATOR_LENGTH} bytes, got {len(auth)}",
            {"length": len(auth)},
        )
    return auth


def _keystream_block(secret: bytes, salt: bytes) -> bytes:
    # MD5 required by RADIUS RFC 2865 - not for general crypto use
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", DeprecationWarning)
        return hashlib.md5(secret + salt, usedforsecurity=False).digest()


def _strip_padding(plain: bytes) -> bytes:
    idx = plain.find(b"\x00")
    if idx > 0:
        return plain[:idx]
    return plain


def obfuscate(
    secret: str | bytes,
    authenticator: bytes,
    password: bytes,
    *,
    chained: bool = False,
) -> bytes:
    """Obfuscate a User-Password value per RFC 2865 §5.2.

    By default only a single 16-byte block is produced:
    ``c = pad16(p) XOR MD5(secret + authenticator)``. With ``chained`` the
    RFC block chaining is applied, each further block keyed by
    ``MD5(secret + previous cipher block)``.

    Raises:
        PasswordTooLongError: password longer than 16 bytes (single block)
            or 128 bytes (chained).
    """
    key_secret = _as_bytes(secret)
    limit = MAX_PASSWORD_LENGTH if chained else PASSWORD_BLOCK_SIZE
    if len(password) > limit:
        raise PasswordTooLongError(
            f"Password too long: {len(password)} bytes (max {limit})",
            {"length": len(password), "max": limit, "chained": chained},
        )

    pad_len = (-len(password)) % PASSWORD_BLOCK_SIZE
    padded = bytes(password) + (b"\x00" * pad_len)
    if not padded:
        padded = b"\x00" * PASSWORD_BLOCK_SIZE

    encrypted = b""
    prev = check_authenticator(authenticator)
    for i in range(0, len(padded), PASSWORD_BLOCK_SIZE):
        block = padded[i : i + PASSWORD_BLOCK_SIZE]
        digest = _keystream_block(key_secret, prev)
        enc = bytes(a ^ b for a, b in zip(block, digest))
        encrypted += enc
        prev = enc
    return encrypted


def deobfuscate(
    secret: str | bytes,
    value: bytes,
    authenticator: bytes,
    *,
    chained: bool = False,
) -> bytes:
    """Recover a User-Password value obfuscated with :func:`obfuscate`.

    In single-block mode at most 16 bytes are recovered and anything beyond
    is ignored. The result is cut at the first zero byte found after index
    0; a leading zero byte or the absence of any zero byte returns all
    recovered bytes.
    """
    key_secret = _as_bytes(secret)
    prev = check_authenticator(authenticator)

    if not chained:
        digest = _keystream_block(key_secret, prev)
        buf = bytearray(PASSWORD_BLOCK_SIZE)
        for i, c in enumerate(value[:PASSWORD_BLOCK_SIZE]):
            buf[i] = digest[i] ^ c
        return _strip_padding(bytes(buf))

    decrypted = b""
    for i in range(0, len(value), PASSWORD_BLOCK_SIZE):
        chunk = bytes(value[i : i + PASSWORD_BLOCK_SIZE])
        digest = _keystream_block(key_secret, prev)
        decrypted += bytes(a ^ b for a, b in zip(chunk, digest))
        prev = chunk
    return _strip_padding(decrypted)


def generate_authenticator() -> bytes:
    """Return 16 bytes from the OS CSPRNG for a new request authenticator."""
    try:
        return secrets.token_bytes(AUTHENTICATOR_LENGTH)
    except (OSError, NotImplementedError) as exc:
        logger.critical(
            "Secure random source unavailable",
            event="radius.authenticator.random_unavailable",
            error=str(exc),
        )
        raise RandomSourceUnavailableError(
            "Cannot generate request authenticator: secure random source unavailable"
        ) from exc


__all__ = [
    "check_authenticator",
    "deobfuscate",
    "generate_authenticator",
    "obfuscate",
]
