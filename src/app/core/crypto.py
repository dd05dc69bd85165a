"""
Field-level Encryption

AES-256-GCM encryption for bank details stored at rest.

Stored format: ``iv_hex:auth_tag_hex:ciphertext_hex``
- iv: 16 random bytes, fresh for every call
- auth_tag: 16-byte GCM tag, verified before any plaintext is returned

The key is read from ENCRYPTION_KEY (64 hex characters) on every call, so a
missing key fails on first use rather than at import time.
"""

import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from app.core.config import get_settings
from app.core.exceptions import AuthenticationError, ConfigError, FormatError

IV_LENGTH = 16
AUTH_TAG_LENGTH = 16
KEY_HEX_LENGTH = 64


def _get_encryption_key(key: str | None = None) -> bytes:
    """Return the 32-byte AES key, from the argument or from settings."""
    key_hex = key if key is not None else get_settings().encryption_key

    if not key_hex:
        raise ConfigError("ENCRYPTION_KEY is not set")

    if len(key_hex) != KEY_HEX_LENGTH:
        raise ConfigError("ENCRYPTION_KEY must be a 64 character hex string (32 bytes)")

    try:
        return bytes.fromhex(key_hex)
    except ValueError as e:
        raise ConfigError("ENCRYPTION_KEY must be a 64 character hex string (32 bytes)") from e


def encrypt(plaintext: str, *, key: str | None = None, iv: bytes | None = None) -> str:
    """
    Encrypt a string with AES-256-GCM.

    Args:
        plaintext: Text to encrypt. An empty string is returned unchanged.
        key: Hex key overriding ENCRYPTION_KEY (tests, key rotation scripts)
        iv: Fixed IV for deterministic tests. Never pass one in application code.

    Returns:
        ``iv:tag:data`` with every part hex encoded

    Raises:
        ConfigError: If the key is missing or malformed
    """
    if not plaintext:
        return ""

    aes_key = _get_encryption_key(key)
    nonce = iv if iv is not None else os.urandom(IV_LENGTH)

    # AESGCM appends the tag to the ciphertext
    sealed = AESGCM(aes_key).encrypt(nonce, plaintext.encode("utf-8"), None)
    data, tag = sealed[:-AUTH_TAG_LENGTH], sealed[-AUTH_TAG_LENGTH:]

    return f"{nonce.hex()}:{tag.hex()}:{data.hex()}"


def decrypt(ciphertext: str, *, key: str | None = None) -> str:
    """
    Decrypt a value produced by :func:`encrypt`.

    Raises:
        ConfigError: If the key is missing or malformed
        FormatError: If the value is not three hex parts
        AuthenticationError: If the GCM tag does not verify (tampered data or wrong key)
    """
    if not ciphertext:
        return ""

    aes_key = _get_encryption_key(key)

    parts = ciphertext.split(":")
    if len(parts) != 3:
        raise FormatError()

    try:
        nonce = bytes.fromhex(parts[0])
        tag = bytes.fromhex(parts[1])
        data = bytes.fromhex(parts[2])
    except ValueError as e:
        raise FormatError() from e

    if len(nonce) != IV_LENGTH or len(tag) != AUTH_TAG_LENGTH:
        raise FormatError()

    try:
        plaintext = AESGCM(aes_key).decrypt(nonce, data + tag, None)
    except InvalidTag as e:
        raise AuthenticationError("Encrypted data failed integrity verification.") from e

    return plaintext.decode("utf-8")


def mask_iban(iban: str | None) -> str:
    """
    Mask an IBAN for display.

    Example: FR7612345678901234567890123 -> FR76 **** **** **** **** **** 123
    """
    if not iban or len(iban) < 8:
        return "****"

    cleaned = "".join(iban.split())
    middle = " ".join(["****"] * 5)
    return f"{cleaned[:4]} {middle} {cleaned[-3:]}"


def mask_bic(bic: str | None) -> str:
    """
    Mask a BIC for display.

    Example: BNPAFRPPXXX -> BNP****PXXX
    """
    if not bic or len(bic) < 8:
        return "****"

    return f"{bic[:3]}****{bic[-4:]}"
