"""Encryption for renter contact details kept on booking snapshots.

Values are sealed with AES-GCM under a key expanded from ``APP_ENCRYPTION_KEY``.
The nonce is an HMAC of the plaintext, so the same phone number or email
always seals to the same token and equality lookups keep working.
"""

from __future__ import annotations

import base64
import binascii
import os
from functools import lru_cache

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes, hmac
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.hkdf import HKDF
from sqlalchemy.types import String, TypeDecorator

from lalan.core.config import get_settings

TOKEN_PREFIX = "enc:"
NONCE_SIZE = 12
MIN_KEY_BYTES = 32


class ContactCipher:
    """Seal and open contact strings with a plaintext-derived nonce."""

    def __init__(self, master_key: bytes) -> None:
        if len(master_key) < MIN_KEY_BYTES:
            raise ValueError(f"encryption key must be at least {MIN_KEY_BYTES} bytes")
        material = HKDF(
            algorithm=hashes.SHA256(),
            length=64,
            salt=b"lalan-contact-hkdf",
            info=b"contact",
        ).derive(master_key)
        self._aead = AESGCM(material[:32])
        self._mac_key = material[32:]

    @classmethod
    def from_b64(cls, encoded: str) -> "ContactCipher":
        try:
            raw = base64.urlsafe_b64decode(encoded.encode("ascii"))
        except (binascii.Error, ValueError) as exc:
            raise ValueError("encryption key is not valid urlsafe base64") from exc
        return cls(raw)

    def seal(self, plain: str) -> str:
        payload = plain.encode("utf-8")
        signer = hmac.HMAC(self._mac_key, hashes.SHA256())
        signer.update(payload)
        nonce = signer.finalize()[:NONCE_SIZE]
        blob = nonce + self._aead.encrypt(nonce, payload, None)
        return TOKEN_PREFIX + base64.urlsafe_b64encode(blob).decode("ascii")

    def open(self, token: str) -> str | None:
        """Return the plaintext, or None when the token is corrupt or foreign."""
        try:
            blob = base64.urlsafe_b64decode(token.removeprefix(TOKEN_PREFIX).encode("ascii"))
        except (binascii.Error, ValueError):
            return None
        nonce, sealed = blob[:NONCE_SIZE], blob[NONCE_SIZE:]
        if not sealed:
            return None
        try:
            return self._aead.decrypt(nonce, sealed, None).decode("utf-8")
        except InvalidTag:
            return None


@lru_cache
def contact_cipher() -> ContactCipher:
    encoded = os.getenv("APP_ENCRYPTION_KEY") or get_settings().app_encryption_key
    if not encoded:
        raise RuntimeError("APP_ENCRYPTION_KEY must be configured")
    try:
        return ContactCipher.from_b64(encoded)
    except ValueError as exc:
        raise RuntimeError(f"APP_ENCRYPTION_KEY is unusable: {exc}") from exc


def encrypt_str(value: str | None) -> str | None:
    """Seal ``value`` unless it is empty or a token this cipher can open.

    Plaintext that merely starts with the token prefix is still sealed.
    """
    if not value:
        return value
    cipher = contact_cipher()
    if value.startswith(TOKEN_PREFIX) and cipher.open(value) is not None:
        return value
    return cipher.seal(value)


def decrypt_str(value: str | None) -> str | None:
    """Open sealed values; legacy plaintext passes through untouched."""
    if not value or not value.startswith(TOKEN_PREFIX):
        return value
    return contact_cipher().open(value)


class EncryptedStr(TypeDecorator):
    """String column sealed on write and opened on read."""

    impl = String
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return encrypt_str(value)

    def process_result_value(self, value, dialect):
        return decrypt_str(value)
