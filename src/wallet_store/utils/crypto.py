"""Cryptographic helpers — hashing, PIN key derivation, store encryption."""

from __future__ import annotations

import hashlib
import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from wallet_store.errors.store_errors import StoreOpenError

KEY_SIZE = 64
NONCE_SIZE = 12


def sha256(data: bytes) -> bytes:
    """Single SHA-256 hash."""
    return hashlib.sha256(data).digest()


def sha512(data: bytes) -> bytes:
    """Single SHA-512 hash."""
    return hashlib.sha512(data).digest()


def derive_key(pin: object) -> bytes:
    """Turn a PIN into the 64-byte store encryption key.

    The PIN is treated as opaque text, so ``1234`` and ``"1234"`` derive the
    same key. The key is never persisted.
    """
    return sha512(str(pin).encode("utf-8"))


class StoreCipher:
    """AES-GCM sealing of individual values under a derived store key.

    Sealed values are ``nonce || ciphertext || tag``. Any authentication
    failure surfaces as :class:`StoreOpenError`, whether the key is wrong or
    the data is damaged.
    """

    def __init__(self, key: bytes) -> None:
        if len(key) != KEY_SIZE:
            msg = f"store key must be {KEY_SIZE} bytes, got {len(key)}"
            raise ValueError(msg)
        self._aead = AESGCM(key[:32])

    def seal(self, plaintext: bytes) -> bytes:
        """Encrypt and authenticate *plaintext* under a fresh nonce."""
        nonce = os.urandom(NONCE_SIZE)
        return nonce + self._aead.encrypt(nonce, plaintext, None)

    def open(self, sealed: bytes) -> bytes:
        """Decrypt a value produced by :meth:`seal`.

        Raises:
            StoreOpenError: If the value cannot be authenticated.
        """
        if len(sealed) <= NONCE_SIZE:
            raise StoreOpenError
        try:
            return self._aead.decrypt(sealed[:NONCE_SIZE], sealed[NONCE_SIZE:], None)
        except InvalidTag:
            raise StoreOpenError from None
