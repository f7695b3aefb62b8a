"""AES-256 helpers for customer identifiers stored with policies."""

from __future__ import annotations

import base64
import hashlib
import os
from dataclasses import dataclass

from cryptography.hazmat.primitives.ciphers.aead import AESGCM


NONCE_SIZE = 12
KEY_SIZE = 32


@dataclass
class CryptoService:
    """Encrypts and decrypts text using AES-256-GCM."""

    key: bytes

    @classmethod
    def from_base64_key(cls, key_b64: str) -> "CryptoService":
        key = base64.urlsafe_b64decode(key_b64.encode("utf-8"))
        if len(key) != KEY_SIZE:
            raise RuntimeError("Encryption key must decode to 32 bytes for AES-256.")
        return cls(key=key)

    @staticmethod
    def generate_base64_key() -> str:
        return base64.urlsafe_b64encode(os.urandom(KEY_SIZE)).decode("utf-8")

    def encrypt_text(self, plain_text: str) -> bytes:
        """Return nonce+ciphertext bytes."""
        nonce = os.urandom(NONCE_SIZE)
        return nonce + AESGCM(self.key).encrypt(nonce, plain_text.encode("utf-8"), None)

    def decrypt_text(self, encrypted: bytes) -> str:
        nonce, cipher_text = encrypted[:NONCE_SIZE], encrypted[NONCE_SIZE:]
        return AESGCM(self.key).decrypt(nonce, cipher_text, None).decode("utf-8")


def lookup_hash(value: str) -> str:
    """Deterministic SHA-256 used to query encrypted columns."""
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


def mask_customer_id(customer_id: str) -> str:
    """Mask an identifier except its last 4 characters."""
    if len(customer_id) <= 4:
        return "*" * len(customer_id)
    return "*" * (len(customer_id) - 4) + customer_id[-4:]
