"""
AES-256 encryption of personally identifying fields.

Tokens are ``urlsafe_b64(nonce || ciphertext || tag)`` produced with
AES-256-GCM. Keys are always 32-byte SHA-256 digests of some key material,
derived per evaluation:

- ``evaluation_key(manager_token)`` protects the evaluation title and the
  wrapped manager token. Only a holder of the plaintext token can derive it.
- ``member_key(evaluation_id, secret)`` protects member names, emails and
  response comments. It mixes the server-wide ``ENCRYPTION_KEY`` with the
  evaluation id, so the server can decrypt (members need to see teammates'
  names) while a leaked row from one evaluation is useless for another.
"""

import base64
import binascii
import hashlib
import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

NONCE_LENGTH = 12
KEY_LENGTH = 32


class CryptoError(Exception):
    """Base class for encryption failures."""


class EncryptionError(CryptoError):
    """Plaintext could not be encrypted."""


class DecryptionError(CryptoError):
    """Ciphertext could not be decrypted with the given key."""

    def __init__(self, message: str = "decryption failed"):
        super().__init__(message)


def generate_key(material: str) -> bytes:
    """Derive a 256-bit key as SHA-256(material)."""
    return hashlib.sha256(material.encode("utf-8")).digest()


def evaluation_key(manager_token: str) -> bytes:
    return generate_key(manager_token)


def member_key(evaluation_id: str, secret: str) -> bytes:
    return generate_key(f"{secret}:{evaluation_id}")


def encrypt(plaintext: str, key: bytes) -> str:
    """Encrypt a non-empty string. A fresh nonce makes every call distinct."""
    if not plaintext:
        raise EncryptionError("plaintext must not be empty")
    if len(key) != KEY_LENGTH:
        raise EncryptionError("key must be 32 bytes")
    nonce = os.urandom(NONCE_LENGTH)
    sealed = AESGCM(key).encrypt(nonce, plaintext.encode("utf-8"), None)
    return base64.urlsafe_b64encode(nonce + sealed).decode("ascii")


def decrypt(ciphertext: str, key: bytes) -> str:
    """
    Decrypt a token produced by ``encrypt``.

    Every failure mode raises the same ``DecryptionError`` so callers cannot
    tell a wrong key from corrupted data.
    """
    if not ciphertext or len(key) != KEY_LENGTH:
        raise DecryptionError()
    try:
        raw = base64.urlsafe_b64decode(ciphertext.encode("ascii"))
    except (binascii.Error, UnicodeEncodeError, ValueError):
        raise DecryptionError() from None
    if len(raw) <= NONCE_LENGTH:
        raise DecryptionError()
    nonce, sealed = raw[:NONCE_LENGTH], raw[NONCE_LENGTH:]
    try:
        plaintext = AESGCM(key).decrypt(nonce, sealed, None).decode("utf-8")
    except (InvalidTag, UnicodeDecodeError):
        raise DecryptionError() from None
    if not plaintext:
        raise DecryptionError()
    return plaintext
