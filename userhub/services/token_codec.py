"""AES-GCM codec for short-lived opaque tokens.

Encrypted values are laid out as ``nonce || ciphertext || tag`` and
hex-encoded, which keeps them safe to embed in a URL query string.
"""

import binascii
import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

NONCE_SIZE = 12


class TokenCodecError(Exception):
    """Base exception for token encryption and decryption."""


class CodecKeyError(TokenCodecError):
    """The configured key is not a valid hex AES key."""


class CiphertextEncodingError(TokenCodecError):
    """Input is not a hex string."""


class CiphertextTooShortError(TokenCodecError):
    """Input is shorter than one nonce."""


class CiphertextAuthenticationError(TokenCodecError):
    """Authentication tag check failed: the value was tampered with or forged."""


class TokenCodec:
    """Authenticated symmetric encryption of strings."""

    def __init__(self, key_hex: str) -> None:
        try:
            key = bytes.fromhex(key_hex)
        except ValueError as e:
            raise CodecKeyError("error in decoding key") from e
        if len(key) not in (16, 24, 32):
            raise CodecKeyError(f"AES key must be 16, 24 or 32 bytes, got {len(key)}")
        self._aesgcm = AESGCM(key)

    def encrypt(self, plaintext: str) -> str:
        """Encrypt ``plaintext`` under a fresh random nonce."""
        nonce = os.urandom(NONCE_SIZE)
        ciphertext = self._aesgcm.encrypt(nonce, plaintext.encode("utf-8"), None)
        return (nonce + ciphertext).hex()

    def decrypt(self, token: str) -> str:
        """Decrypt a value produced by ``encrypt``.

        Raises:
            CiphertextEncodingError: ``token`` is not hex.
            CiphertextTooShortError: ``token`` holds fewer bytes than a nonce.
            CiphertextAuthenticationError: Authentication failed.
        """
        try:
            raw = binascii.unhexlify(token)
        except (binascii.Error, ValueError) as e:
            raise CiphertextEncodingError("error in decoding encrypted string") from e

        if len(raw) < NONCE_SIZE:
            raise CiphertextTooShortError("ciphertext too short")

        nonce, ciphertext = raw[:NONCE_SIZE], raw[NONCE_SIZE:]
        try:
            plaintext = self._aesgcm.decrypt(nonce, ciphertext, None)
            return plaintext.decode("utf-8")
        except (InvalidTag, UnicodeDecodeError) as e:
            raise CiphertextAuthenticationError("error decrypting") from e
