"""
cipher.py — Entry content encryption
AES-256-GCM over UTF-8 text. Tokens are "<base64 iv>:<base64 ciphertext+tag>",
a fresh random IV per call. GCM's tag makes any tampering a DecryptionFailed
instead of garbage plaintext.
"""

import base64
import binascii
import logging
import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from ouramind.config import ENCRYPTION_KEY_LENGTH
from ouramind.errors import ConfigurationError, MalformedToken, DecryptionFailed

logger = logging.getLogger(__name__)

IV_LENGTH = 16  # AES block size
DELIMITER = ":"  # never produced by standard base64


def _b64decode(part: str) -> bytes:
    try:
        return base64.b64decode(part, validate=True)
    except (binascii.Error, ValueError) as e:
        raise MalformedToken("Token part is not valid base64") from e


class EntryCipher:
    """Symmetric cipher bound to one process-wide key."""

    def __init__(self, key: bytes):
        if not isinstance(key, (bytes, bytearray)) or len(key) != ENCRYPTION_KEY_LENGTH:
            raise ConfigurationError(
                f"Encryption key must be exactly {ENCRYPTION_KEY_LENGTH} bytes"
            )
        self._aead = AESGCM(bytes(key))

    def encrypt(self, plaintext: str) -> str:
        """Encrypts a string for DB storage."""
        iv = os.urandom(IV_LENGTH)
        sealed = self._aead.encrypt(iv, plaintext.encode("utf-8"), None)
        return (
            base64.b64encode(iv).decode("ascii")
            + DELIMITER
            + base64.b64encode(sealed).decode("ascii")
        )

    def decrypt(self, token: str) -> str:
        """Decrypts a token produced by encrypt()."""
        if not isinstance(token, str) or DELIMITER not in token:
            raise MalformedToken("Token is missing the IV delimiter")

        iv_part, sealed_part = token.split(DELIMITER, 1)
        if not iv_part or not sealed_part:
            raise MalformedToken("Token has an empty IV or ciphertext")

        iv = _b64decode(iv_part)
        sealed = _b64decode(sealed_part)
        if len(iv) != IV_LENGTH:
            raise MalformedToken(f"IV must be {IV_LENGTH} bytes, got {len(iv)}")

        try:
            raw = self._aead.decrypt(iv, sealed, None)
        except InvalidTag as e:
            logger.warning("Entry ciphertext failed authentication")
            raise DecryptionFailed("Ciphertext failed authentication") from e

        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecryptionFailed("Decrypted bytes are not valid UTF-8") from e
