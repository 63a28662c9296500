"""
Encrypted connection token codec.

Wire format shared with the tunnel (guacamole-lite):

    token    = base64( json({"iv": base64(iv), "value": base64(ciphertext)}) )
    ciphertext = AES-256-CBC(key, iv, PKCS7(json(payload)))

with a fresh random 16-byte IV per token.
"""

from __future__ import annotations

import base64
import binascii
import json
import secrets
from dataclasses import dataclass
from typing import Any
from urllib.parse import unquote

from cryptography.hazmat.primitives.ciphers import Cipher
from cryptography.hazmat.primitives.ciphers.algorithms import AES
from cryptography.hazmat.primitives.ciphers.modes import CBC
from cryptography.hazmat.primitives.padding import PKCS7

from connector.config.settings import CIPHER_IV_LENGTH, CIPHER_KEY_LENGTH
from connector.domain.types import ConnectionDescriptor
from connector.errors import DecodingError, EncodingError


def pad_data(data: bytes) -> bytes:
    padder = PKCS7(AES.block_size).padder()
    return padder.update(data) + padder.finalize()


def unpad_data(data: bytes) -> bytes:
    unpadder = PKCS7(AES.block_size).unpadder()
    return unpadder.update(data) + unpadder.finalize()


def serialize_payload(payload: Any) -> bytes:
    """Compact JSON, same bytes as JavaScript's ``JSON.stringify``."""
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False, allow_nan=False).encode("utf-8")


@dataclass(frozen=True)
class EncryptedToken:
    """IV and ciphertext of one token."""

    iv: bytes
    ciphertext: bytes

    def encode(self) -> str:
        """Return the external (outer base64) representation."""
        envelope = {
            "iv": base64.b64encode(self.iv).decode("ascii"),
            "value": base64.b64encode(self.ciphertext).decode("ascii"),
        }
        return base64.b64encode(serialize_payload(envelope)).decode("ascii")

    @classmethod
    def decode(cls, token: str) -> EncryptedToken:
        """
        Parse the external representation.

        A percent-encoded token (as sent on the websocket query string)
        is accepted as well.

        Raises:
            DecodingError: If any layer is malformed
        """
        if not isinstance(token, str) or not token:
            raise DecodingError("Token is empty")
        try:
            outer = base64.b64decode(unquote(token), validate=True)
            envelope = json.loads(outer.decode("utf-8"))
        except (binascii.Error, ValueError) as e:
            raise DecodingError(f"Malformed token envelope: {e}") from e

        if not isinstance(envelope, dict):
            raise DecodingError("Token envelope is not an object")
        iv_b64 = envelope.get("iv")
        value_b64 = envelope.get("value")
        if not isinstance(iv_b64, str) or not isinstance(value_b64, str):
            raise DecodingError("Token envelope must contain string 'iv' and 'value'")

        try:
            iv = base64.b64decode(iv_b64, validate=True)
            ciphertext = base64.b64decode(value_b64, validate=True)
        except binascii.Error as e:
            raise DecodingError(f"Malformed token field: {e}") from e

        if len(iv) != CIPHER_IV_LENGTH:
            raise DecodingError(f"IV must be {CIPHER_IV_LENGTH} bytes (got {len(iv)})")
        if not ciphertext or len(ciphertext) % CIPHER_IV_LENGTH:
            raise DecodingError("Ciphertext length is not a multiple of the block size")
        return cls(iv=iv, ciphertext=ciphertext)


class TokenCodec:
    """AES-256-CBC token codec bound to one key.

    Stateless apart from the key, so a single instance is shared by all
    request threads.
    """

    def __init__(self, key: bytes) -> None:
        if len(key) != CIPHER_KEY_LENGTH:
            raise ValueError(f"Cipher key must be {CIPHER_KEY_LENGTH} bytes (got {len(key)})")
        self._key = key

    def __repr__(self) -> str:
        return "TokenCodec(key=***)"

    # ------------------------------------------------------------------
    # Byte level
    # ------------------------------------------------------------------

    def seal(self, plaintext: bytes) -> EncryptedToken:
        """Encrypt bytes under a fresh IV."""
        iv = secrets.token_bytes(CIPHER_IV_LENGTH)
        encryptor = Cipher(AES(self._key), CBC(iv)).encryptor()
        ciphertext = encryptor.update(pad_data(plaintext)) + encryptor.finalize()
        return EncryptedToken(iv=iv, ciphertext=ciphertext)

    def unseal(self, token: EncryptedToken) -> bytes:
        """Decrypt and unpad; raises DecodingError on failure."""
        decryptor = Cipher(AES(self._key), CBC(token.iv)).decryptor()
        padded = decryptor.update(token.ciphertext) + decryptor.finalize()
        try:
            return unpad_data(padded)
        except ValueError as e:
            raise DecodingError("Token could not be decrypted") from e

    # ------------------------------------------------------------------
    # Descriptor level
    # ------------------------------------------------------------------

    def encrypt(self, descriptor: ConnectionDescriptor) -> str:
        """
        Encrypt a descriptor into a token string.

        Raises:
            EncodingError: If the descriptor cannot be serialized or encrypted
        """
        try:
            plaintext = serialize_payload(descriptor.to_payload())
            return self.seal(plaintext).encode()
        except (TypeError, ValueError) as e:
            raise EncodingError(f"Cannot encode connection descriptor: {type(e).__name__}") from e

    def decrypt(self, token: str) -> ConnectionDescriptor:
        """
        Decrypt a token string back into a descriptor.

        Raises:
            DecodingError: On any malformed layer or decryption failure
        """
        plaintext = self.unseal(EncryptedToken.decode(token))
        try:
            text = plaintext.decode("utf-8").rstrip("\0")
            return ConnectionDescriptor.from_payload(json.loads(text))
        except ValueError as e:
            raise DecodingError(f"Token payload is invalid: {e}") from e
