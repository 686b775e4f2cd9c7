r"""
Ed25519 cryptographic operations for the XRPL client.

Provides key derivation from a secret, signing, verification and the
address derived from a public key.
"""

from __future__ import annotations
import hashlib
from typing import Any, Union

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey as CryptoEd25519PrivateKey,
    Ed25519PublicKey as CryptoEd25519PublicKey
)

from ..runtime.errors import InvalidSecretError

PUBLIC_KEY_LENGTH = 32
SIGNATURE_LENGTH = 64
SECRET_MIN_LENGTH = 32


class Ed25519Error(ValueError):
    """Malformed Ed25519 key or signature material."""
    pass


def address_from_public_key(public_key_bytes: bytes) -> str:
    """
    Derive the account address of a public key.

    ``"r"`` followed by the first 20 bytes of SHA-256(public key) in hex.
    """
    return "r" + hashlib.sha256(public_key_bytes).digest()[:20].hex()


class Ed25519PublicKey:
    """
    Ed25519 public key.

    Provides verification operations and serialization.
    """

    def __init__(self, public_key_bytes: bytes):
        """
        Initialize from 32-byte public key.

        Args:
            public_key_bytes: 32-byte Ed25519 public key

        Raises:
            Ed25519Error: If key is invalid
        """
        if len(public_key_bytes) != PUBLIC_KEY_LENGTH:
            raise Ed25519Error(f"Ed25519 public key must be 32 bytes, got {len(public_key_bytes)}")

        self._key_bytes = bytes(public_key_bytes)
        try:
            self._crypto_key = CryptoEd25519PublicKey.from_public_bytes(self._key_bytes)
        except ValueError as e:
            raise Ed25519Error(f"Invalid Ed25519 public key: {e}") from e

    @classmethod
    def from_hex(cls, hex_string: str) -> Ed25519PublicKey:
        """Create public key from hex string."""
        try:
            key_bytes = bytes.fromhex(hex_string)
        except ValueError as e:
            raise Ed25519Error(f"Invalid hex string: {e}") from e
        return cls(key_bytes)

    def to_bytes(self) -> bytes:
        """Get the 32-byte public key."""
        return self._key_bytes

    def to_hex(self) -> str:
        """Get the public key as upper-case hex."""
        return self._key_bytes.hex().upper()

    @property
    def address(self) -> str:
        return address_from_public_key(self._key_bytes)

    def verify(self, signature: bytes, message: bytes) -> bool:
        """
        Verify a signature against a message.

        Args:
            signature: 64-byte Ed25519 signature
            message: Message that was signed

        Returns:
            True if signature is valid
        """
        if len(signature) != SIGNATURE_LENGTH:
            return False
        try:
            self._crypto_key.verify(signature, message)
        except InvalidSignature:
            return False
        return True

    def __eq__(self, other) -> bool:
        if not isinstance(other, Ed25519PublicKey):
            return False
        return self._key_bytes == other._key_bytes

    def __hash__(self) -> int:
        return hash(self._key_bytes)

    def __repr__(self) -> str:
        return f"Ed25519PublicKey.from_hex('{self.to_hex()}')"


class Ed25519PrivateKey:
    """
    Ed25519 private key.

    The repr never shows key material.
    """

    def __init__(self, private_key_bytes: bytes):
        """
        Initialize from 32-byte private key seed.

        Raises:
            Ed25519Error: If key is invalid
        """
        if len(private_key_bytes) != 32:
            raise Ed25519Error(f"Ed25519 private key must be 32 bytes, got {len(private_key_bytes)}")

        self._crypto_key = CryptoEd25519PrivateKey.from_private_bytes(bytes(private_key_bytes))
        self._public_key = Ed25519PublicKey(
            self._crypto_key.public_key().public_bytes(
                encoding=serialization.Encoding.Raw,
                format=serialization.PublicFormat.Raw
            )
        )

    @classmethod
    def from_secret(cls, secret: Any) -> Ed25519PrivateKey:
        """
        Derive a private key from a secret string.

        The seed is the first 32 bytes of SHA-512(secret).

        Raises:
            InvalidSecretError: If the secret is not a string of at least
                32 characters without surrounding whitespace
        """
        if not isinstance(secret, str):
            raise InvalidSecretError(f"Secret must be a string, got {type(secret).__name__}")
        if secret != secret.strip():
            raise InvalidSecretError("Secret cannot have leading or trailing whitespace")
        if len(secret) < SECRET_MIN_LENGTH:
            raise InvalidSecretError(f"Secret must be at least {SECRET_MIN_LENGTH} characters")

        seed = hashlib.sha512(secret.encode("utf-8")).digest()[:32]
        return cls(seed)

    def public_key(self) -> Ed25519PublicKey:
        """Get the corresponding public key."""
        return self._public_key

    def sign(self, message: bytes) -> bytes:
        """
        Sign a message.

        Returns:
            64-byte Ed25519 signature
        """
        return self._crypto_key.sign(message)

    def __repr__(self) -> str:
        return f"Ed25519PrivateKey(public={self._public_key.to_hex()})"


class KeyPair:
    """
    Ed25519 key pair with the account address it controls.
    """

    def __init__(self, private_key: Ed25519PrivateKey):
        self.private_key = private_key
        self.public_key = private_key.public_key()

    @classmethod
    def from_secret(cls, secret: Any) -> KeyPair:
        """Create a key pair from a secret string (see Ed25519PrivateKey.from_secret)."""
        return cls(Ed25519PrivateKey.from_secret(secret))

    @property
    def address(self) -> str:
        return self.public_key.address

    def sign(self, message: bytes) -> bytes:
        """Sign a message and return signature bytes."""
        return self.private_key.sign(message)

    def public_key_bytes(self) -> bytes:
        return self.public_key.to_bytes()

    def verify(self, message: bytes, signature: bytes) -> bool:
        return self.public_key.verify(signature, message)

    def __repr__(self) -> str:
        return f"KeyPair(address={self.address})"


def verify_signature(public_key: Union[bytes, str], signature: bytes, message: bytes) -> bool:
    """
    Verify a signature with raw key material.

    Malformed keys verify as False rather than raising.
    """
    try:
        if isinstance(public_key, str):
            key = Ed25519PublicKey.from_hex(public_key)
        else:
            key = Ed25519PublicKey(public_key)
    except Ed25519Error:
        return False
    return key.verify(signature, message)


__all__ = [
    "Ed25519Error",
    "Ed25519PublicKey",
    "Ed25519PrivateKey",
    "KeyPair",
    "address_from_public_key",
    "verify_signature",
]
