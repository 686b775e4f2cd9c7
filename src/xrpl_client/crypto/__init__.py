"""
Cryptographic primitives for the XRPL client.
"""

from .ed25519 import (
    Ed25519Error,
    Ed25519PrivateKey,
    Ed25519PublicKey,
    KeyPair,
    address_from_public_key,
    verify_signature,
)

__all__ = [
    "Ed25519Error",
    "Ed25519PrivateKey",
    "Ed25519PublicKey",
    "KeyPair",
    "address_from_public_key",
    "verify_signature",
]
