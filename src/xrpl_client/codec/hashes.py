"""
Hash functions for transaction identifiers.
"""

import hashlib

# Prefix mixed into the transaction id hash
TRANSACTION_ID_PREFIX = b"TXN\x00"


def sha512_half(input_bytes: bytes) -> bytes:
    """
    First 32 bytes of SHA-512.

    Args:
        input_bytes: Input bytes to hash

    Returns:
        32-byte digest
    """
    return hashlib.sha512(input_bytes).digest()[:32]


def transaction_id(blob: bytes) -> str:
    """
    Identifier of a signed transaction.

    Args:
        blob: Signed transaction blob (canonical bytes plus signature section)

    Returns:
        64 upper-case hex characters
    """
    return sha512_half(TRANSACTION_ID_PREFIX + blob).hex().upper()
