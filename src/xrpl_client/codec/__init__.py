"""
Canonical binary codec.

Key components:
- writer.py / reader.py: big-endian primitives, variable-length prefixes and field headers
- definitions.py: static field table and canonical field order per transaction type
- transaction_codec.py: transaction and signed-blob encoding/decoding
- hashes.py: SHA-512Half and transaction ids
"""

from .definitions import CANONICAL_FIELD_ORDER, FieldDef
from .hashes import sha512_half, transaction_id
from .reader import BinaryReader
from .transaction_codec import (
    DecodedBlob,
    assemble_multisig_blob,
    assemble_single_blob,
    decode_blob,
    decode_transaction,
    encode_transaction,
)
from .writer import BinaryWriter

__all__ = [
    "BinaryReader",
    "BinaryWriter",
    "CANONICAL_FIELD_ORDER",
    "FieldDef",
    "DecodedBlob",
    "assemble_multisig_blob",
    "assemble_single_blob",
    "decode_blob",
    "decode_transaction",
    "encode_transaction",
    "sha512_half",
    "transaction_id",
]
