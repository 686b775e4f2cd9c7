"""
Transaction signers.
"""

from .multisig import SignatureSet, normalize_signature_entry, sort_signer_entries
from .signer import TransactionSigner

__all__ = [
    "SignatureSet",
    "TransactionSigner",
    "normalize_signature_entry",
    "sort_signer_entries",
]
