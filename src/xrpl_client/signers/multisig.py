r"""
Multi-signature entry handling.

Normalizes detached signatures into :class:`SignatureEntry` values, rejects
duplicates and orders them by public key bytes, which is the order the
``Signers`` array is serialized in.
"""

from __future__ import annotations
from typing import Any, Iterable, List, Set, Tuple, Union
import logging

from ..crypto.ed25519 import PUBLIC_KEY_LENGTH, SIGNATURE_LENGTH
from ..runtime.errors import DuplicateSignerError, InvalidFieldError, NoSignersError
from ..transactions import SignatureEntry

logger = logging.getLogger(__name__)

SignatureInput = Union[SignatureEntry, Tuple[Union[str, bytes], Union[str, bytes]]]


def _normalize_hex(value: Any, field: str, length: int) -> str:
    if isinstance(value, (bytes, bytearray)):
        raw = bytes(value)
    elif isinstance(value, str):
        try:
            raw = bytes.fromhex(value)
        except ValueError:
            raise InvalidFieldError(field, f"{field} is not a hex string") from None
    else:
        raise InvalidFieldError(field, f"{field} must be hex or bytes, got {type(value).__name__}")

    if len(raw) != length:
        raise InvalidFieldError(field, f"{field} must be {length} bytes, got {len(raw)}")
    return raw.hex().upper()


def normalize_signature_entry(entry: SignatureInput) -> SignatureEntry:
    """
    Convert a ``(public_key, signature)`` pair or entry to a normalized entry.

    Raises:
        InvalidFieldError: If the key or signature is malformed
    """
    if isinstance(entry, SignatureEntry):
        public_key, signature = entry.public_key, entry.signature
    else:
        try:
            public_key, signature = entry
        except (TypeError, ValueError):
            raise InvalidFieldError(
                "signatures", "Each signature must be a (public_key, signature) pair"
            ) from None

    return SignatureEntry(
        public_key=_normalize_hex(public_key, "public_key", PUBLIC_KEY_LENGTH),
        signature=_normalize_hex(signature, "signature", SIGNATURE_LENGTH),
    )


def sort_signer_entries(entries: Iterable[SignatureEntry]) -> Tuple[SignatureEntry, ...]:
    """Order entries by public key bytes. Pure; the input is left untouched."""
    return tuple(sorted(entries, key=lambda entry: entry.public_key_bytes))


class SignatureSet:
    """
    Collection of detached signatures over one transaction.

    Public keys are unique within a set.
    """

    def __init__(self):
        self._entries: List[SignatureEntry] = []
        self._public_keys: Set[str] = set()

    def add_signature(self, entry: SignatureInput) -> SignatureEntry:
        """
        Add a signature to the set.

        Raises:
            InvalidFieldError: If the entry is malformed
            DuplicateSignerError: If the public key is already in the set
        """
        entry = normalize_signature_entry(entry)
        if entry.public_key in self._public_keys:
            raise DuplicateSignerError(entry.public_key)

        self._entries.append(entry)
        self._public_keys.add(entry.public_key)
        logger.debug(f"Added signature from {entry.public_key} to set ({len(self._entries)} total)")
        return entry

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, public_key: str) -> bool:
        return public_key.upper() in self._public_keys

    def sorted_entries(self) -> Tuple[SignatureEntry, ...]:
        """
        Entries in serialization order.

        Raises:
            NoSignersError: If the set is empty
        """
        if not self._entries:
            raise NoSignersError()
        return sort_signer_entries(self._entries)

    @classmethod
    def from_signatures(cls, signatures: Iterable[SignatureInput]) -> SignatureSet:
        signature_set = cls()
        for entry in signatures:
            signature_set.add_signature(entry)
        return signature_set


__all__ = [
    "SignatureInput",
    "SignatureSet",
    "normalize_signature_entry",
    "sort_signer_entries",
]
