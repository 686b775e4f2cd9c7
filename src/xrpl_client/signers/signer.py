r"""
Transaction signing and verification.

Signs the canonical bytes of a transaction with Ed25519 and assembles the
signed blob. Signing is pure: no network I/O and no shared state, so one
:class:`TransactionSigner` can be used from many threads.
"""

from __future__ import annotations
from typing import Any, Iterable
import logging

from ..codec.transaction_codec import (
    assemble_multisig_blob,
    assemble_single_blob,
    decode_blob,
    encode_transaction,
)
from ..crypto.ed25519 import KeyPair, verify_signature
from ..runtime.errors import EncodingError
from ..transactions import SignatureEntry, SignedTransaction, Transaction
from .multisig import SignatureInput, SignatureSet

logger = logging.getLogger(__name__)


def _same_transaction(a: Any, b: Any) -> bool:
    return type(a) is type(b) and a.model_dump() == b.model_dump()


class TransactionSigner:
    """
    Ed25519 signer for transactions.
    """

    def sign(self, transaction: Transaction, secret: str) -> SignedTransaction:
        """
        Sign a transaction with the key derived from ``secret``.

        Args:
            transaction: Transaction to sign
            secret: Secret to derive the signing key from

        Returns:
            Signed transaction with a single signature

        Raises:
            InvalidSecretError: If the secret is malformed
            EncodingError: If the transaction cannot be encoded
        """
        key_pair = KeyPair.from_secret(secret)
        canonical = encode_transaction(transaction)
        signature = key_pair.sign(canonical)
        blob = assemble_single_blob(canonical, key_pair.public_key_bytes(), signature)

        signed = SignedTransaction(
            transaction=transaction,
            tx_blob=blob.hex().upper(),
            signatures=(
                SignatureEntry(public_key=key_pair.public_key.to_hex(), signature=signature.hex().upper()),
            ),
        )
        logger.debug(f"Signed {transaction.transaction_type.value} {signed.hash}")
        return signed

    def sign_for_multisig(self, transaction: Transaction, secret: str) -> SignatureEntry:
        """
        Produce a detached signature over the canonical bytes.

        Any key may sign; whether it is an authorized signer of the account
        is decided by the ledger.
        """
        key_pair = KeyPair.from_secret(secret)
        signature = key_pair.sign(encode_transaction(transaction))
        logger.debug(f"Multisig signature from {key_pair.address}")
        return SignatureEntry(public_key=key_pair.public_key.to_hex(), signature=signature.hex().upper())

    def create_multisig(self, transaction: Transaction,
                        signatures: Iterable[SignatureInput]) -> SignedTransaction:
        """
        Assemble a multi-signed transaction from detached signatures.

        Signatures are not verified here; use :meth:`verify`.

        Raises:
            NoSignersError: If ``signatures`` is empty
            DuplicateSignerError: If a public key appears twice
            InvalidFieldError: If a key or signature is malformed
        """
        entries = SignatureSet.from_signatures(signatures).sorted_entries()
        blob = assemble_multisig_blob(encode_transaction(transaction), entries)

        signed = SignedTransaction(transaction=transaction, tx_blob=blob.hex().upper(), signatures=entries)
        logger.debug(f"Assembled multisig {signed.hash} with {len(entries)} signers")
        return signed

    def verify(self, signed: SignedTransaction) -> bool:
        """
        Check a signed transaction.

        The blob must decode to exactly the embedded transaction, an
        independent re-encoding must match the blob's canonical bytes, and
        every signature must verify. Corrupted blobs yield False.
        """
        try:
            decoded = decode_blob(signed.tx_blob)
            canonical = encode_transaction(signed.transaction)
        except EncodingError as e:
            logger.debug(f"Signed transaction failed to decode: {e.message}")
            return False

        if not _same_transaction(decoded.transaction, signed.transaction):
            logger.debug("Blob does not match the embedded transaction")
            return False
        if canonical != decoded.canonical_bytes:
            logger.debug("Blob is not the canonical encoding of the transaction")
            return False
        if decoded.signatures != tuple(signed.signatures):
            logger.debug("Blob signatures do not match the embedded signatures")
            return False

        return all(
            verify_signature(entry.public_key_bytes, entry.signature_bytes, canonical)
            for entry in decoded.signatures
        )


__all__ = ["TransactionSigner"]
