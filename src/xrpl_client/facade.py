"""
XRPL client facade.

The Xrpl class is the primary entry point: it composes the builder, the
signer and the ledger client into the common token transfer flows.

Example:
    ```python
    from xrpl_client import Xrpl

    async with Xrpl.testnet() as xrpl:
        result = await xrpl.send_token(secret, recipient, issuer, "USD", "10.5")
        ok = await xrpl.verify_token_transfer(sender, recipient, issuer, "USD", "10.5", result.hash)
    ```
"""

from __future__ import annotations
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, Optional, Tuple
import logging

from pydantic import BaseModel, ConfigDict

from .api_client import ClientConfig, XrplClient
from .crypto.ed25519 import KeyPair
from .enums import TransactionStatus, TransactionType
from .runtime.errors import ValidationError
from .signers.multisig import SignatureInput
from .signers.signer import TransactionSigner
from .transactions import Payment, SignatureEntry, SignedTransaction, Transaction, TransactionResult
from .tx.builders.payments import PaymentBuilder
from .tx.validation import validate_address, validate_amount, validate_currency_code, validate_transaction_hash

logger = logging.getLogger(__name__)


class TransferVerification(BaseModel):
    """Outcome of checking a ledger transaction against an expected transfer."""
    model_config = ConfigDict(frozen=True)

    hash: str
    verified: bool
    status: TransactionStatus
    mismatched_fields: Tuple[str, ...] = ()


def _same_currency(actual: Any, expected: str) -> bool:
    try:
        return validate_currency_code(actual) == expected
    except ValidationError:
        return False


def _same_amount(actual: Any, expected: Decimal) -> bool:
    try:
        return Decimal(str(actual)) == expected
    except InvalidOperation:
        return False


class Xrpl:
    """
    Main facade over the XRPL client, signer and builders.

    Attributes:
        client: XrplClient used for every ledger call
        signer: TransactionSigner used for every signature
    """

    def __init__(self, testnet: bool = True, config: Optional[ClientConfig] = None,
                 client: Optional[XrplClient] = None):
        """
        Initialize the facade.

        Args:
            testnet: Select the public testnet (True) or mainnet
            config: Optional client configuration
            client: Optional pre-built client (takes precedence)
        """
        self.client = client or XrplClient(testnet=testnet, config=config)
        self.signer = TransactionSigner()

    @classmethod
    def testnet(cls) -> Xrpl:
        """Create a facade connected to the public testnet."""
        return cls(testnet=True)

    @classmethod
    def mainnet(cls) -> Xrpl:
        """Create a facade connected to mainnet."""
        return cls(testnet=False)

    @property
    def config(self) -> ClientConfig:
        return self.client.config

    async def close(self) -> None:
        await self.client.close()

    async def __aenter__(self) -> Xrpl:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    # =========================================================================
    # Offline operations
    # =========================================================================

    def create_payment_transaction(self, secret: str, recipient: str, issuer: str, currency: str,
                                   amount: str, sequence: int,
                                   last_ledger_sequence: Optional[int] = None,
                                   fee: Optional[str] = None) -> Payment:
        """
        Build an issued-currency Payment from the account ``secret`` controls.

        No network I/O. ``fee`` defaults to ``ClientConfig.default_fee``.
        """
        sender = KeyPair.from_secret(secret).address
        builder = (PaymentBuilder()
                   .account(sender)
                   .destination(recipient)
                   .amount(amount, currency, issuer)
                   .fee(fee if fee is not None else self.config.default_fee)
                   .sequence(sequence))
        if last_ledger_sequence is not None:
            builder.last_ledger_sequence(last_ledger_sequence)
        return builder.build()

    def sign_transaction_offline(self, secret: str, transaction: Transaction) -> SignedTransaction:
        """Sign without submitting. No network I/O."""
        return self.signer.sign(transaction, secret)

    def sign_for_multisig(self, secret: str, transaction: Transaction) -> SignatureEntry:
        """Produce one detached signature for a multi-signed transaction."""
        return self.signer.sign_for_multisig(transaction, secret)

    def create_multisig_transaction(self, transaction: Transaction,
                                    signatures: Iterable[SignatureInput]) -> SignedTransaction:
        """Assemble detached signatures into a multi-signed transaction."""
        return self.signer.create_multisig(transaction, signatures)

    def verify_signed_transaction(self, signed: SignedTransaction) -> bool:
        """Check a signed transaction's blob and signatures."""
        return self.signer.verify(signed)

    # =========================================================================
    # Ledger operations
    # =========================================================================

    async def submit_signed_transaction(self, signed: SignedTransaction) -> TransactionResult:
        """Submit an already signed transaction as-is."""
        return await self.client.submit(signed)

    async def send_token(self, secret: str, recipient: str, issuer: str, currency: str,
                         amount: str) -> TransactionResult:
        """
        Send an issued token from the account ``secret`` controls.

        Fetches the sender's sequence and the current ledger index, builds a
        Payment expiring ``last_ledger_offset`` ledgers later, signs and
        submits it. The first error is raised unchanged.
        """
        sender = KeyPair.from_secret(secret).address
        account = await self.client.get_account(sender)
        ledger_index = await self.client.get_ledger_index()

        transaction = self.create_payment_transaction(
            secret, recipient, issuer, currency, amount,
            sequence=account.sequence,
            last_ledger_sequence=ledger_index + self.config.last_ledger_offset,
        )
        signed = self.sign_transaction_offline(secret, transaction)
        logger.info(f"Sending {amount} {currency} from {sender} to {recipient}")
        return await self.submit_signed_transaction(signed)

    async def inspect_token_transfer(self, sender: str, recipient: str, issuer: str, currency: str,
                                     amount: str, tx_hash: str) -> TransferVerification:
        """
        Compare a ledger transaction with an expected token transfer.

        Addresses must match exactly, the currency in canonical form and the
        amount numerically (``"100.50"`` equals ``"100.5"``).

        Raises:
            ValidationError: If an expected value or the hash is malformed
            NetworkError, LedgerApiError: If the transaction cannot be fetched
        """
        tx_hash = validate_transaction_hash(tx_hash, field="tx_hash")
        sender = validate_address(sender, field="sender")
        recipient = validate_address(recipient, field="recipient")
        issuer = validate_address(issuer, field="issuer")
        currency = validate_currency_code(currency, field="currency")
        expected_amount = validate_amount(amount).as_decimal()

        result = await self.client.get_transaction(tx_hash)
        fields: Dict[str, Any] = result.raw_fields

        mismatched = []
        if fields.get("TransactionType") != TransactionType.PAYMENT.value:
            mismatched.append("TransactionType")
        if fields.get("Account") != sender:
            mismatched.append("Account")
        if fields.get("Destination") != recipient:
            mismatched.append("Destination")

        delivered = fields["Amount"] if "Amount" in fields else fields.get("DeliverMax")
        if isinstance(delivered, dict):
            if delivered.get("issuer") != issuer:
                mismatched.append("issuer")
            if not _same_currency(delivered.get("currency"), currency):
                mismatched.append("currency")
            if not _same_amount(delivered.get("value"), expected_amount):
                mismatched.append("Amount")
        else:
            mismatched.extend(("issuer", "currency", "Amount"))

        if mismatched:
            logger.debug(f"Transfer {tx_hash} does not match: {', '.join(mismatched)}")
        return TransferVerification(
            hash=str(tx_hash),
            verified=not mismatched,
            status=result.status,
            mismatched_fields=tuple(mismatched),
        )

    async def verify_token_transfer(self, sender: str, recipient: str, issuer: str, currency: str,
                                    amount: str, tx_hash: str) -> bool:
        """
        True if ``tx_hash`` is a Payment of exactly this token transfer.

        Mismatches return False; fetch failures raise.
        """
        verification = await self.inspect_token_transfer(sender, recipient, issuer, currency, amount, tx_hash)
        return verification.verified


__all__ = ["Xrpl", "TransferVerification"]
