# Transaction models for the XRPL Python client
# Closed set of transaction types, each with exactly the fields its type allows

from __future__ import annotations
from pydantic import BaseModel, ConfigDict, Field
from typing import Annotated, Optional, Union, Tuple, Dict, Any, Literal

from .enums import TransactionType, TransactionStatus
from .tx.fields import Address, AmountValue, CurrencyCode, Hash256

UINT32_MAX = 0xFFFFFFFF

UInt32 = Annotated[int, Field(ge=0, le=UINT32_MAX, strict=True)]


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)


# =============================================================================
# Amounts
# =============================================================================

class IssuedAmount(_Frozen):
    """Amount of an issued asset: value, currency and issuer, in that order."""
    value: AmountValue
    currency: CurrencyCode
    issuer: Address

    def to_json(self) -> Dict[str, str]:
        return {"currency": str(self.currency), "issuer": str(self.issuer), "value": str(self.value)}


# Native amounts are integral drop strings
Amount = Union[AmountValue, IssuedAmount]


def amount_to_json(amount: Amount) -> Union[str, Dict[str, str]]:
    if isinstance(amount, IssuedAmount):
        return amount.to_json()
    return str(amount)


# =============================================================================
# Transactions
# =============================================================================

class BaseTransaction(_Frozen):
    """Fields common to every transaction type."""
    transaction_type: TransactionType
    account: Address
    fee: AmountValue
    sequence: Annotated[int, Field(ge=1, le=UINT32_MAX, strict=True)]
    flags: Optional[UInt32] = None
    last_ledger_sequence: Optional[UInt32] = None
    source_tag: Optional[UInt32] = None

    def to_json(self) -> Dict[str, Any]:
        """Ledger JSON (PascalCase) form of the transaction."""
        from .codec.definitions import field_for_attribute

        tx_json: Dict[str, Any] = {}
        for name, value in self:
            if value is None:
                continue
            definition = field_for_attribute(name)
            if name == "transaction_type":
                tx_json[definition.name] = value.value
            elif isinstance(value, (IssuedAmount, AmountValue)):
                tx_json[definition.name] = amount_to_json(value)
            elif isinstance(value, int):
                tx_json[definition.name] = value
            else:
                tx_json[definition.name] = str(value)
        return tx_json


class Payment(BaseTransaction):
    """Payment of native or issued currency from ``account`` to ``destination``."""
    transaction_type: Literal[TransactionType.PAYMENT] = TransactionType.PAYMENT
    destination: Address
    amount: Amount
    destination_tag: Optional[UInt32] = None
    invoice_id: Optional[Hash256] = None

    @property
    def is_native(self) -> bool:
        return not isinstance(self.amount, IssuedAmount)


class TrustSet(BaseTransaction):
    """Create or modify a trust line towards ``limit_amount.issuer``."""
    transaction_type: Literal[TransactionType.TRUST_SET] = TransactionType.TRUST_SET
    limit_amount: IssuedAmount
    quality_in: Optional[UInt32] = None
    quality_out: Optional[UInt32] = None


Transaction = Annotated[Union[Payment, TrustSet], Field(discriminator="transaction_type")]

TRANSACTION_MODELS = {
    TransactionType.PAYMENT: Payment,
    TransactionType.TRUST_SET: TrustSet,
}


# =============================================================================
# Signing output
# =============================================================================

class SignatureEntry(_Frozen):
    """One Ed25519 signature tagged with the signer's public key (hex, upper-case)."""
    public_key: str
    signature: str

    @property
    def public_key_bytes(self) -> bytes:
        return bytes.fromhex(self.public_key)

    @property
    def signature_bytes(self) -> bytes:
        return bytes.fromhex(self.signature)


class SignedTransaction(_Frozen):
    """
    A transaction together with its signed wire blob.

    Produced once by the signer and never modified afterwards. The blob is
    ``canonical_bytes || signature_section`` in upper-case hex.
    """
    transaction: Union[Payment, TrustSet] = Field(..., discriminator="transaction_type")
    tx_blob: str
    signatures: Tuple[SignatureEntry, ...]

    @property
    def is_multisig(self) -> bool:
        from .codec.transaction_codec import decode_blob
        return decode_blob(self.tx_blob).is_multisig

    @property
    def hash(self) -> str:
        """Transaction id derived from the signed blob."""
        from .codec.hashes import transaction_id
        return transaction_id(bytes.fromhex(self.tx_blob))


# =============================================================================
# Ledger responses
# =============================================================================

class TransactionResult(_Frozen):
    """Outcome of a submission or a fetch, as reported by the ledger."""
    hash: str
    status: TransactionStatus
    raw_fields: Dict[str, Any] = Field(default_factory=dict)
    engine_result: str = ""
    engine_result_message: str = ""
    ledger_index: Optional[int] = None
    validated: bool = False

    @property
    def transaction_type(self) -> Optional[str]:
        return self.raw_fields.get("TransactionType")


class AccountInfo(_Frozen):
    """Subset of ``account_info`` the client needs."""
    account: str
    sequence: int
    balance: str
    flags: int = 0
    owner_count: int = 0
    ledger_index: Optional[int] = None


class TrustLine(_Frozen):
    """One entry of ``account_lines``."""
    model_config = ConfigDict(frozen=True, extra="ignore")

    account: str
    balance: str
    currency: str
    limit: str
    limit_peer: str = "0"
    quality_in: int = 0
    quality_out: int = 0
    no_ripple: bool = False
    no_ripple_peer: bool = False
    authorized: bool = False
    peer_authorized: bool = False
    freeze: bool = False
    freeze_peer: bool = False


__all__ = [
    "UINT32_MAX",
    "IssuedAmount",
    "Amount",
    "amount_to_json",
    "BaseTransaction",
    "Payment",
    "TrustSet",
    "Transaction",
    "TRANSACTION_MODELS",
    "SignatureEntry",
    "SignedTransaction",
    "TransactionResult",
    "AccountInfo",
    "TrustLine",
]
