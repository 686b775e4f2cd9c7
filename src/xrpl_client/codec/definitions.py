"""
Field definitions for the canonical binary format.

Each serialized field is identified by ``(type_code, nth)``. Fields are
written in ascending ``(type_code, nth)`` order, which is declared here as a
static tuple per transaction type rather than derived from model or dict
iteration order.
"""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from ..enums import FieldType, TransactionType

# AccountID payloads are the ASCII address
ACCOUNT_ID_MAX_LENGTH = 45


@dataclass(frozen=True)
class FieldDef:
    """
    One serialized field.

    ``attribute`` is the snake_case model attribute the field maps to, or
    ``None`` for fields that only occur in the signature section.
    """

    name: str
    kind: FieldType
    nth: int
    attribute: Optional[str] = None
    max_length: Optional[int] = None

    @property
    def type_code(self) -> int:
        return int(self.kind)

    @property
    def sort_key(self) -> Tuple[int, int]:
        return (self.type_code, self.nth)


TRANSACTION_TYPE = FieldDef("TransactionType", FieldType.UINT16, 2, "transaction_type")
FLAGS = FieldDef("Flags", FieldType.UINT32, 2, "flags")
SOURCE_TAG = FieldDef("SourceTag", FieldType.UINT32, 3, "source_tag")
SEQUENCE = FieldDef("Sequence", FieldType.UINT32, 4, "sequence")
DESTINATION_TAG = FieldDef("DestinationTag", FieldType.UINT32, 14, "destination_tag")
QUALITY_IN = FieldDef("QualityIn", FieldType.UINT32, 20, "quality_in")
QUALITY_OUT = FieldDef("QualityOut", FieldType.UINT32, 21, "quality_out")
LAST_LEDGER_SEQUENCE = FieldDef("LastLedgerSequence", FieldType.UINT32, 27, "last_ledger_sequence")
INVOICE_ID = FieldDef("InvoiceID", FieldType.HASH256, 17, "invoice_id")
AMOUNT = FieldDef("Amount", FieldType.AMOUNT, 1, "amount")
LIMIT_AMOUNT = FieldDef("LimitAmount", FieldType.AMOUNT, 3, "limit_amount")
FEE = FieldDef("Fee", FieldType.AMOUNT, 8, "fee")
SIGNING_PUB_KEY = FieldDef("SigningPubKey", FieldType.BLOB, 3)
TXN_SIGNATURE = FieldDef("TxnSignature", FieldType.BLOB, 4)
ACCOUNT = FieldDef("Account", FieldType.ACCOUNT_ID, 1, "account", ACCOUNT_ID_MAX_LENGTH)
DESTINATION = FieldDef("Destination", FieldType.ACCOUNT_ID, 3, "destination", ACCOUNT_ID_MAX_LENGTH)
OBJECT_END = FieldDef("ObjectEndMarker", FieldType.STOBJECT, 1)
SIGNER = FieldDef("Signer", FieldType.STOBJECT, 16)
ARRAY_END = FieldDef("ArrayEndMarker", FieldType.STARRAY, 1)
SIGNERS = FieldDef("Signers", FieldType.STARRAY, 3)

ALL_FIELDS: Tuple[FieldDef, ...] = (
    TRANSACTION_TYPE,
    FLAGS,
    SOURCE_TAG,
    SEQUENCE,
    DESTINATION_TAG,
    QUALITY_IN,
    QUALITY_OUT,
    LAST_LEDGER_SEQUENCE,
    INVOICE_ID,
    AMOUNT,
    LIMIT_AMOUNT,
    FEE,
    SIGNING_PUB_KEY,
    TXN_SIGNATURE,
    ACCOUNT,
    DESTINATION,
    OBJECT_END,
    SIGNER,
    ARRAY_END,
    SIGNERS,
)

CANONICAL_FIELD_ORDER: Dict[TransactionType, Tuple[FieldDef, ...]] = {
    TransactionType.PAYMENT: (
        TRANSACTION_TYPE,
        FLAGS,
        SOURCE_TAG,
        SEQUENCE,
        DESTINATION_TAG,
        LAST_LEDGER_SEQUENCE,
        INVOICE_ID,
        AMOUNT,
        FEE,
        ACCOUNT,
        DESTINATION,
    ),
    TransactionType.TRUST_SET: (
        TRANSACTION_TYPE,
        FLAGS,
        SOURCE_TAG,
        SEQUENCE,
        QUALITY_IN,
        QUALITY_OUT,
        LAST_LEDGER_SEQUENCE,
        LIMIT_AMOUNT,
        FEE,
        ACCOUNT,
    ),
}

REQUIRED_FIELDS: Dict[TransactionType, Tuple[FieldDef, ...]] = {
    TransactionType.PAYMENT: (TRANSACTION_TYPE, SEQUENCE, AMOUNT, FEE, ACCOUNT, DESTINATION),
    TransactionType.TRUST_SET: (TRANSACTION_TYPE, SEQUENCE, LIMIT_AMOUNT, FEE, ACCOUNT),
}

_BY_ATTRIBUTE: Dict[str, FieldDef] = {f.attribute: f for f in ALL_FIELDS if f.attribute}
_BY_ID: Dict[Tuple[int, int], FieldDef] = {f.sort_key: f for f in ALL_FIELDS}


def field_for_attribute(attribute: str) -> FieldDef:
    """Return the field a model attribute serializes to."""
    try:
        return _BY_ATTRIBUTE[attribute]
    except KeyError:
        raise KeyError(f"No serialized field for attribute: {attribute}") from None


def field_for_id(type_code: int, nth: int) -> Optional[FieldDef]:
    """Return the field for a decoded header, or None if it is not known."""
    return _BY_ID.get((type_code, nth))


__all__ = [
    "FieldDef",
    "ALL_FIELDS",
    "CANONICAL_FIELD_ORDER",
    "REQUIRED_FIELDS",
    "field_for_attribute",
    "field_for_id",
    "TRANSACTION_TYPE",
    "SIGNING_PUB_KEY",
    "TXN_SIGNATURE",
    "SIGNER",
    "SIGNERS",
    "OBJECT_END",
    "ARRAY_END",
]
