"""
Enumerations for the XRPL Python client.
"""

from enum import Enum, IntEnum


class TransactionType(str, Enum):
    """Supported transaction types. Values are the ledger's type names."""

    PAYMENT = "Payment"
    TRUST_SET = "TrustSet"

    @property
    def code(self) -> int:
        """UInt16 code written in the TransactionType field."""
        return _TRANSACTION_TYPE_CODES[self]

    @classmethod
    def from_code(cls, code: int) -> "TransactionType":
        for tx_type, value in _TRANSACTION_TYPE_CODES.items():
            if value == code:
                return tx_type
        raise ValueError(f"Unknown transaction type code: {code}")

    @classmethod
    def parse(cls, value) -> "TransactionType":
        """Accept an enum member, its value ("Payment") or its name ("PAYMENT")."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            for tx_type in cls:
                if value in (tx_type.value, tx_type.name):
                    return tx_type
        raise ValueError(f"Unsupported transaction type: {value!r}")


_TRANSACTION_TYPE_CODES = {
    TransactionType.PAYMENT: 0,
    TransactionType.TRUST_SET: 20,
}


class TransactionStatus(str, Enum):
    """Lifecycle status of a submitted or fetched transaction."""

    PENDING = "pending"
    VALIDATED = "validated"
    FAILED = "failed"


class FieldType(IntEnum):
    """Serialized type codes used in canonical field headers."""

    UINT16 = 1
    UINT32 = 2
    HASH256 = 5
    AMOUNT = 6
    BLOB = 7
    ACCOUNT_ID = 8
    STOBJECT = 14
    STARRAY = 15


class PaymentFlags(IntEnum):
    """Payment transaction flags."""

    FULLY_CANONICAL_SIG = 0x80000000
    NO_RIPPLE_DIRECT = 0x00010000
    PARTIAL_PAYMENT = 0x00020000
    LIMIT_QUALITY = 0x00040000


class TrustSetFlags(IntEnum):
    """TrustSet transaction flags."""

    FULLY_CANONICAL_SIG = 0x80000000
    SET_AUTH = 0x00010000
    SET_NO_RIPPLE = 0x00020000
    CLEAR_NO_RIPPLE = 0x00040000
    SET_FREEZE = 0x00100000
    CLEAR_FREEZE = 0x00200000


__all__ = [
    "TransactionType",
    "TransactionStatus",
    "FieldType",
    "PaymentFlags",
    "TrustSetFlags",
]
