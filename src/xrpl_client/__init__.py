"""
XRPL Python Client

Build, validate, canonically encode, sign (single and multi-signature),
submit and verify XRPL payment transactions.
"""

# Core types
from .enums import TransactionType, TransactionStatus, PaymentFlags, TrustSetFlags
from .transactions import (
    IssuedAmount,
    Payment,
    TrustSet,
    Transaction,
    SignatureEntry,
    SignedTransaction,
    TransactionResult,
    AccountInfo,
    TrustLine,
)
from .tx.fields import Address, AmountValue, CurrencyCode, Hash256
from .tx.validation import (
    validate_address,
    validate_currency_code,
    validate_amount,
    validate_transaction_hash,
)

# Errors
from .runtime.errors import (
    ErrorCode,
    XrplError,
    InvalidFieldError,
    ValidationError,
    InvalidSecretError,
    EncodingError,
    MarshalError,
    UnmarshalError,
    MultisigError,
    DuplicateSignerError,
    NoSignersError,
    NetworkError,
    LedgerApiError,
    TransactionFailedError,
    ErrorHandler,
)

# Building, encoding and signing
from .tx.builders import PaymentBuilder, TrustSetBuilder, build_transaction, get_builder_for
from .codec import encode_transaction, decode_transaction, decode_blob, transaction_id
from .crypto import KeyPair
from .signers import TransactionSigner, sort_signer_entries

# Network
from .api_client import ClientConfig, XrplClient, TESTNET_ENDPOINT, MAINNET_ENDPOINT
from .facade import Xrpl, TransferVerification

__version__ = "0.1.0"

__all__ = [
    "TransactionType",
    "TransactionStatus",
    "PaymentFlags",
    "TrustSetFlags",
    "IssuedAmount",
    "Payment",
    "TrustSet",
    "Transaction",
    "SignatureEntry",
    "SignedTransaction",
    "TransactionResult",
    "AccountInfo",
    "TrustLine",
    "Address",
    "AmountValue",
    "CurrencyCode",
    "Hash256",
    "validate_address",
    "validate_currency_code",
    "validate_amount",
    "validate_transaction_hash",
    "ErrorCode",
    "XrplError",
    "InvalidFieldError",
    "ValidationError",
    "InvalidSecretError",
    "EncodingError",
    "MarshalError",
    "UnmarshalError",
    "MultisigError",
    "DuplicateSignerError",
    "NoSignersError",
    "NetworkError",
    "LedgerApiError",
    "TransactionFailedError",
    "ErrorHandler",
    "PaymentBuilder",
    "TrustSetBuilder",
    "build_transaction",
    "get_builder_for",
    "encode_transaction",
    "decode_transaction",
    "decode_blob",
    "transaction_id",
    "KeyPair",
    "TransactionSigner",
    "sort_signer_entries",
    "ClientConfig",
    "XrplClient",
    "TESTNET_ENDPOINT",
    "MAINNET_ENDPOINT",
    "Xrpl",
    "TransferVerification",
    "__version__",
]
