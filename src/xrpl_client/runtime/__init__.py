"""Runtime helpers for the XRPL Python client"""

from .errors import (
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
    TimeoutError,
    LedgerApiError,
    TransactionFailedError,
    error_from_response,
    ErrorHandler,
)

__all__ = [
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
    "TimeoutError",
    "LedgerApiError",
    "TransactionFailedError",
    "error_from_response",
    "ErrorHandler",
]
