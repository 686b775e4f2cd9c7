"""
XRPL Client Error Model

This module provides the error handling framework for the XRPL Python client.
Every stage of the build -> encode -> sign -> submit pipeline raises one of
these exceptions and never wraps an inner error into a less specific one.
"""

from __future__ import annotations
from typing import Optional, Dict, Any
from enum import IntEnum


class ErrorCode(IntEnum):
    """Client error codes, grouped by pipeline stage."""

    # Success
    OK = 0

    # General errors (1-99)
    UNKNOWN = 1
    INTERNAL = 2

    # Input errors (100-199)
    INVALID_FIELD = 100
    INVALID_ADDRESS = 101
    INVALID_CURRENCY = 102
    INVALID_AMOUNT = 103
    INVALID_HASH = 104

    # Key errors (200-299)
    INVALID_SECRET = 200

    # Encoding errors (300-399)
    ENCODING_ERROR = 300
    MARSHAL_ERROR = 301
    UNMARSHAL_ERROR = 302

    # Multisig errors (400-499)
    DUPLICATE_SIGNER = 400
    NO_SIGNERS = 401

    # Network errors (500-599)
    NETWORK_ERROR = 500
    TIMEOUT = 501
    API_ERROR = 502

    # Ledger errors (600-699)
    TRANSACTION_FAILED = 600


class XrplError(Exception):
    """
    Base class for all client errors.

    Carries a structured code, optional details and the underlying cause.
    """

    def __init__(self, message: str, code: ErrorCode = ErrorCode.UNKNOWN,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[BaseException] = None):
        """
        Initialize a client error.

        Args:
            message: Error message
            code: Error code
            details: Additional error details
            cause: Underlying exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}
        self.cause = cause

    def __str__(self) -> str:
        """String representation of the error."""
        parts = [f"[{self.code.name}] {self.message}"]
        if self.details:
            parts.append(f"Details: {self.details}")
        if self.cause:
            parts.append(f"Caused by: {self.cause}")
        return " | ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation."""
        result: Dict[str, Any] = {
            "code": self.code.value,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        if self.cause:
            result["cause"] = str(self.cause)
        return result


class InvalidFieldError(XrplError, ValueError):
    """A caller-supplied field was rejected. Fix the input and retry."""

    def __init__(self, field: str, message: str, code: ErrorCode = ErrorCode.INVALID_FIELD,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[BaseException] = None):
        details = dict(details or {})
        details.setdefault("field", field)
        super().__init__(message, code, details, cause)
        self.field = field


class ValidationError(InvalidFieldError):
    """A string failed one of the field format checks."""
    pass


class InvalidSecretError(XrplError):
    """Secret key material is malformed."""

    def __init__(self, message: str = "Invalid secret",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[BaseException] = None):
        super().__init__(message, ErrorCode.INVALID_SECRET, details, cause)


class EncodingError(XrplError):
    """Canonical encoding/decoding errors."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.ENCODING_ERROR,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[BaseException] = None):
        super().__init__(message, code, details, cause)


class MarshalError(EncodingError):
    """A value cannot be represented in its wire type."""

    def __init__(self, message: str = "Marshal error",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[BaseException] = None):
        super().__init__(message, ErrorCode.MARSHAL_ERROR, details, cause)


class UnmarshalError(EncodingError):
    """Bytes are not a canonical encoding."""

    def __init__(self, message: str = "Unmarshal error",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[BaseException] = None):
        super().__init__(message, ErrorCode.UNMARSHAL_ERROR, details, cause)


class MultisigError(XrplError):
    """Multi-signature assembly precondition violated."""
    pass


class DuplicateSignerError(MultisigError):
    """The same public key appears more than once in a signature set."""

    def __init__(self, public_key: str,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[BaseException] = None):
        super().__init__(f"Duplicate signature from public key: {public_key}",
                         ErrorCode.DUPLICATE_SIGNER, details, cause)
        self.public_key = public_key


class NoSignersError(MultisigError):
    """A multisig blob was requested for an empty signature set."""

    def __init__(self, message: str = "At least one signature is required",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[BaseException] = None):
        super().__init__(message, ErrorCode.NO_SIGNERS, details, cause)


class NetworkError(XrplError):
    """Network-related errors. Always safe for the caller to retry."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None,
                 cause: Optional[BaseException] = None):
        super().__init__(message, ErrorCode.NETWORK_ERROR, details, cause)


class TimeoutError(NetworkError):
    """Request timeouts."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None,
                 cause: Optional[BaseException] = None):
        super().__init__(message, details, cause)
        self.code = ErrorCode.TIMEOUT


class LedgerApiError(XrplError):
    """The ledger node answered with an error payload (e.g. ``actNotFound``)."""

    def __init__(self, error: str, message: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[BaseException] = None):
        super().__init__(message or error, ErrorCode.API_ERROR, details, cause)
        self.error = error


class TransactionFailedError(XrplError):
    """The ledger rejected a transaction. The remote reason is kept verbatim."""

    def __init__(self, engine_result: str, reason: str = "",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[BaseException] = None):
        message = f"{engine_result}: {reason}" if reason else engine_result
        super().__init__(message, ErrorCode.TRANSACTION_FAILED, details, cause)
        self.engine_result = engine_result
        self.reason = reason


def error_from_response(result: Dict[str, Any]) -> Optional[XrplError]:
    """
    Create an appropriate error from a JSON-RPC ``result`` object.

    Args:
        result: The ``result`` member of an XRPL JSON-RPC response

    Returns:
        Appropriate error instance or None if no error
    """
    if not isinstance(result, dict):
        return LedgerApiError("invalidResponse", f"Unexpected result payload: {result!r}")

    error = result.get("error")
    if error is None and result.get("status") != "error":
        return None

    error = str(error or "unknown")
    message = result.get("error_message") or result.get("error_exception") or error
    details = {k: result[k] for k in ("error_code", "request") if k in result}

    if error in ("noNetwork", "noCurrent", "noClosed", "tooBusy", "slowDown"):
        return NetworkError(message, details)
    return LedgerApiError(error, message, details)


class ErrorHandler:
    """
    Utility class for handling and categorizing errors.
    """

    @staticmethod
    def is_retryable(error: BaseException) -> bool:
        """
        Check if an error is safe for the caller to retry as-is.

        Args:
            error: Exception to check

        Returns:
            True if the same call may succeed later
        """
        if isinstance(error, XrplError):
            return error.code in (ErrorCode.NETWORK_ERROR, ErrorCode.TIMEOUT)
        return False

    @staticmethod
    def is_caller_error(error: BaseException) -> bool:
        """Check if the error points at bad caller input."""
        return isinstance(error, (InvalidFieldError, InvalidSecretError, MultisigError))


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
