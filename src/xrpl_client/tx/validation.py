"""
Field validation for XRPL transactions.

Pure, total functions: each takes one string and either returns the
validated (canonical) value or raises :class:`ValidationError` naming the
offending field. The optional ``field`` keyword only changes which field
name the error reports.
"""

from __future__ import annotations
from decimal import Decimal
from typing import Any, Optional, Tuple
import re

from ..runtime.errors import ErrorCode, ValidationError
from .fields import Address, AmountValue, CurrencyCode, Hash256

ADDRESS_PREFIX = "r"
ADDRESS_MIN_LENGTH = 25
ADDRESS_MAX_LENGTH = 45
HASH_HEX_LENGTH = 64
HEX_CURRENCY_LENGTH = 40

# Issued amount range
MIN_MANTISSA = 10 ** 15
MAX_MANTISSA = 10 ** 16 - 1
MIN_EXPONENT = -96
MAX_EXPONENT = 80
MAX_SIGNIFICANT_DIGITS = 16

_HEX_RE = re.compile(r"[0-9A-Fa-f]*")
_ISO_CURRENCY_RE = re.compile(r"[A-Za-z0-9]{3}")
_AMOUNT_RE = re.compile(r"(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)")


def _require_str(value: Any, field: str, code: ErrorCode) -> str:
    if not isinstance(value, str):
        raise ValidationError(field, f"{field} must be a string, got {type(value).__name__}", code)
    if not value.strip():
        raise ValidationError(field, f"{field} cannot be empty", code)
    return value


def validate_address(value: Any, field: str = "address") -> Address:
    """
    Validate a classic address.

    Raises:
        ValidationError: If the address is empty, contains whitespace, is
            shorter than 25 or longer than 45 characters, does not start
            with ``r`` or contains non-alphanumeric characters
    """
    code = ErrorCode.INVALID_ADDRESS
    value = _require_str(value, field, code)

    if any(c.isspace() for c in value):
        raise ValidationError(field, "Address cannot contain whitespace", code)

    if len(value) < ADDRESS_MIN_LENGTH or len(value) > ADDRESS_MAX_LENGTH:
        raise ValidationError(
            field,
            f"Invalid address length {len(value)}, expected {ADDRESS_MIN_LENGTH}-{ADDRESS_MAX_LENGTH}",
            code,
        )

    if not value.startswith(ADDRESS_PREFIX):
        raise ValidationError(field, f"Address must start with '{ADDRESS_PREFIX}'", code)

    if not (value.isascii() and value.isalnum()):
        raise ValidationError(field, "Address contains invalid characters", code)

    return Address._from_validated(value)


def validate_currency_code(value: Any, field: str = "currency_code") -> CurrencyCode:
    """
    Validate a currency code.

    Accepts a 3-character code (case-insensitive) or exactly 40 hex
    characters. A hex code in the standard layout collapses to its
    3-character form.
    """
    code = ErrorCode.INVALID_CURRENCY
    value = _require_str(value, field, code)

    if _ISO_CURRENCY_RE.fullmatch(value):
        return CurrencyCode._from_validated(value.upper())

    if len(value) == HEX_CURRENCY_LENGTH and _HEX_RE.fullmatch(value):
        hex_code = value.upper()
        standard = _standard_code_from_hex(hex_code)
        return CurrencyCode._from_validated(standard or hex_code)

    raise ValidationError(
        field,
        f"Invalid currency code {value!r}: expected 3 characters or {HEX_CURRENCY_LENGTH} hex characters",
        code,
    )


def _standard_code_from_hex(hex_code: str):
    if hex_code[:24] != "0" * 24 or hex_code[30:] != "0" * 10:
        return None
    symbol = bytes.fromhex(hex_code[24:30])
    if symbol.isascii() and symbol.isalnum():
        return symbol.decode("ascii").upper()
    return None


def validate_amount(value: Any, field: str = "amount") -> AmountValue:
    """
    Validate a non-negative decimal amount.

    Rejects signs, exponents, more than one decimal point and anything
    non-numeric. Returns the canonical form.
    """
    code = ErrorCode.INVALID_AMOUNT
    value = _require_str(value, field, code)

    if value.startswith("-"):
        raise ValidationError(field, "Amount cannot be negative", code)

    if value.count(".") > 1:
        raise ValidationError(field, "Amount has more than one decimal point", code)

    if not value.isascii() or not _AMOUNT_RE.fullmatch(value):
        raise ValidationError(field, f"Invalid amount format: {value!r}", code)

    int_part, _, frac_part = value.partition(".")
    int_part = int_part.lstrip("0") or "0"
    frac_part = frac_part.rstrip("0")
    canonical = f"{int_part}.{frac_part}" if frac_part else int_part
    return AmountValue._from_validated(canonical)


def issued_value_parts(value: Any, field: str = "amount") -> Optional[Tuple[int, int]]:
    """
    Normalize an issued amount to ``(mantissa, exponent)``.

    The mantissa lies in ``[10**15, 10**16)`` and the exponent in
    ``[-96, 80]``. Zero has no normalized form and returns None.

    Raises:
        ValidationError: If the value needs more than 16 significant digits
            or its exponent falls outside the representable range
    """
    code = ErrorCode.INVALID_AMOUNT
    number = Decimal(validate_amount(value, field=field))
    if number.is_zero():
        return None

    _, digits, exponent = number.as_tuple()
    digits = list(digits)
    while len(digits) > 1 and digits[-1] == 0:
        digits.pop()
        exponent += 1
    while len(digits) > 1 and digits[0] == 0:
        digits.pop(0)

    if len(digits) > MAX_SIGNIFICANT_DIGITS:
        raise ValidationError(
            field,
            f"{field} has {len(digits)} significant digits, maximum is {MAX_SIGNIFICANT_DIGITS}",
            code,
        )

    mantissa = int("".join(str(d) for d in digits))
    while mantissa < MIN_MANTISSA:
        mantissa *= 10
        exponent -= 1

    if exponent < MIN_EXPONENT or exponent > MAX_EXPONENT:
        raise ValidationError(field, f"{field} is out of range (exponent {exponent})", code)

    return mantissa, exponent


def validate_transaction_hash(value: Any, field: str = "hash") -> Hash256:
    """Validate a 64-character hex transaction hash."""
    code = ErrorCode.INVALID_HASH
    value = _require_str(value, field, code)

    if len(value) != HASH_HEX_LENGTH:
        raise ValidationError(field, f"Invalid transaction hash length {len(value)}", code)

    if not _HEX_RE.fullmatch(value):
        raise ValidationError(field, "Invalid transaction hash format", code)

    return Hash256._from_validated(value.upper())


def is_valid_address(value: Any) -> bool:
    try:
        validate_address(value)
        return True
    except ValidationError:
        return False


def is_valid_currency_code(value: Any) -> bool:
    try:
        validate_currency_code(value)
        return True
    except ValidationError:
        return False


def is_valid_amount(value: Any) -> bool:
    try:
        validate_amount(value)
        return True
    except ValidationError:
        return False


def is_valid_transaction_hash(value: Any) -> bool:
    try:
        validate_transaction_hash(value)
        return True
    except ValidationError:
        return False


__all__ = [
    "ValidationError",
    "validate_address",
    "validate_currency_code",
    "validate_amount",
    "validate_transaction_hash",
    "issued_value_parts",
    "is_valid_address",
    "is_valid_currency_code",
    "is_valid_amount",
    "is_valid_transaction_hash",
]
