"""
Transaction Codec

Canonical binary encoding and decoding of transactions and signed blobs.

The canonical bytes of a transaction are its fields, each prefixed with a
field header, written in ascending ``(type_code, nth)`` order. Those bytes
are the signing message. A signed blob appends a signature section: either
one ``SigningPubKey``/``TxnSignature`` pair or a ``Signers`` array.
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from pydantic import ValidationError as PydanticValidationError

from ..enums import FieldType, TransactionType
from ..runtime.errors import EncodingError, InvalidFieldError, UnmarshalError, XrplError
from ..transactions import (
    IssuedAmount,
    SignatureEntry,
    TRANSACTION_MODELS,
    Transaction,
)
from ..tx.fields import AmountValue, CurrencyCode
from ..tx.validation import MAX_EXPONENT, MAX_MANTISSA, MIN_EXPONENT, MIN_MANTISSA, issued_value_parts
from . import definitions
from .definitions import CANONICAL_FIELD_ORDER, REQUIRED_FIELDS, FieldDef
from .reader import BinaryReader
from .writer import BinaryWriter

# Native amount word layout
NATIVE_POSITIVE_BIT = 1 << 62
MAX_NATIVE_DROPS = 10 ** 17

# Issued amount word layout
ISSUED_BIT = 1 << 63
ISSUED_POSITIVE_BIT = 1 << 62
ISSUED_ZERO = ISSUED_BIT
MANTISSA_BITS = 54
EXPONENT_BIAS = 97

CURRENCY_LENGTH = 20


# =============================================================================
# Amounts
# =============================================================================

def _parse_decimal(value: Any, field: str) -> Decimal:
    try:
        number = Decimal(str(value))
    except InvalidOperation:
        raise EncodingError(f"{field}: not a decimal value: {value!r}") from None
    if not number.is_finite() or number.is_signed():
        raise EncodingError(f"{field}: amount must be a finite non-negative decimal, got {value!r}")
    return number


def _write_native(writer: BinaryWriter, value: Any, field: str) -> None:
    drops = _parse_decimal(value, field)
    if drops != drops.to_integral_value():
        raise EncodingError(f"{field}: native amounts must be a whole number of drops, got {value}")
    drops = int(drops)
    if drops > MAX_NATIVE_DROPS:
        raise EncodingError(f"{field}: native amount {drops} exceeds maximum {MAX_NATIVE_DROPS}")
    writer.u64(NATIVE_POSITIVE_BIT | drops)


def _issued_value_word(value: Any, field: str) -> int:
    try:
        parts = issued_value_parts(str(value), field=field)
    except InvalidFieldError as e:
        raise EncodingError(f"{field}: {e.message}", cause=e) from e
    if parts is None:
        return ISSUED_ZERO

    mantissa, exponent = parts
    return ISSUED_BIT | ISSUED_POSITIVE_BIT | ((exponent + EXPONENT_BIAS) << MANTISSA_BITS) | mantissa


def _write_account(writer: BinaryWriter, address: Any, field: str) -> None:
    try:
        raw = str(address).encode("ascii")
    except UnicodeEncodeError:
        raise EncodingError(f"{field}: address is not ASCII") from None
    if not raw or len(raw) > definitions.ACCOUNT_ID_MAX_LENGTH:
        raise EncodingError(f"{field}: invalid address length {len(raw)}")
    writer.vl_bytes(raw)


def _currency_bytes(currency: Any, field: str) -> bytes:
    if isinstance(currency, CurrencyCode):
        return currency.to_bytes()
    try:
        return CurrencyCode(currency).to_bytes()
    except XrplError as e:
        raise EncodingError(f"{field}: {e.message}", cause=e) from e


def encode_amount(writer: BinaryWriter, amount: Any, field: str = "Amount") -> None:
    """
    Write a native or issued amount.

    Raises:
        EncodingError: If the value cannot be represented exactly
    """
    if isinstance(amount, IssuedAmount):
        writer.u64(_issued_value_word(amount.value, field))
        writer.bytes(_currency_bytes(amount.currency, field))
        _write_account(writer, amount.issuer, field)
    else:
        _write_native(writer, amount, field)


def _plain_decimal(mantissa: int, exponent: int) -> str:
    digits = str(mantissa)
    if exponent >= 0:
        return digits + "0" * exponent
    point = len(digits) + exponent
    if point > 0:
        return f"{digits[:point]}.{digits[point:]}"
    return "0." + "0" * (-point) + digits


def decode_amount(reader: BinaryReader) -> Union[AmountValue, IssuedAmount]:
    """
    Read a native or issued amount.

    Raises:
        UnmarshalError: If the amount is negative or not canonical
    """
    word = reader.u64()

    if not word & ISSUED_BIT:
        if not word & NATIVE_POSITIVE_BIT:
            raise UnmarshalError("Negative native amounts are not supported")
        drops = word & (NATIVE_POSITIVE_BIT - 1)
        if drops > MAX_NATIVE_DROPS:
            raise UnmarshalError(f"Native amount {drops} exceeds maximum {MAX_NATIVE_DROPS}")
        return AmountValue(str(drops))

    if word == ISSUED_ZERO:
        value = "0"
    else:
        if not word & ISSUED_POSITIVE_BIT:
            raise UnmarshalError("Negative issued amounts are not supported")
        exponent = ((word >> MANTISSA_BITS) & 0xFF) - EXPONENT_BIAS
        mantissa = word & ((1 << MANTISSA_BITS) - 1)
        if not MIN_MANTISSA <= mantissa <= MAX_MANTISSA:
            raise UnmarshalError(f"Non-canonical issued amount mantissa: {mantissa}")
        if exponent < MIN_EXPONENT or exponent > MAX_EXPONENT:
            raise UnmarshalError(f"Issued amount exponent out of range: {exponent}")
        value = _plain_decimal(mantissa, exponent)

    currency = reader.bytes(CURRENCY_LENGTH)
    issuer = _read_account(reader)
    try:
        return IssuedAmount(value=value, currency=currency.hex(), issuer=issuer)
    except PydanticValidationError as e:
        raise UnmarshalError(f"Invalid issued amount: {e.errors()[0]['msg']}", cause=e) from e


def _read_account(reader: BinaryReader) -> str:
    raw = reader.vl_bytes()
    if not raw or len(raw) > definitions.ACCOUNT_ID_MAX_LENGTH:
        raise UnmarshalError(f"Invalid account id length: {len(raw)}")
    try:
        return raw.decode("ascii")
    except UnicodeDecodeError:
        raise UnmarshalError("Account id is not ASCII") from None


# =============================================================================
# Transactions
# =============================================================================

def _write_field(writer: BinaryWriter, fd: FieldDef, value: Any) -> None:
    writer.field_header(fd.type_code, fd.nth)

    if fd.kind == FieldType.UINT16:
        code = value.code if isinstance(value, TransactionType) else value
        writer.u16(code)
    elif fd.kind == FieldType.UINT32:
        if isinstance(value, bool) or not isinstance(value, int):
            raise EncodingError(f"{fd.name}: expected an unsigned 32-bit integer, got {value!r}")
        writer.u32(value)
    elif fd.kind == FieldType.HASH256:
        try:
            raw = bytes.fromhex(str(value))
        except ValueError:
            raise EncodingError(f"{fd.name}: not a hex string") from None
        if len(raw) != 32:
            raise EncodingError(f"{fd.name}: expected 32 bytes, got {len(raw)}")
        writer.bytes(raw)
    elif fd.kind == FieldType.AMOUNT:
        encode_amount(writer, value, fd.name)
    elif fd.kind == FieldType.ACCOUNT_ID:
        _write_account(writer, value, fd.name)
    else:
        raise EncodingError(f"{fd.name}: field type {fd.kind.name} is not a transaction field")


def encode_transaction(transaction: Transaction) -> bytes:
    """
    Canonical bytes of a transaction.

    Deterministic: the same transaction always yields the same bytes. These
    bytes are the message that gets signed.

    Raises:
        EncodingError: If a required field is missing or a value cannot be
            represented exactly
    """
    tx_type = getattr(transaction, "transaction_type", None)
    try:
        tx_type = TransactionType.parse(tx_type)
    except ValueError:
        raise EncodingError(f"Unsupported transaction type: {tx_type!r}") from None

    required = REQUIRED_FIELDS[tx_type]
    writer = BinaryWriter()
    for fd in CANONICAL_FIELD_ORDER[tx_type]:
        value = tx_type if fd is definitions.TRANSACTION_TYPE else getattr(transaction, fd.attribute, None)
        if value is None:
            if fd in required:
                raise EncodingError(f"Missing required field: {fd.name}", details={"field": fd.name})
            continue
        _write_field(writer, fd, value)
    return writer.to_bytes()


def _read_value(reader: BinaryReader, fd: FieldDef) -> Any:
    if fd.kind == FieldType.UINT16:
        code = reader.u16()
        try:
            return TransactionType.from_code(code)
        except ValueError as e:
            raise UnmarshalError(str(e)) from e
    if fd.kind == FieldType.UINT32:
        return reader.u32()
    if fd.kind == FieldType.HASH256:
        return reader.bytes(32).hex().upper()
    if fd.kind == FieldType.AMOUNT:
        return decode_amount(reader)
    if fd.kind == FieldType.ACCOUNT_ID:
        return _read_account(reader)
    raise UnmarshalError(f"{fd.name}: field type {fd.kind.name} is not a transaction field")


def _read_transaction(reader: BinaryReader) -> Tuple[Transaction, Optional[FieldDef], int]:
    """
    Read transaction fields until the end of input or the signature section.

    Returns the transaction, the signature-section field whose header was
    consumed (or None at end of input) and the length of the canonical part.
    """
    if reader.eof:
        raise UnmarshalError("Empty transaction")

    type_code, nth = reader.field_header()
    if definitions.field_for_id(type_code, nth) is not definitions.TRANSACTION_TYPE:
        raise UnmarshalError("Transaction must start with TransactionType")
    tx_type = _read_value(reader, definitions.TRANSACTION_TYPE)

    allowed = CANONICAL_FIELD_ORDER[tx_type]
    values: Dict[str, Any] = {"transaction_type": tx_type}
    last = definitions.TRANSACTION_TYPE.sort_key
    stop: Optional[FieldDef] = None
    canonical_length = reader.offset

    while not reader.eof:
        type_code, nth = reader.field_header()
        fd = definitions.field_for_id(type_code, nth)
        if fd is None:
            raise UnmarshalError(f"Unknown field ({type_code}, {nth})")
        if fd in (definitions.SIGNING_PUB_KEY, definitions.SIGNERS):
            stop = fd
            break
        if fd not in allowed:
            raise UnmarshalError(f"Field {fd.name} is not allowed in {tx_type.value}")
        if fd.sort_key <= last:
            raise UnmarshalError(f"Field {fd.name} is duplicated or out of canonical order")
        last = fd.sort_key
        values[fd.attribute] = _read_value(reader, fd)
        canonical_length = reader.offset

    try:
        transaction = TRANSACTION_MODELS[tx_type](**values)
    except PydanticValidationError as e:
        raise UnmarshalError(f"Decoded {tx_type.value} is invalid: {e.errors()[0]['msg']}", cause=e) from e
    return transaction, stop, canonical_length


def decode_transaction(data: bytes) -> Transaction:
    """
    Parse canonical bytes back into a transaction.

    Raises:
        UnmarshalError: On unknown, duplicated or out-of-order fields,
            non-canonical values or trailing bytes
    """
    reader = BinaryReader(bytes(data))
    transaction, stop, _ = _read_transaction(reader)
    if stop is not None:
        raise UnmarshalError(f"Unexpected {stop.name} in unsigned transaction")
    return transaction


# =============================================================================
# Signed blobs
# =============================================================================

@dataclass(frozen=True)
class DecodedBlob:
    """A parsed signed blob."""

    transaction: Transaction
    canonical_bytes: bytes
    signatures: Tuple[SignatureEntry, ...]
    is_multisig: bool


def _expect_header(reader: BinaryReader, fd: FieldDef) -> None:
    type_code, nth = reader.field_header()
    if (type_code, nth) != fd.sort_key:
        raise UnmarshalError(f"Expected {fd.name}, found field ({type_code}, {nth})")


def _read_key_and_signature(reader: BinaryReader) -> SignatureEntry:
    public_key = reader.vl_bytes()
    _expect_header(reader, definitions.TXN_SIGNATURE)
    signature = reader.vl_bytes()
    if not public_key or not signature:
        raise UnmarshalError("Empty public key or signature")
    return SignatureEntry(public_key=public_key.hex().upper(), signature=signature.hex().upper())


def decode_blob(blob: Union[str, bytes]) -> DecodedBlob:
    """
    Parse a signed blob into its transaction and signature section.

    Args:
        blob: Hex string or raw bytes

    Raises:
        UnmarshalError: If the blob is not a canonical signed transaction
    """
    if isinstance(blob, str):
        try:
            blob = bytes.fromhex(blob)
        except ValueError:
            raise UnmarshalError("Blob is not a hex string") from None

    reader = BinaryReader(bytes(blob))
    transaction, stop, canonical_length = _read_transaction(reader)

    if stop is definitions.SIGNING_PUB_KEY:
        signatures: List[SignatureEntry] = [_read_key_and_signature(reader)]
        is_multisig = False
    elif stop is definitions.SIGNERS:
        signatures = []
        while True:
            type_code, nth = reader.field_header()
            if (type_code, nth) == definitions.ARRAY_END.sort_key:
                break
            if (type_code, nth) != definitions.SIGNER.sort_key:
                raise UnmarshalError(f"Expected Signer, found field ({type_code}, {nth})")
            _expect_header(reader, definitions.SIGNING_PUB_KEY)
            signatures.append(_read_key_and_signature(reader))
            _expect_header(reader, definitions.OBJECT_END)
        if not signatures:
            raise UnmarshalError("Signers array is empty")
        keys = [entry.public_key_bytes for entry in signatures]
        if any(a >= b for a, b in zip(keys, keys[1:])):
            raise UnmarshalError("Signers are not sorted by public key or contain duplicates")
        is_multisig = True
    else:
        raise UnmarshalError("Blob has no signature section")

    if not reader.eof:
        raise UnmarshalError(f"Trailing bytes after signature section at offset {reader.offset}")

    return DecodedBlob(
        transaction=transaction,
        canonical_bytes=bytes(blob[:canonical_length]),
        signatures=tuple(signatures),
        is_multisig=is_multisig,
    )


def assemble_single_blob(canonical_bytes: bytes, public_key: bytes, signature: bytes) -> bytes:
    """Append a single signature section to canonical bytes."""
    writer = BinaryWriter()
    writer.bytes(canonical_bytes)
    writer.field_header(definitions.SIGNING_PUB_KEY.type_code, definitions.SIGNING_PUB_KEY.nth)
    writer.vl_bytes(public_key)
    writer.field_header(definitions.TXN_SIGNATURE.type_code, definitions.TXN_SIGNATURE.nth)
    writer.vl_bytes(signature)
    return writer.to_bytes()


def assemble_multisig_blob(canonical_bytes: bytes, entries: Iterable[SignatureEntry]) -> bytes:
    """
    Append a ``Signers`` array to canonical bytes.

    Raises:
        EncodingError: If the entries are empty or not strictly ascending by
            public key bytes
    """
    entries = list(entries)
    if not entries:
        raise EncodingError("Signers array cannot be empty")
    keys = [entry.public_key_bytes for entry in entries]
    if any(a >= b for a, b in zip(keys, keys[1:])):
        raise EncodingError("Signer entries must be sorted by public key without duplicates")

    writer = BinaryWriter()
    writer.bytes(canonical_bytes)
    writer.field_header(definitions.SIGNERS.type_code, definitions.SIGNERS.nth)
    for entry in entries:
        writer.field_header(definitions.SIGNER.type_code, definitions.SIGNER.nth)
        writer.field_header(definitions.SIGNING_PUB_KEY.type_code, definitions.SIGNING_PUB_KEY.nth)
        writer.vl_bytes(entry.public_key_bytes)
        writer.field_header(definitions.TXN_SIGNATURE.type_code, definitions.TXN_SIGNATURE.nth)
        writer.vl_bytes(entry.signature_bytes)
        writer.field_header(definitions.OBJECT_END.type_code, definitions.OBJECT_END.nth)
    writer.field_header(definitions.ARRAY_END.type_code, definitions.ARRAY_END.nth)
    return writer.to_bytes()


__all__ = [
    "DecodedBlob",
    "encode_amount",
    "decode_amount",
    "encode_transaction",
    "decode_transaction",
    "decode_blob",
    "assemble_single_blob",
    "assemble_multisig_blob",
]
