r"""
Validated string types for transaction fields.

``Address``, ``CurrencyCode``, ``AmountValue`` and ``Hash256`` are ``str``
subclasses whose only constructor path runs the matching validator in
:mod:`xrpl_client.tx.validation`. An instance therefore always holds a
valid, canonical value, and a pydantic model field typed with one of them
can never carry malformed input past the builder.
"""

from __future__ import annotations
from decimal import Decimal
from typing import Any, Callable

from pydantic import GetCoreSchemaHandler
from pydantic_core import CoreSchema, core_schema


class _ValidatedStr(str):
    """Base for validated string newtypes."""

    _validator_name: str = ""

    def __new__(cls, value: Any):
        # Direct construction goes through the validator as well
        return cls._validator()(value)

    @classmethod
    def _from_validated(cls, value: str):
        """Wrap an already validated, canonical value. Used by the validators only."""
        return str.__new__(cls, value)

    @classmethod
    def _validator(cls) -> Callable[..., Any]:
        from . import validation
        return getattr(validation, cls._validator_name)

    @classmethod
    def __get_pydantic_core_schema__(
        cls,
        source_type: Any,
        handler: GetCoreSchemaHandler,
    ) -> CoreSchema:
        """Return a Pydantic CoreSchema that runs the validator."""
        return core_schema.no_info_plain_validator_function(
            cls._validate,
            serialization=core_schema.plain_serializer_function_ser_schema(str),
        )

    @classmethod
    def _validate(cls, value: Any):
        if isinstance(value, cls):
            return value
        return cls._validator()(value)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}('{str(self)}')"


class Address(_ValidatedStr):
    """Classic ledger address (``r...``)."""

    _validator_name = "validate_address"


class CurrencyCode(_ValidatedStr):
    """Three-character ISO-style code or 40-hex non-standard code, upper-cased."""

    _validator_name = "validate_currency_code"

    @property
    def is_standard(self) -> bool:
        return len(self) == 3

    def to_bytes(self) -> bytes:
        """20-byte wire form of the currency."""
        if self.is_standard:
            return bytes(12) + self.encode("ascii") + bytes(5)
        return bytes.fromhex(self)


class AmountValue(_ValidatedStr):
    """
    Non-negative decimal string in canonical form.

    Leading integer zeros and trailing fractional zeros are stripped, so
    ``"100.50"`` and ``"100.5"`` are the same value.
    """

    _validator_name = "validate_amount"

    def as_decimal(self) -> Decimal:
        return Decimal(str(self))

    @property
    def is_integral(self) -> bool:
        return "." not in self


class Hash256(_ValidatedStr):
    """64 hex characters, upper-cased."""

    _validator_name = "validate_transaction_hash"

    def to_bytes(self) -> bytes:
        return bytes.fromhex(self)


__all__ = [
    "Address",
    "CurrencyCode",
    "AmountValue",
    "Hash256",
]
