"""
Payment and trust line transaction builders.
"""

from __future__ import annotations
from typing import Any, Dict, Optional, Union

from ...enums import TransactionType
from ...runtime.errors import ErrorCode, InvalidFieldError
from ...transactions import IssuedAmount, Payment, TrustSet
from ..validation import issued_value_parts
from .base import (
    BaseTxBuilder,
    address,
    amount,
    currency_code,
    drops,
    sequence_number,
    transaction_hash,
    uint32,
)

AmountInput = Union[str, int]


def _check_issued_currency(code: str, field: str = "currency_code") -> None:
    if code == "XRP" or code == "0" * 40:
        raise InvalidFieldError(field, "XRP cannot be used as an issued currency", ErrorCode.INVALID_CURRENCY)


class PaymentBuilder(BaseTxBuilder[Payment]):
    """
    Builder for Payment transactions.

    Without ``currency_code`` the amount is native and counted in drops;
    with it the amount is issued by ``issuer``.
    """

    FIELDS = (
        ("account", address, True),
        ("destination", address, True),
        ("amount", amount, True),
        ("currency_code", currency_code, False),
        ("issuer", address, False),
        ("fee", drops, True),
        ("sequence", sequence_number, True),
        ("flags", uint32, False),
        ("last_ledger_sequence", uint32, False),
        ("source_tag", uint32, False),
        ("destination_tag", uint32, False),
        ("invoice_id", transaction_hash, False),
    )

    @property
    def tx_type(self) -> TransactionType:
        return TransactionType.PAYMENT

    @property
    def model_cls(self):
        return Payment

    def account(self, account: str) -> PaymentBuilder:
        """Set the sending account."""
        return self.with_field('account', account)

    def destination(self, destination: str) -> PaymentBuilder:
        """Set the receiving account."""
        return self.with_field('destination', destination)

    def amount(self, value: AmountInput, currency: Optional[str] = None,
               issuer: Optional[str] = None) -> PaymentBuilder:
        """Set the amount; pass ``currency`` and ``issuer`` for an issued amount."""
        self.with_field('amount', value)
        if currency is not None:
            self.with_field('currency_code', currency)
        if issuer is not None:
            self.with_field('issuer', issuer)
        return self

    def fee(self, drops: AmountInput) -> PaymentBuilder:
        """Set the fee in drops."""
        return self.with_field('fee', drops)

    def sequence(self, sequence: int) -> PaymentBuilder:
        return self.with_field('sequence', sequence)

    def flags(self, flags: int) -> PaymentBuilder:
        return self.with_field('flags', flags)

    def last_ledger_sequence(self, ledger_index: int) -> PaymentBuilder:
        """Set the last ledger the transaction may be included in."""
        return self.with_field('last_ledger_sequence', ledger_index)

    def source_tag(self, tag: int) -> PaymentBuilder:
        return self.with_field('source_tag', tag)

    def destination_tag(self, tag: int) -> PaymentBuilder:
        return self.with_field('destination_tag', tag)

    def invoice_id(self, invoice_id: str) -> PaymentBuilder:
        return self.with_field('invoice_id', invoice_id)

    def _check(self, values: Dict[str, Any]) -> None:
        if values["account"] == values["destination"]:
            raise InvalidFieldError("destination", "Payment destination cannot be the sending account",
                                    ErrorCode.INVALID_ADDRESS)

        code = values.get("currency_code")
        if code is None:
            if "issuer" in values:
                raise InvalidFieldError("issuer", "issuer requires currency_code")
            drops(values["amount"], "amount")
        else:
            _check_issued_currency(code)
            if "issuer" not in values:
                raise InvalidFieldError("issuer", "Missing required field: issuer")
            issued_value_parts(values["amount"], field="amount")

    def _model_fields(self, values: Dict[str, Any]) -> Dict[str, Any]:
        fields = dict(values)
        code = fields.pop("currency_code", None)
        issuer = fields.pop("issuer", None)
        if code is not None:
            fields["amount"] = IssuedAmount(value=fields["amount"], currency=code, issuer=issuer)
        return fields


class TrustSetBuilder(BaseTxBuilder[TrustSet]):
    """Builder for TrustSet transactions."""

    FIELDS = (
        ("account", address, True),
        ("currency_code", currency_code, True),
        ("issuer", address, True),
        ("limit", amount, True),
        ("fee", drops, True),
        ("sequence", sequence_number, True),
        ("flags", uint32, False),
        ("last_ledger_sequence", uint32, False),
        ("source_tag", uint32, False),
        ("quality_in", uint32, False),
        ("quality_out", uint32, False),
    )

    @property
    def tx_type(self) -> TransactionType:
        return TransactionType.TRUST_SET

    @property
    def model_cls(self):
        return TrustSet

    def account(self, account: str) -> TrustSetBuilder:
        return self.with_field('account', account)

    def limit(self, value: AmountInput, currency: str, issuer: str) -> TrustSetBuilder:
        """Set the trust line limit towards ``issuer``."""
        return (self.with_field('limit', value)
                .with_field('currency_code', currency)
                .with_field('issuer', issuer))

    def fee(self, drops: AmountInput) -> TrustSetBuilder:
        return self.with_field('fee', drops)

    def sequence(self, sequence: int) -> TrustSetBuilder:
        return self.with_field('sequence', sequence)

    def flags(self, flags: int) -> TrustSetBuilder:
        return self.with_field('flags', flags)

    def last_ledger_sequence(self, ledger_index: int) -> TrustSetBuilder:
        return self.with_field('last_ledger_sequence', ledger_index)

    def source_tag(self, tag: int) -> TrustSetBuilder:
        return self.with_field('source_tag', tag)

    def quality(self, quality_in: Optional[int] = None, quality_out: Optional[int] = None) -> TrustSetBuilder:
        if quality_in is not None:
            self.with_field('quality_in', quality_in)
        if quality_out is not None:
            self.with_field('quality_out', quality_out)
        return self

    def _check(self, values: Dict[str, Any]) -> None:
        _check_issued_currency(values["currency_code"])
        issued_value_parts(values["limit"], field="limit")
        if values["issuer"] == values["account"]:
            raise InvalidFieldError("issuer", "An account cannot extend a trust line to itself",
                                    ErrorCode.INVALID_ADDRESS)

    def _model_fields(self, values: Dict[str, Any]) -> Dict[str, Any]:
        fields = dict(values)
        fields["limit_amount"] = IssuedAmount(
            value=fields.pop("limit"),
            currency=fields.pop("currency_code"),
            issuer=fields.pop("issuer"),
        )
        return fields


__all__ = ["PaymentBuilder", "TrustSetBuilder"]
