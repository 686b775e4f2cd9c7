"""
Transaction builder tests.
"""

import sys
from pathlib import Path

import pytest
from pydantic import ValidationError as PydanticValidationError

sys.path.insert(0, str(Path(__file__).parent.parent))
from helpers import DESTINATION, ISSUER, SENDER_ADDRESS, mk_payment, payment_fields, trust_set_fields

from xrpl_client.codec import decode_transaction, encode_transaction
from xrpl_client.enums import PaymentFlags, TransactionType, TrustSetFlags
from xrpl_client.runtime.errors import InvalidFieldError
from xrpl_client.transactions import IssuedAmount, Payment, TrustSet
from xrpl_client.tx.builders import (
    BUILDER_REGISTRY,
    PaymentBuilder,
    TrustSetBuilder,
    build_transaction,
    get_builder_for,
    list_transaction_types,
)


def _field_error(tx_type, fields):
    with pytest.raises(InvalidFieldError) as excinfo:
        build_transaction(tx_type, fields)
    return excinfo.value.field


class TestPaymentBuilder:
    """Payment construction."""

    def test_issued_payment(self):
        tx = build_transaction("Payment", payment_fields())

        assert isinstance(tx, Payment)
        assert tx.transaction_type == TransactionType.PAYMENT
        assert tx.account == SENDER_ADDRESS
        assert tx.destination == DESTINATION
        assert tx.amount == IssuedAmount(value="100.5", currency="USD", issuer=ISSUER)
        assert tx.fee == "12"
        assert tx.sequence == 1
        assert tx.last_ledger_sequence == 100
        assert tx.flags is None
        assert not tx.is_native

    def test_native_payment_accepts_integer_drops(self):
        tx = build_transaction("Payment", payment_fields(amount=1000000, currency_code=None, issuer=None, fee=10))
        assert tx.amount == "1000000"
        assert tx.fee == "10"
        assert tx.is_native

    def test_native_amount_must_be_whole_drops(self):
        fields = payment_fields(amount="1.5", currency_code=None, issuer=None)
        assert _field_error("Payment", fields) == "amount"

    def test_native_amount_maximum(self):
        fields = payment_fields(amount=str(10 ** 17 + 1), currency_code=None, issuer=None)
        assert _field_error("Payment", fields) == "amount"

    def test_self_payment_rejected(self):
        assert _field_error("Payment", payment_fields(destination=SENDER_ADDRESS)) == "destination"

    def test_unknown_field_rejected(self):
        assert _field_error("Payment", payment_fields(memo="hello")) == "memo"

    @pytest.mark.parametrize("missing", ["account", "destination", "amount", "fee", "sequence"])
    def test_missing_required_field(self, missing):
        fields = payment_fields()
        del fields[missing]
        assert _field_error("Payment", fields) == missing

    def test_issuer_requires_currency(self):
        assert _field_error("Payment", payment_fields(currency_code=None)) == "issuer"

    def test_currency_requires_issuer(self):
        assert _field_error("Payment", payment_fields(issuer=None)) == "issuer"

    def test_xrp_is_not_an_issued_currency(self):
        assert _field_error("Payment", payment_fields(currency_code="xrp")) == "currency_code"

    @pytest.mark.parametrize("field,value", [
        ("sequence", 0),
        ("sequence", True),
        ("sequence", "1"),
        ("flags", 2 ** 32),
        ("destination_tag", -1),
        ("fee", "1.5"),
        ("fee", -12),
        ("invoice_id", "ABC"),
    ])
    def test_invalid_values(self, field, value):
        assert _field_error("Payment", payment_fields(**{field: value})) == field

    def test_optional_fields(self):
        invoice = "ab" * 32
        tx = mk_payment(flags=0x80000000, source_tag=7, destination_tag=42, invoice_id=invoice)
        assert tx.flags == 0x80000000
        assert tx.source_tag == 7
        assert tx.destination_tag == 42
        assert tx.invoice_id == invoice.upper()

    @pytest.mark.parametrize("value", [
        "1.23456789012345678",
        "12345678901234567",
        "1" + "0" * 96,
        "0." + "0" * 95 + "1",
    ])
    def test_issued_amount_must_be_representable(self, value):
        assert _field_error("Payment", payment_fields(amount=value)) == "amount"

    @pytest.mark.parametrize("value", [
        "1234567890123456",
        "9" * 16 + "0" * 64,
        "1" + "0" * 95,
        "0." + "0" * 80 + "1",
        "0",
    ])
    def test_issued_amount_range_boundaries(self, value):
        assert isinstance(mk_payment(amount=value).amount, IssuedAmount)

    def test_flag_constants(self):
        flags = PaymentFlags.PARTIAL_PAYMENT | PaymentFlags.NO_RIPPLE_DIRECT
        tx = mk_payment(flags=flags)
        assert tx.flags == 0x00030000
        assert decode_transaction(encode_transaction(tx)).flags == flags

    def test_fluent_builder_matches_mapping(self):
        tx = (PaymentBuilder()
              .account(SENDER_ADDRESS)
              .destination(DESTINATION)
              .amount("100.50", "USD", ISSUER)
              .fee(12)
              .sequence(1)
              .last_ledger_sequence(100)
              .build())
        assert tx == mk_payment()

    def test_with_field_and_get_field(self):
        builder = PaymentBuilder().with_field("account", SENDER_ADDRESS)
        assert builder.get_field("account") == SENDER_ADDRESS
        assert builder.get_field("destination", "default") == "default"


class TestDeterminism:
    """Results never depend on the order fields were supplied in."""

    def test_order_independent_result(self):
        fields = payment_fields()
        reordered = dict(reversed(list(fields.items())))
        assert build_transaction("Payment", fields) == build_transaction("Payment", reordered)

    def test_order_independent_error(self):
        fields = payment_fields(account="bad", fee="bad")
        reordered = dict(reversed(list(fields.items())))
        assert _field_error("Payment", fields) == "account"
        assert _field_error("Payment", reordered) == "account"

    def test_input_is_not_mutated(self):
        fields = payment_fields()
        snapshot = dict(fields)
        build_transaction("Payment", fields)
        assert fields == snapshot

    def test_build_is_repeatable(self):
        builder = get_builder_for("Payment")
        for name, value in payment_fields().items():
            builder.with_field(name, value)
        assert builder.build() == builder.build()


class TestTrustSetBuilder:
    """TrustSet construction."""

    def test_trust_set(self):
        tx = build_transaction("TrustSet", trust_set_fields(quality_in=1, quality_out=2))

        assert isinstance(tx, TrustSet)
        assert tx.limit_amount == IssuedAmount(value="1000000", currency="USD", issuer=ISSUER)
        assert tx.quality_in == 1
        assert tx.quality_out == 2

    def test_trust_line_to_self_rejected(self):
        assert _field_error("TrustSet", trust_set_fields(issuer=SENDER_ADDRESS)) == "issuer"

    def test_limit_required(self):
        fields = trust_set_fields()
        del fields["limit"]
        assert _field_error("TrustSet", fields) == "limit"

    def test_payment_fields_rejected(self):
        assert _field_error("TrustSet", trust_set_fields(destination=DESTINATION)) == "destination"

    def test_fluent_builder(self):
        tx = (TrustSetBuilder()
              .account(SENDER_ADDRESS)
              .limit("1000000", "USD", ISSUER)
              .fee("12")
              .sequence(2)
              .quality(quality_in=1)
              .build())
        assert tx.limit_amount.currency == "USD"
        assert tx.quality_in == 1
        assert tx.quality_out is None

    @pytest.mark.parametrize("value", ["1.23456789012345678", "0." + "0" * 120 + "1"])
    def test_limit_must_be_representable(self, value):
        assert _field_error("TrustSet", trust_set_fields(limit=value)) == "limit"

    def test_flag_constants(self):
        tx = build_transaction("TrustSet", trust_set_fields(flags=TrustSetFlags.SET_NO_RIPPLE))
        assert tx.flags == 0x00020000
        assert tx.flags & TrustSetFlags.SET_NO_RIPPLE


class TestRegistry:
    """Builder registry."""

    def test_registry_contents(self):
        assert BUILDER_REGISTRY[TransactionType.PAYMENT] is PaymentBuilder
        assert BUILDER_REGISTRY[TransactionType.TRUST_SET] is TrustSetBuilder
        assert list_transaction_types() == ["Payment", "TrustSet"]

    @pytest.mark.parametrize("tx_type", [TransactionType.PAYMENT, "Payment", "PAYMENT"])
    def test_type_spellings(self, tx_type):
        assert isinstance(get_builder_for(tx_type), PaymentBuilder)

    def test_unknown_type(self):
        with pytest.raises(InvalidFieldError) as excinfo:
            get_builder_for("OfferCreate")
        assert excinfo.value.field == "transaction_type"

    def test_fresh_builder_each_time(self):
        assert get_builder_for("Payment") is not get_builder_for("Payment")


class TestModel:
    """Built transactions are immutable values."""

    def test_frozen(self, payment):
        with pytest.raises(PydanticValidationError):
            payment.sequence = 2

    def test_extra_fields_forbidden(self):
        with pytest.raises(PydanticValidationError):
            Payment(
                account=SENDER_ADDRESS, destination=DESTINATION, amount="1", fee="12",
                sequence=1, memo="x",
            )

    def test_ledger_json(self, payment):
        assert payment.to_json() == {
            "TransactionType": "Payment",
            "Account": SENDER_ADDRESS,
            "Fee": "12",
            "Sequence": 1,
            "LastLedgerSequence": 100,
            "Destination": DESTINATION,
            "Amount": {"currency": "USD", "issuer": ISSUER, "value": "100.5"},
        }
