"""
Field validator tests.

Covers length boundaries, canonical forms and the field name carried by
the raised error.
"""

import pytest

from xrpl_client.runtime.errors import ErrorCode, InvalidFieldError, ValidationError
from xrpl_client.tx.fields import Address, AmountValue, CurrencyCode, Hash256
from xrpl_client.tx.validation import (
    is_valid_address,
    is_valid_amount,
    is_valid_currency_code,
    is_valid_transaction_hash,
    issued_value_parts,
    validate_address,
    validate_amount,
    validate_currency_code,
    validate_transaction_hash,
)


class TestAddress:
    """Address validation."""

    def test_boundaries(self):
        assert validate_address("r" + "a" * 24) == "r" + "a" * 24
        assert validate_address("r" + "a" * 44) == "r" + "a" * 44

        with pytest.raises(ValidationError):
            validate_address("r" + "a" * 23)
        with pytest.raises(ValidationError):
            validate_address("r" + "a" * 45)

    @pytest.mark.parametrize("value", [
        "",
        "   ",
        "rHb9CJAWyB4rj91VRWn96Dkuk G4bwdtyTh",
        "xHb9CJAWyB4rj91VRWn96DkukG4bwdtyTh",
        "rHb9CJAWyB4rj91VRWn96DkukG4bwdty-h",
        "rHb9CJAWyB4rj91VRWn96DkukG4bwdtyTé",
    ])
    def test_rejects_malformed(self, value):
        with pytest.raises(ValidationError) as excinfo:
            validate_address(value)
        assert excinfo.value.code == ErrorCode.INVALID_ADDRESS

    def test_rejects_non_string(self):
        with pytest.raises(ValidationError):
            validate_address(12345)
        with pytest.raises(ValidationError):
            validate_address(None)

    def test_error_names_field(self):
        with pytest.raises(ValidationError) as excinfo:
            validate_address("bogus", field="destination")
        assert excinfo.value.field == "destination"
        assert excinfo.value.details["field"] == "destination"

    def test_returns_newtype(self):
        address = validate_address("rHb9CJAWyB4rj91VRWn96DkukG4bwdtyTh")
        assert isinstance(address, Address)
        assert isinstance(address, str)


class TestCurrencyCode:
    """Currency code validation."""

    def test_three_character_codes_are_upper_cased(self):
        assert validate_currency_code("usd") == "USD"
        assert validate_currency_code("Eur") == "EUR"
        assert validate_currency_code("A1B") == "A1B"

    @pytest.mark.parametrize("value", ["US", "USDX", "U$D", "", "0" * 39, "0" * 41, "G" * 40])
    def test_rejects_wrong_shapes(self, value):
        with pytest.raises(ValidationError) as excinfo:
            validate_currency_code(value)
        assert excinfo.value.code == ErrorCode.INVALID_CURRENCY

    def test_hex_code_is_upper_cased(self):
        code = "015841551A748AD2C1F76FF6ECB0CCCD00000000"
        assert validate_currency_code(code.lower()) == code
        assert not validate_currency_code(code).is_standard

    def test_standard_layout_hex_collapses(self):
        hex_usd = "0" * 24 + "555344" + "0" * 10
        currency = validate_currency_code(hex_usd)
        assert currency == "USD"
        assert currency.is_standard

    def test_wire_form(self):
        assert CurrencyCode("USD").to_bytes() == bytes(12) + b"USD" + bytes(5)
        assert len(CurrencyCode("015841551A748AD2C1F76FF6ECB0CCCD00000000").to_bytes()) == 20


class TestAmount:
    """Amount validation and canonical form."""

    @pytest.mark.parametrize("value,expected", [
        ("100", "100"),
        ("100.50", "100.5"),
        ("007", "7"),
        ("0.000", "0"),
        ("0", "0"),
        (".5", "0.5"),
        ("5.", "5"),
        ("0.0001", "0.0001"),
    ])
    def test_canonical_form(self, value, expected):
        assert validate_amount(value) == expected

    @pytest.mark.parametrize("value", ["-1", "1.2.3", "1e5", "abc", "", " ", "inf", "nan", "+1", "1,5", "."])
    def test_rejects(self, value):
        with pytest.raises(ValidationError) as excinfo:
            validate_amount(value, field="limit")
        assert excinfo.value.field == "limit"
        assert excinfo.value.code == ErrorCode.INVALID_AMOUNT

    def test_newtype_helpers(self):
        value = AmountValue("100.50")
        assert value == "100.5"
        assert not value.is_integral
        assert AmountValue("12").is_integral
        assert value.as_decimal() == AmountValue("100.5").as_decimal()


class TestTransactionHash:
    """Transaction hash validation."""

    def test_accepts_64_hex_and_upper_cases(self):
        value = "b98130912866c378afeccb8f8b598a0bbaec1af5a2d53fac0e3c3434358b9c85"
        assert validate_transaction_hash(value) == value.upper()
        assert isinstance(validate_transaction_hash(value), Hash256)

    @pytest.mark.parametrize("value", ["A" * 63, "A" * 65, "G" * 64, ""])
    def test_rejects(self, value):
        with pytest.raises(ValidationError):
            validate_transaction_hash(value)


def test_predicates():
    assert is_valid_address("rHb9CJAWyB4rj91VRWn96DkukG4bwdtyTh")
    assert not is_valid_address("nope")
    assert is_valid_currency_code("USD")
    assert not is_valid_currency_code("US")
    assert is_valid_amount("1.5")
    assert not is_valid_amount("-1.5")
    assert is_valid_transaction_hash("0" * 64)
    assert not is_valid_transaction_hash("0" * 10)


def test_newtypes_validate_on_construction():
    with pytest.raises(ValidationError):
        Address("not-an-address")
    with pytest.raises(ValidationError):
        AmountValue("-3")


def test_validation_error_is_invalid_field_error():
    assert issubclass(ValidationError, InvalidFieldError)
    assert issubclass(ValidationError, ValueError)


@pytest.mark.parametrize("suffix", ["\n", "\r\n", " ", "\t", "\x00"])
class TestTrailingCharacters:
    """Trailing whitespace or control characters are never accepted."""

    def test_address(self, suffix):
        with pytest.raises(ValidationError):
            validate_address("rHb9CJAWyB4rj91VRWn96DkukG4bwdtyTh" + suffix)

    def test_currency_code(self, suffix):
        with pytest.raises(ValidationError):
            validate_currency_code("USD" + suffix)
        with pytest.raises(ValidationError):
            validate_currency_code("0" * 39 + suffix)
        with pytest.raises(ValidationError):
            validate_currency_code("015841551A748AD2C1F76FF6ECB0CCCD00000000" + suffix)

    def test_amount(self, suffix):
        with pytest.raises(ValidationError):
            validate_amount("100" + suffix)
        with pytest.raises(ValidationError):
            validate_amount("100.5" + suffix)

    def test_transaction_hash(self, suffix):
        with pytest.raises(ValidationError):
            validate_transaction_hash("A" * 63 + suffix)
        with pytest.raises(ValidationError):
            validate_transaction_hash("A" * 64 + suffix)


class TestIssuedValueParts:
    """Normalized mantissa and exponent of issued amounts."""

    @pytest.mark.parametrize("value,expected", [
        ("100.5", (1005000000000000, -13)),
        ("1", (1000000000000000, -15)),
        ("1" + "0" * 95, (1000000000000000, 80)),
        ("0." + "0" * 80 + "1", (1000000000000000, -96)),
        ("1234567890123456", (1234567890123456, 0)),
    ])
    def test_normalizes(self, value, expected):
        assert issued_value_parts(value) == expected

    def test_zero(self):
        assert issued_value_parts("0") is None
        assert issued_value_parts("0.000") is None

    @pytest.mark.parametrize("value", [
        "1.23456789012345678",
        "1" + "0" * 96,
        "0." + "0" * 95 + "1",
    ])
    def test_rejects_unrepresentable(self, value):
        with pytest.raises(ValidationError) as excinfo:
            issued_value_parts(value, field="limit")
        assert excinfo.value.field == "limit"
        assert excinfo.value.code == ErrorCode.INVALID_AMOUNT
