"""
Unit Tests for amounts and transaction values
"""

import pytest
from pydantic import ValidationError

from payments.models import (
    AMOUNT_MAX,
    AmountOverflowError,
    Chargeback,
    Deposit,
    Dispute,
    InvalidAmountError,
    TransactionAdapter,
    TransactionKind,
    Withdrawal,
    format_amount,
    parse_amount,
)


class TestParseAmount:

    @pytest.mark.parametrize("text, expected", [
        ("123.45", 1_234_500),
        ("0.0001", 1),
        ("1.0", 10_000),
        ("7.1234", 71_234),
        ("0.0000", 0),
        ("007.50", 75_000),
    ])
    def test_valid_amounts(self, text, expected):
        assert parse_amount(text) == expected

    @pytest.mark.parametrize("text", [
        "100",
        "1.23456",
        "-1.0",
        "+1.0",
        ".5",
        "5.",
        "1.2.3",
        "abc.def",
        "",
        " 1.0",
    ])
    def test_malformed_amounts(self, text):
        with pytest.raises(InvalidAmountError):
            parse_amount(text)

    def test_largest_amount(self):
        """Test the top of the unsigned 64-bit range."""
        whole, fraction = divmod(AMOUNT_MAX, 10_000)
        assert parse_amount(f"{whole}.{fraction:04d}") == AMOUNT_MAX

    def test_overflow_rejected(self):
        """Test that values past the unsigned 64-bit range fail instead of wrapping."""
        whole, fraction = divmod(AMOUNT_MAX + 1, 10_000)
        with pytest.raises(AmountOverflowError):
            parse_amount(f"{whole}.{fraction:04d}")
        with pytest.raises(AmountOverflowError):
            parse_amount("99999999999999999999.0")

    def test_very_long_whole_part_overflows(self):
        """Test digit strings past the int conversion limit."""
        with pytest.raises(AmountOverflowError):
            parse_amount("9" * 5000 + ".0")

    def test_leading_zeros_do_not_count(self):
        assert parse_amount("0" * 5000 + "12.5") == 125_000

    def test_overflow_is_a_value_error(self):
        with pytest.raises(ValueError):
            parse_amount("99999999999999999999.0")


class TestFormatAmount:

    @pytest.mark.parametrize("value, expected", [
        (1_234_500, "123.4500"),
        (0, "0.0000"),
        (1, "0.0001"),
        (-5, "-0.0005"),
        (-1_000_000, "-100.0000"),
    ])
    def test_four_decimal_digits(self, value, expected):
        assert format_amount(value) == expected


class TestTransactionValues:

    def test_kind_tags(self):
        assert Deposit(user=1, tx=1, amount=1).kind == TransactionKind.DEPOSIT
        assert Withdrawal(user=1, tx=1, amount=1).kind == TransactionKind.WITHDRAWAL
        assert Chargeback(user=1, tx=1).kind == TransactionKind.CHARGEBACK

    def test_values_are_immutable(self):
        deposit = Deposit(user=1, tx=1, amount=1)
        with pytest.raises(ValidationError):
            deposit.amount = 2

    def test_discriminated_by_type(self):
        transaction = TransactionAdapter.validate_python({"type": "dispute", "user": 3, "tx": 4})
        assert transaction == Dispute(user=3, tx=4)

    @pytest.mark.parametrize("payload", [
        {"type": "deposit", "user": 65536, "tx": 1, "amount": 1},
        {"type": "deposit", "user": 1, "tx": 2 ** 32, "amount": 1},
        {"type": "withdrawal", "user": 1, "tx": 1, "amount": -1},
        {"type": "deposit", "user": 1, "tx": 1},
        {"type": "refund", "user": 1, "tx": 1},
    ])
    def test_out_of_range_values_rejected(self, payload):
        with pytest.raises(ValidationError):
            TransactionAdapter.validate_python(payload)
