"""
test_core_types.py - Unit tests for core data structures

Tests:
- TransactionKind / TransactionStatus: values, classification
- TransactionRecord: creation, validation, immutability, status copies
- Account: defaults, validation, balance invariant, row form
- Decimal helpers: to_decimal, format_decimal
"""

import pytest
from dataclasses import FrozenInstanceError
from decimal import Decimal

from txreplay import (
    TransactionKind, TransactionStatus, TransactionRecord, Account,
    LedgerError, InputError, MalformedRecord, ReplayAlreadyRun,
    format_decimal, to_decimal,
)


class TestTransactionKind:
    """Tests for TransactionKind."""

    def test_kind_from_text(self):
        """Kinds parse from their lower-case names."""
        assert TransactionKind("deposit") is TransactionKind.DEPOSIT
        assert TransactionKind("chargeback") is TransactionKind.CHARGEBACK

    def test_unknown_kind_raises(self):
        with pytest.raises(ValueError):
            TransactionKind("transfer")

    def test_amount_carrying_kinds(self):
        assert TransactionKind.DEPOSIT.carries_amount
        assert TransactionKind.WITHDRAWAL.carries_amount
        for kind in (TransactionKind.DISPUTE, TransactionKind.RESOLVE, TransactionKind.CHARGEBACK):
            assert not kind.carries_amount
            assert kind.is_dispute_family


class TestTransactionRecord:
    """Tests for TransactionRecord creation and validation."""

    def test_create_deposit(self):
        record = TransactionRecord(TransactionKind.DEPOSIT, 1, 7, Decimal("1.5"))
        assert record.kind == TransactionKind.DEPOSIT
        assert record.account_id == 1
        assert record.tx_id == 7
        assert record.amount == Decimal("1.5")
        assert record.status == TransactionStatus.NONE

    def test_dispute_has_no_amount(self):
        record = TransactionRecord(TransactionKind.DISPUTE, 1, 7)
        assert record.amount is None

    def test_kind_string_is_coerced(self):
        record = TransactionRecord("withdrawal", 1, 2, Decimal("3"))
        assert record.kind is TransactionKind.WITHDRAWAL

    def test_float_amount_is_converted_exactly(self):
        """Floats go through str() so 0.1 stays 0.1."""
        record = TransactionRecord(TransactionKind.DEPOSIT, 1, 1, 0.1)
        assert record.amount == Decimal("0.1")

    def test_negative_amount_raises(self):
        with pytest.raises(ValueError, match="non-negative"):
            TransactionRecord(TransactionKind.DEPOSIT, 1, 1, Decimal("-1"))

    def test_nan_amount_raises(self):
        with pytest.raises(ValueError, match="finite"):
            TransactionRecord(TransactionKind.DEPOSIT, 1, 1, Decimal("NaN"))

    def test_negative_ids_raise(self):
        with pytest.raises(ValueError, match="account_id"):
            TransactionRecord(TransactionKind.DEPOSIT, -1, 1, Decimal("1"))
        with pytest.raises(ValueError, match="tx_id"):
            TransactionRecord(TransactionKind.DEPOSIT, 1, -1, Decimal("1"))

    def test_record_is_immutable(self):
        record = TransactionRecord(TransactionKind.DEPOSIT, 1, 1, Decimal("1"))
        with pytest.raises(FrozenInstanceError):
            record.status = TransactionStatus.DISPUTED

    def test_with_status_returns_copy(self):
        record = TransactionRecord(TransactionKind.DEPOSIT, 1, 1, Decimal("1"))
        disputed = record.with_status(TransactionStatus.DISPUTED)
        assert disputed.is_disputed
        assert not record.is_disputed
        assert disputed.amount == record.amount

    def test_with_account_id(self):
        record = TransactionRecord(TransactionKind.DEPOSIT, 0, 1, Decimal("1"))
        assert record.with_account_id(42).account_id == 42
        assert record.account_id == 0

    def test_repr(self):
        record = TransactionRecord(TransactionKind.DEPOSIT, 3, 9, Decimal("2"))
        assert "deposit" in repr(record)
        assert "client=3" in repr(record)


class TestAccount:
    """Tests for Account."""

    def test_fresh_account_is_empty(self):
        account = Account(5)
        assert account.available == Decimal("0")
        assert account.held == Decimal("0")
        assert account.total == Decimal("0")
        assert account.locked is False

    def test_numeric_balances_converted(self):
        account = Account(1, available=1.5, held=0, total="1.5")
        assert account.available == Decimal("1.5")
        assert account.total == Decimal("1.5")

    def test_negative_id_raises(self):
        with pytest.raises(ValueError):
            Account(-1)

    def test_is_balanced(self):
        assert Account(1, Decimal("8"), Decimal("2"), Decimal("10")).is_balanced()
        assert not Account(1, Decimal("8"), Decimal("2"), Decimal("8")).is_balanced()

    def test_is_balanced_tolerance(self):
        account = Account(1, Decimal("1"), Decimal("0"), Decimal("1.00001"))
        assert not account.is_balanced()
        assert account.is_balanced(tolerance=Decimal("0.001"))

    def test_as_row(self):
        account = Account(2, Decimal("1"), Decimal("2"), Decimal("3"), True)
        assert account.as_row() == (2, Decimal("1"), Decimal("2"), Decimal("3"), True)

    def test_accounts_compare_by_value(self):
        assert Account(1, Decimal("1.0"), total=Decimal("1")) == Account(1, Decimal("1"), total=Decimal("1.00"))


class TestDecimalHelpers:
    """Tests for to_decimal and format_decimal."""

    @pytest.mark.parametrize("value,expected", [
        ("1.5", Decimal("1.5")),
        (" 2 ", Decimal("2")),
        (3, Decimal("3")),
        (0.25, Decimal("0.25")),
        (Decimal("4.1"), Decimal("4.1")),
    ])
    def test_to_decimal(self, value, expected):
        assert to_decimal(value) == expected

    @pytest.mark.parametrize("value", ["abc", "", True])
    def test_to_decimal_rejects_non_numbers(self, value):
        with pytest.raises(ValueError):
            to_decimal(value)

    @pytest.mark.parametrize("value,expected", [
        (Decimal("1.50"), "1.5"),
        (Decimal("10.000"), "10"),
        (Decimal("0"), "0"),
        (Decimal("-0"), "0"),
        (Decimal("1E+2"), "100"),
        (Decimal("0.0001"), "0.0001"),
        (Decimal("-2.5"), "-2.5"),
        (Decimal("1E+5000"), "1" + "0" * 5000),
        (Decimal("1E-20"), "0." + "0" * 19 + "1"),
    ])
    def test_format_decimal(self, value, expected):
        assert format_decimal(value) == expected


class TestExceptions:
    """Tests for the exception hierarchy."""

    def test_hierarchy(self):
        assert issubclass(InputError, LedgerError)
        assert issubclass(MalformedRecord, InputError)
        assert issubclass(ReplayAlreadyRun, LedgerError)

    def test_malformed_record_line(self):
        err = MalformedRecord("bad amount", line=4)
        assert err.line == 4
        assert str(err) == "line 4: bad amount"

    def test_malformed_record_without_line(self):
        err = MalformedRecord("bad")
        assert err.line is None
        assert str(err) == "bad"
