"""
Tests for the Money value type.
"""

from decimal import Decimal

import pytest

from ledger_engine.errors import InvalidAmountError
from ledger_engine.money import Money


class TestParse:

    @pytest.mark.parametrize("value, expected", [
        ("100.00", Decimal("100")),
        ("0.0001", Decimal("0.0001")),
        (" 42.5 ", Decimal("42.5")),
        (7, Decimal("7")),
        (Decimal("19.99"), Decimal("19.99")),
        (0.1, Decimal("0.1")),
        ("1E+2", Decimal("100")),
    ])
    def test_valid_amounts(self, value, expected):
        assert Money.parse(value).amount == expected

    def test_parsed_amount_has_four_decimal_places(self):
        assert str(Money.parse("100")) == "100.0000"

    @pytest.mark.parametrize("value", ["0", "0.0000", 0, Decimal("0")])
    def test_zero_rejected(self, value):
        with pytest.raises(InvalidAmountError, match="positive"):
            Money.parse(value)

    @pytest.mark.parametrize("value", ["-1", -5, Decimal("-0.01")])
    def test_negative_rejected(self, value):
        with pytest.raises(InvalidAmountError, match="positive"):
            Money.parse(value)

    @pytest.mark.parametrize("value", [
        "abc", "", "12,50", None, True, False, [1], [0, [1], 0], {"value": 1},
    ])
    def test_non_numeric_rejected(self, value):
        with pytest.raises(InvalidAmountError):
            Money.parse(value)

    @pytest.mark.parametrize("value", ["NaN", "Infinity", "-Infinity"])
    def test_non_finite_rejected(self, value):
        with pytest.raises(InvalidAmountError):
            Money.parse(value)

    def test_too_many_decimal_places_rejected(self):
        """Sub-precision amounts are refused, never rounded."""
        with pytest.raises(InvalidAmountError, match="decimal places"):
            Money.parse("1.00005")

    def test_amount_beyond_column_range_rejected(self):
        with pytest.raises(InvalidAmountError, match="maximum"):
            Money.parse("1e15")


class TestArithmetic:

    def test_addition_is_exact(self):
        total = Money.parse("0.1") + Money.parse("0.2")
        assert total == Money.parse("0.3")

    def test_subtraction_can_go_negative(self):
        result = Money.parse("60") - Money.parse("100")
        assert result.amount == Decimal("-40")
        assert result.is_negative()

    def test_zero(self):
        assert Money.zero().amount == Decimal("0")
        assert not Money.zero().is_negative()

    def test_of_accepts_stored_values(self):
        assert Money.of(Decimal("12.3400")) == Money.parse("12.34")
        assert Money.of(0) == Money.zero()


class TestComparison:

    def test_less_than(self):
        assert Money.parse("59.99").less_than(Money.parse("60"))
        assert not Money.parse("60").less_than(Money.parse("60.0000"))

    def test_greater_or_equal(self):
        assert Money.parse("60").greater_or_equal(Money.parse("60.00"))
        assert not Money.parse("1").greater_or_equal(Money.parse("1.0001"))

    def test_ordering_operators(self):
        amounts = [Money.parse("3"), Money.parse("1"), Money.parse("2")]
        assert sorted(amounts) == [
            Money.parse("1"), Money.parse("2"), Money.parse("3"),
        ]
