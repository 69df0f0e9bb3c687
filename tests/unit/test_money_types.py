"""
Unit tests for money coercion and rounding.

Verifies:
- Float constructor prohibition
- ROUND_HALF_UP determinism
- Percentage of zero is zero
"""

from decimal import Decimal

import pytest
from hypothesis import given
from hypothesis import strategies as st

from rent_kernel.db.types import percentage, round_money, to_money


class TestToMoney:
    """Tests for to_money coercion."""

    def test_decimal_passthrough(self):
        value = Decimal("100.50")
        assert to_money(value) is value

    def test_int(self):
        assert to_money(15000) == Decimal("15000")

    def test_string(self):
        assert to_money("10300.25") == Decimal("10300.25")

    def test_float_rejected(self):
        with pytest.raises(TypeError):
            to_money(100.5)

    def test_garbage_string_raises(self):
        with pytest.raises(ArithmeticError):  # decimal.InvalidOperation
            to_money("fifteen thousand")

    @pytest.mark.parametrize("value", ["NaN", "Infinity", "-Infinity", Decimal("NaN"), Decimal("Inf")])
    def test_non_finite_rejected(self, value):
        with pytest.raises(ArithmeticError, match="finite"):
            to_money(value)


class TestRoundMoney:
    """Tests for round_money."""

    def test_half_up(self):
        assert round_money(Decimal("2.345")) == Decimal("2.35")

    def test_half_up_negative(self):
        assert round_money(Decimal("-2.345")) == Decimal("-2.35")

    def test_zero_places(self):
        assert round_money(Decimal("2.5"), 0) == Decimal("3")


class TestPercentage:
    """Tests for percentage."""

    def test_scenario_rate(self):
        assert percentage(Decimal("12000"), Decimal("20000")) == Decimal("60.00")

    def test_zero_whole(self):
        assert percentage(Decimal("0"), Decimal("0")) == Decimal("0.00")

    def test_repeating_fraction(self):
        assert percentage(Decimal("1"), Decimal("3")) == Decimal("33.33")

    @given(
        part=st.decimals(min_value=0, max_value=10**9, places=2),
        whole=st.decimals(min_value=Decimal("0.01"), max_value=10**9, places=2),
    )
    def test_two_places_and_non_negative(self, part, whole):
        result = percentage(part, whole)
        assert result >= 0
        assert result.as_tuple().exponent == -2
