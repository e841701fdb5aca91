"""Unit tests for the Money value object."""

from decimal import Decimal

import pytest

from shopdesk.domain.exceptions import ValidationError
from shopdesk.domain.model.value_objects import Money


class TestMoney:

    def test_of_accepts_api_numbers(self):
        assert Money.of(100) == Money(Decimal("100"))
        assert Money.of("99.50") == Money(Decimal("99.50"))
        assert Money.of(12.5) == Money(Decimal("12.5"))

    def test_negative_amount_rejected(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            Money.of("-1")

    @pytest.mark.parametrize("raw", ["twelve", "NaN", "Infinity", True])
    def test_garbage_rejected(self, raw):
        with pytest.raises(ValidationError, match="Invalid money amount"):
            Money.of(raw)

    def test_minus_floored_clamps_at_zero(self):
        assert Money.of("21").minus_floored(Money.of("22")) == Money.of("0")
        assert Money.of("100").minus_floored(Money.of("22")) == Money.of("78")

    def test_currency_mismatch_rejected(self):
        with pytest.raises(ValidationError, match="Cannot combine"):
            Money.of("1").minus_floored(Money(Decimal("1"), "USD"))

    def test_display(self):
        assert str(Money.of("78")) == "₹78"
        assert str(Money.of("12.5")) == "₹12.50"
        assert str(Money(Decimal("5"), "USD")) == "USD 5"
