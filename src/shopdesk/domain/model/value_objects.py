"""Value objects for amounts shown to the operator.

The order API sends prices and totals as bare JSON numbers in rupees.
They are held as Decimal so the service-fee subtraction is exact.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from shopdesk.domain.exceptions import ValidationError

_ZERO = Decimal("0")


@dataclass(frozen=True)
class Money:
    """A non-negative, finite amount in a single currency (INR by default)."""

    amount: Decimal
    currency: str = "INR"

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal) or not self.amount.is_finite():
            raise ValidationError(f"Invalid money amount: {self.amount!r}")
        if self.amount < _ZERO:
            raise ValidationError(f"Money amount cannot be negative, got {self.amount}")

    @classmethod
    def of(cls, amount: str | float | int | Decimal) -> Money:
        """Build from whatever the API sent: int, float, numeric string."""
        if isinstance(amount, bool):
            raise ValidationError(f"Invalid money amount: {amount!r}")
        try:
            value = Decimal(str(amount).strip())
        except InvalidOperation as exc:
            raise ValidationError(f"Invalid money amount: {amount!r}") from exc
        return cls(value)

    def minus_floored(self, other: Money) -> Money:
        """Subtract *other*, clamping the result at zero."""
        if other.currency != self.currency:
            raise ValidationError(f"Cannot combine {self.currency} with {other.currency}")
        return Money(max(self.amount - other.amount, _ZERO), self.currency)

    def __str__(self) -> str:
        prefix = "₹" if self.currency == "INR" else f"{self.currency} "
        if self.amount == self.amount.to_integral_value():
            return f"{prefix}{self.amount:.0f}"
        return f"{prefix}{self.amount:.2f}"
