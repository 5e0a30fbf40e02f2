"""Money and quantity value objects.

All amounts are Decimals on a cent grid; anything that can leave the grid
(percentages, proportional splits) rounds half-up through ``quantize()``.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from backoffice.domain.exceptions import ValidationError

CENT = Decimal("0.01")
HUNDRED = Decimal("100")


@dataclass(frozen=True, order=True)
class Money:
    """Non-negative, finite monetary amount.

    Subtraction that would go below zero is an error rather than a
    negative amount, so a total can never be discounted past nothing.
    """

    amount: Decimal

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise ValidationError(
                f"Money amount must be a Decimal, got {type(self.amount).__name__}"
            )
        if not self.amount.is_finite():
            raise ValidationError(f"Money amount must be finite, got {self.amount}")
        if self.amount < 0:
            raise ValidationError(f"Money amount cannot be negative, got {self.amount}")

    def __add__(self, other: Money) -> Money:
        return Money(self.amount + other.amount)

    def __sub__(self, other: Money) -> Money:
        if other.amount > self.amount:
            raise ValidationError(
                f"Cannot take {other} from {self}: Money subtraction would "
                f"result in a negative amount"
            )
        return Money(self.amount - other.amount)

    def __mul__(self, units: int) -> Money:
        if isinstance(units, bool) or not isinstance(units, int):
            raise TypeError(f"Money can only be multiplied by a unit count, not {units!r}")
        return Money(self.amount * units)

    # --- Rounding -------------------------------------------------------------

    def quantize(self) -> Money:
        """Round to whole cents, half-up."""
        return Money(self.amount.quantize(CENT, rounding=ROUND_HALF_UP))

    def percent(self, rate: Decimal) -> Money:
        """``rate`` percent of this amount, rounded to cents."""
        return Money(self.amount * rate / HUNDRED).quantize()

    def share(self, part: Money, whole: Money) -> Money:
        """This amount scaled by ``part / whole``, rounded to cents."""
        if whole.is_zero():
            return Money.zero()
        return Money(self.amount * part.amount / whole.amount).quantize()

    def is_zero(self) -> bool:
        return self.amount == 0

    @staticmethod
    def min(a: Money, b: Money) -> Money:
        return a if a <= b else b

    def __str__(self) -> str:
        return f"${self.amount:,.2f}"

    # --- Construction ---------------------------------------------------------

    @staticmethod
    def zero() -> Money:
        return Money(Decimal("0.00"))

    @staticmethod
    def of(amount: str | int | Decimal) -> Money:
        """Parse user or storage input."""
        try:
            return Money(Decimal(str(amount).strip()))
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid money amount: {amount!r}") from exc


@dataclass(frozen=True)
class Quantity:
    """Units on an order line: a positive int, never a bool or float."""

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValidationError(
                f"Quantity must be an integer, got {type(self.value).__name__}"
            )
        if self.value <= 0:
            raise ValidationError("Quantity must be positive")

    def __str__(self) -> str:
        return str(self.value)
