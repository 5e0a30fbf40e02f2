"""Order aggregate.

The Order is an aggregate root that owns its line items and its payment.
All monetary invariants are enforced here:

- ``final_total == subtotal - discount_amount``
- ``discount_amount <= subtotal`` (so ``final_total`` is never negative)
- when a discount was pushed down onto lines, the line discounts add up
  to ``discount_amount``
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum

from backoffice.domain.exceptions import InvalidStatusTransitionError, ValidationError
from backoffice.domain.model.value_objects import HUNDRED, Money, Quantity


class OrderStatus(Enum):
    PENDING = "pending"
    PAID = "paid"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


_ALLOWED_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset(
        {OrderStatus.PAID, OrderStatus.COMPLETED, OrderStatus.CANCELLED}
    ),
    OrderStatus.PAID: frozenset({OrderStatus.COMPLETED, OrderStatus.CANCELLED}),
    OrderStatus.COMPLETED: frozenset({OrderStatus.CANCELLED}),
    OrderStatus.CANCELLED: frozenset(),
}


def parse_status(raw: str) -> OrderStatus:
    try:
        return OrderStatus(raw.strip().lower())
    except ValueError:
        allowed = ", ".join(s.value for s in OrderStatus)
        raise ValidationError(
            f"Unknown order status '{raw}' (expected one of: {allowed})"
        ) from None


@dataclass(frozen=True)
class Allocation:
    """Units of one line taken from one warehouse."""

    warehouse_id: int | None
    quantity: int


@dataclass
class OrderLine:
    """Captures the price snapshot of a product at order-creation time.

    ``unit_price`` never changes after creation (price lock).  A line-level
    promotion lowers ``discounted_subtotal``; ``line_subtotal`` always
    stays the pre-discount amount.
    """

    product_id: int
    product_name: str
    quantity: Quantity
    unit_price: Money  # locked at order-creation time
    discounted_subtotal: Money | None = None
    allocations: tuple[Allocation, ...] = ()

    def __post_init__(self) -> None:
        if self.discounted_subtotal is None:
            self.discounted_subtotal = self.line_subtotal

    @property
    def line_subtotal(self) -> Money:
        return self.unit_price * self.quantity.value

    @property
    def discount_amount(self) -> Money:
        return self.line_subtotal - self.discounted_subtotal

    @property
    def discount_percent(self) -> Decimal:
        if self.line_subtotal.is_zero() or self.discount_amount.is_zero():
            return Decimal("0.00")
        ratio = self.discount_amount.amount / self.line_subtotal.amount * HUNDRED
        return ratio.quantize(Decimal("0.01"))

    def apply_discount(self, discount: Money) -> Money:
        """Lower the line by ``discount`` (capped at what is left).

        Returns the discount actually applied.
        """
        applied = Money.min(discount, self.discounted_subtotal)
        self.discounted_subtotal = self.discounted_subtotal - applied
        return applied


@dataclass
class Payment:
    order_id: int | None
    amount: Money
    method: str
    paid_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class Order:
    """Aggregate root for sales orders.

    Use the ``Order.create()`` factory for new orders; it enforces all
    business rules.  The ``__init__`` is intentionally simple so the
    repository can reconstitute persisted orders without re-validating.
    """

    id: int | None
    lines: list[OrderLine]
    customer_id: int | None = None
    user_id: int | None = None
    status: OrderStatus = OrderStatus.PENDING
    discount_amount: Money = field(default_factory=Money.zero)
    promotion_id: int | None = None
    payment: Payment | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        lines: list[OrderLine],
        *,
        customer_id: int | None = None,
        user_id: int | None = None,
        discount_amount: Money | None = None,
        promotion_id: int | None = None,
        created_at: datetime | None = None,
    ) -> Order:
        """Create a new order, enforcing all invariants."""
        if not lines:
            raise ValidationError("Order must contain at least one item")

        order = Order(
            id=None,
            lines=list(lines),
            customer_id=customer_id,
            user_id=user_id,
            discount_amount=discount_amount or Money.zero(),
            promotion_id=promotion_id,
        )
        if created_at is not None:
            order.created_at = created_at

        if order.discount_amount > order.subtotal:
            raise ValidationError(
                f"Discount {order.discount_amount} exceeds subtotal {order.subtotal}"
            )

        line_discounts = sum(
            (line.discount_amount for line in order.lines), Money.zero()
        )
        if not line_discounts.is_zero() and line_discounts != order.discount_amount:
            raise ValidationError(
                f"Line discounts {line_discounts} do not match order discount "
                f"{order.discount_amount}"
            )
        return order

    def record_payment(self, method: str, paid_at: datetime | None = None) -> Payment:
        """Attach the single payment for this order (amount = final total)."""
        if self.payment is not None:
            raise ValidationError("Order already has a payment")
        if not method or not method.strip():
            raise ValidationError("Payment method is required")
        self.payment = Payment(
            order_id=self.id,
            amount=self.final_total,
            method=method.strip(),
            paid_at=paid_at or self.created_at,
        )
        return self.payment

    # --- State transitions ----------------------------------------------------

    def change_status(self, new_status: OrderStatus, override: bool = False) -> None:
        """Move to ``new_status``.

        Normal transitions only move forward (pending -> paid/completed ->
        cancelled).  ``override`` is the explicit admin escape hatch and
        allows any change.
        """
        if new_status == self.status:
            raise InvalidStatusTransitionError(
                f"Order is already {self.status.value}"
            )
        if not override and new_status not in _ALLOWED_TRANSITIONS[self.status]:
            raise InvalidStatusTransitionError(
                f"Cannot change order status from {self.status.value} "
                f"to {new_status.value}"
            )
        self.status = new_status

    # --- Computed properties --------------------------------------------------

    @property
    def subtotal(self) -> Money:
        return sum((line.line_subtotal for line in self.lines), Money.zero())

    @property
    def final_total(self) -> Money:
        return self.subtotal - self.discount_amount

    @property
    def item_count(self) -> int:
        return len(self.lines)

    @property
    def display_number(self) -> str:
        return f"DH{self.id or 0:06d}"
