"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the outer layers (CLI, request handlers) and the
application layer without exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal


@dataclass(frozen=True)
class Actor:
    """Who is performing an operation, passed explicitly into every use case."""

    user_id: int | None
    username: str

    @staticmethod
    def system() -> Actor:
        return Actor(user_id=None, username="system")


@dataclass(frozen=True)
class OrderLineRequest:
    """Input: one requested product and how many units."""

    product_id: int
    quantity: int


@dataclass(frozen=True)
class CreateOrderRequest:
    """Input: everything needed to place an order.

    ``lines`` keeps the caller's order; the result lists lines the same way.
    """

    lines: tuple[OrderLineRequest, ...]
    customer_id: int | None = None
    user_id: int | None = None
    promo_code: str | None = None
    payment_method: str | None = None

    @staticmethod
    def of(
        pairs: list[tuple[int, int]],
        **kwargs,
    ) -> CreateOrderRequest:
        """Build a request from ``(product_id, quantity)`` pairs."""
        return CreateOrderRequest(
            lines=tuple(OrderLineRequest(pid, qty) for pid, qty in pairs),
            **kwargs,
        )


@dataclass(frozen=True)
class OrderLineResult:
    """Output: a single line as displayed to the user."""

    product_id: int
    product_name: str
    quantity: int
    unit_price: Decimal
    line_subtotal: Decimal  # before discount
    subtotal: Decimal  # after discount
    discount_amount: Decimal
    discount_percent: Decimal


@dataclass(frozen=True)
class OrderResult:
    """Output: a complete, hydrated order."""

    id: int
    number: str
    status: str
    created_at: datetime
    customer_id: int | None
    customer_name: str | None
    user_id: int | None
    user_name: str | None
    subtotal: Decimal
    discount_amount: Decimal
    final_total: Decimal
    lines: list[OrderLineResult]
    payment_method: str | None = None
    payment_date: datetime | None = None
    promotion_id: int | None = None
    promotion_code: str | None = None
    promotion_scope: str | None = None
    promotion_description: str | None = None
    promotion_rejection: str | None = None  # why a supplied code was ignored


@dataclass(frozen=True)
class WarehouseStockDTO:
    warehouse_id: int | None
    quantity: int
    updated_at: datetime


@dataclass(frozen=True)
class ProductStockDTO:
    product_id: int
    product_name: str
    unit: str
    total: int
    warehouses: list[WarehouseStockDTO] = field(default_factory=list)
