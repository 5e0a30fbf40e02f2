"""Application service: Create Order use case.

This is the order-fulfillment transaction.  Inside one unit of work it:

1. Resolves every product and checks that enough stock exists for every
   line before anything is changed.
2. Builds the lines with the products' *current* prices (snapshot).
3. Resolves and applies the promotion code, if one was given.
4. Reserves stock through the inventory ledger (lowest warehouse first).
5. Persists the order, its lines and its payment, then commits.

Any exception in steps 1-5 leaves the unit of work uncommitted, so stock,
orders and promotion usage are exactly as they were.  After the commit,
one audit event is emitted on a best-effort basis.
"""

from __future__ import annotations

import logging
import time
from collections import Counter
from datetime import datetime
from typing import Callable

from backoffice.application.audit import AuditEvent, AuditSink, NullAuditSink, emit_audit_event
from backoffice.application.clock import local_now
from backoffice.application.dto import Actor, CreateOrderRequest, OrderResult
from backoffice.application.identity import IdentityDirectory, NullIdentityDirectory
from backoffice.application.show_order import order_to_result
from backoffice.domain.exceptions import (
    InsufficientStockError,
    StockShortage,
    TransactionTimeoutError,
    ValidationError,
)
from backoffice.domain.model.order import Order, OrderLine
from backoffice.domain.model.promotion import Promotion
from backoffice.domain.model.value_objects import Money, Quantity
from backoffice.domain.repository.unit_of_work import UnitOfWork
from backoffice.domain.service.inventory_ledger import InventoryLedger
from backoffice.domain.service.promotion_resolver import (
    PromotionApplication,
    PromotionResolver,
)

logger = logging.getLogger(__name__)

MAX_LINES = 100
DEFAULT_PAYMENT_METHOD = "cash"


class CreateOrderHandler:

    def __init__(
        self,
        uow: UnitOfWork,
        audit_sink: AuditSink | None = None,
        identity: IdentityDirectory | None = None,
        clock: Callable[[], datetime] = local_now,
        default_payment_method: str = DEFAULT_PAYMENT_METHOD,
        timeout: float | None = None,
    ) -> None:
        self._uow = uow
        self._audit_sink = audit_sink or NullAuditSink()
        self._identity = identity or NullIdentityDirectory()
        self._clock = clock
        self._default_payment_method = default_payment_method
        self._timeout = timeout

    def handle(
        self,
        request: CreateOrderRequest,
        actor: Actor,
        timeout: float | None = None,
    ) -> OrderResult:
        """Place an order atomically and return it fully hydrated.

        Raises:
            ValidationError: malformed request, unknown or unsellable product.
            InsufficientStockError: one or more products lack stock.
            PersistenceError: the transaction could not commit (retryable).
        """
        quantities = self._validate(request)
        timeout = timeout if timeout is not None else self._timeout
        deadline = time.monotonic() + timeout if timeout is not None else None
        now = self._clock()
        today = now.date()

        with self._uow as uow:
            ledger = InventoryLedger(uow.inventory)
            resolver = PromotionResolver(uow.promotions)

            # Step 1-2: resolve products, check stock, snapshot prices
            lines = self._build_lines(uow, request)
            self._check_stock(ledger, quantities)
            subtotal = sum((line.line_subtotal for line in lines), Money.zero())
            self._check_deadline(deadline)

            # Step 3: promotion
            promotion: Promotion | None = None
            rejection: str | None = None
            discount = Money.zero()
            if request.promo_code and request.promo_code.strip():
                resolution = resolver.resolve(
                    request.promo_code, subtotal, lines, today
                )
                if isinstance(resolution, PromotionApplication):
                    resolver.apply(resolution, lines, today)
                    promotion = resolution.promotion
                    discount = resolution.discount
                else:
                    rejection = resolution.reason

            # Step 4: reserve stock
            for line in lines:
                line.allocations = tuple(
                    ledger.reserve(line.product_id, line.quantity.value, now)
                )
            self._check_deadline(deadline)

            # Step 5: persist order, lines and payment together
            order = Order.create(
                lines,
                customer_id=request.customer_id,
                user_id=request.user_id,
                discount_amount=discount,
                promotion_id=promotion.id if promotion else None,
                created_at=now,
            )
            order.id = uow.orders.next_id()
            order.record_payment(
                request.payment_method or self._default_payment_method, now
            )
            uow.orders.save(order)
            self._check_deadline(deadline)
            uow.commit()

        logger.info(
            "Created order %s: subtotal %s, discount %s, total %s%s",
            order.display_number,
            order.subtotal,
            order.discount_amount,
            order.final_total,
            f" (promotion {promotion.code})" if promotion else "",
        )

        # Step 6: audit, outside the transaction
        emit_audit_event(self._audit_sink, self._audit_event(order, actor))

        # Step 7
        return order_to_result(order, promotion, self._identity, rejection)

    # --- Steps ------------------------------------------------------------------

    @staticmethod
    def _validate(request: CreateOrderRequest) -> Counter[int]:
        """Shape checks done before any lookup; returns units per product."""
        if not request.lines:
            raise ValidationError("Order must contain at least one item")
        if len(request.lines) > MAX_LINES:
            raise ValidationError(f"Maximum {MAX_LINES} items per order")

        quantities: Counter[int] = Counter()
        for item in request.lines:
            if isinstance(item.product_id, bool) or not isinstance(item.product_id, int):
                raise ValidationError(f"Invalid product id: {item.product_id!r}")
            quantities[item.product_id] += Quantity(item.quantity).value
        return quantities

    @staticmethod
    def _build_lines(uow: UnitOfWork, request: CreateOrderRequest) -> list[OrderLine]:
        lines: list[OrderLine] = []
        for item in request.lines:
            product = uow.products.get_by_id(item.product_id)
            if product is None:
                raise ValidationError(f"Unknown product id {item.product_id}")
            if not product.is_sellable:
                raise ValidationError(
                    f"Product '{product.name}' is {product.status.value} "
                    f"and cannot be sold"
                )
            lines.append(
                OrderLine(
                    product_id=product.id,
                    product_name=product.name,
                    quantity=Quantity(item.quantity),
                    unit_price=product.price,  # <-- price snapshot
                )
            )
        return lines

    @staticmethod
    def _check_stock(ledger: InventoryLedger, quantities: Counter[int]) -> None:
        """Validate every product before any stock is touched."""
        shortages = []
        for product_id, requested in quantities.items():
            available = ledger.check_availability(product_id)
            if available < requested:
                shortages.append(
                    StockShortage(product_id=product_id, available=available, requested=requested)
                )
        if shortages:
            error = InsufficientStockError(shortages)
            logger.warning("Order rejected: %s", error)
            raise error

    @staticmethod
    def _check_deadline(deadline: float | None) -> None:
        if deadline is not None and time.monotonic() > deadline:
            raise TransactionTimeoutError("Order transaction timed out; nothing was saved")

    @staticmethod
    def _audit_event(order: Order, actor: Actor) -> AuditEvent:
        return AuditEvent(
            action="CREATE",
            entity_type="Order",
            entity_id=order.id,
            entity_name=order.display_number,
            summary=(
                f"Created order {order.display_number} - customer "
                f"{order.customer_id if order.customer_id is not None else 'walk-in'}"
                f" - total {order.final_total} - {order.item_count} items"
            ),
            actor=actor,
            new_values={
                "order_id": order.id,
                "customer_id": order.customer_id,
                "subtotal": str(order.subtotal.amount),
                "discount_amount": str(order.discount_amount.amount),
                "final_total": str(order.final_total.amount),
                "status": order.status.value,
                "item_count": order.item_count,
                "items": [
                    {
                        "product_id": line.product_id,
                        "quantity": line.quantity.value,
                        "price": str(line.unit_price.amount),
                        "subtotal": str(line.discounted_subtotal.amount),
                    }
                    for line in order.lines
                ],
            },
            additional_info={
                "item_count": order.item_count,
                "has_promotion": order.promotion_id is not None,
            },
            occurred_at=order.created_at,
        )
