"""Application service: Show Order / List Orders use cases (queries)."""

from __future__ import annotations

from backoffice.application.dto import OrderLineResult, OrderResult
from backoffice.application.identity import IdentityDirectory, NullIdentityDirectory
from backoffice.domain.exceptions import EntityNotFoundError
from backoffice.domain.model.order import Order, parse_status
from backoffice.domain.model.promotion import Promotion
from backoffice.domain.repository.unit_of_work import UnitOfWork


def order_to_result(
    order: Order,
    promotion: Promotion | None,
    identity: IdentityDirectory,
    promotion_rejection: str | None = None,
) -> OrderResult:
    """Hydrate an order for display."""
    payment = order.payment
    return OrderResult(
        id=order.id,  # type: ignore[arg-type]
        number=order.display_number,
        status=order.status.value,
        created_at=order.created_at,
        customer_id=order.customer_id,
        customer_name=(
            identity.customer_name(order.customer_id)
            if order.customer_id is not None
            else None
        ),
        user_id=order.user_id,
        user_name=(
            identity.user_name(order.user_id) if order.user_id is not None else None
        ),
        subtotal=order.subtotal.amount,
        discount_amount=order.discount_amount.amount,
        final_total=order.final_total.amount,
        lines=[
            OrderLineResult(
                product_id=line.product_id,
                product_name=line.product_name,
                quantity=line.quantity.value,
                unit_price=line.unit_price.amount,
                line_subtotal=line.line_subtotal.amount,
                subtotal=line.discounted_subtotal.amount,
                discount_amount=line.discount_amount.amount,
                discount_percent=line.discount_percent,
            )
            for line in order.lines
        ],
        payment_method=payment.method if payment else None,
        payment_date=payment.paid_at if payment else None,
        promotion_id=order.promotion_id,
        promotion_code=promotion.code if promotion else None,
        promotion_scope=promotion.apply_scope.value if promotion else None,
        promotion_description=promotion.describe() if promotion else None,
        promotion_rejection=promotion_rejection,
    )


def _load_promotion(uow: UnitOfWork, order: Order) -> Promotion | None:
    if order.promotion_id is None:
        return None
    return uow.promotions.get_by_id(order.promotion_id)


class ShowOrderHandler:

    def __init__(
        self,
        uow: UnitOfWork,
        identity: IdentityDirectory | None = None,
    ) -> None:
        self._uow = uow
        self._identity = identity or NullIdentityDirectory()

    def handle(self, order_id: int) -> OrderResult:
        with self._uow as uow:
            order = uow.orders.get_by_id(order_id)
            if order is None:
                raise EntityNotFoundError(f"Order #{order_id} not found")
            return order_to_result(order, _load_promotion(uow, order), self._identity)


class ListOrdersHandler:

    def __init__(
        self,
        uow: UnitOfWork,
        identity: IdentityDirectory | None = None,
    ) -> None:
        self._uow = uow
        self._identity = identity or NullIdentityDirectory()

    def handle(self, status: str | None = None) -> list[OrderResult]:
        """All orders, newest first, optionally filtered by status."""
        wanted = parse_status(status) if status is not None else None
        with self._uow as uow:
            return [
                order_to_result(order, _load_promotion(uow, order), self._identity)
                for order in uow.orders.list_all()
                if wanted is None or order.status == wanted
            ]
