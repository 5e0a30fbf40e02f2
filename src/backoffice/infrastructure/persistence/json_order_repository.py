"""JSON-document-backed implementation of OrderRepository.

Lines and the payment are stored inside the order record, so an order
can never be persisted without them.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from backoffice.domain.model.order import Allocation, Order, OrderLine, OrderStatus, Payment
from backoffice.domain.model.value_objects import Money, Quantity
from backoffice.domain.repository.order_repository import OrderRepository


class JsonOrderRepository(OrderRepository):
    """Reads and writes the ``orders`` table of a working document."""

    def __init__(self, records: list[dict]) -> None:
        self._records = records

    # --- OrderRepository interface --------------------------------------------

    def next_id(self) -> int:
        if not self._records:
            return 1
        return max(o["id"] for o in self._records) + 1

    def get_by_id(self, order_id: int) -> Order | None:
        for raw in self._records:
            if raw["id"] == order_id:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[Order]:
        orders = [self._to_domain(raw) for raw in self._records]
        return sorted(orders, key=lambda o: (o.created_at, o.id), reverse=True)

    def save(self, order: Order) -> None:
        if order.id is None:
            order.id = self.next_id()
        if order.payment is not None and order.payment.order_id is None:
            order.payment.order_id = order.id

        # Upsert: replace if exists, otherwise append
        for i, raw in enumerate(self._records):
            if raw["id"] == order.id:
                self._records[i] = self._to_raw(order)
                return
        self._records.append(self._to_raw(order))

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(order: Order) -> dict:
        payment = order.payment
        return {
            "id": order.id,
            "customer_id": order.customer_id,
            "user_id": order.user_id,
            "status": order.status.value,
            "created_at": order.created_at.isoformat(),
            "discount_amount": str(order.discount_amount.amount),
            "promotion_id": order.promotion_id,
            "lines": [
                {
                    "product_id": line.product_id,
                    "product_name": line.product_name,
                    "quantity": line.quantity.value,
                    "unit_price": str(line.unit_price.amount),
                    "subtotal": str(line.discounted_subtotal.amount),
                    "allocations": [
                        {"warehouse_id": a.warehouse_id, "quantity": a.quantity}
                        for a in line.allocations
                    ],
                }
                for line in order.lines
            ],
            "payment": (
                {
                    "amount": str(payment.amount.amount),
                    "method": payment.method,
                    "paid_at": payment.paid_at.isoformat(),
                }
                if payment is not None
                else None
            ),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Order:
        lines = [
            OrderLine(
                product_id=i["product_id"],
                product_name=i["product_name"],
                quantity=Quantity(i["quantity"]),
                unit_price=Money(Decimal(i["unit_price"])),
                discounted_subtotal=Money(Decimal(i["subtotal"])),
                allocations=tuple(
                    Allocation(a["warehouse_id"], a["quantity"])
                    for a in i.get("allocations", [])
                ),
            )
            for i in raw["lines"]
        ]
        raw_payment = raw.get("payment")
        payment = (
            Payment(
                order_id=raw["id"],
                amount=Money(Decimal(raw_payment["amount"])),
                method=raw_payment["method"],
                paid_at=datetime.fromisoformat(raw_payment["paid_at"]),
            )
            if raw_payment
            else None
        )
        return Order(
            id=raw["id"],
            lines=lines,
            customer_id=raw.get("customer_id"),
            user_id=raw.get("user_id"),
            status=OrderStatus(raw["status"]),
            discount_amount=Money(Decimal(raw.get("discount_amount", "0"))),
            promotion_id=raw.get("promotion_id"),
            payment=payment,
            created_at=datetime.fromisoformat(raw["created_at"]),
        )
