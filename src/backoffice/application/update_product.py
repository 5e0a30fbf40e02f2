"""Application service: Update Product use case.

Changes a product's sale price and/or its catalog status.  Orders placed
earlier keep the unit price they were sold at; a product moved out of
``active`` can no longer be put on a new order.
"""

from __future__ import annotations

from backoffice.application.audit import AuditEvent, AuditSink, NullAuditSink, emit_audit_event
from backoffice.application.dto import Actor
from backoffice.domain.exceptions import EntityNotFoundError, ValidationError
from backoffice.domain.model.product import Product, ProductStatus
from backoffice.domain.model.value_objects import Money
from backoffice.domain.repository.unit_of_work import UnitOfWork


def _snapshot(product: Product) -> dict:
    return {"price": str(product.price.amount), "status": product.status.value}


class UpdateProductHandler:

    def __init__(self, uow: UnitOfWork, audit_sink: AuditSink | None = None) -> None:
        self._uow = uow
        self._audit_sink = audit_sink or NullAuditSink()

    def handle(
        self,
        product_id: int,
        new_price: str | None = None,
        new_status: str | None = None,
        actor: Actor | None = None,
    ) -> Product:
        if new_price is None and new_status is None:
            raise ValidationError("Nothing to update: give a new price or status")
        status = None
        if new_status is not None:
            try:
                status = ProductStatus(new_status.strip().lower())
            except ValueError:
                raise ValidationError(f"Unknown product status '{new_status}'") from None

        with self._uow as uow:
            product = uow.products.get_by_id(product_id)
            if product is None:
                raise EntityNotFoundError(f"Product with ID '{product_id}' not found")

            before = _snapshot(product)
            if new_price is not None:
                product.update_price(Money.of(new_price))
            if status is not None:
                product.change_status(status)
            uow.products.save(product)
            uow.commit()

        emit_audit_event(
            self._audit_sink,
            AuditEvent(
                action="UPDATE",
                entity_type="Product",
                entity_id=product.id,
                entity_name=product.name,
                summary=f"Updated product {product.name}",
                actor=actor or Actor.system(),
                old_values=before,
                new_values=_snapshot(product),
            ),
        )
        return product
