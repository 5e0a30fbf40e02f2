"""Application service: Add Product use case."""

from __future__ import annotations

from backoffice.application.audit import AuditEvent, AuditSink, NullAuditSink, emit_audit_event
from backoffice.application.dto import Actor
from backoffice.domain.exceptions import ValidationError
from backoffice.domain.model.product import Product
from backoffice.domain.model.value_objects import Money
from backoffice.domain.repository.unit_of_work import UnitOfWork


class AddProductHandler:

    def __init__(self, uow: UnitOfWork, audit_sink: AuditSink | None = None) -> None:
        self._uow = uow
        self._audit_sink = audit_sink or NullAuditSink()

    def handle(
        self,
        name: str,
        price: str,
        cost_price: str = "0",
        unit: str = "pcs",
        actor: Actor | None = None,
    ) -> Product:
        """Register a sellable product; names are unique regardless of case."""
        name = (name or "").strip()
        if not name:
            raise ValidationError("Product name is required")
        sale_price = Money.of(price)
        if sale_price.is_zero():
            raise ValidationError("Product price must be greater than zero")

        with self._uow as uow:
            if uow.products.get_by_name(name) is not None:
                raise ValidationError(f"Product '{name}' already exists")
            product = Product(
                id=uow.products.next_id(),
                name=name,
                price=sale_price,
                cost_price=Money.of(cost_price),
                unit=unit.strip() or "pcs",
            )
            uow.products.save(product)
            uow.commit()

        emit_audit_event(
            self._audit_sink,
            AuditEvent(
                action="CREATE",
                entity_type="Product",
                entity_id=product.id,
                entity_name=product.name,
                summary=f"Added product {product.name} at {product.price}",
                actor=actor or Actor.system(),
                new_values={"price": str(product.price.amount), "unit": product.unit},
            ),
        )
        return product
