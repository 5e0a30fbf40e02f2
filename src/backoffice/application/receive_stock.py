"""Application service: Receive Stock use case.

Credits units into one (product, warehouse) inventory entry, creating
the entry the first time a product is stocked in that warehouse.
"""

from __future__ import annotations

from backoffice.application.audit import AuditEvent, AuditSink, NullAuditSink, emit_audit_event
from backoffice.application.dto import Actor, WarehouseStockDTO
from backoffice.domain.exceptions import ValidationError
from backoffice.domain.repository.unit_of_work import UnitOfWork
from backoffice.domain.service.inventory_ledger import InventoryLedger


class ReceiveStockHandler:

    def __init__(self, uow: UnitOfWork, audit_sink: AuditSink | None = None) -> None:
        self._uow = uow
        self._audit_sink = audit_sink or NullAuditSink()

    def handle(
        self,
        product_id: int,
        quantity: int,
        actor: Actor,
        warehouse_id: int | None = None,
    ) -> WarehouseStockDTO:
        if quantity <= 0:
            raise ValidationError("Received quantity must be positive")

        with self._uow as uow:
            product = uow.products.get_by_id(product_id)
            if product is None:
                raise ValidationError(f"Unknown product id {product_id}")

            ledger = InventoryLedger(uow.inventory)
            before = ledger.check_availability(product_id)
            entry = ledger.credit(product_id, warehouse_id, quantity)
            uow.commit()

        emit_audit_event(
            self._audit_sink,
            AuditEvent(
                action="UPDATE",
                entity_type="Inventory",
                entity_id=product_id,
                entity_name=product.name,
                summary=(
                    f"Received {quantity} {product.unit} of {product.name} "
                    f"into warehouse {warehouse_id if warehouse_id is not None else '-'}"
                ),
                actor=actor,
                old_values={"total_stock": before},
                new_values={"total_stock": before + quantity},
                additional_info={"warehouse_id": warehouse_id, "quantity": quantity},
            ),
        )
        return WarehouseStockDTO(
            warehouse_id=entry.warehouse_id,
            quantity=entry.quantity,
            updated_at=entry.updated_at,
        )
