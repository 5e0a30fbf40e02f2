"""Application service: Update Order Status use case.

Orders move forward only (pending -> paid/completed -> cancelled) unless
an administrator explicitly overrides.  Every change is audited with the
old and new status.  Cancelling does not put stock back; returned goods
come back in through stock receipt.
"""

from __future__ import annotations

from backoffice.application.audit import AuditEvent, AuditSink, NullAuditSink, emit_audit_event
from backoffice.application.dto import Actor
from backoffice.domain.exceptions import EntityNotFoundError
from backoffice.domain.model.order import parse_status
from backoffice.domain.repository.unit_of_work import UnitOfWork


class UpdateOrderStatusHandler:

    def __init__(self, uow: UnitOfWork, audit_sink: AuditSink | None = None) -> None:
        self._uow = uow
        self._audit_sink = audit_sink or NullAuditSink()

    def handle(
        self,
        order_id: int,
        status: str,
        actor: Actor,
        override: bool = False,
    ) -> None:
        new_status = parse_status(status)

        with self._uow as uow:
            order = uow.orders.get_by_id(order_id)
            if order is None:
                raise EntityNotFoundError(f"Order #{order_id} not found")

            old_status = order.status
            order.change_status(new_status, override=override)
            uow.orders.save(order)
            uow.commit()

        emit_audit_event(
            self._audit_sink,
            AuditEvent(
                action="UPDATE",
                entity_type="Order",
                entity_id=order_id,
                entity_name=order.display_number,
                summary=(
                    f"Order {order.display_number} status: "
                    f"{old_status.value} -> {new_status.value}"
                ),
                actor=actor,
                old_values={"status": old_status.value},
                new_values={"status": new_status.value},
                additional_info={"override": override} if override else None,
            ),
        )
