"""Application service: Delete Promotion use case.

Deletion is a status, not a removal: orders keep pointing at the
promotion they used, and a deleted promotion never comes back to life
through a status refresh.
"""

from __future__ import annotations

from backoffice.application.audit import AuditEvent, AuditSink, NullAuditSink, emit_audit_event
from backoffice.application.dto import Actor
from backoffice.domain.exceptions import EntityNotFoundError, ValidationError
from backoffice.domain.model.promotion import Promotion, PromotionStatus
from backoffice.domain.repository.unit_of_work import UnitOfWork


class DeletePromotionHandler:

    def __init__(self, uow: UnitOfWork, audit_sink: AuditSink | None = None) -> None:
        self._uow = uow
        self._audit_sink = audit_sink or NullAuditSink()

    def handle(self, code: str, actor: Actor | None = None) -> Promotion:
        with self._uow as uow:
            promotion = uow.promotions.get_by_code(code)
            if promotion is None:
                raise EntityNotFoundError(f"Promotion '{code.strip()}' not found")
            if promotion.status == PromotionStatus.DELETED:
                raise ValidationError(f"Promotion {promotion.code} is already deleted")

            old_status = promotion.status
            promotion.delete()
            uow.promotions.save(promotion)
            uow.commit()

        emit_audit_event(
            self._audit_sink,
            AuditEvent(
                action="DELETE",
                entity_type="Promotion",
                entity_id=promotion.id,
                entity_name=promotion.code,
                summary=f"Deleted promotion {promotion.code}",
                actor=actor or Actor.system(),
                old_values={"status": old_status.value},
                new_values={"status": promotion.status.value},
            ),
        )
        return promotion
