"""Application service: Add Promotion use case.

Raw CLI values are parsed here; the promotion's initial status is
derived from today's date, so a promotion scheduled for later is stored
as inactive and wakes up on the next refresh or use.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Callable

from backoffice.application.audit import AuditEvent, AuditSink, NullAuditSink, emit_audit_event
from backoffice.application.clock import local_now
from backoffice.application.dto import Actor
from backoffice.domain.exceptions import ValidationError
from backoffice.domain.model.promotion import ApplyScope, DiscountKind, Promotion
from backoffice.domain.model.value_objects import Money
from backoffice.domain.repository.unit_of_work import UnitOfWork


def _parse_value(raw: str) -> Decimal:
    try:
        value = Decimal(raw)
    except InvalidOperation as exc:
        raise ValidationError(f"Invalid discount value: {raw!r}") from exc
    if not value.is_finite():
        raise ValidationError(f"Invalid discount value: {raw!r}")
    return value


class AddPromotionHandler:

    def __init__(
        self,
        uow: UnitOfWork,
        clock: Callable[[], datetime] = local_now,
        audit_sink: AuditSink | None = None,
    ) -> None:
        self._uow = uow
        self._clock = clock
        self._audit_sink = audit_sink or NullAuditSink()

    def handle(
        self,
        code: str,
        discount_kind: str,
        discount_value: str,
        start_date: date,
        end_date: date,
        *,
        min_order_amount: str = "0",
        usage_limit: int = 0,
        apply_scope: str = "order",
        product_ids: list[int] | None = None,
        description: str | None = None,
        actor: Actor | None = None,
    ) -> Promotion:
        try:
            kind = DiscountKind(discount_kind)
            scope = ApplyScope(apply_scope)
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc

        promotion = Promotion.create(
            code,
            kind,
            _parse_value(discount_value),
            start_date,
            end_date,
            min_order_amount=Money.of(min_order_amount),
            usage_limit=usage_limit,
            apply_scope=scope,
            product_ids=frozenset(product_ids or ()),
            description=description,
        )
        promotion.refresh_status(self._clock().date())

        with self._uow as uow:
            if uow.promotions.get_by_code(promotion.code) is not None:
                raise ValidationError(f"Promotion code '{promotion.code}' already exists")
            for product_id in sorted(promotion.product_ids):
                if uow.products.get_by_id(product_id) is None:
                    raise ValidationError(f"Unknown product id {product_id}")
            uow.promotions.save(promotion)
            uow.commit()

        emit_audit_event(
            self._audit_sink,
            AuditEvent(
                action="CREATE",
                entity_type="Promotion",
                entity_id=promotion.id,
                entity_name=promotion.code,
                summary=f"Added promotion {promotion.describe()}",
                actor=actor or Actor.system(),
                new_values={
                    "discount_kind": promotion.discount_kind.value,
                    "discount_value": str(promotion.discount_value),
                    "apply_scope": promotion.apply_scope.value,
                    "product_ids": sorted(promotion.product_ids),
                    "start_date": promotion.start_date.isoformat(),
                    "end_date": promotion.end_date.isoformat(),
                    "usage_limit": promotion.usage_limit,
                    "status": promotion.status.value,
                },
            ),
        )
        return promotion
