"""JSON-document-backed implementation of PromotionRepository."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from backoffice.domain.model.promotion import (
    ApplyScope,
    DiscountKind,
    Promotion,
    PromotionStatus,
)
from backoffice.domain.model.value_objects import Money
from backoffice.domain.repository.promotion_repository import PromotionRepository


class JsonPromotionRepository(PromotionRepository):
    """Reads and writes the ``promotions`` table of a working document."""

    def __init__(self, records: list[dict]) -> None:
        self._records = records

    # --- PromotionRepository interface ----------------------------------------

    def get_by_id(self, promotion_id: int) -> Promotion | None:
        for raw in self._records:
            if raw["id"] == promotion_id:
                return self._to_domain(raw)
        return None

    def get_by_code(self, code: str) -> Promotion | None:
        wanted = code.strip().casefold()
        for raw in self._records:
            if raw["code"].casefold() == wanted:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[Promotion]:
        return [self._to_domain(raw) for raw in self._records]

    def save(self, promotion: Promotion) -> None:
        if promotion.id is None:
            promotion.id = max((raw["id"] for raw in self._records), default=0) + 1
        for i, raw in enumerate(self._records):
            if raw["id"] == promotion.id:
                self._records[i] = self._to_raw(promotion)
                return
        self._records.append(self._to_raw(promotion))

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(promotion: Promotion) -> dict:
        return {
            "id": promotion.id,
            "code": promotion.code,
            "description": promotion.description,
            "discount_kind": promotion.discount_kind.value,
            "discount_value": str(promotion.discount_value),
            "start_date": promotion.start_date.isoformat(),
            "end_date": promotion.end_date.isoformat(),
            "min_order_amount": str(promotion.min_order_amount.amount),
            "usage_limit": promotion.usage_limit,
            "used_count": promotion.used_count,
            "status": promotion.status.value,
            "apply_scope": promotion.apply_scope.value,
            "product_ids": sorted(promotion.product_ids),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Promotion:
        return Promotion(
            id=raw["id"],
            code=raw["code"],
            description=raw.get("description"),
            discount_kind=DiscountKind(raw["discount_kind"]),
            discount_value=Decimal(raw["discount_value"]),
            start_date=date.fromisoformat(raw["start_date"]),
            end_date=date.fromisoformat(raw["end_date"]),
            min_order_amount=Money(Decimal(raw.get("min_order_amount", "0"))),
            usage_limit=raw.get("usage_limit", 0),
            used_count=raw.get("used_count", 0),
            status=PromotionStatus(raw.get("status", "active")),
            apply_scope=ApplyScope(raw.get("apply_scope", "order")),
            product_ids=frozenset(raw.get("product_ids", [])),
        )
