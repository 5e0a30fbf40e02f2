"""Promotion aggregate.

A promotion's active/inactive status is never stored as independent
truth: ``derive_status()`` recomputes it from the validity window and the
usage quota, and ``refresh_status()`` is called every time a promotion is
touched.  Only ``deleted`` is set explicitly, and it is terminal.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum

from backoffice.domain.exceptions import ValidationError
from backoffice.domain.model.value_objects import Money


class DiscountKind(Enum):
    PERCENT = "percent"
    FIXED = "fixed"


class ApplyScope(Enum):
    ORDER = "order"
    PRODUCT = "product"
    COMBO = "combo"


class PromotionStatus(Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    DELETED = "deleted"


SCOPE_LABELS = {
    ApplyScope.ORDER: "Order discount",
    ApplyScope.PRODUCT: "Product discount",
    ApplyScope.COMBO: "Combo discount",
}


def derive_status(
    today: date,
    start_date: date,
    end_date: date,
    used_count: int,
    usage_limit: int,
) -> PromotionStatus:
    """Status implied by the calendar and the usage quota.

    ``usage_limit == 0`` means unlimited.
    """
    if today < start_date or today > end_date:
        return PromotionStatus.INACTIVE
    if usage_limit > 0 and used_count >= usage_limit:
        return PromotionStatus.INACTIVE
    return PromotionStatus.ACTIVE


@dataclass
class Promotion:
    id: int | None
    code: str
    discount_kind: DiscountKind
    discount_value: Decimal
    start_date: date
    end_date: date
    min_order_amount: Money = field(default_factory=Money.zero)
    usage_limit: int = 0
    used_count: int = 0
    status: PromotionStatus = PromotionStatus.ACTIVE
    apply_scope: ApplyScope = ApplyScope.ORDER
    product_ids: frozenset[int] = frozenset()
    description: str | None = None

    # --- Factory (used for NEW promotions only) -------------------------------

    @staticmethod
    def create(
        code: str,
        discount_kind: DiscountKind,
        discount_value: Decimal,
        start_date: date,
        end_date: date,
        *,
        min_order_amount: Money | None = None,
        usage_limit: int = 0,
        apply_scope: ApplyScope = ApplyScope.ORDER,
        product_ids: frozenset[int] | set[int] = frozenset(),
        description: str | None = None,
    ) -> Promotion:
        if not code or not code.strip():
            raise ValidationError("Promotion code is required")
        if discount_value <= 0:
            raise ValidationError("Discount value must be greater than zero")
        if discount_kind == DiscountKind.PERCENT and discount_value > 100:
            raise ValidationError("Percentage discount cannot exceed 100")
        if end_date < start_date:
            raise ValidationError("Promotion end date is before its start date")
        if usage_limit < 0:
            raise ValidationError("Usage limit cannot be negative")
        if apply_scope != ApplyScope.ORDER and not product_ids:
            raise ValidationError(
                f"A {apply_scope.value} promotion needs at least one product"
            )
        return Promotion(
            id=None,
            code=code.strip(),
            discount_kind=discount_kind,
            discount_value=discount_value,
            start_date=start_date,
            end_date=end_date,
            min_order_amount=min_order_amount or Money.zero(),
            usage_limit=usage_limit,
            apply_scope=apply_scope,
            product_ids=frozenset(product_ids),
            description=description,
        )

    # --- Queries ---------------------------------------------------------------

    def matches_code(self, code: str) -> bool:
        return self.code.casefold() == code.strip().casefold()

    def is_within_window(self, today: date) -> bool:
        return self.start_date <= today <= self.end_date

    @property
    def has_uses_left(self) -> bool:
        return self.usage_limit == 0 or self.used_count < self.usage_limit

    @property
    def is_active(self) -> bool:
        return self.status == PromotionStatus.ACTIVE

    def covers(self, product_id: int) -> bool:
        return product_id in self.product_ids

    def describe(self) -> str:
        return f"{self.code} - {SCOPE_LABELS[self.apply_scope]}"

    # --- State transitions ----------------------------------------------------

    def refresh_status(self, today: date) -> bool:
        """Re-derive status; return True if it changed."""
        if self.status == PromotionStatus.DELETED:
            return False
        new_status = derive_status(
            today, self.start_date, self.end_date, self.used_count, self.usage_limit
        )
        if new_status == self.status:
            return False
        self.status = new_status
        return True

    def record_use(self, today: date) -> None:
        """Consume one usage slot."""
        if not self.has_uses_left:
            raise ValidationError(f"Promotion {self.code} has no uses left")
        self.used_count += 1
        self.refresh_status(today)

    def delete(self) -> None:
        self.status = PromotionStatus.DELETED
