"""Domain service: Promotion Resolver.

Decides whether a promotion code applies to an order and how much it
takes off.  Resolution is split in two so the caller controls when the
side effects happen:

  ``resolve()``: runs the eligibility checks and computes the discount
                 without touching the order lines.
  ``apply()``:   pushes the discount onto the lines (for line-level
                 scopes), consumes one usage slot and re-derives the
                 promotion's status.

A code that does not apply is never an error: ``resolve()`` returns a
``PromotionNotApplicable`` carrying the reason, and the order goes ahead
undiscounted.

Scopes with an eligible product set (``product`` and ``combo``) are not
applicable when the order contains none of those products; they do not
apply a zero discount and do not consume a usage slot.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable, Union

from backoffice.domain.model.order import OrderLine
from backoffice.domain.model.promotion import ApplyScope, DiscountKind, Promotion
from backoffice.domain.model.value_objects import Money
from backoffice.domain.repository.promotion_repository import PromotionRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PromotionApplication:
    """A promotion that applies, and the discount it yields.

    ``line_discounts`` maps line index -> discount for line-level scopes
    and is empty for whole-order promotions.
    """

    promotion: Promotion
    discount: Money
    line_discounts: dict[int, Money]

    @property
    def is_line_level(self) -> bool:
        return self.promotion.apply_scope != ApplyScope.ORDER


@dataclass(frozen=True)
class PromotionNotApplicable:
    code: str
    reason: str


Resolution = Union[PromotionApplication, PromotionNotApplicable]


# --- Discount policies --------------------------------------------------------


def _discount_on(amount: Money, promotion: Promotion) -> Money:
    """Discount on ``amount``; a fixed discount never exceeds it."""
    if promotion.discount_kind == DiscountKind.PERCENT:
        return Money.min(amount.percent(promotion.discount_value), amount)
    return Money.min(Money(promotion.discount_value).quantize(), amount)


def _whole_order(
    promotion: Promotion, subtotal: Money, lines: list[OrderLine]
) -> tuple[Money, dict[int, Money]]:
    return _discount_on(subtotal, promotion), {}


def _specific_products(
    promotion: Promotion, subtotal: Money, lines: list[OrderLine]
) -> tuple[Money, dict[int, Money]]:
    line_discounts = {
        index: _discount_on(line.line_subtotal, promotion)
        for index, line in enumerate(lines)
        if promotion.covers(line.product_id)
    }
    total = sum(line_discounts.values(), Money.zero())
    return total, line_discounts


def _product_combo(
    promotion: Promotion, subtotal: Money, lines: list[OrderLine]
) -> tuple[Money, dict[int, Money]]:
    eligible = [i for i, line in enumerate(lines) if promotion.covers(line.product_id)]
    aggregate = sum((lines[i].line_subtotal for i in eligible), Money.zero())
    discount = _discount_on(aggregate, promotion)

    # Proportional split; the last eligible line absorbs the rounding remainder.
    line_discounts: dict[int, Money] = {}
    distributed = Money.zero()
    for index in eligible[:-1]:
        share = discount.share(lines[index].line_subtotal, aggregate)
        line_discounts[index] = share
        distributed = distributed + share
    line_discounts[eligible[-1]] = discount - distributed
    return discount, line_discounts


_POLICIES: dict[
    ApplyScope,
    Callable[[Promotion, Money, list[OrderLine]], tuple[Money, dict[int, Money]]],
] = {
    ApplyScope.ORDER: _whole_order,
    ApplyScope.PRODUCT: _specific_products,
    ApplyScope.COMBO: _product_combo,
}


class PromotionResolver:

    def __init__(self, promotion_repo: PromotionRepository) -> None:
        self._promotion_repo = promotion_repo

    def resolve(
        self,
        code: str,
        subtotal: Money,
        lines: list[OrderLine],
        today: date,
    ) -> Resolution:
        """Run the eligibility checks in order, stopping at the first failure."""
        promotion = self._promotion_repo.get_by_code(code)
        if promotion is None:
            return self._not_applicable(code, "unknown promotion code")

        if promotion.refresh_status(today):
            self._promotion_repo.save(promotion)

        if not promotion.is_active:
            return self._not_applicable(code, f"promotion is {promotion.status.value}")
        if not promotion.is_within_window(today):
            return self._not_applicable(code, "outside the promotion's validity dates")
        if subtotal < promotion.min_order_amount:
            return self._not_applicable(
                code,
                f"order subtotal {subtotal} is below the minimum "
                f"{promotion.min_order_amount}",
            )
        if not promotion.has_uses_left:
            return self._not_applicable(code, "usage limit reached")
        if promotion.apply_scope != ApplyScope.ORDER and not any(
            promotion.covers(line.product_id) for line in lines
        ):
            return self._not_applicable(code, "no eligible products in order")

        discount, line_discounts = _POLICIES[promotion.apply_scope](
            promotion, subtotal, lines
        )
        return PromotionApplication(
            promotion=promotion, discount=discount, line_discounts=line_discounts
        )

    def apply(
        self,
        application: PromotionApplication,
        lines: list[OrderLine],
        today: date,
    ) -> None:
        """Push line discounts onto the lines and consume one usage slot."""
        for index, discount in application.line_discounts.items():
            lines[index].apply_discount(discount)

        promotion = application.promotion
        promotion.record_use(today)
        self._promotion_repo.save(promotion)
        logger.info(
            "Applied promotion %s: discount %s, used %d/%s, now %s",
            promotion.code,
            application.discount,
            promotion.used_count,
            promotion.usage_limit or "unlimited",
            promotion.status.value,
        )

    @staticmethod
    def _not_applicable(code: str, reason: str) -> PromotionNotApplicable:
        logger.info("Promotion %r not applicable: %s", code, reason)
        return PromotionNotApplicable(code=code, reason=reason)
