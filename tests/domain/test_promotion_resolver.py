"""Tests for the PromotionResolver domain service."""

from datetime import date
from decimal import Decimal

from backoffice.domain.model.order import OrderLine
from backoffice.domain.model.promotion import (
    ApplyScope,
    DiscountKind,
    Promotion,
    PromotionStatus,
)
from backoffice.domain.model.value_objects import Money, Quantity
from backoffice.domain.service.promotion_resolver import (
    PromotionApplication,
    PromotionNotApplicable,
    PromotionResolver,
)
from tests.fakes import FakePromotionRepository

TODAY = date(2026, 3, 10)


def _promo(**overrides) -> Promotion:
    fields = dict(
        id=None,
        code="SAVE",
        discount_kind=DiscountKind.PERCENT,
        discount_value=Decimal("15"),
        start_date=date(2026, 3, 1),
        end_date=date(2026, 3, 31),
    )
    fields.update(overrides)
    return Promotion(**fields)


def _line(product_id: int, price: str, qty: int = 1) -> OrderLine:
    return OrderLine(
        product_id=product_id,
        product_name=f"Product {product_id}",
        quantity=Quantity(qty),
        unit_price=Money.of(price),
    )


def _setup(*promotions: Promotion):
    repo = FakePromotionRepository(list(promotions))
    return PromotionResolver(repo), repo


def _subtotal(lines: list[OrderLine]) -> Money:
    return sum((line.line_subtotal for line in lines), Money.zero())


class TestWholeOrder:

    def test_percent_of_subtotal(self):
        resolver, _ = _setup(_promo())
        lines = [_line(1, "50", 2), _line(2, "100")]
        result = resolver.resolve("SAVE", _subtotal(lines), lines, TODAY)
        assert isinstance(result, PromotionApplication)
        assert result.discount == Money.of("30.00")
        assert result.line_discounts == {}
        assert not result.is_line_level

    def test_fixed_is_capped_at_subtotal(self):
        resolver, _ = _setup(_promo(discount_kind=DiscountKind.FIXED, discount_value=Decimal("500")))
        lines = [_line(1, "120")]
        result = resolver.resolve("SAVE", _subtotal(lines), lines, TODAY)
        assert result.discount == Money.of("120")

    def test_code_is_case_insensitive(self):
        resolver, _ = _setup(_promo())
        lines = [_line(1, "100")]
        result = resolver.resolve("  save ", _subtotal(lines), lines, TODAY)
        assert isinstance(result, PromotionApplication)


class TestSpecificProducts:

    def test_only_listed_products_discounted(self):
        promo = _promo(
            discount_kind=DiscountKind.FIXED,
            discount_value=Decimal("10"),
            apply_scope=ApplyScope.PRODUCT,
            product_ids=frozenset({1}),
        )
        resolver, _ = _setup(promo)
        lines = [_line(1, "50", 2), _line(2, "100")]
        result = resolver.resolve("SAVE", _subtotal(lines), lines, TODAY)
        assert result.discount == Money.of("10")
        assert result.line_discounts == {0: Money.of("10")}

    def test_fixed_capped_at_line(self):
        promo = _promo(
            discount_kind=DiscountKind.FIXED,
            discount_value=Decimal("25"),
            apply_scope=ApplyScope.PRODUCT,
            product_ids=frozenset({1, 2}),
        )
        resolver, _ = _setup(promo)
        lines = [_line(1, "10"), _line(2, "100")]
        result = resolver.resolve("SAVE", _subtotal(lines), lines, TODAY)
        assert result.line_discounts == {0: Money.of("10"), 1: Money.of("25")}
        assert result.discount == Money.of("35")


class TestCombo:

    def test_proportional_split(self):
        promo = _promo(
            discount_value=Decimal("10"),
            apply_scope=ApplyScope.COMBO,
            product_ids=frozenset({1, 2}),
        )
        resolver, _ = _setup(promo)
        lines = [_line(1, "100"), _line(2, "200"), _line(3, "40")]
        result = resolver.resolve("SAVE", _subtotal(lines), lines, TODAY)
        assert result.discount == Money.of("30")
        assert result.line_discounts == {0: Money.of("10"), 1: Money.of("20")}

    def test_split_adds_up_after_rounding(self):
        promo = _promo(
            discount_kind=DiscountKind.FIXED,
            discount_value=Decimal("10"),
            apply_scope=ApplyScope.COMBO,
            product_ids=frozenset({1, 2, 3}),
        )
        resolver, _ = _setup(promo)
        lines = [_line(1, "10"), _line(2, "10"), _line(3, "10")]
        result = resolver.resolve("SAVE", _subtotal(lines), lines, TODAY)
        assert sum(result.line_discounts.values(), Money.zero()) == Money.of("10")
        assert result.line_discounts[2] == Money.of("3.34")


class TestNotApplicable:

    def _reason(self, resolver, lines, code="SAVE", today=TODAY):
        result = resolver.resolve(code, _subtotal(lines), lines, today)
        assert isinstance(result, PromotionNotApplicable)
        return result.reason

    def test_unknown_code(self):
        resolver, _ = _setup()
        assert self._reason(resolver, [_line(1, "10")], code="NOPE") == "unknown promotion code"

    def test_deleted(self):
        resolver, _ = _setup(_promo(status=PromotionStatus.DELETED))
        assert self._reason(resolver, [_line(1, "10")]) == "promotion is deleted"

    def test_outside_window_refreshes_status(self):
        resolver, repo = _setup(_promo())
        reason = self._reason(resolver, [_line(1, "10")], today=date(2026, 4, 2))
        assert reason == "promotion is inactive"
        assert repo.get_by_code("SAVE").status == PromotionStatus.INACTIVE

    def test_below_minimum(self):
        resolver, _ = _setup(_promo(min_order_amount=Money.of("100")))
        reason = self._reason(resolver, [_line(1, "99.99")])
        assert reason.startswith("order subtotal $99.99 is below the minimum $100.00")

    def test_usage_limit_reached(self):
        resolver, _ = _setup(_promo(usage_limit=2, used_count=2))
        assert self._reason(resolver, [_line(1, "10")]) == "promotion is inactive"

    def test_no_eligible_products(self):
        promo = _promo(apply_scope=ApplyScope.COMBO, product_ids=frozenset({7, 8}))
        resolver, _ = _setup(promo)
        assert self._reason(resolver, [_line(1, "10")]) == "no eligible products in order"


class TestApply:

    def test_pushes_line_discounts_and_records_use(self):
        promo = _promo(
            discount_value=Decimal("10"),
            apply_scope=ApplyScope.COMBO,
            product_ids=frozenset({1, 2}),
            usage_limit=5,
        )
        resolver, repo = _setup(promo)
        lines = [_line(1, "100"), _line(2, "200")]
        result = resolver.resolve("SAVE", _subtotal(lines), lines, TODAY)
        resolver.apply(result, lines, TODAY)
        assert lines[0].discounted_subtotal == Money.of("90")
        assert lines[1].discounted_subtotal == Money.of("180")
        assert repo.get_by_code("SAVE").used_count == 1

    def test_last_slot_deactivates(self):
        resolver, repo = _setup(_promo(usage_limit=1))
        lines = [_line(1, "100")]
        resolver.apply(resolver.resolve("SAVE", _subtotal(lines), lines, TODAY), lines, TODAY)
        assert repo.get_by_code("SAVE").status == PromotionStatus.INACTIVE

        second = resolver.resolve("SAVE", _subtotal(lines), lines, TODAY)
        assert isinstance(second, PromotionNotApplicable)

    def test_whole_order_leaves_lines_alone(self):
        resolver, _ = _setup(_promo())
        lines = [_line(1, "100")]
        resolver.apply(resolver.resolve("SAVE", _subtotal(lines), lines, TODAY), lines, TODAY)
        assert lines[0].discount_amount.is_zero()

    def test_logs_not_applicable(self, caplog):
        resolver, _ = _setup()
        with caplog.at_level("INFO"):
            resolver.resolve("NOPE", Money.of("1"), [_line(1, "1")], TODAY)
        assert "not applicable" in caplog.text
