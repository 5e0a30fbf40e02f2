"""Tests for the product and promotion administration use cases."""

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from backoffice.application.add_product import AddProductHandler
from backoffice.application.add_promotion import AddPromotionHandler
from backoffice.application.delete_promotion import DeletePromotionHandler
from backoffice.application.dto import Actor
from backoffice.application.refresh_promotions import RefreshPromotionsHandler
from backoffice.application.update_product import UpdateProductHandler
from backoffice.domain.exceptions import EntityNotFoundError, ValidationError
from backoffice.domain.model.product import Product, ProductStatus
from backoffice.domain.model.promotion import ApplyScope, PromotionStatus
from backoffice.domain.model.value_objects import Money
from tests.fakes import FakeUnitOfWork, RecordingAuditSink

ADMIN = Actor(user_id=1, username="admin")


def _clock_at(day: date):
    return lambda: datetime(day.year, day.month, day.day, 12, 0, tzinfo=timezone.utc)


MARCH = (date(2026, 3, 1), date(2026, 3, 31))


class TestAddProduct:

    def test_add(self):
        uow = FakeUnitOfWork()
        product = AddProductHandler(uow).handle("Widget", "19.99", unit="box")
        assert product.id == 1
        assert uow.products.get_by_id(1).price == Money.of("19.99")
        assert uow.products.get_by_id(1).unit == "box"

    def test_duplicate_name_rejected(self):
        uow = FakeUnitOfWork(products=[Product(id=1, name="Widget", price=Money.of("1"))])
        with pytest.raises(ValidationError, match="already exists"):
            AddProductHandler(uow).handle("widget", "2")

    def test_add_is_audited(self):
        sink = RecordingAuditSink()
        AddProductHandler(FakeUnitOfWork(), audit_sink=sink).handle(" Widget ", "5", actor=ADMIN)
        [event] = sink.events
        assert (event.action, event.entity_type, event.entity_name) == ("CREATE", "Product", "Widget")
        assert event.actor == ADMIN

    def test_zero_price_rejected(self):
        with pytest.raises(ValidationError, match="greater than zero"):
            AddProductHandler(FakeUnitOfWork()).handle("Widget", "0")


class TestUpdateProduct:

    def test_update_price(self):
        uow = FakeUnitOfWork(products=[Product(id=1, name="Widget", price=Money.of("1"))])
        UpdateProductHandler(uow).handle(1, "2.50")
        assert uow.products.get_by_id(1).price == Money.of("2.50")

    def test_deactivate_is_audited(self):
        uow = FakeUnitOfWork(products=[Product(id=1, name="Widget", price=Money.of("1"))])
        sink = RecordingAuditSink()
        UpdateProductHandler(uow, audit_sink=sink).handle(1, new_status="Inactive", actor=ADMIN)
        assert not uow.products.get_by_id(1).is_sellable
        [event] = sink.events
        assert event.old_values == {"price": "1", "status": "active"}
        assert event.new_values == {"price": "1", "status": "inactive"}

    def test_deleted_product_stays_deleted(self):
        uow = FakeUnitOfWork(
            products=[Product(id=1, name="Widget", price=Money.of("1"), status=ProductStatus.DELETED)]
        )
        with pytest.raises(ValidationError, match="cannot be restored"):
            UpdateProductHandler(uow).handle(1, new_status="active")

    def test_nothing_to_update(self):
        with pytest.raises(ValidationError, match="Nothing to update"):
            UpdateProductHandler(FakeUnitOfWork()).handle(1)

    def test_unknown_status(self):
        with pytest.raises(ValidationError, match="Unknown product status"):
            UpdateProductHandler(FakeUnitOfWork()).handle(1, new_status="gone")

    def test_unknown_product(self):
        with pytest.raises(EntityNotFoundError):
            UpdateProductHandler(FakeUnitOfWork()).handle(1, "2")


class TestAddPromotion:

    def test_add_order_promotion(self):
        uow = FakeUnitOfWork()
        handler = AddPromotionHandler(uow, clock=_clock_at(date(2026, 3, 5)))
        promo = handler.handle("SPRING15", "percent", "15", *MARCH)
        assert promo.id == 1
        assert promo.status == PromotionStatus.ACTIVE
        assert uow.promotions.get_by_code("spring15").discount_value == Decimal("15")

    def test_add_is_audited(self):
        sink = RecordingAuditSink()
        handler = AddPromotionHandler(FakeUnitOfWork(), clock=_clock_at(date(2026, 3, 5)), audit_sink=sink)
        handler.handle("SPRING15", "percent", "15", *MARCH, actor=ADMIN)
        [event] = sink.events
        assert event.entity_type == "Promotion"
        assert event.new_values["status"] == "active"
        assert event.new_values["discount_value"] == "15"

    def test_future_promotion_starts_inactive(self):
        handler = AddPromotionHandler(FakeUnitOfWork(), clock=_clock_at(date(2026, 2, 1)))
        promo = handler.handle("LATER", "fixed", "5", *MARCH)
        assert promo.status == PromotionStatus.INACTIVE

    def test_combo_needs_known_products(self):
        uow = FakeUnitOfWork(products=[Product(id=1, name="Widget", price=Money.of("1"))])
        handler = AddPromotionHandler(uow, clock=_clock_at(date(2026, 3, 5)))
        with pytest.raises(ValidationError, match="Unknown product id 2"):
            handler.handle("PAIR", "percent", "10", *MARCH, apply_scope="combo", product_ids=[1, 2])

    def test_combo_with_products(self):
        uow = FakeUnitOfWork(products=[Product(id=1, name="Widget", price=Money.of("1"))])
        handler = AddPromotionHandler(uow, clock=_clock_at(date(2026, 3, 5)))
        promo = handler.handle("PAIR", "percent", "10", *MARCH, apply_scope="combo", product_ids=[1])
        assert promo.apply_scope == ApplyScope.COMBO
        assert promo.product_ids == frozenset({1})

    def test_duplicate_code_rejected(self):
        uow = FakeUnitOfWork()
        handler = AddPromotionHandler(uow, clock=_clock_at(date(2026, 3, 5)))
        handler.handle("SAVE", "fixed", "5", *MARCH)
        with pytest.raises(ValidationError, match="already exists"):
            handler.handle("save", "fixed", "5", *MARCH)

    @pytest.mark.parametrize(
        "kind, value, scope",
        [("bogus", "5", "order"), ("fixed", "abc", "order"), ("fixed", "5", "bogus"), ("fixed", "NaN", "order")],
    )
    def test_malformed_input_rejected(self, kind, value, scope):
        handler = AddPromotionHandler(FakeUnitOfWork(), clock=_clock_at(date(2026, 3, 5)))
        with pytest.raises(ValidationError):
            handler.handle("X", kind, value, *MARCH, apply_scope=scope)


class TestRefreshPromotions:

    def test_reports_changed_codes(self):
        uow = FakeUnitOfWork()
        add = AddPromotionHandler(uow, clock=_clock_at(date(2026, 3, 5)))
        add.handle("MARCH", "fixed", "5", *MARCH)
        add.handle("APRIL", "fixed", "5", date(2026, 4, 1), date(2026, 4, 30))

        changed = RefreshPromotionsHandler(uow, clock=_clock_at(date(2026, 4, 2))).handle()

        assert sorted(changed) == ["APRIL", "MARCH"]
        assert uow.promotions.get_by_code("MARCH").status == PromotionStatus.INACTIVE
        assert uow.promotions.get_by_code("APRIL").status == PromotionStatus.ACTIVE

    def test_nothing_to_change(self):
        uow = FakeUnitOfWork()
        AddPromotionHandler(uow, clock=_clock_at(date(2026, 3, 5))).handle("M", "fixed", "5", *MARCH)
        assert RefreshPromotionsHandler(uow, clock=_clock_at(date(2026, 3, 6))).handle() == []


class TestDeletePromotion:

    def _uow_with_march(self):
        uow = FakeUnitOfWork()
        AddPromotionHandler(uow, clock=_clock_at(date(2026, 3, 5))).handle("MARCH", "fixed", "5", *MARCH)
        return uow

    def test_delete_is_audited(self):
        uow = self._uow_with_march()
        sink = RecordingAuditSink()
        promo = DeletePromotionHandler(uow, audit_sink=sink).handle("march", actor=ADMIN)
        assert promo.status == PromotionStatus.DELETED
        assert uow.promotions.get_by_code("MARCH").status == PromotionStatus.DELETED
        [event] = sink.events
        assert event.action == "DELETE"
        assert event.old_values == {"status": "active"}
        assert event.new_values == {"status": "deleted"}
        assert event.actor == ADMIN

    def test_refresh_does_not_revive(self):
        uow = self._uow_with_march()
        DeletePromotionHandler(uow).handle("MARCH")
        assert RefreshPromotionsHandler(uow, clock=_clock_at(date(2026, 3, 6))).handle() == []
        assert uow.promotions.get_by_code("MARCH").status == PromotionStatus.DELETED

    def test_delete_twice_rejected(self):
        uow = self._uow_with_march()
        handler = DeletePromotionHandler(uow)
        handler.handle("MARCH")
        with pytest.raises(ValidationError, match="already deleted"):
            handler.handle("MARCH")

    def test_unknown_code(self):
        with pytest.raises(EntityNotFoundError):
            DeletePromotionHandler(FakeUnitOfWork()).handle("NOPE")
