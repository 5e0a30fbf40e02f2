"""JSON-document-backed implementation of ProductRepository."""

from __future__ import annotations

from decimal import Decimal

from backoffice.domain.model.product import Product, ProductStatus
from backoffice.domain.model.value_objects import Money
from backoffice.domain.repository.product_repository import ProductRepository


class JsonProductRepository(ProductRepository):
    """Reads and writes the ``products`` table of a working document."""

    def __init__(self, records: list[dict]) -> None:
        self._records = records

    # --- ProductRepository interface ------------------------------------------

    def get_by_id(self, product_id: int) -> Product | None:
        for raw in self._records:
            if raw["id"] == product_id:
                return self._to_domain(raw)
        return None

    def get_by_name(self, name: str) -> Product | None:
        for raw in self._records:
            if raw["name"].lower() == name.lower():
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[Product]:
        return [self._to_domain(raw) for raw in self._records]

    def save(self, product: Product) -> None:
        for i, raw in enumerate(self._records):
            if raw["id"] == product.id:
                self._records[i] = self._to_raw(product)
                return
        self._records.append(self._to_raw(product))

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(product: Product) -> dict:
        return {
            "id": product.id,
            "name": product.name,
            "price": str(product.price.amount),
            "cost_price": str(product.cost_price.amount),
            "unit": product.unit,
            "status": product.status.value,
        }

    @staticmethod
    def _to_domain(raw: dict) -> Product:
        return Product(
            id=raw["id"],
            name=raw["name"],
            price=Money(Decimal(raw["price"])),
            cost_price=Money(Decimal(raw.get("cost_price", "0"))),
            unit=raw.get("unit", "pcs"),
            status=ProductStatus(raw.get("status", "active")),
        )
