"""Application service: Show Inventory use case (query)."""

from __future__ import annotations

from backoffice.application.dto import ProductStockDTO, WarehouseStockDTO
from backoffice.domain.exceptions import EntityNotFoundError
from backoffice.domain.model.product import Product
from backoffice.domain.repository.unit_of_work import UnitOfWork


class ShowInventoryHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, product_id: int | None = None) -> list[ProductStockDTO]:
        """Stock per product with its warehouse breakdown.

        With ``product_id`` only that product is returned.
        """
        with self._uow as uow:
            if product_id is not None:
                product = uow.products.get_by_id(product_id)
                if product is None:
                    raise EntityNotFoundError(f"Product with ID '{product_id}' not found")
                products = [product]
            else:
                products = sorted(uow.products.list_all(), key=lambda p: p.id)
            return [self._stock_of(uow, product) for product in products]

    @staticmethod
    def _stock_of(uow: UnitOfWork, product: Product) -> ProductStockDTO:
        entries = sorted(
            uow.inventory.list_for_product(product.id),
            key=lambda e: (e.warehouse_id is not None, e.warehouse_id or 0),
        )
        return ProductStockDTO(
            product_id=product.id,
            product_name=product.name,
            unit=product.unit,
            total=sum(e.quantity for e in entries),
            warehouses=[
                WarehouseStockDTO(
                    warehouse_id=e.warehouse_id,
                    quantity=e.quantity,
                    updated_at=e.updated_at,
                )
                for e in entries
            ],
        )
