"""Abstract unit of work: the transaction boundary.

Repositories handed out by a unit of work only see and change that
transaction's working state.  Nothing is durable until ``commit()``;
leaving the ``with`` block without committing rolls everything back,
including when an exception escapes.

    with uow:
        ...
        uow.commit()
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from backoffice.domain.repository.inventory_repository import InventoryRepository
from backoffice.domain.repository.order_repository import OrderRepository
from backoffice.domain.repository.product_repository import ProductRepository
from backoffice.domain.repository.promotion_repository import PromotionRepository


class UnitOfWork(ABC):
    products: ProductRepository
    inventory: InventoryRepository
    promotions: PromotionRepository
    orders: OrderRepository

    def __enter__(self) -> UnitOfWork:
        self._begin()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        # Rolling back after a successful commit is a no-op.
        self.rollback()

    @abstractmethod
    def _begin(self) -> None:
        """Start the transaction (acquire isolation, load working state)."""

    @abstractmethod
    def commit(self) -> None:
        """Make every change durable in one step."""

    @abstractmethod
    def rollback(self) -> None:
        """Discard uncommitted changes and release the transaction."""
