"""Abstract repository for InventoryEntry records."""

from __future__ import annotations

from abc import ABC, abstractmethod

from backoffice.domain.model.inventory import InventoryEntry


class InventoryRepository(ABC):

    @abstractmethod
    def list_for_product(self, product_id: int) -> list[InventoryEntry]:
        """Return every warehouse entry for a product (any order)."""

    @abstractmethod
    def get(self, product_id: int, warehouse_id: int | None) -> InventoryEntry | None:
        """Return the entry for a (product, warehouse) pair, or None."""

    @abstractmethod
    def list_all(self) -> list[InventoryEntry]:
        """Return every inventory entry."""

    @abstractmethod
    def save(self, entry: InventoryEntry) -> None:
        """Persist a new or updated entry."""
