"""JSON-document-backed implementation of InventoryRepository."""

from __future__ import annotations

from datetime import datetime

from backoffice.domain.model.inventory import InventoryEntry
from backoffice.domain.repository.inventory_repository import InventoryRepository


class JsonInventoryRepository(InventoryRepository):
    """Reads and writes the ``inventory`` table of a working document."""

    def __init__(self, records: list[dict]) -> None:
        self._records = records

    # --- InventoryRepository interface ----------------------------------------

    def list_for_product(self, product_id: int) -> list[InventoryEntry]:
        return [
            self._to_domain(raw) for raw in self._records
            if raw["product_id"] == product_id
        ]

    def get(self, product_id: int, warehouse_id: int | None) -> InventoryEntry | None:
        for raw in self._records:
            if raw["product_id"] == product_id and raw["warehouse_id"] == warehouse_id:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[InventoryEntry]:
        return [self._to_domain(raw) for raw in self._records]

    def save(self, entry: InventoryEntry) -> None:
        for i, raw in enumerate(self._records):
            if (raw["product_id"], raw["warehouse_id"]) == entry.key:
                self._records[i] = self._to_raw(entry)
                return
        self._records.append(self._to_raw(entry))

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(entry: InventoryEntry) -> dict:
        return {
            "product_id": entry.product_id,
            "warehouse_id": entry.warehouse_id,
            "quantity": entry.quantity,
            "updated_at": entry.updated_at.isoformat(),
        }

    @staticmethod
    def _to_domain(raw: dict) -> InventoryEntry:
        return InventoryEntry(
            product_id=raw["product_id"],
            warehouse_id=raw.get("warehouse_id"),
            quantity=raw["quantity"],
            updated_at=datetime.fromisoformat(raw["updated_at"]),
        )
