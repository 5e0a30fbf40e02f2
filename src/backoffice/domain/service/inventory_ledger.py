"""Domain service: Inventory Ledger.

Stock for a product is spread over several warehouse entries.  The
ledger hides that split: callers ask for N units of a product and the
ledger decides which warehouses supply them.

Allocation order is deterministic. Entries are drained by ascending
warehouse id, with the "no warehouse" entry first, so identical orders
against identical stock always deplete the same warehouses.

A reservation is never undone here: it happens inside the order's unit of
work, so a failed order discards it together with everything else.
"""

from __future__ import annotations

import logging
from datetime import datetime

from backoffice.domain.exceptions import InsufficientStockError, StockShortage, ValidationError
from backoffice.domain.model.inventory import InventoryEntry
from backoffice.domain.model.order import Allocation
from backoffice.domain.repository.inventory_repository import InventoryRepository

logger = logging.getLogger(__name__)


def _allocation_order(entry: InventoryEntry) -> tuple[bool, int]:
    return (entry.warehouse_id is not None, entry.warehouse_id or 0)


class InventoryLedger:

    def __init__(self, inventory_repo: InventoryRepository) -> None:
        self._inventory_repo = inventory_repo

    def check_availability(self, product_id: int) -> int:
        """Total on-hand units across every warehouse (0 if none)."""
        return sum(e.quantity for e in self._inventory_repo.list_for_product(product_id))

    def reserve(
        self,
        product_id: int,
        quantity: int,
        at: datetime | None = None,
    ) -> list[Allocation]:
        """Take ``quantity`` units of a product, lowest warehouse id first.

        Either every unit is taken or nothing is: the total is checked
        before any entry is touched.
        """
        if quantity <= 0:
            raise ValidationError("Reservation quantity must be positive")

        entries = sorted(
            self._inventory_repo.list_for_product(product_id), key=_allocation_order
        )
        available = sum(e.quantity for e in entries)
        if available < quantity:
            raise InsufficientStockError(
                [StockShortage(product_id=product_id, available=available, requested=quantity)]
            )

        allocations: list[Allocation] = []
        remaining = quantity
        for entry in entries:
            if remaining == 0:
                break
            if entry.quantity == 0:
                continue
            take = min(entry.quantity, remaining)
            entry.debit(take, at)
            self._inventory_repo.save(entry)
            allocations.append(Allocation(warehouse_id=entry.warehouse_id, quantity=take))
            remaining -= take
            logger.debug(
                "Took %d of product %s from warehouse %s (%d left there)",
                take, product_id, entry.warehouse_id, entry.quantity,
            )
        return allocations

    def credit(
        self,
        product_id: int,
        warehouse_id: int | None,
        quantity: int,
        at: datetime | None = None,
    ) -> InventoryEntry:
        """Add received units to one warehouse entry.

        Creates the entry if the product has never been stocked there.
        """
        entry = self._inventory_repo.get(product_id, warehouse_id)
        if entry is None:
            entry = InventoryEntry(product_id=product_id, warehouse_id=warehouse_id)
        entry.credit(quantity, at)
        self._inventory_repo.save(entry)
        return entry
