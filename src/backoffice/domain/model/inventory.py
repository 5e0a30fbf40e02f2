"""InventoryEntry: stock of one product in one warehouse.

A product may have several entries, one per warehouse plus an optional
entry with no warehouse.  The product's on-hand stock is the sum over
its entries.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from backoffice.domain.exceptions import ValidationError


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class InventoryEntry:
    """Quantity counter for a (product, warehouse) pair.

    Invariant: ``quantity`` is never negative.
    """

    product_id: int
    warehouse_id: int | None
    quantity: int = 0
    updated_at: datetime = field(default_factory=_now)

    def __post_init__(self) -> None:
        if self.quantity < 0:
            raise ValidationError(
                f"Inventory quantity cannot be negative, got {self.quantity}"
            )

    @property
    def key(self) -> tuple[int, int | None]:
        return (self.product_id, self.warehouse_id)

    def debit(self, quantity: int, at: datetime | None = None) -> None:
        """Remove ``quantity`` units from this entry."""
        if quantity <= 0:
            raise ValidationError("Debit quantity must be positive")
        if quantity > self.quantity:
            raise ValidationError(
                f"Cannot take {quantity} units of product {self.product_id} "
                f"from warehouse {self.warehouse_id} (only {self.quantity} on hand)"
            )
        self.quantity -= quantity
        self.updated_at = at or _now()

    def credit(self, quantity: int, at: datetime | None = None) -> None:
        """Add ``quantity`` units to this entry."""
        if quantity <= 0:
            raise ValidationError("Credit quantity must be positive")
        self.quantity += quantity
        self.updated_at = at or _now()
