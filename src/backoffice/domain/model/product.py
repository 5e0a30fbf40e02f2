"""Product aggregate.

Only the parts of the catalog that selling needs: the current sale
price, the unit of measure and whether the product may be sold.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from backoffice.domain.exceptions import ValidationError
from backoffice.domain.model.value_objects import Money


class ProductStatus(Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    DELETED = "deleted"


@dataclass
class Product:
    """A product in the catalog.

    ``price`` is copied onto every order line at order time, so changing
    it never reprices an existing order.  ``cost_price`` is informational.
    """

    id: int
    name: str
    price: Money
    cost_price: Money = field(default_factory=Money.zero)
    unit: str = "pcs"
    status: ProductStatus = ProductStatus.ACTIVE

    @property
    def is_sellable(self) -> bool:
        return self.status == ProductStatus.ACTIVE

    def update_price(self, new_price: Money) -> None:
        if new_price.is_zero():
            raise ValidationError("Product price must be greater than zero")
        self.price = new_price

    def change_status(self, status: ProductStatus) -> None:
        if self.status == ProductStatus.DELETED and status != ProductStatus.DELETED:
            raise ValidationError(f"Product '{self.name}' is deleted and cannot be restored")
        self.status = status
