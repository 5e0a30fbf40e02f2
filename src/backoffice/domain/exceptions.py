"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
A promotion that cannot be applied is *not* an exception: the resolver
returns a ``PromotionNotApplicable`` value and the order goes ahead.
"""

from __future__ import annotations

from dataclasses import dataclass


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated, or input was malformed."""


InvalidInputError = ValidationError


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class InvalidStatusTransitionError(ValidationError):
    """An order status change is not allowed from the current status."""


@dataclass(frozen=True)
class StockShortage:
    product_id: int
    available: int
    requested: int


class InsufficientStockError(DomainException):
    """One or more products do not have enough stock on hand.

    Carries one ``StockShortage`` per failing product.  The convenience
    properties expose the first shortage, which is all most callers need.
    """

    def __init__(self, shortages: list[StockShortage] | tuple[StockShortage, ...]) -> None:
        if not shortages:
            raise ValueError("InsufficientStockError needs at least one shortage")
        self.shortages = tuple(shortages)
        details = ", ".join(
            f"product {s.product_id} (available {s.available}, requested {s.requested})"
            for s in self.shortages
        )
        super().__init__(f"Insufficient stock for {details}")

    @property
    def product_id(self) -> int:
        return self.shortages[0].product_id

    @property
    def available(self) -> int:
        return self.shortages[0].available

    @property
    def requested(self) -> int:
        return self.shortages[0].requested


class PersistenceError(DomainException):
    """The transaction could not begin or commit. Safe to retry."""


class TransactionTimeoutError(PersistenceError):
    """The caller-supplied transaction timeout elapsed before commit."""
