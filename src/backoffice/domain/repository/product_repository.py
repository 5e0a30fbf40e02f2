"""Product lookup and storage, as seen by the domain."""

from __future__ import annotations

from abc import ABC, abstractmethod

from backoffice.domain.model.product import Product


class ProductRepository(ABC):

    @abstractmethod
    def get_by_id(self, product_id: int) -> Product | None:
        ...

    @abstractmethod
    def get_by_name(self, name: str) -> Product | None:
        """Case-insensitive name lookup."""

    @abstractmethod
    def list_all(self) -> list[Product]:
        ...

    @abstractmethod
    def save(self, product: Product) -> None:
        """Insert or replace by id."""

    def next_id(self) -> int:
        return max((p.id for p in self.list_all()), default=0) + 1
