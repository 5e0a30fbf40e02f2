"""Abstract repository for Promotion aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from backoffice.domain.model.promotion import Promotion


class PromotionRepository(ABC):

    @abstractmethod
    def get_by_id(self, promotion_id: int) -> Promotion | None:
        """Return a promotion by its ID, or None if not found."""

    @abstractmethod
    def get_by_code(self, code: str) -> Promotion | None:
        """Return the promotion whose code matches, ignoring case."""

    @abstractmethod
    def list_all(self) -> list[Promotion]:
        """Return every promotion."""

    @abstractmethod
    def save(self, promotion: Promotion) -> None:
        """Persist a new or updated promotion; assigns an ID if missing."""
