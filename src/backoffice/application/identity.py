"""Identity port: display names for customers and staff users.

Identity and authentication live outside this system; use cases only
need a name to show next to an id.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class IdentityDirectory(ABC):

    @abstractmethod
    def customer_name(self, customer_id: int) -> str | None:
        """Display name of a customer, or None if unknown."""

    @abstractmethod
    def user_name(self, user_id: int) -> str | None:
        """Display name of a staff user, or None if unknown."""


class NullIdentityDirectory(IdentityDirectory):

    def customer_name(self, customer_id: int) -> str | None:
        return None

    def user_name(self, user_id: int) -> str | None:
        return None
