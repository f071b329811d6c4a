"""Customer repository interface."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.customers.models import Customer


class ICustomerRepository(IRepository["Customer"]):
    """Repository contract for customer look-ups."""

    @abstractmethod
    def search(self, query: str, limit: Optional[int] = None) -> List[Customer]:
        """Customers whose name matches *query*."""
