"""Sale repository interface."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.sales.dtos import CreateSaleDTO, UpdateSaleDTO
    from modules.sales.models import Sale


class ISaleRepository(IRepository["Sale"]):
    """Repository contract for sales (one per order)."""

    @abstractmethod
    def create(self, dto: CreateSaleDTO) -> Sale:
        """Register a sale."""

    @abstractmethod
    def update(self, id: int, dto: UpdateSaleDTO) -> Sale:
        """Partially update amount, payment method or staff member."""

    @abstractmethod
    def find_by_order(self, order_id: int) -> Optional[Sale]:
        """The sale referencing *order_id*, if any."""
