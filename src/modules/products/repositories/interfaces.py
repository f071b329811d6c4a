"""Product repository interface."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.products.dtos import CreateProductDTO, UpdateProductDTO
    from modules.products.models import Product


class IProductRepository(IRepository["Product"]):
    """Repository contract for the Product catalog."""

    @abstractmethod
    def search(self, query: str = "", limit: Optional[int] = None) -> List[Product]:
        """Products matching *query*; the whole (bounded) catalog when blank."""

    @abstractmethod
    def create(self, dto: CreateProductDTO) -> Product:
        """Create a product."""

    @abstractmethod
    def update(self, id: int, dto: UpdateProductDTO) -> Product:
        """Partially update a product."""
